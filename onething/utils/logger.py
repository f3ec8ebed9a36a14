import logging
import logging.config
from typing import Optional

from onething.config import AppConfig, config as default_config


def setup_logging(cfg: Optional[AppConfig] = None) -> logging.Logger:
    """Apply the dictConfig from the app configuration and return the package logger"""
    cfg = cfg or default_config
    if cfg.log_to_file:
        cfg.log_dir.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(cfg.get_logging_config())
    return logging.getLogger("onething")
