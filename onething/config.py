#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OneThing Tracker - Configuration
Centralised configuration loaded from environment variables with validation
"""

import os
import sys
from pathlib import Path
from typing import Dict, Any
from dataclasses import dataclass
from enum import Enum

import pytz


class Environment(Enum):
    """Runtime environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class StorageConfig:
    """Profile and entry storage settings"""
    data_dir: Path
    backup_dir: Path
    profile_file: str = "profile.json"
    entries_file: str = "entries.json"

    @property
    def profile_path(self) -> Path:
        return self.data_dir / self.profile_file

    @property
    def entries_path(self) -> Path:
        return self.data_dir / self.entries_file


@dataclass
class NotificationConfig:
    """Local reminder settings"""
    enabled: bool = True
    title: str = "One Thing"
    cutoff_time: str = "21:00"  # nothing fires at or after this local time
    anti_spam_minutes: int = 60


@dataclass
class ProgressionConfig:
    """Level and streak rules"""
    level_up_streak: int = 7
    min_level: int = 1
    max_level: int = 3


def _env_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() == 'true'


class AppConfig:
    """Main configuration object"""

    def __init__(self):
        self.environment = Environment(os.getenv('ONETHING_ENV', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Read settings from the environment"""

        self.data_dir = Path(os.getenv('ONETHING_DATA_DIR', 'data'))
        self.log_dir = Path(os.getenv('ONETHING_LOG_DIR', 'logs'))

        self.storage = StorageConfig(
            data_dir=self.data_dir,
            backup_dir=Path(os.getenv('ONETHING_BACKUP_DIR', str(self.data_dir / 'backups'))),
            profile_file=os.getenv('ONETHING_PROFILE_FILE', 'profile.json'),
            entries_file=os.getenv('ONETHING_ENTRIES_FILE', 'entries.json'),
        )

        self.notifications = NotificationConfig(
            enabled=_env_bool('ONETHING_NOTIFICATIONS_ENABLED', 'true'),
            title=os.getenv('ONETHING_NOTIFICATION_TITLE', 'One Thing'),
            cutoff_time=os.getenv('ONETHING_NOTIFICATION_CUTOFF', '21:00'),
            anti_spam_minutes=int(os.getenv('ONETHING_ANTI_SPAM_MINUTES', 60)),
        )

        self.progression = ProgressionConfig(
            level_up_streak=int(os.getenv('ONETHING_LEVEL_UP_STREAK', 7)),
        )

        self.timezone = os.getenv('ONETHING_TIMEZONE', 'UTC')

        # Logging
        self.log_level = LogLevel(os.getenv('ONETHING_LOG_LEVEL', 'INFO'))
        self.log_to_file = _env_bool('ONETHING_LOG_TO_FILE', 'false')
        self.log_format = os.getenv(
            'ONETHING_LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Collect configuration errors and fail loudly"""
        errors = []

        if self.timezone not in pytz.all_timezones_set:
            errors.append(f"Unknown timezone {self.timezone!r}")

        parts = self.notifications.cutoff_time.split(':')
        if (len(parts) != 2 or not all(p.isdigit() and len(p) == 2 for p in parts)
                or not 0 <= int(parts[0]) <= 23 or not 0 <= int(parts[1]) <= 59):
            errors.append(f"Notification cutoff {self.notifications.cutoff_time!r} is not HH:MM")

        if self.notifications.anti_spam_minutes < 0:
            errors.append("ONETHING_ANTI_SPAM_MINUTES must not be negative")

        if self.progression.level_up_streak < 1:
            errors.append("ONETHING_LEVEL_UP_STREAK must be at least 1")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"• {error}" for error in errors))

    def ensure_directories(self):
        """Create data, backup and log directories"""
        directories = [self.storage.data_dir, self.storage.backup_dir]
        if self.log_to_file:
            directories.append(self.log_dir)

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """Build a logging.config.dictConfig dictionary"""
        handlers = {
            'console': {
                'class': 'logging.StreamHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'stream': sys.stdout
            }
        }
        if self.log_to_file:
            handlers['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"onething_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': handlers,
            'loggers': {
                'onething': {
                    'level': self.log_level.value,
                    'handlers': list(handlers),
                    'propagate': False
                },
                'apscheduler': {
                    'level': 'WARNING',
                    'handlers': list(handlers),
                    'propagate': False
                }
            }
        }

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def to_dict(self) -> Dict[str, Any]:
        """Serialise configuration for diagnostics"""
        return {
            'environment': self.environment.value,
            'data_dir': str(self.storage.data_dir),
            'backup_dir': str(self.storage.backup_dir),
            'timezone': self.timezone,
            'notifications': {
                'enabled': self.notifications.enabled,
                'cutoff_time': self.notifications.cutoff_time,
                'anti_spam_minutes': self.notifications.anti_spam_minutes
            },
            'level_up_streak': self.progression.level_up_streak,
            'log_level': self.log_level.value
        }


# Global configuration instance
config = AppConfig()

__all__ = [
    'config',
    'AppConfig',
    'Environment',
    'LogLevel',
    'StorageConfig',
    'NotificationConfig',
    'ProgressionConfig'
]
