#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OneThing Tracker - Profile & Entry Store
Local JSON storage with per-record validation and corrupted-file recovery

Stored data is a local cache, not a ledger: anything that fails validation is
dropped (an invalid day entry) or replaced with defaults (an invalid profile),
and I/O failures are logged instead of propagated.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from onething.config import StorageConfig, config
from onething.core.exceptions import StorageError
from onething.database.migrations import migrate_profile_data
from onething.models import DailyEntry, UserProfile

logger = logging.getLogger(__name__)

# ===== PARSING =====

def parse_profile(data: Any) -> UserProfile:
    """Validate a raw profile record, falling back to a fresh profile"""
    if data is None:
        return UserProfile()
    if not isinstance(data, dict):
        logger.warning(f"Profile record has type {type(data).__name__}, using defaults")
        return UserProfile()

    try:
        return UserProfile.from_dict(migrate_profile_data(data))
    except ValidationError as e:
        logger.warning(f"Invalid profile data ({e.error_count()} error(s)), using defaults")
        return UserProfile()


def parse_entries(data: Any) -> Dict[str, DailyEntry]:
    """Validate raw entries, keeping only the valid ones"""
    if not isinstance(data, dict):
        if data is not None:
            logger.warning(f"Entries record has type {type(data).__name__}, ignoring it")
        return {}

    entries: Dict[str, DailyEntry] = {}
    for key, value in data.items():
        try:
            entry = DailyEntry.from_dict(value)
        except (ValidationError, TypeError) as e:
            logger.warning(f"Invalid entry for date {key}, dropping it: {e}")
            continue
        if entry.date != key:
            logger.warning(f"Entry stored under {key} is dated {entry.date}, dropping it")
            continue
        entries[key] = entry
    return entries


# ===== STORES =====

class BaseStore(ABC):
    """Get/set contract the tracker needs from persistence"""

    @abstractmethod
    def read_profile(self) -> UserProfile:
        pass

    @abstractmethod
    def write_profile(self, profile: UserProfile) -> bool:
        pass

    @abstractmethod
    def read_entries(self) -> Dict[str, DailyEntry]:
        pass

    @abstractmethod
    def write_entry(self, entry: DailyEntry) -> bool:
        pass

    @abstractmethod
    def clear_all(self) -> None:
        """Full data reset"""
        pass

    def read_entry(self, date_str: str) -> Optional[DailyEntry]:
        return self.read_entries().get(date_str)


class MemoryStore(BaseStore):
    """Keeps serialised records in memory; goes through the same parsing as disk data"""

    def __init__(self, profile_data: Optional[Dict[str, Any]] = None,
                 entries_data: Optional[Dict[str, Any]] = None):
        self.profile_data = profile_data
        self.entries_data = entries_data

    def read_profile(self) -> UserProfile:
        return parse_profile(self.profile_data)

    def write_profile(self, profile: UserProfile) -> bool:
        self.profile_data = profile.to_dict()
        return True

    def read_entries(self) -> Dict[str, DailyEntry]:
        return parse_entries(self.entries_data)

    def write_entry(self, entry: DailyEntry) -> bool:
        entries = self.read_entries()
        entries[entry.date] = entry
        self.entries_data = {key: value.to_dict() for key, value in entries.items()}
        return True

    def clear_all(self) -> None:
        self.profile_data = None
        self.entries_data = None


class JsonFileStore(BaseStore):
    """Profile and entries in two JSON files under the data directory"""

    def __init__(self, storage: Optional[StorageConfig] = None):
        self.storage = storage or config.storage
        self.profile_path: Path = self.storage.profile_path
        self.entries_path: Path = self.storage.entries_path

    # ----- raw file access -----

    def _read_json(self, path: Path) -> Any:
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"❌ JSON parse error in {path.name}: {e}")
            self._quarantine(path)
            return None
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def _write_json(self, path: Path, data: Any) -> None:
        tmp_path = path.with_suffix(path.suffix + '.tmp')
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    def _quarantine(self, path: Path) -> None:
        """Move a corrupted file aside so the next write starts clean"""
        try:
            self.storage.backup_dir.mkdir(parents=True, exist_ok=True)
            backup_name = f"corrupted_backup_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{path.name}"
            backup_path = self.storage.backup_dir / backup_name
            path.replace(backup_path)
            logger.warning(f"🔄 Corrupted file moved to {backup_path}")
        except OSError as e:
            logger.error(f"❌ Could not back up corrupted file {path}: {e}")

    # ----- store contract -----

    def read_profile(self) -> UserProfile:
        try:
            data = self._read_json(self.profile_path)
        except StorageError as e:
            logger.error(f"❌ {e}")
            return UserProfile()
        return parse_profile(data)

    def write_profile(self, profile: UserProfile) -> bool:
        try:
            self._write_json(self.profile_path, profile.to_dict())
            return True
        except StorageError as e:
            logger.error(f"❌ Profile not saved: {e}")
            return False

    def read_entries(self) -> Dict[str, DailyEntry]:
        try:
            data = self._read_json(self.entries_path)
        except StorageError as e:
            logger.error(f"❌ {e}")
            return {}
        return parse_entries(data)

    def write_entry(self, entry: DailyEntry) -> bool:
        entries = self.read_entries()
        entries[entry.date] = entry
        try:
            self._write_json(self.entries_path, {key: value.to_dict() for key, value in entries.items()})
            return True
        except StorageError as e:
            logger.error(f"❌ Entry for {entry.date} not saved: {e}")
            return False

    def clear_all(self) -> None:
        for path in (self.profile_path, self.entries_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"❌ Could not delete {path}: {e}")
        logger.info("🗑 All tracker data cleared")
