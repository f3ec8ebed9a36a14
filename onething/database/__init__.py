from .manager import (
    BaseStore,
    MemoryStore,
    JsonFileStore,
    parse_profile,
    parse_entries
)

from .migrations import (
    detect_reminder_scheme,
    migrate_reminder_scheme,
    migrate_profile_data
)

__all__ = [
    'BaseStore',
    'MemoryStore',
    'JsonFileStore',
    'parse_profile',
    'parse_entries',
    'detect_reminder_scheme',
    'migrate_reminder_scheme',
    'migrate_profile_data'
]
