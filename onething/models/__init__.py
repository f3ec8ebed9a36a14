"""
OneThing Tracker - Models Package
Profile, daily entry and reminder configuration models
"""

from .enums import (
    Mood,
    ProofType,
    ReminderKind,
    WrapUpMode
)

from .reminders import (
    ReminderConfig,
    FocusNudgeConfig,
    ReminderSettings,
    ReminderSchemeV1,
    ReminderSchemeV2,
    ReminderSchemeV3,
    ReminderScheme
)

from .profile import (
    Level,
    UserProfile
)

from .entry import (
    TaskProof,
    TaskItem,
    Reflection,
    DailyEntry,
    generate_id
)

__all__ = [
    # Enums
    'Mood',
    'ProofType',
    'ReminderKind',
    'WrapUpMode',

    # Reminder models
    'ReminderConfig',
    'FocusNudgeConfig',
    'ReminderSettings',
    'ReminderSchemeV1',
    'ReminderSchemeV2',
    'ReminderSchemeV3',
    'ReminderScheme',

    # Profile
    'Level',
    'UserProfile',

    # Entries
    'TaskProof',
    'TaskItem',
    'Reflection',
    'DailyEntry',
    'generate_id'
]
