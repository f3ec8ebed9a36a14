# onething/database/migrations.py

import logging
from typing import Any, Callable, Dict, List

from pydantic import TypeAdapter, ValidationError

from onething.models.enums import WrapUpMode
from onething.models.reminders import (
    FocusNudgeConfig,
    ReminderConfig,
    ReminderScheme,
    ReminderSchemeV1,
    ReminderSchemeV2,
    ReminderSchemeV3,
    ReminderSettings,
)

logger = logging.getLogger(__name__)

_scheme_adapter = TypeAdapter(ReminderScheme)

# Top-level profile keys that belong to one of the legacy schemes
LEGACY_REMINDER_KEYS = (
    'reminderEnabled',
    'reminderTime',
    'reminderPickTask',
    'reminderCompleteTask',
    'reminderFocusNudge',
    'reminderWrapUp',
    'remindersEnabled',
    'pickTaskTime',
    'wrapUpTime',
    'reminderSchemeVersion',
)


def detect_reminder_scheme(data: Dict[str, Any]):
    """Work out which legacy reminder shape a raw profile dict carries"""
    if data.get('reminderSchemeVersion') == 3 or 'remindersEnabled' in data:
        raw = {
            'version': 3,
            'remindersEnabled': data.get('remindersEnabled', False),
        }
        for key in ('pickTaskTime', 'wrapUpTime'):
            if key in data:
                raw[key] = data[key]
        return _scheme_adapter.validate_python(raw)

    if 'reminderFocusNudge' in data or 'reminderWrapUp' in data:
        raw = {'version': 2}
        for source, target in (('reminderPickTask', 'pickTask'),
                               ('reminderFocusNudge', 'focusNudge'),
                               ('reminderWrapUp', 'wrapUp')):
            if isinstance(data.get(source), dict):
                raw[target] = data[source]
        return _scheme_adapter.validate_python(raw)

    raw = {'version': 1}
    if isinstance(data.get('reminderPickTask'), dict):
        raw['pickTask'] = data['reminderPickTask']
    elif 'reminderEnabled' in data or 'reminderTime' in data:
        # Oldest profiles: one reminder, one time
        raw['pickTask'] = {
            'enabled': data.get('reminderEnabled', False),
            'time': data.get('reminderTime', ReminderConfig().time),
        }
    if isinstance(data.get('reminderCompleteTask'), dict):
        raw['completeTask'] = data['reminderCompleteTask']
    return _scheme_adapter.validate_python(raw)


def migrate_reminder_scheme(scheme) -> ReminderSettings:
    """Convert any persisted reminder scheme into the canonical settings"""
    if isinstance(scheme, ReminderSchemeV1):
        return ReminderSettings(
            pick_task=scheme.pick_task,
            focus_nudge=FocusNudgeConfig(enabled=False),
            wrap_up=scheme.complete_task,
            wrap_up_mode=WrapUpMode.DAILY,
        )
    if isinstance(scheme, ReminderSchemeV2):
        return ReminderSettings(
            pick_task=scheme.pick_task,
            focus_nudge=scheme.focus_nudge,
            wrap_up=scheme.wrap_up,
            wrap_up_mode=WrapUpMode.DAILY,
        )
    if isinstance(scheme, ReminderSchemeV3):
        return ReminderSettings(
            pick_task=ReminderConfig(enabled=scheme.reminders_enabled, time=scheme.pick_task_time),
            focus_nudge=FocusNudgeConfig(enabled=True),
            wrap_up=ReminderConfig(enabled=scheme.reminders_enabled, time=scheme.wrap_up_time),
            wrap_up_mode=WrapUpMode.PER_TASK,
        )
    raise TypeError(f"Unknown reminder scheme: {type(scheme).__name__}")


def migrate_reminders(data: Dict[str, Any]) -> Dict[str, Any]:
    """Replace legacy reminder keys with the canonical ``reminders`` block"""
    if isinstance(data.get('reminders'), dict):
        return {k: v for k, v in data.items() if k not in LEGACY_REMINDER_KEYS}

    if not any(key in data for key in LEGACY_REMINDER_KEYS):
        return dict(data)

    try:
        scheme = detect_reminder_scheme(data)
        settings = migrate_reminder_scheme(scheme)
        logger.info(f"Migrated reminder settings from scheme v{scheme.version}")
    except ValidationError as e:
        logger.warning(f"Discarding unreadable reminder settings: {e.error_count()} error(s)")
        settings = ReminderSettings()

    migrated = {k: v for k, v in data.items() if k not in LEGACY_REMINDER_KEYS}
    migrated['reminders'] = settings.model_dump(by_alias=True, mode='json')
    return migrated


PROFILE_MIGRATIONS: List[Callable[[Dict[str, Any]], Dict[str, Any]]] = [
    migrate_reminders,
]


def migrate_profile_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply every profile migration in order"""
    for migration in PROFILE_MIGRATIONS:
        data = migration(data)
    return data
