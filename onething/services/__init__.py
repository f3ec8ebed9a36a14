"""
OneThing Tracker - Services Package
Notification scheduling and the tracker session
"""

from .backends import (
    DailyTrigger,
    OnceTrigger,
    PermissionStatus,
    NotificationBackend,
    NullBackend,
    APSchedulerBackend
)

from .notifications import (
    PICK_TASK_ID,
    WRAP_UP_ID,
    Reminder,
    ReminderPlan,
    OperationType,
    NotificationOperation,
    NotificationScheduler,
    focus_nudge_id,
    wrap_up_task_id
)

from .tracker_service import (
    TrackerState,
    TrackerService
)

__all__ = [
    'DailyTrigger',
    'OnceTrigger',
    'PermissionStatus',
    'NotificationBackend',
    'NullBackend',
    'APSchedulerBackend',
    'PICK_TASK_ID',
    'WRAP_UP_ID',
    'Reminder',
    'ReminderPlan',
    'OperationType',
    'NotificationOperation',
    'NotificationScheduler',
    'focus_nudge_id',
    'wrap_up_task_id',
    'TrackerState',
    'TrackerService'
]
