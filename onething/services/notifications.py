"""
Notification scheduler

Turns the current profile and today's entry into the set of reminders that
should exist right now, then reconciles that set against the backend:
stale reminders are cancelled, desired ones are cancelled and re-created.

Reminder slots:

* pick-task: daily, only while today has no tasks;
* focus-nudge: one-shot per incomplete task with a scheduled time;
* wrap-up: daily, or one-shot per incomplete task, depending on the
  reminder settings.

Nothing is ever scheduled at or after the cutoff time (21:00 by default),
one-shot reminders whose time has passed are dropped, and a wrap-up too close
to a task's own nudge is suppressed.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Set

from onething.config import config
from onething.models import DailyEntry, ReminderKind, ReminderSettings, TaskItem, UserProfile, WrapUpMode
from onething.services.backends import (
    DailyTrigger,
    NotificationBackend,
    OnceTrigger,
    PermissionStatus,
    Trigger,
)
from onething.services.messages import message_for
from onething.utils.datetime_utils import (
    is_at_or_after,
    minutes_between,
    now_local,
    parse_time,
    seconds_until,
)

logger = logging.getLogger(__name__)

PICK_TASK_ID = 'pick-task-reminder'
WRAP_UP_ID = 'wrap-up-reminder'
FOCUS_NUDGE_PREFIX = 'focus-nudge-'
WRAP_UP_TASK_PREFIX = 'wrap-up-'


def focus_nudge_id(task_id: str) -> str:
    return f"{FOCUS_NUDGE_PREFIX}{task_id}"


def wrap_up_task_id(task_id: str) -> str:
    return f"{WRAP_UP_TASK_PREFIX}{task_id}"


def is_reminder_id(identifier: str) -> bool:
    """True for every id this scheduler can issue"""
    return (identifier == PICK_TASK_ID
            or identifier.startswith(FOCUS_NUDGE_PREFIX)
            or identifier.startswith(WRAP_UP_TASK_PREFIX))


@dataclass(frozen=True)
class Reminder:
    identifier: str
    kind: ReminderKind
    trigger: Trigger
    title: str
    body: str


class OperationType(Enum):
    CANCEL = "cancel"
    SCHEDULE = "schedule"


@dataclass(frozen=True)
class NotificationOperation:
    type: OperationType
    identifier: str
    reminder: Optional[Reminder] = None


@dataclass
class ReminderPlan:
    """Reminders that should be live, and known ids that should not"""
    desired: Dict[str, Reminder] = field(default_factory=dict)
    cancel: Set[str] = field(default_factory=set)


class NotificationScheduler:

    def __init__(self, backend: NotificationBackend, rng: Optional[random.Random] = None,
                 title: Optional[str] = None, cutoff_time: Optional[str] = None,
                 anti_spam_minutes: Optional[int] = None):
        self.backend = backend
        self.rng = rng or random.Random()
        self.title = title or config.notifications.title
        self.cutoff_time = cutoff_time or config.notifications.cutoff_time
        if anti_spam_minutes is None:
            anti_spam_minutes = config.notifications.anti_spam_minutes
        self.anti_spam_minutes = anti_spam_minutes
        # Ids scheduled by this instance and not cancelled since
        self._issued: Set[str] = set()

    # ===== PLANNING =====

    def _before_cutoff(self, time_str: str) -> bool:
        return not is_at_or_after(time_str, self.cutoff_time)

    def _fires_today(self, time_str: str, now: datetime) -> bool:
        return self._before_cutoff(time_str) and seconds_until(time_str, now) > 0

    def _too_close(self, task: TaskItem, wrap_up_time: str) -> bool:
        return (task.scheduled_time is not None
                and minutes_between(task.scheduled_time, wrap_up_time) <= self.anti_spam_minutes)

    def _reminder(self, identifier: str, kind: ReminderKind, trigger: Trigger,
                  name: Optional[str], task: Optional[str] = None,
                  time: Optional[str] = None) -> Reminder:
        body = message_for(kind, self.rng, name=name, task=task, time=time)
        return Reminder(identifier=identifier, kind=kind, trigger=trigger, title=self.title, body=body)

    def _daily(self, time_str: str) -> DailyTrigger:
        hour, minute = parse_time(time_str)
        return DailyTrigger(hour=hour, minute=minute)

    def plan(self, profile: UserProfile, today_entry: Optional[DailyEntry],
             now: datetime) -> ReminderPlan:
        """Desired reminders for this moment; no side effects besides the random source"""
        settings = profile.reminders
        name = profile.display_name or None
        tasks = today_entry.tasks if today_entry is not None else []

        relevant = {PICK_TASK_ID, WRAP_UP_ID}
        for task in tasks:
            relevant.add(focus_nudge_id(task.id))
            relevant.add(wrap_up_task_id(task.id))

        desired: Dict[str, Reminder] = {}

        if not tasks:
            pick = settings.pick_task
            if pick.enabled and self._before_cutoff(pick.time):
                desired[PICK_TASK_ID] = self._reminder(
                    PICK_TASK_ID, ReminderKind.PICK_TASK, self._daily(pick.time), name
                )
        elif not today_entry.completed:
            incomplete = today_entry.incomplete_tasks

            if settings.focus_nudge.enabled:
                for task in incomplete:
                    if task.scheduled_time and self._fires_today(task.scheduled_time, now):
                        identifier = focus_nudge_id(task.id)
                        desired[identifier] = self._reminder(
                            identifier, ReminderKind.FOCUS_NUDGE,
                            OnceTrigger(seconds=seconds_until(task.scheduled_time, now)),
                            name, task=task.text, time=task.scheduled_time
                        )

            desired.update(self._plan_wrap_up(settings, incomplete, now, name))

        return ReminderPlan(desired=desired, cancel=relevant - set(desired))

    def _plan_wrap_up(self, settings: ReminderSettings, incomplete: List[TaskItem],
                      now: datetime, name: Optional[str]) -> Dict[str, Reminder]:
        wrap_up = settings.wrap_up
        if not wrap_up.enabled or not incomplete or not self._before_cutoff(wrap_up.time):
            return {}

        if settings.wrap_up_mode == WrapUpMode.DAILY:
            if any(self._too_close(task, wrap_up.time) for task in incomplete):
                logger.debug(f"Wrap-up at {wrap_up.time} suppressed, a task nudge is within "
                             f"{self.anti_spam_minutes} minutes")
                return {}
            return {
                WRAP_UP_ID: self._reminder(WRAP_UP_ID, ReminderKind.WRAP_UP, self._daily(wrap_up.time), name)
            }

        seconds = seconds_until(wrap_up.time, now)
        if seconds <= 0:
            return {}
        planned = {}
        for task in incomplete:
            if self._too_close(task, wrap_up.time):
                continue
            identifier = wrap_up_task_id(task.id)
            planned[identifier] = self._reminder(
                identifier, ReminderKind.WRAP_UP, OnceTrigger(seconds=seconds),
                name, task=task.text, time=wrap_up.time
            )
        return planned

    # ===== RECONCILIATION =====

    def _permission(self) -> PermissionStatus:
        try:
            return self.backend.get_permission_status()
        except Exception as e:
            logger.warning(f"⚠️ Permission check failed, treating as denied: {e}")
            return PermissionStatus(granted=False, can_ask_again=False)

    def _live_ids(self) -> Set[str]:
        try:
            backend_ids = set(self.backend.scheduled_ids())
        except Exception as e:
            logger.warning(f"⚠️ Could not list scheduled reminders: {e}")
            backend_ids = set()
        return {i for i in (self._issued | backend_ids) if is_reminder_id(i)}

    def _safe_cancel(self, identifier: str) -> None:
        try:
            self.backend.cancel(identifier)
        except Exception as e:
            logger.debug(f"Cancel of {identifier} ignored: {e}")
        self._issued.discard(identifier)

    def reconcile(self, profile: UserProfile, today_entry: Optional[DailyEntry],
                  now: Optional[datetime] = None) -> List[NotificationOperation]:
        """Bring the backend in line with the current state and return what was done"""
        now = now or now_local()
        plan = self.plan(profile, today_entry, now)
        operations: List[NotificationOperation] = []

        stale = self._live_ids() - set(plan.desired)
        for identifier in sorted(plan.cancel | stale):
            self._safe_cancel(identifier)
            operations.append(NotificationOperation(OperationType.CANCEL, identifier))

        if not plan.desired:
            return operations

        if not self._permission().granted:
            logger.debug(f"Notification permission not granted, skipping {len(plan.desired)} reminder(s)")
            return operations

        for identifier, reminder in plan.desired.items():
            self._safe_cancel(identifier)
            operations.append(NotificationOperation(OperationType.CANCEL, identifier))
            try:
                self.backend.schedule(identifier, reminder.trigger, reminder.title, reminder.body)
            except Exception as e:
                logger.error(f"❌ Could not schedule {identifier}: {e}")
                continue
            self._issued.add(identifier)
            operations.append(NotificationOperation(OperationType.SCHEDULE, identifier, reminder))

        logger.debug(f"Reconciled reminders: {sorted(plan.desired)} live")
        return operations

    def cancel_all(self) -> List[NotificationOperation]:
        """Drop every reminder this scheduler knows about"""
        operations = []
        for identifier in sorted(self._live_ids() | {PICK_TASK_ID, WRAP_UP_ID}):
            self._safe_cancel(identifier)
            operations.append(NotificationOperation(OperationType.CANCEL, identifier))
        return operations
