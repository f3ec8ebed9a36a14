from datetime import datetime, timedelta
from typing import Iterable, Optional

import pytz

from onething.models import DailyEntry, TaskItem, UserProfile
from onething.services.backends import NotificationBackend, PermissionStatus

TODAY = "2024-03-15"
YESTERDAY = "2024-03-14"


def at(hour: int, minute: int = 0, day: int = 15) -> datetime:
    return pytz.utc.localize(datetime(2024, 3, day, hour, minute))


def make_profile(**overrides) -> UserProfile:
    return UserProfile(**overrides)


def make_task(text: str = "Write the report", done: bool = False,
              scheduled_time: Optional[str] = None, task_id: Optional[str] = None) -> TaskItem:
    kwargs = dict(text=text, is_completed=done, scheduled_time=scheduled_time)
    if task_id is not None:
        kwargs['id'] = task_id
    return TaskItem(**kwargs)


def make_entry(date_str: str = TODAY, tasks: Iterable[TaskItem] = (), level: int = 1) -> DailyEntry:
    return DailyEntry(date=date_str, tasks=list(tasks), level_at_time=level)


def by_date(*entries: DailyEntry):
    return {e.date: e for e in entries}


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0, minutes: int = 0):
        self.now = self.now + timedelta(days=days, hours=hours, minutes=minutes)


class FakeBackend(NotificationBackend):
    """Keeps live reminders by id and refuses to hold two under one id"""

    def __init__(self, granted: bool = True):
        self.granted = granted
        self.live = {}
        self.schedule_calls = []
        self.cancel_calls = []

    def schedule(self, identifier, trigger, title, body):
        self.schedule_calls.append(identifier)
        assert identifier not in self.live, f"{identifier} scheduled twice"
        self.live[identifier] = (trigger, title, body)

    def cancel(self, identifier):
        self.cancel_calls.append(identifier)
        self.live.pop(identifier, None)

    def get_permission_status(self):
        return PermissionStatus(granted=self.granted)

    def scheduled_ids(self):
        return set(self.live)


NEW_YORK = pytz.timezone("America/New_York")

# Local 01:00 on the spring-forward day and 00:30 on the fall-back day
DST_MORNINGS = [
    NEW_YORK.localize(datetime(2024, 3, 10, 1, 0)),
    NEW_YORK.localize(datetime(2024, 11, 3, 0, 30)),
]


def wall_clock_after(now: datetime, seconds: int) -> str:
    """Local HH:MM a one-shot reminder planned at ``now`` actually fires"""
    fired = now.tzinfo.normalize(now + timedelta(seconds=seconds))
    return fired.strftime("%H:%M")