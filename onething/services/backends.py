"""
Notification backends

The scheduler only needs three idempotent primitives from whatever actually
delivers reminders: schedule by id, cancel by id and a permission check.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Set, Union

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from onething.config import config
from onething.utils.datetime_utils import get_timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyTrigger:
    """Fires every day at hour:minute local time"""
    hour: int
    minute: int


@dataclass(frozen=True)
class OnceTrigger:
    """Fires once, ``seconds`` from now"""
    seconds: int


Trigger = Union[DailyTrigger, OnceTrigger]


@dataclass(frozen=True)
class PermissionStatus:
    granted: bool
    can_ask_again: bool = True


class NotificationBackend(ABC):
    """Whatever delivers reminders once they are scheduled"""

    @abstractmethod
    def schedule(self, identifier: str, trigger: Trigger, title: str, body: str) -> None:
        pass

    @abstractmethod
    def cancel(self, identifier: str) -> None:
        """Must not raise for an unknown id"""
        pass

    @abstractmethod
    def get_permission_status(self) -> PermissionStatus:
        pass

    def scheduled_ids(self) -> Set[str]:
        """Ids currently live, when the backend can tell"""
        return set()


class NullBackend(NotificationBackend):
    """Platform without local notifications"""

    def schedule(self, identifier: str, trigger: Trigger, title: str, body: str) -> None:
        pass

    def cancel(self, identifier: str) -> None:
        pass

    def get_permission_status(self) -> PermissionStatus:
        return PermissionStatus(granted=False, can_ask_again=False)


def log_delivery(identifier: str, title: str, body: str) -> None:
    logger.info(f"🔔 [{identifier}] {title}: {body}")


class APSchedulerBackend(NotificationBackend):
    """In-process delivery through an APScheduler scheduler.

    Daily reminders become ``CronTrigger`` jobs and one-shot reminders
    ``DateTrigger`` jobs; the job id is the reminder id, so scheduling the
    same id twice replaces the job instead of duplicating it.
    """

    def __init__(self, scheduler: Optional[BaseScheduler] = None,
                 deliver: Callable[..., None] = log_delivery,
                 permission_granted: Optional[bool] = None,
                 tz_name: Optional[str] = None):
        self.timezone = get_timezone(tz_name)
        self.scheduler = scheduler or BackgroundScheduler(timezone=self.timezone)
        self.deliver = deliver
        if permission_granted is None:
            permission_granted = config.notifications.enabled
        self.permission_granted = permission_granted

    def start(self):
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("📅 Notification scheduler started")

    def shutdown(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("📅 Notification scheduler stopped")

    def _build_trigger(self, trigger: Trigger):
        if isinstance(trigger, DailyTrigger):
            return CronTrigger(hour=trigger.hour, minute=trigger.minute, timezone=self.timezone)
        if isinstance(trigger, OnceTrigger):
            run_date = datetime.now(self.timezone) + timedelta(seconds=trigger.seconds)
            return DateTrigger(run_date=run_date, timezone=self.timezone)
        raise TypeError(f"Unsupported trigger: {trigger!r}")

    def schedule(self, identifier: str, trigger: Trigger, title: str, body: str) -> None:
        self.scheduler.add_job(
            self.deliver,
            self._build_trigger(trigger),
            id=identifier,
            name=title,
            kwargs={'identifier': identifier, 'title': title, 'body': body},
            replace_existing=True
        )
        logger.debug(f"Job {identifier} scheduled with {trigger}")

    def cancel(self, identifier: str) -> None:
        try:
            self.scheduler.remove_job(identifier)
        except JobLookupError:
            pass

    def get_permission_status(self) -> PermissionStatus:
        return PermissionStatus(granted=self.permission_granted, can_ask_again=False)

    def scheduled_ids(self) -> Set[str]:
        return {job.id for job in self.scheduler.get_jobs()}
