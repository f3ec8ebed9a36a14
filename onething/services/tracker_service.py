#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OneThing Tracker - Tracker Service
Glue between the store, the progression engine and the notification scheduler

Every event follows the same order: evaluate progression (on start or when
the calendar day changed) -> persist profile -> persist entry -> reconcile
reminders. Reminders are never scheduled against state that has not been
written yet.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError

from onething.core import progression
from onething.core.exceptions import InvalidInputError, TaskNotFoundError
from onething.core.progression import CompletionResult
from onething.database.manager import BaseStore
from onething.models import DailyEntry, Mood, TaskProof, UserProfile
from onething.services.notifications import NotificationScheduler
from onething.utils.datetime_utils import local_date_str, now_local
from onething.utils.validators import validate_name_input

logger = logging.getLogger(__name__)

# Progression fields only change through the engine
EDITABLE_PROFILE_FIELDS = ('name', 'onboarding_complete', 'reminders')


@dataclass
class TrackerState:
    profile: UserProfile
    entries: Dict[str, DailyEntry]
    today_entry: Optional[DailyEntry] = None
    yesterday_missed: bool = False
    just_leveled_up: bool = False


class TrackerService:
    """Single-user tracker session.

    All public methods are serialised by one re-entrant lock, so overlapping
    events from the host cannot interleave their writes.
    """

    def __init__(self, store: BaseStore, notifier: NotificationScheduler,
                 clock: Callable[[], datetime] = now_local):
        self.store = store
        self.notifier = notifier
        self.clock = clock
        self.state: Optional[TrackerState] = None
        self._loaded_date: Optional[str] = None
        self._lock = threading.RLock()

    # ===== LOADING =====

    def load(self) -> TrackerState:
        """App start: read, evaluate yesterday, persist, reconcile"""
        with self._lock:
            now = self.clock()
            profile = self.store.read_profile()
            entries = self.store.read_entries()

            processed = progression.evaluate_end_of_day(profile, entries, today=now)
            if processed != profile:
                profile = processed
                self.store.write_profile(profile)

            today = local_date_str(now)
            today_entry = entries.get(today)
            self.state = TrackerState(
                profile=profile,
                entries=entries,
                today_entry=today_entry,
                yesterday_missed=progression.was_yesterday_missed(entries, today=now),
            )
            self._loaded_date = today

            self.notifier.reconcile(profile, today_entry, now=now)
            logger.info(f"✅ Tracker loaded for {today}: level {profile.current_level}, "
                        f"streak {profile.current_level_streak}, {len(entries)} day(s) of history")
            return self.state

    def _current_state(self) -> TrackerState:
        if self.state is None:
            return self.load()
        if self._loaded_date != local_date_str(self.clock()):
            logger.info("🌅 New day detected, re-evaluating progression")
            return self.load()
        return self.state

    def _commit(self, profile: Optional[UserProfile] = None,
                entry: Optional[DailyEntry] = None) -> None:
        state = self.state
        if profile is not None:
            self.store.write_profile(profile)
            state.profile = profile
        if entry is not None:
            self.store.write_entry(entry)
            state.entries[entry.date] = entry
            state.today_entry = entry
        self.notifier.reconcile(state.profile, state.today_entry, now=self.clock())

    # ===== PROPERTIES =====

    @property
    def profile(self) -> UserProfile:
        return self._current_state().profile

    @property
    def today_entry(self) -> Optional[DailyEntry]:
        return self._current_state().today_entry

    @property
    def can_add_more_tasks(self) -> bool:
        state = self._current_state()
        return progression.can_add_more_tasks(state.profile, state.today_entry)

    @property
    def completion_rate(self) -> int:
        return progression.calculate_completion_rate(self._current_state().entries)

    # ===== EVENTS =====

    def update_profile(self, **updates: Any) -> UserProfile:
        with self._lock:
            unknown = set(updates) - set(EDITABLE_PROFILE_FIELDS)
            if unknown:
                raise TypeError(f"Profile field(s) not editable: {sorted(unknown)}")

            state = self._current_state()
            if 'name' in updates:
                result = validate_name_input(updates['name'])
                if not result.valid:
                    raise InvalidInputError(result.error)
                updates['name'] = result.sanitized

            try:
                profile = UserProfile.model_validate({**state.profile.model_dump(), **updates})
            except ValidationError as e:
                raise InvalidInputError(f"Invalid profile update: {e}") from e

            self._commit(profile=profile)
            return profile

    def add_task(self, text: str, scheduled_time: Optional[str] = None) -> DailyEntry:
        with self._lock:
            state = self._current_state()
            entry = progression.add_task(state.profile, state.today_entry, text,
                                         scheduled_time=scheduled_time, today=self.clock())
            self._commit(entry=entry)
            return entry

    def set_task_time(self, task_id: str, scheduled_time: Optional[str]) -> DailyEntry:
        with self._lock:
            state = self._current_state()
            if state.today_entry is None:
                raise TaskNotFoundError(f"No task {task_id!r} today")
            entry = progression.set_task_time(state.today_entry, task_id, scheduled_time)
            self._commit(entry=entry)
            return entry

    def complete_task(self, task_id: str,
                      proof: Union[TaskProof, Dict[str, Any], None] = None) -> CompletionResult:
        with self._lock:
            state = self._current_state()
            if state.today_entry is None:
                raise TaskNotFoundError(f"No task {task_id!r} today")

            result = progression.apply_task_completion(
                state.profile, state.today_entry, task_id, completed_at=self.clock(), proof=proof
            )
            if result.entry is state.today_entry:
                return result

            if result.leveled_up:
                state.just_leveled_up = True
            self._commit(profile=result.profile, entry=result.entry)
            return result

    def add_reflection(self, mood: Union[Mood, str], note: Optional[str] = None) -> DailyEntry:
        with self._lock:
            state = self._current_state()
            entry = progression.add_reflection(state.today_entry, mood, note)
            self._commit(entry=entry)
            return entry

    def reset_all_data(self) -> TrackerState:
        with self._lock:
            if self.state is not None:
                logger.info(f"🗑 Resetting data: streak {self.state.profile.current_level_streak}, "
                            f"{self.state.profile.total_tasks_completed} task(s) completed")
            self.store.clear_all()
            self.notifier.cancel_all()
            self.state = None
            self._loaded_date = None
            return self.load()
