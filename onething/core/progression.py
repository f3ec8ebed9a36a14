#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OneThing Tracker - Progression Engine

Two transitions drive the level state machine:

* end of day (``evaluate_end_of_day``): a missed day resets the streak and
  drops the level by one;
* task completion (``apply_task_completion``): a fully completed day extends
  the streak, and reaching the level-up streak below the top level raises the
  level by one and restarts the streak.

The streak always counts consecutive fully-completed days at the current
level only. Every function here is pure: inputs are never mutated, changed
state comes back as new model instances.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from onething.config import config
from onething.core.exceptions import (
    DayAlreadyCompletedError,
    InvalidInputError,
    InvariantViolation,
    ReflectionNotAllowedError,
    TaskLimitReachedError,
    TaskNotFoundError,
)
from onething.models import DailyEntry, Mood, Reflection, TaskItem, TaskProof, UserProfile
from onething.utils.datetime_utils import local_date_str, now_local, yesterday_str
from onething.utils.validators import (
    validate_level,
    validate_mood,
    validate_note_input,
    validate_proof_type,
    validate_task_input,
    validate_time_string,
)

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, None]


@dataclass
class CompletionResult:
    """Outcome of completing one task"""
    profile: UserProfile
    entry: DailyEntry
    day_completed: bool = False
    leveled_up: bool = False


# ===== HELPERS =====

def _checked_level(level: int) -> int:
    if validate_level(level) is None:
        raise InvariantViolation(f"Level {level!r} is outside 1..3")
    return level


def _usable_entries(entries: Mapping[str, Any]) -> Dict[str, DailyEntry]:
    """Entries that are well-formed; anything else counts as absent"""
    usable: Dict[str, DailyEntry] = {}
    for key, value in (entries or {}).items():
        if isinstance(value, dict):
            try:
                value = DailyEntry.from_dict(value)
            except ValidationError:
                continue
        if isinstance(value, DailyEntry) and value.date == key:
            usable[key] = value
    return usable


def _regress(profile: UserProfile, today_key: str, reason: str) -> UserProfile:
    new_level = profile.current_level
    if profile.current_level > config.progression.min_level:
        new_level = profile.current_level - 1
    logger.info(
        f"📉 Missed day ({reason}): level {profile.current_level} -> {new_level}, "
        f"streak {profile.current_level_streak} -> 0"
    )
    return profile.model_copy(update={
        'current_level': _checked_level(new_level),
        'current_level_streak': 0,
        'last_regression_date': today_key,
    })


def _date_key(today: DateLike) -> str:
    return local_date_str(today if today is not None else now_local())


# ===== END OF DAY =====

def evaluate_end_of_day(profile: UserProfile, entries: Mapping[str, Any],
                        today: DateLike = None) -> UserProfile:
    """Profile that should hold today, given yesterday's outcome.

    A missing day only counts as missed when the user already has a streak
    and history older than yesterday; a brand-new user is never punished.
    However long the gap, a single regression is applied.
    """
    today_key = _date_key(today)
    if profile.last_regression_date == today_key:
        # Already penalised today
        return profile

    yesterday = yesterday_str(today)
    usable = _usable_entries(entries)
    entry = usable.get(yesterday)

    if entry is None:
        if profile.current_level_streak > 0 and any(d < yesterday for d in usable):
            return _regress(profile, today_key, f"no entry for {yesterday}")
        return profile

    if entry.tasks and not entry.completed:
        return _regress(profile, today_key, f"{yesterday} left incomplete")

    # Completed, or a rest day that was never started
    return profile


def was_yesterday_missed(entries: Mapping[str, Any], today: DateLike = None) -> bool:
    entry = _usable_entries(entries).get(yesterday_str(today))
    return entry is not None and bool(entry.tasks) and not entry.completed


# ===== TASK COMPLETION =====

def apply_task_completion(profile: UserProfile, entry: DailyEntry, task_id: str,
                          completed_at: Optional[datetime] = None,
                          proof: Union[TaskProof, Dict[str, Any], None] = None,
                          level_up_streak: Optional[int] = None) -> CompletionResult:
    """Mark a task done and apply streak / level-up rules"""
    task = entry.get_task(task_id)
    if task is None:
        raise TaskNotFoundError(f"No task {task_id!r} on {entry.date}")
    if task.is_completed:
        return CompletionResult(profile=profile, entry=entry, day_completed=entry.completed)

    if isinstance(proof, dict):
        if validate_proof_type(proof.get('type')) is None:
            raise InvalidInputError(f"Unsupported proof type {proof.get('type')!r}")
        try:
            proof = TaskProof.model_validate(proof)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid proof: {e.error_count()} error(s)") from e

    completed_at = completed_at or now_local()
    tasks = [
        t.model_copy(update={
            'is_completed': True,
            'completed_at': completed_at.isoformat(),
            'proof': proof,
        }) if t.id == task_id else t
        for t in entry.tasks
    ]
    all_done = all(t.is_completed for t in tasks)
    updated_entry = entry.model_copy(update={'tasks': tasks, 'completed': all_done})

    updates: Dict[str, Any] = {'total_tasks_completed': profile.total_tasks_completed + 1}
    leveled_up = False

    if all_done:
        threshold = level_up_streak or config.progression.level_up_streak
        streak = profile.current_level_streak + 1
        updates['current_level_streak'] = streak
        updates['longest_streak'] = max(profile.longest_streak, streak)

        if streak >= threshold and profile.current_level < config.progression.max_level:
            new_level = _checked_level(profile.current_level + 1)
            logger.info(f"🎉 Level up: {profile.current_level} -> {new_level} after {streak} days")
            updates['current_level'] = new_level
            updates['current_level_streak'] = 0
            leveled_up = True

    return CompletionResult(
        profile=profile.model_copy(update=updates),
        entry=updated_entry,
        day_completed=all_done,
        leveled_up=leveled_up,
    )


# ===== ENTRY EDITING =====

def new_entry(date_str: str, level: int) -> DailyEntry:
    return DailyEntry(date=date_str, level_at_time=_checked_level(level))


def can_add_more_tasks(profile: UserProfile, entry: Optional[DailyEntry]) -> bool:
    if entry is None:
        return True
    return len(entry.tasks) < profile.current_level


def add_task(profile: UserProfile, entry: Optional[DailyEntry], text: str,
             scheduled_time: Optional[str] = None, today: DateLike = None) -> DailyEntry:
    """Append a task to today's entry, creating the entry on first use"""
    result = validate_task_input(text)
    if not result.valid:
        raise InvalidInputError(result.error)
    if scheduled_time is not None and validate_time_string(scheduled_time) is None:
        raise InvalidInputError(f"Invalid time {scheduled_time!r}, expected HH:MM")

    current = entry or new_entry(_date_key(today), profile.current_level)
    if current.completed:
        raise DayAlreadyCompletedError(f"{current.date} is already completed")
    if not can_add_more_tasks(profile, current):
        raise TaskLimitReachedError(
            f"Level {profile.current_level} allows {profile.current_level} task(s) per day"
        )

    task = TaskItem(text=result.sanitized, scheduled_time=scheduled_time)
    return current.model_copy(update={'tasks': [*current.tasks, task], 'completed': False})


def set_task_time(entry: DailyEntry, task_id: str, scheduled_time: Optional[str]) -> DailyEntry:
    """Set or clear the focus-nudge time of a task"""
    if entry.get_task(task_id) is None:
        raise TaskNotFoundError(f"No task {task_id!r} on {entry.date}")
    if scheduled_time is not None and validate_time_string(scheduled_time) is None:
        raise InvalidInputError(f"Invalid time {scheduled_time!r}, expected HH:MM")

    tasks = [
        t.model_copy(update={'scheduled_time': scheduled_time}) if t.id == task_id else t
        for t in entry.tasks
    ]
    return entry.model_copy(update={'tasks': tasks})


def add_reflection(entry: Optional[DailyEntry], mood: Union[Mood, str],
                   note: Optional[str] = None) -> DailyEntry:
    if entry is None or not entry.completed:
        raise ReflectionNotAllowedError("Reflections can only be added to a completed day")

    validated = validate_mood(mood.value if isinstance(mood, Mood) else mood)
    if validated is None:
        logger.error(f"Invalid mood value: {mood!r}")
        raise InvariantViolation(f"Invalid mood value: {mood!r}")

    sanitized_note = None
    if note:
        result = validate_note_input(note)
        if not result.valid:
            raise InvalidInputError(result.error)
        sanitized_note = result.sanitized or None

    return entry.model_copy(update={'reflection': Reflection(mood=Mood(validated), note=sanitized_note)})


# ===== STATS =====

def calculate_completion_rate(entries: Mapping[str, Any]) -> int:
    """Percentage of recorded days that were completed, rounded half up"""
    usable = _usable_entries(entries)
    if not usable:
        return 0
    completed = sum(1 for e in usable.values() if e.completed)
    return int(completed * 100 / len(usable) + 0.5)
