#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OneThing Tracker - Reminder Configuration Models

Reminder settings went through three persisted shapes:

* V1: two reminders, "pick a task" in the morning and "complete your task"
  in the evening (the oldest profiles only have a single
  ``reminderEnabled``/``reminderTime`` pair).
* V2: three reminders, pick-task, per-task focus nudges and an evening wrap-up.
* V3: a single on/off toggle, focus nudges always on, and a wrap-up sent per
  incomplete task.

Each shape is kept as its own model, tagged by ``version``. Migration into the
one canonical ``ReminderSettings`` lives in ``onething.database.migrations``;
everything downstream (the notification scheduler in particular) only ever
sees ``ReminderSettings``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from onething.models.enums import WrapUpMode
from onething.utils.validators import validate_time_string

DEFAULT_PICK_TASK_TIME = "08:00"
DEFAULT_WRAP_UP_TIME = "18:00"


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on disk"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_time(value: str) -> str:
    if validate_time_string(value) is None:
        raise ValueError(f"time must be HH:MM, got {value!r}")
    return value


# ===== CANONICAL SHAPE =====

class ReminderConfig(CamelModel):
    enabled: bool = False
    time: str = DEFAULT_PICK_TASK_TIME

    @field_validator('time')
    @classmethod
    def validate_time(cls, v):
        return _check_time(v)


class FocusNudgeConfig(CamelModel):
    enabled: bool = True


class ReminderSettings(CamelModel):
    """The only reminder shape the scheduler works with"""
    pick_task: ReminderConfig = Field(
        default_factory=lambda: ReminderConfig(enabled=False, time=DEFAULT_PICK_TASK_TIME)
    )
    focus_nudge: FocusNudgeConfig = Field(default_factory=FocusNudgeConfig)
    wrap_up: ReminderConfig = Field(
        default_factory=lambda: ReminderConfig(enabled=False, time=DEFAULT_WRAP_UP_TIME)
    )
    wrap_up_mode: WrapUpMode = WrapUpMode.DAILY


# ===== PERSISTED SCHEMES =====

class ReminderSchemeV1(CamelModel):
    version: Literal[1] = 1
    pick_task: ReminderConfig = Field(default_factory=ReminderConfig)
    complete_task: ReminderConfig = Field(
        default_factory=lambda: ReminderConfig(enabled=False, time=DEFAULT_WRAP_UP_TIME)
    )


class ReminderSchemeV2(CamelModel):
    version: Literal[2] = 2
    pick_task: ReminderConfig = Field(default_factory=ReminderConfig)
    focus_nudge: FocusNudgeConfig = Field(default_factory=FocusNudgeConfig)
    wrap_up: ReminderConfig = Field(
        default_factory=lambda: ReminderConfig(enabled=False, time=DEFAULT_WRAP_UP_TIME)
    )


class ReminderSchemeV3(CamelModel):
    version: Literal[3] = 3
    reminders_enabled: bool = False
    pick_task_time: str = DEFAULT_PICK_TASK_TIME
    wrap_up_time: str = DEFAULT_WRAP_UP_TIME

    @field_validator('pick_task_time', 'wrap_up_time')
    @classmethod
    def validate_times(cls, v):
        return _check_time(v)


ReminderScheme = Annotated[
    Union[ReminderSchemeV1, ReminderSchemeV2, ReminderSchemeV3],
    Field(discriminator='version'),
]
