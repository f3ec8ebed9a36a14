# onething/models/entry.py

import uuid
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from onething.models.enums import Mood, ProofType
from onething.models.profile import Level
from onething.models.reminders import CamelModel
from onething.utils.datetime_utils import now_local
from onething.utils.validators import validate_date_string, validate_time_string


def generate_id() -> str:
    return uuid.uuid4().hex


class TaskProof(CamelModel):
    type: ProofType
    uri: str


class TaskItem(CamelModel):
    id: str = Field(default_factory=generate_id)
    text: str = Field(..., min_length=1)
    created_at: str = Field(default_factory=lambda: now_local().isoformat())
    is_completed: bool = False
    completed_at: Optional[str] = None
    scheduled_time: Optional[str] = None  # HH:MM of the focus nudge
    proof: Optional[TaskProof] = None

    @field_validator('scheduled_time')
    @classmethod
    def validate_scheduled_time(cls, v):
        if v is not None and validate_time_string(v) is None:
            raise ValueError(f"scheduledTime must be HH:MM, got {v!r}")
        return v


class Reflection(CamelModel):
    mood: Mood
    note: Optional[str] = None


class DailyEntry(CamelModel):
    """All tasks for one calendar day"""
    date: str
    tasks: List[TaskItem] = Field(default_factory=list)
    completed: bool = False
    level_at_time: Level = 1
    reflection: Optional[Reflection] = None
    completion_message_index: Optional[int] = None
    completion_animation_seen: Optional[bool] = None

    @field_validator('date')
    @classmethod
    def validate_date(cls, v):
        if validate_date_string(v) is None:
            raise ValueError(f"date must be YYYY-MM-DD, got {v!r}")
        return v

    @model_validator(mode='after')
    def sync_completed(self):
        # completed is derived; a stored flag that disagrees with the tasks loses
        self.completed = bool(self.tasks) and all(t.is_completed for t in self.tasks)
        return self

    @property
    def incomplete_tasks(self) -> List[TaskItem]:
        return [t for t in self.tasks if not t.is_completed]

    def get_task(self, task_id: str) -> Optional[TaskItem]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json', exclude_none=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyEntry":
        return cls.model_validate(data)
