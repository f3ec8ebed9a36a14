# onething/models/profile.py

from typing import Any, Dict, Literal, Optional

from pydantic import Field

from onething.models.reminders import CamelModel, ReminderSettings
from onething.utils.datetime_utils import now_local

Level = Literal[1, 2, 3]


class UserProfile(CamelModel):
    """Single per-installation profile row"""
    name: str = ""
    created_at: str = Field(default_factory=lambda: now_local().isoformat())
    current_level: Level = 1
    current_level_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    total_tasks_completed: int = Field(0, ge=0)
    onboarding_complete: bool = False
    last_regression_date: Optional[str] = None  # day the last missed-day penalty was applied
    reminders: ReminderSettings = Field(default_factory=ReminderSettings)

    @property
    def display_name(self) -> str:
        return self.name.strip()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        return cls.model_validate(data)
