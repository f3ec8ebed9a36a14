# onething/models/enums.py

from enum import Enum


class Mood(str, Enum):
    ENERGIZED = "energized"
    CALM = "calm"
    NEUTRAL = "neutral"
    TOUGH = "tough"


class ProofType(str, Enum):
    PHOTO = "photo"
    SCREENSHOT = "screenshot"
    DOCUMENT = "document"


class ReminderKind(str, Enum):
    PICK_TASK = "pick_task"
    FOCUS_NUDGE = "focus_nudge"
    WRAP_UP = "wrap_up"


class WrapUpMode(str, Enum):
    DAILY = "daily"          # one recurring reminder for the whole day
    PER_TASK = "per_task"    # one-shot per incomplete task
