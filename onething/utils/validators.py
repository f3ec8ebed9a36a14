# onething/utils/validators.py

import re
from dataclasses import dataclass
from typing import Optional

from onething.utils.datetime_utils import parse_date, parse_time

MAX_TASK_LENGTH = 500
MAX_NAME_LENGTH = 50
MAX_NOTE_LENGTH = 500

VALID_MOODS = ("energized", "calm", "neutral", "tough")
VALID_PROOF_TYPES = ("photo", "screenshot", "document")
VALID_LEVELS = (1, 2, 3)

# Control characters except tab, newline and carriage return
_CONTROL_CHARS_KEEP_NEWLINES = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    sanitized: Optional[str] = None


def validate_task_input(text: str) -> ValidationResult:
    trimmed = text.strip()
    if not trimmed:
        return ValidationResult(False, "Task cannot be empty")
    if len(trimmed) > MAX_TASK_LENGTH:
        return ValidationResult(False, f"Task is too long (max {MAX_TASK_LENGTH} characters)")
    return ValidationResult(True, sanitized=_CONTROL_CHARS_KEEP_NEWLINES.sub("", trimmed))


def validate_name_input(text: str) -> ValidationResult:
    trimmed = text.strip()
    if len(trimmed) > MAX_NAME_LENGTH:
        return ValidationResult(False, f"Name is too long (max {MAX_NAME_LENGTH} characters)")
    return ValidationResult(True, sanitized=_CONTROL_CHARS.sub("", trimmed))


def validate_note_input(text: str) -> ValidationResult:
    trimmed = text.strip()
    if len(trimmed) > MAX_NOTE_LENGTH:
        return ValidationResult(False, f"Note is too long (max {MAX_NOTE_LENGTH} characters)")
    return ValidationResult(True, sanitized=_CONTROL_CHARS_KEEP_NEWLINES.sub("", trimmed))


def validate_mood(mood) -> Optional[str]:
    if isinstance(mood, str) and mood in VALID_MOODS:
        return mood
    return None


def validate_proof_type(proof_type) -> Optional[str]:
    if isinstance(proof_type, str) and proof_type in VALID_PROOF_TYPES:
        return proof_type
    return None


def validate_level(level) -> Optional[int]:
    # bool is an int subclass
    if isinstance(level, int) and not isinstance(level, bool) and level in VALID_LEVELS:
        return level
    return None


def validate_date_string(date_str) -> Optional[str]:
    if not isinstance(date_str, str) or not _DATE_RE.match(date_str):
        return None
    try:
        parse_date(date_str)
    except ValueError:
        return None
    return date_str


def validate_time_string(time_str) -> Optional[str]:
    if not isinstance(time_str, str):
        return None
    try:
        parse_time(time_str)
    except ValueError:
        return None
    return time_str
