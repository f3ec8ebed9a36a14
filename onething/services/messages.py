# onething/services/messages.py

import random
import re
from typing import Optional, Sequence

from onething.models import ReminderKind
from onething.utils.datetime_utils import format_time_12h

_PLACEHOLDER_RE = re.compile(r"NAME|TASK|TIME")

PICK_TASK_MESSAGES = [
    "Good morning! What's your one thing today?",
    "A new day, a fresh start. Ready to pick your one thing?",
    "Your day is wide open. What one thing will make it count?",
]

PICK_TASK_MESSAGES_WITH_NAME = [
    "Hey NAME, one task is all it takes. What will it be?",
]

FOCUS_NUDGE_MESSAGES = [
    "It's TIME. Time for: TASK",
    "You planned this for TIME: TASK",
    "Focus time. TASK is up next.",
]

FOCUS_NUDGE_MESSAGES_WITH_NAME = [
    "NAME, it's TIME. Ready for TASK?",
]

WRAP_UP_MESSAGES = [
    "Your one thing is waiting. You've got this.",
    "Still time to finish today's task. Just one thing, remember?",
    "Almost end of day. Your task is still open. Wrap it up?",
]

WRAP_UP_MESSAGES_WITH_NAME = [
    "Hey NAME, don't forget: you committed to one thing today.",
]

MESSAGE_POOLS = {
    ReminderKind.PICK_TASK: (PICK_TASK_MESSAGES, PICK_TASK_MESSAGES_WITH_NAME),
    ReminderKind.FOCUS_NUDGE: (FOCUS_NUDGE_MESSAGES, FOCUS_NUDGE_MESSAGES_WITH_NAME),
    ReminderKind.WRAP_UP: (WRAP_UP_MESSAGES, WRAP_UP_MESSAGES_WITH_NAME),
}


def fill_placeholders(template: str, name: Optional[str] = None,
                      task: Optional[str] = None, time: Optional[str] = None) -> str:
    values = {
        "NAME": name,
        "TASK": task,
        "TIME": format_time_12h(time) if time else None,
    }
    # Single pass so substituted text is never re-scanned
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(0)] or m.group(0), template)


def pick_message(messages: Sequence[str], messages_with_name: Sequence[str],
                 rng: random.Random, name: Optional[str] = None,
                 task: Optional[str] = None, time: Optional[str] = None) -> str:
    """Uniform pick; a name adds the personalised templates to the pool"""
    pool = list(messages) + (list(messages_with_name) if name else [])
    return fill_placeholders(rng.choice(pool), name=name, task=task, time=time)


def message_for(kind: ReminderKind, rng: random.Random, name: Optional[str] = None,
                task: Optional[str] = None, time: Optional[str] = None) -> str:
    messages, messages_with_name = MESSAGE_POOLS[kind]
    return pick_message(messages, messages_with_name, rng, name=name, task=task, time=time)
