import random

import pytest

from onething.models import ReminderKind
from onething.services.messages import (
    MESSAGE_POOLS,
    PICK_TASK_MESSAGES,
    PICK_TASK_MESSAGES_WITH_NAME,
    fill_placeholders,
    message_for,
    pick_message,
)


def test_placeholders_are_filled():
    text = fill_placeholders("NAME: TASK at TIME", name="Ana", task="Read", time="14:05")
    assert text == "Ana: Read at 2:05 PM"


def test_substituted_text_is_not_rescanned():
    assert fill_placeholders("Do TASK", task="the TIME report", time="10:00") == "Do the TIME report"


def test_missing_values_leave_template_alone():
    assert fill_placeholders("It's TIME") == "It's TIME"


def test_named_templates_need_a_name():
    rng = random.Random(5)
    for _ in range(50):
        assert pick_message(PICK_TASK_MESSAGES, PICK_TASK_MESSAGES_WITH_NAME, rng) in PICK_TASK_MESSAGES


def test_name_widens_the_pool():
    rng = random.Random(11)
    seen = {pick_message(PICK_TASK_MESSAGES, PICK_TASK_MESSAGES_WITH_NAME, rng, name="Ana") for _ in range(200)}
    assert "Hey Ana, one task is all it takes. What will it be?" in seen
    assert seen & set(PICK_TASK_MESSAGES)


@pytest.mark.parametrize("kind", list(ReminderKind))
def test_every_kind_has_a_pool(kind):
    messages, with_name = MESSAGE_POOLS[kind]
    assert messages and with_name
    body = message_for(kind, random.Random(0), name="Ana", task="Stretch", time="16:00")
    assert "NAME" not in body and "TASK" not in body and "TIME" not in body


def test_same_seed_same_message():
    first = message_for(ReminderKind.WRAP_UP, random.Random(3), name="Ana")
    second = message_for(ReminderKind.WRAP_UP, random.Random(3), name="Ana")
    assert first == second
