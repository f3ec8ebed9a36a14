from .exceptions import (
    TrackerError,
    InvalidInputError,
    TaskLimitReachedError,
    DayAlreadyCompletedError,
    TaskNotFoundError,
    ReflectionNotAllowedError,
    InvariantViolation,
    StorageError
)

from .progression import (
    CompletionResult,
    evaluate_end_of_day,
    was_yesterday_missed,
    apply_task_completion,
    new_entry,
    can_add_more_tasks,
    add_task,
    set_task_time,
    add_reflection,
    calculate_completion_rate
)

__all__ = [
    'TrackerError',
    'InvalidInputError',
    'TaskLimitReachedError',
    'DayAlreadyCompletedError',
    'TaskNotFoundError',
    'ReflectionNotAllowedError',
    'InvariantViolation',
    'StorageError',
    'CompletionResult',
    'evaluate_end_of_day',
    'was_yesterday_missed',
    'apply_task_completion',
    'new_entry',
    'can_add_more_tasks',
    'add_task',
    'set_task_time',
    'add_reflection',
    'calculate_completion_rate'
]
