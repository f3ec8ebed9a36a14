# onething/core/exceptions.py


class TrackerError(Exception):
    """Base error for the tracker core"""
    pass


class InvalidInputError(TrackerError):
    """User input rejected by validation"""
    pass


class TaskLimitReachedError(TrackerError):
    """Today's entry already holds as many tasks as the current level allows"""
    pass


class DayAlreadyCompletedError(TrackerError):
    """Tasks cannot be added once the day is completed"""
    pass


class TaskNotFoundError(TrackerError):
    """No task with the given id in the entry"""
    pass


class ReflectionNotAllowedError(TrackerError):
    """Reflections are only accepted on completed days"""
    pass


class InvariantViolation(TrackerError):
    """A value escaped its closed set after validation; this is a bug, not bad input"""
    pass


class StorageError(TrackerError):
    """Reading or writing the local store failed"""
    pass
