"""Error taxonomy for taskminder.

Every failure a caller can act on has its own type, so presentation code can
tell a bad form value from a missing record without inspecting messages.
"""


class TaskminderError(Exception):
    """Base class for all taskminder errors."""


class ValidationError(TaskminderError, ValueError):
    """Empty required field, duplicate name/level, or deadline in the past."""


class InvalidNotificationDate(TaskminderError, ValueError):
    """Notification date falls outside [today, deadline]."""


class NotFound(TaskminderError, LookupError):
    """Referenced task, notification, category or priority does not exist."""


class ProtectedEntity(TaskminderError):
    """Attempt to rename or delete the Uncategorized category or Default priority."""


class StorageError(TaskminderError, OSError):
    """A collection could not be written; the previous file is left untouched."""
