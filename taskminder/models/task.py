"""Task data model for taskminder."""

from datetime import date
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from taskminder.models.constants import DEFAULT_PRIORITY_ID, UNCATEGORIZED_ID
from taskminder.models.notification import Notification


_STATE_LABELS = {
    "open": "Open",
    "in_progress": "In Progress",
    "postponed": "Postponed",
    "completed": "Completed",
    "delayed": "Delayed",
}


class TaskState(str, Enum):
    """Task state enumeration.

    The value is the machine name; ``label`` is the exact text used on disk and
    in the user interface.
    """
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    POSTPONED = "postponed"
    COMPLETED = "completed"
    DELAYED = "delayed"  # Only set by the automatic deadline check

    @property
    def label(self) -> str:
        return _STATE_LABELS[self.value]

    @classmethod
    def from_label(cls, text: Optional[str]) -> "TaskState":
        """Map a display label back to a state.

        Matching ignores case. Missing or unknown text maps to OPEN.

        Args:
            text: Display label such as "In Progress"

        Returns:
            Matching TaskState, or OPEN if nothing matches
        """
        if not text:
            return cls.OPEN
        wanted = text.strip().lower()
        for state in cls:
            if state.label.lower() == wanted:
                return state
        return cls.OPEN


class Task(BaseModel):
    """Canonical Task model."""

    id: int = Field(..., description="Unique task identifier")
    name: str = Field(..., description="Task name")
    description: str = Field("", description="Free-text description")
    deadline: date = Field(..., description="Due date (date-only)")
    category_id: int = Field(UNCATEGORIZED_ID, description="Category ID (-1 = Uncategorized)")
    priority_id: int = Field(DEFAULT_PRIORITY_ID, description="Priority ID (-1 = Default)")
    state: TaskState = Field(TaskState.OPEN, description="Task state")
    notifications: List[Notification] = Field(
        default_factory=list,
        description="Reminders owned by this task",
    )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("task", self.id))

    def is_completed(self) -> bool:
        return self.state == TaskState.COMPLETED

    def is_delayed(self) -> bool:
        return self.state == TaskState.DELAYED

    def is_due_within(self, today: date, days: int) -> bool:
        """True if the deadline falls in [today, today + days]."""
        remaining = (self.deadline - today).days
        return 0 <= remaining <= days

    def find_notification(self, notification_id: int) -> Optional[Notification]:
        for notification in self.notifications:
            if notification.id == notification_id:
                return notification
        return None

    def has_notification_on(self, notification_date: date) -> bool:
        return any(n.notification_date == notification_date for n in self.notifications)
