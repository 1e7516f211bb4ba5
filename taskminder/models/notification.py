"""Notification data models for taskminder."""

from datetime import date
from pydantic import BaseModel, Field


class Notification(BaseModel):
    """A reminder attached to exactly one task.

    The identifier is only used to tell notifications apart; it carries no ordering.
    """

    id: int = Field(..., description="Unique notification identifier")
    message: str = Field(..., description="Reminder text shown to the user")
    notification_date: date = Field(..., description="Day on which the reminder becomes due")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Notification):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("notification", self.id))


class NotificationEntry(BaseModel):
    """Flattened view of a notification together with the task that owns it."""

    task_id: int
    task_name: str
    notification: Notification

    @property
    def notification_id(self) -> int:
        return self.notification.id

    @property
    def message(self) -> str:
        return self.notification.message

    @property
    def notification_date(self) -> date:
        return self.notification.notification_date
