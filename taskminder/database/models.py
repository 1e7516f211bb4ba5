"""Persistence records for taskminder.

These models describe the on-disk JSON layout, one record per entity. Field
aliases keep the historical key names (``taskID``, ``dueDate``, ``priorityId``
...) while the rest of the code works with the domain models.
"""

import logging
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from taskminder.engine.identity import EntityKind, IdentityAllocator
from taskminder.models.lookup import Category, Priority
from taskminder.models.notification import Notification
from taskminder.models.task import Task, TaskState

logger = logging.getLogger(__name__)


def state_to_label(state: TaskState) -> str:
    """Convert a state to its persisted label."""
    return TaskState(state).label


def label_to_state(text: Optional[str]) -> TaskState:
    """Convert a persisted label to a state; unknown text becomes OPEN."""
    state = TaskState.from_label(text)
    if text and state.label.lower() != text.strip().lower():
        logger.warning(f"No matching task state for {text!r}; using {state.label}")
    return state


class NotificationRecord(BaseModel):
    """Persisted notification: ``{notificationId, message, date}``."""

    model_config = ConfigDict(populate_by_name=True)

    notification_id: Optional[int] = Field(None, alias="notificationId")
    message: str
    notification_date: date = Field(..., alias="date")

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationRecord":
        return cls(
            notification_id=notification.id,
            message=notification.message,
            notification_date=notification.notification_date,
        )

    def to_domain(self, allocator: IdentityAllocator) -> Notification:
        """Rebuild the notification; a record without an ID gets a fresh one."""
        if self.notification_id is None:
            notification_id = allocator.next(EntityKind.NOTIFICATION)
        else:
            notification_id = self.notification_id
            allocator.reconcile(EntityKind.NOTIFICATION, notification_id)
        return Notification(
            id=notification_id,
            message=self.message,
            notification_date=self.notification_date,
        )


class TaskRecord(BaseModel):
    """Persisted task.

    ``{taskID, name, description, dueDate, categoryID, priorityID, notifications, state}``
    """

    model_config = ConfigDict(populate_by_name=True)

    task_id: int = Field(..., alias="taskID")
    name: str
    description: str = ""
    due_date: date = Field(..., alias="dueDate")
    category_id: int = Field(..., alias="categoryID")
    priority_id: int = Field(..., alias="priorityID")
    notifications: List[NotificationRecord] = Field(default_factory=list)
    state: Optional[str] = None

    @classmethod
    def from_domain(cls, task: Task) -> "TaskRecord":
        return cls(
            task_id=task.id,
            name=task.name,
            description=task.description,
            due_date=task.deadline,
            category_id=task.category_id,
            priority_id=task.priority_id,
            notifications=[NotificationRecord.from_domain(n) for n in task.notifications],
            state=state_to_label(task.state),
        )

    def to_domain(self, allocator: IdentityAllocator) -> Task:
        """Rebuild the task and advance the allocator past restored identifiers.

        A completed task never keeps notifications, even if the file holds some.
        """
        allocator.reconcile(EntityKind.TASK, self.task_id)
        state = label_to_state(self.state)
        notifications = [record.to_domain(allocator) for record in self.notifications]
        if state == TaskState.COMPLETED and notifications:
            logger.warning(f"Dropping {len(notifications)} notification(s) stored on completed task {self.task_id}")
            notifications = []
        return Task(
            id=self.task_id,
            name=self.name,
            description=self.description,
            deadline=self.due_date,
            category_id=self.category_id,
            priority_id=self.priority_id,
            state=state,
            notifications=notifications,
        )


class CategoryRecord(BaseModel):
    """Persisted category: ``{categoryID, name}``."""

    model_config = ConfigDict(populate_by_name=True)

    category_id: int = Field(..., alias="categoryID")
    name: str

    @classmethod
    def from_domain(cls, category: Category) -> "CategoryRecord":
        return cls(category_id=category.id, name=category.name)

    def to_domain(self, allocator: IdentityAllocator) -> Category:
        allocator.reconcile(EntityKind.CATEGORY, self.category_id)
        return Category(id=self.category_id, name=self.name)


class PriorityRecord(BaseModel):
    """Persisted priority: ``{priorityId, name}``.

    The key is called ``name`` for historical reasons; it holds the priority level.
    """

    model_config = ConfigDict(populate_by_name=True)

    priority_id: int = Field(..., alias="priorityId")
    level: str = Field(..., alias="name")

    @classmethod
    def from_domain(cls, priority: Priority) -> "PriorityRecord":
        return cls(priority_id=priority.id, level=priority.level)

    def to_domain(self, allocator: IdentityAllocator) -> Priority:
        allocator.reconcile(EntityKind.PRIORITY, self.priority_id)
        return Priority(id=self.priority_id, level=self.level)
