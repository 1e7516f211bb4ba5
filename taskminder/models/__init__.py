"""Data models for taskminder."""

from taskminder.models.task import Task, TaskState
from taskminder.models.notification import Notification, NotificationEntry
from taskminder.models.lookup import Category, Priority
from taskminder.models.summary import TaskSummary

__all__ = [
    "Task",
    "TaskState",
    "Notification",
    "NotificationEntry",
    "Category",
    "Priority",
    "TaskSummary",
]
