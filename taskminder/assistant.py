"""Application facade for taskminder.

``TaskAssistant`` owns one identifier allocator, the three repositories, the
integrity manager and the storage. Presentation code issues commands here and
re-queries afterwards; the repositories never call back into it.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from taskminder.config import Settings
from taskminder.database.integrity import ReferentialIntegrityManager
from taskminder.database.lookup_repository import CategoryRepository, PriorityRepository
from taskminder.database.repository import TaskRepository
from taskminder.database.storage import JsonStorage
from taskminder.engine.identity import IdentityAllocator
from taskminder.engine.notifications import NotificationPreset
from taskminder.errors import ValidationError
from taskminder.models.constants import (
    ANY_ID,
    DEFAULT_PRIORITY_ID,
    DUE_SOON_DAYS,
    SORT_KEYS,
    UNCATEGORIZED_ID,
)
from taskminder.models.lookup import Category, Priority
from taskminder.models.notification import Notification, NotificationEntry
from taskminder.models.summary import TaskSummary
from taskminder.models.task import Task, TaskState

logger = logging.getLogger(__name__)


class TaskAssistant:
    """Single entry point for loading, editing, querying and saving tasks."""

    def __init__(
        self,
        storage: JsonStorage,
        today: Callable[[], date] = date.today,
        due_soon_days: int = DUE_SOON_DAYS,
    ):
        self.storage = storage
        self.allocator = IdentityAllocator()
        self.tasks = TaskRepository(self.allocator, today=today, due_soon_days=due_soon_days)
        self.categories = CategoryRepository(self.allocator)
        self.priorities = PriorityRepository(self.allocator)
        self.integrity = ReferentialIntegrityManager(self.tasks, self.categories, self.priorities)

    @classmethod
    def from_settings(cls, settings: Settings, today: Callable[[], date] = date.today) -> "TaskAssistant":
        storage = JsonStorage(settings.tasks_file, settings.categories_file, settings.priorities_file)
        return cls(storage, today=today, due_soon_days=settings.due_soon_days)

    # ---- persistence ----

    def load_all(self) -> None:
        """Load every collection from storage. Unreadable files fall back to defaults."""
        self.categories.load(self.storage.load_categories(self.allocator))
        self.priorities.load(self.storage.load_priorities(self.allocator))
        self.tasks.load(self.storage.load_tasks(self.allocator))

    def save_all(self) -> None:
        """Write every collection once.

        Raises:
            StorageError: If a collection could not be written
        """
        self.storage.save_tasks(self.tasks.snapshot())
        self.storage.save_categories(self.categories.snapshot())
        self.storage.save_priorities(self.priorities.snapshot())

    # ---- task commands ----

    def _check_references(self, category_id: Optional[int], priority_id: Optional[int]) -> None:
        if category_id is not None and not self.categories.exists(category_id):
            raise ValidationError(f"Unknown category {category_id}")
        if priority_id is not None and not self.priorities.exists(priority_id):
            raise ValidationError(f"Unknown priority {priority_id}")

    def add_task(
        self,
        name: str,
        description: str,
        deadline: date,
        category_id: int = UNCATEGORIZED_ID,
        priority_id: int = DEFAULT_PRIORITY_ID,
        state: TaskState = TaskState.OPEN,
    ) -> Task:
        self._check_references(category_id, priority_id)
        return self.tasks.add(name, description, deadline, category_id, priority_id, state)

    def update_task(self, task_id: int, **fields: Any) -> Task:
        self._check_references(fields.get("category_id"), fields.get("priority_id"))
        return self.tasks.update(task_id, **fields)

    def delete_task(self, task_id: int) -> Task:
        return self.tasks.delete(task_id)

    # ---- notification commands ----

    def add_notification(self, task_id: int, message: str, notification_date: date) -> Notification:
        return self.tasks.add_notification(task_id, message, notification_date)

    def schedule_notification(
        self,
        task_id: int,
        message: str,
        preset: NotificationPreset,
        custom_date: Optional[date] = None,
    ) -> Notification:
        return self.tasks.schedule_notification(task_id, message, preset, custom_date)

    def update_notification(
        self, task_id: int, notification_id: int, message: str, notification_date: date
    ) -> Notification:
        return self.tasks.update_notification(task_id, notification_id, message, notification_date)

    def delete_notification(self, task_id: int, notification_id: int) -> Notification:
        return self.tasks.delete_notification(task_id, notification_id)

    def available_presets(self, task_id: int) -> List[NotificationPreset]:
        return self.tasks.available_presets(task_id)

    # ---- category / priority commands ----

    def add_category(self, name: str) -> Category:
        return self.categories.add(name)

    def rename_category(self, category_id: int, name: str) -> Category:
        return self.categories.rename(category_id, name)

    def delete_category(self, category_id: int) -> List[Task]:
        """Delete a category together with its tasks; returns the deleted tasks."""
        return self.integrity.delete_category(category_id)

    def add_priority(self, level: str) -> Priority:
        return self.priorities.add(level)

    def rename_priority(self, priority_id: int, level: str) -> Priority:
        return self.priorities.rename(priority_id, level)

    def delete_priority(self, priority_id: int) -> List[Task]:
        """Delete a priority; its tasks move to Default. Returns the moved tasks."""
        return self.integrity.delete_priority(priority_id)

    # ---- queries ----

    def find_all_tasks(self) -> List[Task]:
        return self.tasks.find_all()

    def _sort_key(self, sort_by: str) -> Callable[[Task], Any]:
        if sort_by == "category":
            names = self.categories.id_to_name()
            return lambda task: names.get(task.category_id, "").lower()
        if sort_by == "priority":
            levels = self.priorities.id_to_name()
            return lambda task: levels.get(task.priority_id, "").lower()
        if sort_by == "deadline":
            return lambda task: task.deadline
        return lambda task: task.name.lower()

    def search(
        self,
        name_pattern: str = "",
        category_id: int = ANY_ID,
        priority_id: int = ANY_ID,
        sort_by: Optional[str] = None,
    ) -> List[Task]:
        """Search tasks; ``sort_by`` is one of "category", "priority", "deadline", "name".

        Raises:
            ValueError: For an unknown ``sort_by``
        """
        if sort_by is not None and sort_by not in SORT_KEYS:
            raise ValueError(f"Unknown sort key {sort_by!r}; expected one of {', '.join(SORT_KEYS)}")
        sort_key = self._sort_key(sort_by) if sort_by else None
        return self.tasks.search(name_pattern, category_id, priority_id, sort_key=sort_key)

    def summary(self) -> TaskSummary:
        return self.tasks.summary()

    def delayed_tasks(self) -> List[Task]:
        return self.tasks.delayed_tasks()

    def due_notifications(self) -> List[NotificationEntry]:
        return self.tasks.due_notifications()

    def all_notifications(self) -> List[NotificationEntry]:
        return self.tasks.all_notifications()

    def category_names(self) -> Dict[int, str]:
        return self.categories.id_to_name()

    def priority_levels(self) -> Dict[int, str]:
        return self.priorities.id_to_name()
