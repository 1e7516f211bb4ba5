"""Referential integrity between tasks and their lookups.

Removing a category deletes the tasks filed under it, while removing a
priority only moves its tasks to the Default priority. The two rules differ on
purpose: a task without its category has no meaning, a task without a specific
priority still does.
"""

import logging
from typing import List

from taskminder.database.lookup_repository import CategoryRepository, PriorityRepository
from taskminder.database.repository import TaskRepository
from taskminder.models.constants import DEFAULT_PRIORITY_ID
from taskminder.models.task import Task

logger = logging.getLogger(__name__)


class ReferentialIntegrityManager:
    """Cascades category and priority deletions onto stored tasks."""

    def __init__(
        self,
        tasks: TaskRepository,
        categories: CategoryRepository,
        priorities: PriorityRepository,
    ):
        self.tasks = tasks
        self.categories = categories
        self.priorities = priorities

    def delete_category(self, category_id: int) -> List[Task]:
        """Delete a category and every task that belongs to it.

        Args:
            category_id: Category to delete

        Returns:
            The deleted tasks

        Raises:
            ProtectedEntity: For the Uncategorized category
            NotFound: If the category does not exist
        """
        category = self.categories.remove(category_id)
        deleted = self.tasks.delete_by_category(category_id)
        logger.info(f"Deleted category {category_id} ({category.name}) and {len(deleted)} task(s)")
        return deleted

    def delete_priority(self, priority_id: int) -> List[Task]:
        """Delete a priority and move its tasks to the Default priority.

        Args:
            priority_id: Priority to delete

        Returns:
            The reassigned tasks (none are deleted)

        Raises:
            ProtectedEntity: For the Default priority
            NotFound: If the priority does not exist
        """
        priority = self.priorities.remove(priority_id)
        moved = self.tasks.reassign_priority(priority_id, DEFAULT_PRIORITY_ID)
        logger.info(f"Deleted priority {priority_id} ({priority.level}); reassigned {len(moved)} task(s)")
        return moved
