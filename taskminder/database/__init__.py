"""Storage and repositories for taskminder."""

from taskminder.database.repository import TaskRepository
from taskminder.database.lookup_repository import CategoryRepository, PriorityRepository
from taskminder.database.integrity import ReferentialIntegrityManager
from taskminder.database.storage import JsonStorage

__all__ = [
    "TaskRepository",
    "CategoryRepository",
    "PriorityRepository",
    "ReferentialIntegrityManager",
    "JsonStorage",
]
