"""Pytest fixtures and configuration for taskminder tests."""

from datetime import date, timedelta

import pytest

from taskminder.database.integrity import ReferentialIntegrityManager
from taskminder.database.lookup_repository import CategoryRepository, PriorityRepository
from taskminder.database.repository import TaskRepository
from taskminder.database.storage import JsonStorage
from taskminder.engine.identity import IdentityAllocator
from taskminder.models.task import Task, TaskState


TODAY = date(2025, 1, 1)


class Clock:
    """Adjustable "today" used in place of date.today."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int) -> None:
        self.today = self.today + timedelta(days=days)


@pytest.fixture
def clock():
    """Clock fixed at 2025-01-01."""
    return Clock(TODAY)


@pytest.fixture
def allocator():
    return IdentityAllocator()


@pytest.fixture
def task_repository(allocator, clock):
    """Create a TaskRepository driven by the test clock."""
    return TaskRepository(allocator, today=clock)


@pytest.fixture
def category_repository(allocator):
    return CategoryRepository(allocator)


@pytest.fixture
def priority_repository(allocator):
    return PriorityRepository(allocator)


@pytest.fixture
def integrity(task_repository, category_repository, priority_repository):
    return ReferentialIntegrityManager(task_repository, category_repository, priority_repository)


@pytest.fixture
def storage(tmp_path):
    """JsonStorage writing into a per-test temporary directory."""
    return JsonStorage(
        tmp_path / "tasks.json",
        tmp_path / "categories.json",
        tmp_path / "priorities.json",
    )


@pytest.fixture
def sample_task_base():
    """Base task data for building Task objects directly.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": 0,
        "name": "Test Task",
        "description": "Test description",
        "deadline": date(2025, 1, 10),
        "category_id": -1,
        "priority_id": -1,
        "state": TaskState.OPEN,
        "notifications": [],
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)
