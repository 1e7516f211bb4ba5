"""JSON file persistence for taskminder.

Each entity kind lives in its own file holding a JSON array of records.
Reading never fails: a missing or empty file yields an empty collection, and
a malformed file makes the whole collection fall back (empty for tasks,
sentinel-only for categories and priorities). Writing goes through a
temporary file so a failed save leaves the previous copy in place.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter

from taskminder.database.models import CategoryRecord, PriorityRecord, TaskRecord
from taskminder.engine.identity import EntityKind, IdentityAllocator
from taskminder.errors import StorageError
from taskminder.models.constants import (
    DEFAULT_PRIORITY_ID,
    DEFAULT_PRIORITY_LEVEL,
    UNCATEGORIZED_ID,
    UNCATEGORIZED_NAME,
)
from taskminder.models.lookup import Category, Priority
from taskminder.models.task import Task

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)
PathLike = Union[str, Path]


def _read_json(path: Path) -> Optional[Any]:
    """Return the decoded file content, or None for a missing or empty file."""
    if not path.exists() or path.stat().st_size == 0:
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _read_records(path: Path, record_class: Type[R]) -> Optional[List[R]]:
    """Read and validate every record of a file.

    Returns:
        The records, an empty list for a missing/empty file, or None if the file
        could not be read or any record is malformed
    """
    try:
        data = _read_json(path)
        if data is None:
            logger.info(f"No data at {path}; starting empty")
            return []
        return TypeAdapter(List[record_class]).validate_python(data)
    except (OSError, ValueError) as e:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
        logger.warning(f"Invalid data in {path}; falling back to defaults: {type(e).__name__}: {str(e)[:200]}")
        return None


def _write_records(path: Path, records: List[BaseModel]) -> None:
    """Atomically replace ``path`` with the given records.

    Raises:
        StorageError: If writing fails; the previous file is left untouched
    """
    payload = [record.model_dump(mode="json", by_alias=True) for record in records]
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=4, ensure_ascii=False)
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError) as e:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        logger.error(f"Failed to save {path}: {type(e).__name__}: {str(e)}")
        raise StorageError(f"Failed to save {path}: {e}") from e
    logger.info(f"Saved {len(records)} record(s) to {path}")


class JsonStorage:
    """Reads and writes the three entity collections."""

    def __init__(self, tasks_path: PathLike, categories_path: PathLike, priorities_path: PathLike):
        self.tasks_path = Path(tasks_path)
        self.categories_path = Path(categories_path)
        self.priorities_path = Path(priorities_path)

    # ---- tasks ----

    def load_tasks(self, allocator: IdentityAllocator) -> List[Task]:
        """Load tasks, reconciling the allocator with every restored identifier.

        Stored notification IDs are all reconciled before any notification
        without an ID is given a fresh one.
        """
        records = _read_records(self.tasks_path, TaskRecord)
        if not records:
            return []
        for record in records:
            for notification in record.notifications:
                if notification.notification_id is not None:
                    allocator.reconcile(EntityKind.NOTIFICATION, notification.notification_id)
        return [record.to_domain(allocator) for record in records]

    def save_tasks(self, tasks: List[Task]) -> None:
        _write_records(self.tasks_path, [TaskRecord.from_domain(task) for task in tasks])

    # ---- categories ----

    def load_categories(self, allocator: IdentityAllocator) -> List[Category]:
        """Load categories; the Uncategorized sentinel is guaranteed to be present."""
        records = _read_records(self.categories_path, CategoryRecord) or []
        categories: List[Category] = []
        has_sentinel = False
        for record in records:
            if record.category_id == UNCATEGORIZED_ID:
                if record.name != UNCATEGORIZED_NAME or has_sentinel:
                    logger.warning(f"Discarding category record with reserved id {UNCATEGORIZED_ID}: {record.name!r}")
                    continue
                has_sentinel = True
            categories.append(record.to_domain(allocator))
        if not has_sentinel:
            categories.append(Category.sentinel())
        return categories

    def save_categories(self, categories: List[Category]) -> None:
        _write_records(self.categories_path, [CategoryRecord.from_domain(c) for c in categories])

    # ---- priorities ----

    def load_priorities(self, allocator: IdentityAllocator) -> List[Priority]:
        """Load priorities; the Default sentinel is guaranteed to be present."""
        records = _read_records(self.priorities_path, PriorityRecord) or []
        priorities: List[Priority] = []
        has_sentinel = False
        for record in records:
            if record.priority_id == DEFAULT_PRIORITY_ID:
                if record.level != DEFAULT_PRIORITY_LEVEL or has_sentinel:
                    logger.warning(f"Discarding priority record with reserved id {DEFAULT_PRIORITY_ID}: {record.level!r}")
                    continue
                has_sentinel = True
            priorities.append(record.to_domain(allocator))
        if not has_sentinel:
            priorities.append(Priority.sentinel())
        return priorities

    def save_priorities(self, priorities: List[Priority]) -> None:
        _write_records(self.priorities_path, [PriorityRecord.from_domain(p) for p in priorities])
