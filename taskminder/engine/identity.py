"""Identifier allocation for taskminder.

Each entity kind has its own counter (watermark). New entities take the
current watermark; entities restored from storage push it past their own ID,
so identifiers handed out later never collide with restored ones.
"""

import logging
from enum import Enum
from typing import Dict

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    """Entity kinds with independent identifier spaces."""
    TASK = "task"
    NOTIFICATION = "notification"
    CATEGORY = "category"
    PRIORITY = "priority"


class IdentityAllocator:
    """Per-kind monotonically increasing integer identifiers."""

    def __init__(self):
        self._watermarks: Dict[EntityKind, int] = {kind: 0 for kind in EntityKind}

    def next(self, kind: EntityKind) -> int:
        """Return an unused identifier for ``kind`` and advance its watermark."""
        allocated = self._watermarks[kind]
        self._watermarks[kind] = allocated + 1
        return allocated

    def reconcile(self, kind: EntityKind, seen_id: int) -> None:
        """Record an identifier restored from storage.

        Sets the watermark to ``max(watermark, seen_id + 1)``.
        """
        if seen_id + 1 > self._watermarks[kind]:
            self._watermarks[kind] = seen_id + 1
            logger.debug(f"Watermark for {kind.value} advanced to {seen_id + 1}")

    def watermark(self, kind: EntityKind) -> int:
        return self._watermarks[kind]
