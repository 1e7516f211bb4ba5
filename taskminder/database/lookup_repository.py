"""Repositories for the Category and Priority lookups."""

import logging
from typing import Dict, Generic, Iterable, List, Optional, Type, TypeVar

from taskminder.engine.identity import EntityKind, IdentityAllocator
from taskminder.errors import NotFound, ProtectedEntity, ValidationError
from taskminder.models.lookup import Category, Priority

logger = logging.getLogger(__name__)

L = TypeVar("L", Category, Priority)


class _LookupRepository(Generic[L]):
    """Shared behaviour of named lookups with a protected sentinel at ID -1.

    Subclasses set the entity class, its identifier kind, the attribute that
    holds the label, and a noun used in messages.
    """

    entity_class: Type[L]
    kind: EntityKind
    label_field: str
    noun: str

    def __init__(self, allocator: IdentityAllocator):
        self.allocator = allocator
        self._items: List[L] = [self.entity_class.sentinel()]

    def _clean_label(self, label: Optional[str], exclude_id: Optional[int] = None) -> str:
        cleaned = (label or "").strip()
        if not cleaned:
            raise ValidationError(f"Please enter a {self.noun} {self.label_field}")
        for item in self._items:
            if item.label == cleaned and item.id != exclude_id:
                raise ValidationError(f"{self.noun.capitalize()} '{cleaned}' already exists")
        return cleaned

    def _check_not_sentinel(self, item_id: int, action: str) -> None:
        if item_id == self.entity_class.sentinel().id:
            raise ProtectedEntity(f"You cannot {action} the default {self.noun}")

    # ---- loading / saving ----

    def load(self, items: Iterable[L]) -> List[L]:
        """Replace the collection; the sentinel is appended if it is missing."""
        loaded = list(items)
        if not any(item.is_sentinel() for item in loaded):
            loaded.append(self.entity_class.sentinel())
        self._items = loaded
        logger.info(f"Loaded {len(self._items)} {self.noun} entries")
        return self.find_all()

    def snapshot(self) -> List[L]:
        return list(self._items)

    # ---- lookups ----

    def find(self, item_id: int) -> Optional[L]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def get(self, item_id: int) -> L:
        item = self.find(item_id)
        if item is None:
            raise NotFound(f"{self.noun.capitalize()} {item_id} not found")
        return item

    def exists(self, item_id: int) -> bool:
        return self.find(item_id) is not None

    def find_all(self) -> List[L]:
        return list(self._items)

    def name_to_id(self) -> Dict[str, int]:
        """Label-to-ID mapping, as used by selection widgets."""
        return {item.label: item.id for item in self._items}

    def id_to_name(self) -> Dict[int, str]:
        """ID-to-label mapping, as used to display a task's lookup values."""
        return {item.id: item.label for item in self._items}

    # ---- commands ----

    def add(self, label: str) -> L:
        """Create a new entry.

        Raises:
            ValidationError: If the label is empty or already used
        """
        cleaned = self._clean_label(label)
        item = self.entity_class(**{"id": self.allocator.next(self.kind), self.label_field: cleaned})
        self._items.append(item)
        logger.debug(f"Created {self.noun} {item.id}: {cleaned}")
        return item

    def rename(self, item_id: int, label: str) -> L:
        """Change the label of an entry.

        Raises:
            ProtectedEntity: For the sentinel entry
            NotFound: If the entry does not exist
            ValidationError: If the label is empty or already used
        """
        self._check_not_sentinel(item_id, "update")
        item = self.get(item_id)
        cleaned = self._clean_label(label, exclude_id=item_id)
        setattr(item, self.label_field, cleaned)
        logger.debug(f"Renamed {self.noun} {item_id} to {cleaned}")
        return item

    def remove(self, item_id: int) -> L:
        """Remove an entry without touching tasks that reference it.

        Callers that need the task cascade go through ReferentialIntegrityManager.

        Raises:
            ProtectedEntity: For the sentinel entry
            NotFound: If the entry does not exist
        """
        self._check_not_sentinel(item_id, "delete")
        item = self.get(item_id)
        self._items.remove(item)
        logger.debug(f"Removed {self.noun} {item_id}: {item.label}")
        return item


class CategoryRepository(_LookupRepository[Category]):
    """Repository for categories (sentinel: Uncategorized, ID -1)."""

    entity_class = Category
    kind = EntityKind.CATEGORY
    label_field = "name"
    noun = "category"


class PriorityRepository(_LookupRepository[Priority]):
    """Repository for priorities (sentinel: Default, ID -1)."""

    entity_class = Priority
    kind = EntityKind.PRIORITY
    label_field = "level"
    noun = "priority"
