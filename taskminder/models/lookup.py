"""Category and Priority data models for taskminder.

Both are simple named lookups referenced from tasks by ID. The -1 entry of
each kind is a sentinel that can never be renamed or deleted.
"""

from pydantic import BaseModel, Field

from taskminder.models.constants import (
    DEFAULT_PRIORITY_ID,
    DEFAULT_PRIORITY_LEVEL,
    UNCATEGORIZED_ID,
    UNCATEGORIZED_NAME,
)


class Category(BaseModel):
    """A user-defined grouping of tasks."""

    id: int = Field(..., description="Unique category identifier (-1 = Uncategorized)")
    name: str = Field(..., description="Category name (unique)")

    @property
    def label(self) -> str:
        return self.name

    def is_sentinel(self) -> bool:
        return self.id == UNCATEGORIZED_ID

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Category):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("category", self.id))

    @classmethod
    def sentinel(cls) -> "Category":
        return cls(id=UNCATEGORIZED_ID, name=UNCATEGORIZED_NAME)


class Priority(BaseModel):
    """A user-defined priority level."""

    id: int = Field(..., description="Unique priority identifier (-1 = Default)")
    level: str = Field(..., description="Priority level label (unique)")

    @property
    def label(self) -> str:
        return self.level

    def is_sentinel(self) -> bool:
        return self.id == DEFAULT_PRIORITY_ID

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("priority", self.id))

    @classmethod
    def sentinel(cls) -> "Priority":
        return cls(id=DEFAULT_PRIORITY_ID, level=DEFAULT_PRIORITY_LEVEL)
