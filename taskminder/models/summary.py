"""Summary counts shown on the main task view."""

from pydantic import BaseModel, Field


class TaskSummary(BaseModel):
    """Aggregate task counts, computed against the date of the query."""

    total: int = Field(0, ge=0)
    completed: int = Field(0, ge=0)
    delayed: int = Field(0, ge=0)
    due_soon: int = Field(0, ge=0, description="Tasks whose deadline is within the due-soon window")
