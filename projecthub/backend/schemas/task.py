"""
Task Schemas.

Pydantic schemas for task create/update/filter input and responses.
Priority is a closed enum; unknown values are rejected at the edge.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from projecthub.backend.core.dates import DueStatus, classify_due_date, due_date_label
from projecthub.backend.core.utils import utc_today
from projecthub.backend.models.task import Priority
from projecthub.backend.schemas.base import StrippedModel


class TaskCreate(StrippedModel):
    """Schema for creating a new task."""

    project_id: str = Field(..., min_length=1, description="Parent project")
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Task name",
        examples=["Draft wireframes"],
    )
    priority: Priority = Field(default=Priority.MEDIUM, description="Task priority")
    due_date: date | None = Field(default=None, description="Optional due date")

    @field_validator("due_date")
    @classmethod
    def _not_in_past(cls, value: date | None) -> date | None:
        if value is not None and value < utc_today():
            raise ValueError("Due date cannot be in the past")
        return value


class TaskUpdate(StrippedModel):
    """Schema for updating an existing task. Only supplied fields change."""

    project_id: str | None = Field(default=None, min_length=1, description="Move to project")
    name: str | None = Field(default=None, min_length=1, max_length=100)
    priority: Priority | None = None
    completed: bool | None = None
    due_date: date | None = None


class TaskFilters(BaseModel):
    """Optional filters for listing tasks."""

    project_id: str | None = None
    priority: Priority | None = None
    completed: bool | None = None
    due_date_before: date | None = None
    due_date_after: date | None = None


class TaskResponse(BaseModel):
    """Schema for a task in results."""

    id: str
    project_id: str
    name: str
    priority: Priority
    completed: bool
    due_date: date | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def due_status(self) -> DueStatus | None:
        return classify_due_date(self.due_date)

    @computed_field
    @property
    def due_label(self) -> str | None:
        return due_date_label(self.due_date)
