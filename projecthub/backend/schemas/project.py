"""
Project Schemas.

Pydantic schemas for project create/update/filter input and responses.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from projecthub.backend.core.dates import DueStatus, classify_due_date, due_date_label
from projecthub.backend.core.utils import utc_today
from projecthub.backend.schemas.base import StrippedModel


class ProjectCreate(StrippedModel):
    """Schema for creating a new project."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Project name",
        examples=["Website Redesign"],
    )
    description: str | None = Field(
        default=None,
        max_length=500,
        description="Project description",
    )
    due_date: date | None = Field(
        default=None,
        description="Optional due date; cannot be in the past",
    )

    @field_validator("description")
    @classmethod
    def _blank_description_is_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("due_date")
    @classmethod
    def _not_in_past(cls, value: date | None) -> date | None:
        if value is not None and value < utc_today():
            raise ValueError("Due date cannot be in the past")
        return value


class ProjectUpdate(StrippedModel):
    """Schema for updating an existing project. Only supplied fields change."""

    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Project name",
    )
    description: str | None = Field(
        default=None,
        max_length=500,
        description="Project description",
    )
    due_date: date | None = Field(
        default=None,
        description="Due date",
    )

    @field_validator("description")
    @classmethod
    def _blank_description_is_none(cls, value: str | None) -> str | None:
        return value or None


class ProjectFilters(BaseModel):
    """Optional filters for listing projects."""

    due_date_before: date | None = None
    due_date_after: date | None = None


class ProjectResponse(BaseModel):
    """Schema for a project in results."""

    id: str = Field(description="Project unique identifier")
    user_id: str = Field(description="Owner identifier")
    name: str = Field(description="Project name")
    description: str | None = Field(description="Project description")
    due_date: date | None = Field(description="Due date")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def due_status(self) -> DueStatus | None:
        return classify_due_date(self.due_date)

    @computed_field
    @property
    def due_label(self) -> str | None:
        return due_date_label(self.due_date)
