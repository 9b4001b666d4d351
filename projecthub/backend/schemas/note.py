"""
Note Schemas.

Pydantic schemas for note create/update/filter input and responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from projecthub.backend.schemas.base import StrippedModel

NOTE_CONTENT_MAX_LENGTH = 10000


class NoteCreate(StrippedModel):
    """Schema for creating a new note."""

    task_id: str = Field(..., min_length=1, description="Parent task")
    content: str = Field(
        ...,
        min_length=1,
        max_length=NOTE_CONTENT_MAX_LENGTH,
        description="Note content",
        examples=["- call vendor\n- confirm budget"],
    )
    title: str | None = Field(
        default=None,
        max_length=100,
        description="Optional note title",
    )

    @field_validator("title")
    @classmethod
    def _blank_title_is_none(cls, value: str | None) -> str | None:
        return value or None


class NoteUpdate(StrippedModel):
    """Schema for updating an existing note."""

    task_id: str | None = Field(default=None, min_length=1, description="Move to task")
    content: str | None = Field(default=None, min_length=1, max_length=NOTE_CONTENT_MAX_LENGTH)
    title: str | None = Field(default=None, max_length=100)

    @field_validator("title")
    @classmethod
    def _blank_title_is_none(cls, value: str | None) -> str | None:
        return value or None


class NoteFilters(BaseModel):
    """Optional filters for listing notes."""

    task_id: str | None = None
    content_contains: str | None = None
    created_before: datetime | None = None
    created_after: datetime | None = None


class NoteResponse(BaseModel):
    """Schema for a note in results."""

    id: str = Field(description="Note unique identifier")
    task_id: str = Field(description="Parent task identifier")
    title: str | None = Field(description="Note title")
    content: str = Field(description="Note content")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)
