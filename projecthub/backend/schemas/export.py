"""
Export Schemas.

Hierarchical snapshot of one project (project → tasks → notes) with
computed fields, plus the rendered artifact returned to callers.
"""

import base64
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from projecthub.backend.models.task import Priority

PDF_DATA_URI_PREFIX = "data:application/pdf;base64,"


class ExportFormat(str, Enum):
    JSON = "json"
    PDF = "pdf"


class ExportNote(BaseModel):
    id: str
    title: str | None = None
    content: str
    created_at: datetime
    updated_at: datetime
    formatted_content: str
    timestamp: str


class ExportTask(BaseModel):
    id: str
    name: str
    priority: Priority
    completed: bool
    due_date: date | None = None
    created_at: datetime
    updated_at: datetime
    notes: list[ExportNote] = Field(default_factory=list)
    status: str
    formatted_due_date: str | None = None
    notes_count: int


class ExportProject(BaseModel):
    id: str
    name: str
    description: str | None = None
    due_date: date | None = None
    created_at: datetime
    updated_at: datetime
    tasks: list[ExportTask] = Field(default_factory=list)
    formatted_due_date: str | None = None
    tasks_count: int
    completed_tasks_count: int
    total_notes_count: int
    completion_percentage: int
    export_timestamp: str


class ExportMetadata(BaseModel):
    export_date: str
    export_timestamp: str
    format: ExportFormat
    version: str
    project_count: int = 1
    total_tasks: int
    total_notes: int
    app_name: str


class ExportData(BaseModel):
    """Complete export document."""

    metadata: ExportMetadata
    project: ExportProject


class ExportStats(BaseModel):
    project_name: str
    task_count: int
    completed_task_count: int
    total_note_count: int
    completion_percentage: int


class ExportArtifact(BaseModel):
    """Rendered export, ready to download."""

    format: ExportFormat
    filename: str
    media_type: str
    content: str = Field(description="JSON text, or a base64 PDF data URI")

    def to_bytes(self) -> bytes:
        """Raw file bytes for writing to disk."""
        if self.content.startswith(PDF_DATA_URI_PREFIX):
            return base64.b64decode(self.content[len(PDF_DATA_URI_PREFIX):])
        return self.content.encode("utf-8")
