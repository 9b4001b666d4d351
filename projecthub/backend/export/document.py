"""
Export Document.

Assembles a project, its tasks and their notes into a validated
ExportData tree and serializes it to JSON. Pure functions; fetching is
done by ExportService.
"""

import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime, timezone

from projecthub.backend.core.config_schema import ExportSchema
from projecthub.backend.core.dates import format_date, format_timestamp
from projecthub.backend.core.exceptions import ExportValidationError
from projecthub.backend.core.utils import utc_now
from projecthub.backend.schemas.export import (
    ExportData,
    ExportFormat,
    ExportMetadata,
    ExportNote,
    ExportProject,
    ExportStats,
    ExportTask,
)
from projecthub.backend.schemas.note import NoteResponse
from projecthub.backend.schemas.project import ProjectResponse
from projecthub.backend.schemas.task import TaskResponse

STATUS_COMPLETED = "Completed"
STATUS_IN_PROGRESS = "In Progress"

_BULLET = re.compile(r"^[•\-*]\s*")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-z0-9]")


def completion_percentage(completed: int, total: int) -> int:
    """Completed share as a whole percent, rounding halves up."""
    if total <= 0:
        return 0
    return int(completed * 100 / total + 0.5)


def format_note_content(content: str) -> str:
    """
    Normalize note text for display.

    Trims every line, drops blank lines and rewrites a leading
    '•', '-' or '*' marker as '• '.
    """
    lines = []
    for raw in content.splitlines():
        line = raw.strip()
        if not line:
            continue
        if _BULLET.match(line):
            line = "• " + _BULLET.sub("", line, count=1)
        lines.append(line)
    return "\n".join(lines)


def _export_note(note: NoteResponse) -> ExportNote:
    return ExportNote(
        id=note.id,
        title=note.title,
        content=note.content,
        created_at=note.created_at,
        updated_at=note.updated_at,
        formatted_content=format_note_content(note.content),
        timestamp=format_timestamp(note.created_at),
    )


def _export_task(task: TaskResponse, notes: Sequence[NoteResponse]) -> ExportTask:
    return ExportTask(
        id=task.id,
        name=task.name,
        priority=task.priority,
        completed=task.completed,
        due_date=task.due_date,
        created_at=task.created_at,
        updated_at=task.updated_at,
        notes=[_export_note(n) for n in notes],
        status=STATUS_COMPLETED if task.completed else STATUS_IN_PROGRESS,
        formatted_due_date=format_date(task.due_date) if task.due_date else None,
        notes_count=len(notes),
    )


def iso_timestamp(value: datetime) -> str:
    """Naive UTC datetime as ISO 8601 with millisecond precision and a Z suffix."""
    stamped = value.replace(tzinfo=timezone.utc).isoformat(timespec="milliseconds")
    return stamped.replace("+00:00", "Z")


def build_export_data(
    project: ProjectResponse,
    tasks: Sequence[TaskResponse],
    task_notes: Mapping[str, Sequence[NoteResponse]],
    export_format: ExportFormat,
    config: ExportSchema,
    now: datetime | None = None,
) -> ExportData:
    """
    Build the export tree for one project.

    Args:
        project: The exported project
        tasks: Its tasks in display order
        task_notes: Notes keyed by task id; missing keys mean no notes
        export_format: Requested output format, recorded in metadata
        config: Export branding and schema version
        now: Export time, defaults to the current UTC time

    Returns:
        ExportData with computed counts and formatted fields
    """
    now = now or utc_now()
    timestamp = iso_timestamp(now)
    export_tasks = [_export_task(t, task_notes.get(t.id, ())) for t in tasks]
    completed = sum(1 for t in export_tasks if t.completed)
    total_notes = sum(t.notes_count for t in export_tasks)

    export_project = ExportProject(
        id=project.id,
        name=project.name,
        description=project.description,
        due_date=project.due_date,
        created_at=project.created_at,
        updated_at=project.updated_at,
        tasks=export_tasks,
        formatted_due_date=format_date(project.due_date) if project.due_date else None,
        tasks_count=len(export_tasks),
        completed_tasks_count=completed,
        total_notes_count=total_notes,
        completion_percentage=completion_percentage(completed, len(export_tasks)),
        export_timestamp=timestamp,
    )
    metadata = ExportMetadata(
        export_date=format_date(now.date()),
        export_timestamp=timestamp,
        format=export_format,
        version=config.schema_version,
        total_tasks=len(export_tasks),
        total_notes=total_notes,
        app_name=config.app_name,
    )
    return ExportData(metadata=metadata, project=export_project)


def validate_export_data(data: ExportData) -> None:
    """
    Structural self-check of an assembled export.

    Raises:
        ExportValidationError: If the project or any task lacks an id or
            name, or a task's notes are not a list
    """
    project = data.project
    if not project.id or not project.name:
        raise ExportValidationError()
    for task in project.tasks:
        if not task.id or not task.name or not isinstance(task.notes, list):
            raise ExportValidationError()


def export_stats(data: ExportData) -> ExportStats:
    project = data.project
    return ExportStats(
        project_name=project.name,
        task_count=project.tasks_count,
        completed_task_count=project.completed_tasks_count,
        total_note_count=project.total_notes_count,
        completion_percentage=project.completion_percentage,
    )


def export_filename(project_name: str, export_format: ExportFormat, on: date | None = None) -> str:
    """
    Download filename, e.g. 'q1_launch_plan___export_2024-03-05.json'.

    Every character outside [a-z0-9] in the lowercased name becomes '_'.
    """
    on = on or utc_now().date()
    stem = _UNSAFE_FILENAME_CHARS.sub("_", project_name.lower())
    return f"{stem}_export_{on.isoformat()}.{export_format.value}"


def render_json(data: ExportData) -> str:
    """Pretty-printed JSON with top-level 'metadata' and 'project'."""
    return data.model_dump_json(indent=2)
