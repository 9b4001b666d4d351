"""
Export Service.

Aggregates one project with its tasks and notes and renders it as JSON
or PDF. Reads go through the entity services, so ownership rules and
error messages are identical to direct access.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.backend.core.config import get_app_config
from projecthub.backend.core.config_schema import ExportSchema
from projecthub.backend.core.exceptions import ValidationError
from projecthub.backend.core.security import Identity
from projecthub.backend.core.utils import utc_now
from projecthub.backend.export.document import (
    build_export_data,
    export_filename,
    export_stats,
    render_json,
    validate_export_data,
)
from projecthub.backend.export.pdf import render_pdf, to_data_uri
from projecthub.backend.schemas.export import (
    ExportArtifact,
    ExportData,
    ExportFormat,
    ExportStats,
)
from projecthub.backend.schemas.note import NoteResponse
from projecthub.backend.services.base import BaseService, service_operation, unwrap
from projecthub.backend.services.note import NoteService
from projecthub.backend.services.project import ProjectService
from projecthub.backend.services.task import TaskService

MEDIA_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.PDF: "application/pdf",
}


def parse_export_format(value: ExportFormat | str) -> ExportFormat:
    """
    Raises:
        ValidationError: For anything other than 'json' or 'pdf'
    """
    try:
        return ExportFormat(value.lower() if isinstance(value, str) else value)
    except ValueError:
        raise ValidationError(f"Unsupported export format: {value}")


class ExportService(BaseService):
    """
    Service for project exports.

    Note fetch failures for individual tasks are tolerated: that task is
    exported with no notes and the failure is logged. Project and task
    fetch failures abort the export.
    """

    entity = "Export"

    def __init__(self, session: AsyncSession, config: ExportSchema | None = None) -> None:
        super().__init__(session)
        self.projects = ProjectService(session)
        self.tasks = TaskService(session)
        self.notes = NoteService(session)
        self._config = config or get_app_config().export

    async def _notes_for_task(self, identity: Identity, task_id: str) -> list[NoteResponse]:
        result = await self.notes.list_notes_by_task(identity, task_id)
        if not result.success:
            self._logger.warning(
                "Skipping notes for task",
                extra={"task_id": task_id, "error": result.error_message},
            )
            return []
        return result.data

    async def aggregate_project(
        self,
        identity: Identity | None,
        project_id: str,
        export_format: ExportFormat = ExportFormat.JSON,
    ) -> ExportData:
        """
        Fetch and assemble the export tree for one project.

        Raises:
            ApplicationError: If the project or its tasks cannot be fetched
            ExportValidationError: If the assembled tree is inconsistent
        """
        project = unwrap(
            await self.projects.get_project(identity, project_id),
            "Failed to fetch project",
        )
        tasks = unwrap(
            await self.tasks.list_tasks_by_project(identity, project_id),
            "Failed to fetch tasks",
        )

        task_notes = {}
        for task in tasks:
            task_notes[task.id] = await self._notes_for_task(identity, task.id)

        data = build_export_data(project, tasks, task_notes, export_format, self._config)
        validate_export_data(data)

        self._log_debug(
            "Export assembled",
            project_id=project_id,
            tasks=data.project.tasks_count,
            notes=data.project.total_notes_count,
        )
        return data

    @service_operation("generate_export")
    async def generate_export(
        self,
        identity: Identity | None,
        project_id: str,
        export_format: ExportFormat | str = ExportFormat.JSON,
    ) -> ExportArtifact:
        """
        Export a project as a downloadable artifact.

        Args:
            identity: Authenticated caller
            project_id: Project to export
            export_format: 'json' or 'pdf'

        Returns:
            ExportArtifact with JSON text or a PDF data URI
        """
        fmt = parse_export_format(export_format)
        self._require_identity(identity)
        project_id = self._require_id(project_id, "Project")

        self._log_operation("Generating export", project_id=project_id, format=fmt.value)

        data = await self.aggregate_project(identity, project_id, fmt)
        if fmt is ExportFormat.PDF:
            content = to_data_uri(render_pdf(data, self._config, utc_now()))
        else:
            content = render_json(data)

        return ExportArtifact(
            format=fmt,
            filename=export_filename(data.project.name, fmt),
            media_type=MEDIA_TYPES[fmt],
            content=content,
        )

    @service_operation("get_export_stats")
    async def get_export_stats(self, identity: Identity | None, project_id: str) -> ExportStats:
        """Summary counts for a project without rendering anything."""
        data = await self.aggregate_project(identity, project_id)
        return export_stats(data)

    @service_operation("has_exportable_data")
    async def has_exportable_data(self, identity: Identity | None, project_id: str) -> bool:
        """True when the project has a description or at least one task."""
        project = unwrap(
            await self.projects.get_project(identity, project_id),
            "Failed to fetch project",
        )
        if project.description:
            return True
        count = unwrap(
            await self.tasks.count_tasks(identity, project_id),
            "Failed to count tasks",
        )
        return count > 0
