"""Business logic services. Public operations return ApiResponse."""

from projecthub.backend.services.export import ExportService
from projecthub.backend.services.note import NoteService
from projecthub.backend.services.project import ProjectService
from projecthub.backend.services.task import TaskService

__all__ = ["ExportService", "NoteService", "ProjectService", "TaskService"]
