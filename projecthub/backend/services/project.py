"""
Project Service.

Business logic layer for projects. Every operation takes the caller's
Identity explicitly and returns an ApiResponse.
"""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.backend.core.exceptions import NotFoundError
from projecthub.backend.core.security import Identity
from projecthub.backend.core.utils import utc_today
from projecthub.backend.repositories.project import ProjectRepository
from projecthub.backend.schemas.project import (
    ProjectCreate,
    ProjectFilters,
    ProjectResponse,
    ProjectUpdate,
)
from projecthub.backend.services.base import BaseService, service_operation

_NOT_NULL_FIELDS = frozenset({"name"})


class ProjectService(BaseService):
    """
    Service for project business logic.

    Handles project creation, updates, and retrieval with
    ownership checks and validation.
    """

    entity = "Project"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ProjectRepository(session)

    @service_operation("create_project")
    async def create_project(
        self,
        identity: Identity | None,
        data: ProjectCreate | Mapping[str, Any],
    ) -> ProjectResponse:
        """
        Create a new project owned by the caller.

        Args:
            identity: Authenticated caller
            data: Project creation data

        Returns:
            Created project
        """
        owner_id = self._require_identity(identity)
        payload = self._parse(ProjectCreate, data)

        self._log_operation("Creating project", name=payload.name)

        project = await self._execute_db_operation(
            "create_project",
            self.repo.create(
                user_id=owner_id,
                name=payload.name,
                description=payload.description,
                due_date=payload.due_date,
            ),
        )

        self._log_debug("Project created", project_id=project.id)
        return ProjectResponse.model_validate(project)

    @service_operation("get_project")
    async def get_project(self, identity: Identity | None, project_id: str) -> ProjectResponse:
        """
        Get a project by ID.

        Fails with RES_NOT_FOUND when the project does not exist or is
        owned by someone else.
        """
        owner_id = self._require_identity(identity)
        project_id = self._require_id(project_id, "Project")
        project = await self._execute_db_operation(
            "get_project",
            self.repo.get_by_id(project_id, owner_id),
        )
        return ProjectResponse.model_validate(project)

    @service_operation("list_projects")
    async def list_projects(
        self,
        identity: Identity | None,
        filters: ProjectFilters | Mapping[str, Any] | None = None,
    ) -> list[ProjectResponse]:
        """
        List the caller's projects, newest first.

        Args:
            identity: Authenticated caller
            filters: Optional due-date range

        Returns:
            List of projects
        """
        owner_id = self._require_identity(identity)
        criteria = self._parse(ProjectFilters, filters or {})
        projects = await self._execute_db_operation(
            "list_projects",
            self.repo.search(owner_id, **criteria.model_dump()),
        )
        return [ProjectResponse.model_validate(p) for p in projects]

    @service_operation("list_upcoming_projects")
    async def list_upcoming_projects(
        self,
        identity: Identity | None,
        days_ahead: int = 7,
    ) -> list[ProjectResponse]:
        """Projects due between today and days_ahead from now, soonest first."""
        owner_id = self._require_identity(identity)
        today = utc_today()
        projects = await self._execute_db_operation(
            "list_upcoming_projects",
            self.repo.get_due_between(owner_id, today, today + timedelta(days=days_ahead)),
        )
        return [ProjectResponse.model_validate(p) for p in projects]

    @service_operation("update_project")
    async def update_project(
        self,
        identity: Identity | None,
        project_id: str,
        data: ProjectUpdate | Mapping[str, Any],
    ) -> ProjectResponse:
        """
        Update an existing project.

        Only supplied fields change; updated_at is always re-stamped.
        """
        owner_id = self._require_identity(identity)
        project_id = self._require_id(project_id, "Project")
        payload = self._parse(ProjectUpdate, data)
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key not in _NOT_NULL_FIELDS
        }

        if not await self._execute_db_operation(
            "update_project", self.repo.exists(project_id, owner_id)
        ):
            raise NotFoundError("Project not found or access denied")

        self._log_operation("Updating project", project_id=project_id, fields=list(changes))

        project = await self._execute_db_operation(
            "update_project",
            self.repo.update(project_id, owner_id, **changes),
        )
        return ProjectResponse.model_validate(project)

    @service_operation("delete_project")
    async def delete_project(self, identity: Identity | None, project_id: str) -> None:
        """Delete a project together with its tasks and their notes."""
        owner_id = self._require_identity(identity)
        project_id = self._require_id(project_id, "Project")

        if not await self._execute_db_operation(
            "delete_project", self.repo.exists(project_id, owner_id)
        ):
            raise NotFoundError("Project not found or access denied")

        self._log_operation("Deleting project", project_id=project_id)
        await self._execute_db_operation(
            "delete_project",
            self.repo.delete(project_id, owner_id),
        )

    @service_operation("count_projects")
    async def count_projects(self, identity: Identity | None) -> int:
        owner_id = self._require_identity(identity)
        return await self._execute_db_operation("count_projects", self.repo.count(owner_id))

    @service_operation("project_exists")
    async def project_exists(self, identity: Identity | None, project_id: str) -> bool:
        """True when the project exists under the caller's ownership."""
        owner_id = self._require_identity(identity)
        project_id = self._require_id(project_id, "Project")
        return await self._execute_db_operation(
            "project_exists",
            self.repo.exists(project_id, owner_id),
        )
