"""
Task Service.

Business logic layer for tasks. Tasks are owned through their project;
every mutation re-verifies that chain before touching the store.
"""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.backend.core.exceptions import NotFoundError
from projecthub.backend.core.security import Identity
from projecthub.backend.core.utils import utc_today
from projecthub.backend.models.task import Priority
from projecthub.backend.repositories.project import ProjectRepository
from projecthub.backend.repositories.task import TaskRepository
from projecthub.backend.schemas.task import TaskCreate, TaskFilters, TaskResponse, TaskUpdate
from projecthub.backend.schemas.base import ApiResponse
from projecthub.backend.services.base import BaseService, service_operation

_NOT_NULL_FIELDS = frozenset({"name", "project_id", "priority", "completed"})


class TaskService(BaseService):
    """Service for task business logic."""

    entity = "Task"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = TaskRepository(session)
        self.projects = ProjectRepository(session)

    async def _ensure_project(self, project_id: str, owner_id: str, message: str) -> None:
        if not await self._execute_db_operation(
            "check_project", self.projects.exists(project_id, owner_id)
        ):
            raise NotFoundError(message)

    async def _ensure_task(self, task_id: str, owner_id: str) -> None:
        if not await self._execute_db_operation(
            "check_task", self.repo.exists(task_id, owner_id)
        ):
            raise NotFoundError("Task not found or access denied")

    @service_operation("create_task")
    async def create_task(
        self,
        identity: Identity | None,
        data: TaskCreate | Mapping[str, Any],
    ) -> TaskResponse:
        """
        Create a task under one of the caller's projects.

        New tasks always start incomplete.
        """
        owner_id = self._require_identity(identity)
        payload = self._parse(TaskCreate, data)
        await self._ensure_project(
            payload.project_id, owner_id, "Project not found or access denied"
        )

        self._log_operation("Creating task", project_id=payload.project_id, name=payload.name)

        task = await self._execute_db_operation(
            "create_task",
            self.repo.create(
                project_id=payload.project_id,
                name=payload.name,
                priority=payload.priority,
                due_date=payload.due_date,
                completed=False,
            ),
        )
        return TaskResponse.model_validate(task)

    @service_operation("get_task")
    async def get_task(self, identity: Identity | None, task_id: str) -> TaskResponse:
        owner_id = self._require_identity(identity)
        task_id = self._require_id(task_id, "Task")
        task = await self._execute_db_operation("get_task", self.repo.get_by_id(task_id, owner_id))
        return TaskResponse.model_validate(task)

    @service_operation("list_tasks")
    async def list_tasks(
        self,
        identity: Identity | None,
        filters: TaskFilters | Mapping[str, Any] | None = None,
    ) -> list[TaskResponse]:
        """
        List the caller's tasks, newest first.

        Args:
            identity: Authenticated caller
            filters: Optional project, priority, completion and due-date range
        """
        owner_id = self._require_identity(identity)
        criteria = self._parse(TaskFilters, filters or {})
        tasks = await self._execute_db_operation(
            "list_tasks",
            self.repo.search(owner_id, **criteria.model_dump()),
        )
        return [TaskResponse.model_validate(t) for t in tasks]

    @service_operation("list_tasks_by_project")
    async def list_tasks_by_project(
        self,
        identity: Identity | None,
        project_id: str,
    ) -> list[TaskResponse]:
        """Tasks of one owned project, newest first."""
        owner_id = self._require_identity(identity)
        project_id = self._require_id(project_id, "Project")
        await self._ensure_project(project_id, owner_id, "Project not found or access denied")
        tasks = await self._execute_db_operation(
            "list_tasks_by_project",
            self.repo.search(owner_id, project_id=project_id),
        )
        return [TaskResponse.model_validate(t) for t in tasks]

    @service_operation("list_upcoming_tasks")
    async def list_upcoming_tasks(
        self,
        identity: Identity | None,
        days_ahead: int = 7,
    ) -> list[TaskResponse]:
        """Incomplete tasks due in the next days_ahead days, soonest first."""
        owner_id = self._require_identity(identity)
        today = utc_today()
        tasks = await self._execute_db_operation(
            "list_upcoming_tasks",
            self.repo.get_due_between(owner_id, today, today + timedelta(days=days_ahead)),
        )
        return [TaskResponse.model_validate(t) for t in tasks]

    async def list_tasks_by_priority(
        self,
        identity: Identity | None,
        priority: Priority | str,
    ) -> ApiResponse:
        return await self.list_tasks(identity, {"priority": priority})

    async def list_completed_tasks(self, identity: Identity | None) -> ApiResponse:
        return await self.list_tasks(identity, {"completed": True})

    async def list_incomplete_tasks(self, identity: Identity | None) -> ApiResponse:
        return await self.list_tasks(identity, {"completed": False})

    @service_operation("update_task")
    async def update_task(
        self,
        identity: Identity | None,
        task_id: str,
        data: TaskUpdate | Mapping[str, Any],
    ) -> TaskResponse:
        """
        Update an existing task.

        Moving a task to another project requires that project to be
        owned by the caller as well.
        """
        owner_id = self._require_identity(identity)
        task_id = self._require_id(task_id, "Task")
        payload = self._parse(TaskUpdate, data)
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key not in _NOT_NULL_FIELDS
        }

        await self._ensure_task(task_id, owner_id)
        if "project_id" in changes:
            await self._ensure_project(
                changes["project_id"], owner_id, "Target project not found or access denied"
            )

        self._log_operation("Updating task", task_id=task_id, fields=list(changes))

        task = await self._execute_db_operation(
            "update_task",
            self.repo.update(task_id, owner_id, **changes),
        )
        return TaskResponse.model_validate(task)

    @service_operation("toggle_task_completion")
    async def toggle_task_completion(self, identity: Identity | None, task_id: str) -> TaskResponse:
        """Flip a task's completed flag atomically."""
        owner_id = self._require_identity(identity)
        task_id = self._require_id(task_id, "Task")

        self._log_operation("Toggling task completion", task_id=task_id)

        task = await self._execute_db_operation(
            "toggle_task_completion",
            self.repo.toggle_completion(task_id, owner_id),
        )
        return TaskResponse.model_validate(task)

    @service_operation("delete_task")
    async def delete_task(self, identity: Identity | None, task_id: str) -> None:
        """Delete a task together with its notes."""
        owner_id = self._require_identity(identity)
        task_id = self._require_id(task_id, "Task")
        await self._ensure_task(task_id, owner_id)

        self._log_operation("Deleting task", task_id=task_id)
        await self._execute_db_operation("delete_task", self.repo.delete(task_id, owner_id))

    @service_operation("count_tasks")
    async def count_tasks(self, identity: Identity | None, project_id: str | None = None) -> int:
        owner_id = self._require_identity(identity)
        return await self._execute_db_operation(
            "count_tasks",
            self.repo.count_for_project(owner_id, project_id),
        )

    @service_operation("task_exists")
    async def task_exists(self, identity: Identity | None, task_id: str) -> bool:
        owner_id = self._require_identity(identity)
        task_id = self._require_id(task_id, "Task")
        return await self._execute_db_operation("task_exists", self.repo.exists(task_id, owner_id))
