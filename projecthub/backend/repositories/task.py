"""
Task Repository.

Data access layer for tasks. Ownership resolves through the parent project.
"""

from datetime import date

from sqlalchemy import Select, select, update

from projecthub.backend.core.exceptions import NotFoundError
from projecthub.backend.core.utils import utc_now
from projecthub.backend.models.project import Project
from projecthub.backend.models.task import Priority, Task
from projecthub.backend.repositories.base import BaseRepository, date_range_conditions


class TaskRepository(BaseRepository[Task]):
    """
    Repository for Task model.

    Inherits owner-scoped CRUD from BaseRepository and adds task filters
    and an atomic completion toggle.
    """

    model = Task

    def owned(self, owner_id: str) -> Select:
        return (
            select(Task)
            .join(Project, Task.project_id == Project.id)
            .where(Project.user_id == owner_id)
        )

    async def search(
        self,
        owner_id: str,
        project_id: str | None = None,
        priority: Priority | None = None,
        completed: bool | None = None,
        due_date_before: date | None = None,
        due_date_after: date | None = None,
    ) -> list[Task]:
        """List owned tasks with optional filters, newest first."""
        conditions = date_range_conditions(Task.due_date, due_date_before, due_date_after)
        if project_id is not None:
            conditions.append(Task.project_id == project_id)
        if priority is not None:
            conditions.append(Task.priority == priority)
        if completed is not None:
            conditions.append(Task.completed == completed)
        return await self.get_all(owner_id, *conditions)

    async def get_due_between(self, owner_id: str, start: date, end: date) -> list[Task]:
        """Incomplete tasks due within [start, end], soonest first."""
        return await self.get_all(
            owner_id,
            Task.due_date >= start,
            Task.due_date <= end,
            Task.completed == False,  # noqa: E712
            order_by=(Task.due_date.asc(),),
        )

    async def count_for_project(self, owner_id: str, project_id: str | None = None) -> int:
        if project_id is None:
            return await self.count(owner_id)
        return await self.count(owner_id, Task.project_id == project_id)

    async def toggle_completion(self, id: str, owner_id: str) -> Task:
        """
        Flip completed in a single UPDATE so concurrent toggles never lose a write.

        Raises:
            NotFoundError: If no owned task matches
        """
        owned_projects = select(Project.id).where(Project.user_id == owner_id)
        result = await self.session.execute(
            update(Task)
            .where(Task.id == id, Task.project_id.in_(owned_projects))
            .values(completed=~Task.completed, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Task not found")

        task = await self.get_by_id(id, owner_id)
        await self.session.refresh(task)
        return task
