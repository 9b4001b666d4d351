"""
Note Repository.

Data access layer for notes. Ownership resolves through task and project.
"""

from datetime import datetime

from sqlalchemy import Select, select

from projecthub.backend.models.note import Note
from projecthub.backend.models.project import Project
from projecthub.backend.models.task import Task
from projecthub.backend.repositories.base import BaseRepository, date_range_conditions


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits owner-scoped CRUD from BaseRepository and adds
    note-specific queries.
    """

    model = Note

    def owned(self, owner_id: str) -> Select:
        return (
            select(Note)
            .join(Task, Note.task_id == Task.id)
            .join(Project, Task.project_id == Project.id)
            .where(Project.user_id == owner_id)
        )

    async def search(
        self,
        owner_id: str,
        task_id: str | None = None,
        content_contains: str | None = None,
        created_before: datetime | None = None,
        created_after: datetime | None = None,
    ) -> list[Note]:
        """
        List owned notes with optional filters, newest first.

        Args:
            owner_id: Owning user
            task_id: Restrict to one task
            content_contains: Case-insensitive content substring
            created_before: Inclusive upper bound on creation time
            created_after: Inclusive lower bound on creation time
        """
        conditions = date_range_conditions(Note.created_at, created_before, created_after)
        if task_id is not None:
            conditions.append(Note.task_id == task_id)
        if content_contains:
            conditions.append(Note.content.icontains(content_contains, autoescape=True))
        return await self.get_all(owner_id, *conditions)

    async def count_for_task(self, owner_id: str, task_id: str | None = None) -> int:
        if task_id is None:
            return await self.count(owner_id)
        return await self.count(owner_id, Note.task_id == task_id)
