"""
Project Repository.

Data access layer for projects. Ownership is the user_id column.
"""

from datetime import date

from sqlalchemy import Select, select

from projecthub.backend.models.project import Project
from projecthub.backend.repositories.base import BaseRepository, date_range_conditions


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project model."""

    model = Project

    def owned(self, owner_id: str) -> Select:
        return select(Project).where(Project.user_id == owner_id)

    async def search(
        self,
        owner_id: str,
        due_date_before: date | None = None,
        due_date_after: date | None = None,
    ) -> list[Project]:
        """List owned projects, optionally narrowed by due-date range."""
        return await self.get_all(
            owner_id,
            *date_range_conditions(Project.due_date, due_date_before, due_date_after),
        )

    async def get_due_between(self, owner_id: str, start: date, end: date) -> list[Project]:
        """Projects due within [start, end], soonest first."""
        return await self.get_all(
            owner_id,
            Project.due_date >= start,
            Project.due_date <= end,
            order_by=(Project.due_date.asc(),),
        )
