"""
Base Repository.

Base class for all repositories with common owner-scoped CRUD operations.
Every query starts from the subclass's owner-scoped statement, so a record
that exists but belongs to someone else is indistinguishable from a
missing one.
"""

from datetime import date
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.backend.core.exceptions import NotFoundError
from projecthub.backend.core.logging import get_logger
from projecthub.backend.core.utils import utc_now
from projecthub.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses set the model class and define the owner scope:

        class ProjectRepository(BaseRepository[Project]):
            model = Project

            def owned(self, owner_id: str) -> Select:
                return select(Project).where(Project.user_id == owner_id)
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def owned(self, owner_id: str) -> Select:
        """Statement selecting every record owned by owner_id."""
        raise NotImplementedError

    async def get_by_id(self, id: str | UUID, owner_id: str) -> ModelType:
        """
        Get a single owned record by ID.

        Raises:
            NotFoundError: If no owned record matches
        """
        result = await self.session.execute(
            self.owned(owner_id).where(self.model.id == str(id))
        )
        try:
            return result.scalar_one()
        except NoResultFound:
            raise NotFoundError(f"{self.model.__name__} not found")

    async def get_by_id_or_none(self, id: str | UUID, owner_id: str) -> ModelType | None:
        """Get a single owned record by ID, returning None if not found."""
        result = await self.session.execute(
            self.owned(owner_id).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        owner_id: str,
        *conditions: Any,
        order_by: tuple[Any, ...] | None = None,
        limit: int | None = None,
    ) -> list[ModelType]:
        """List owned records, newest first unless another order is given."""
        stmt = self.owned(owner_id)
        if conditions:
            stmt = stmt.where(*conditions)
        stmt = stmt.order_by(*(order_by or (self.model.created_at.desc(),)))
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, owner_id: str, *conditions: Any) -> int:
        """Exact count of owned records matching the conditions."""
        stmt = self.owned(owner_id)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        )
        return result.scalar_one()

    async def exists(self, id: str | UUID, owner_id: str) -> bool:
        """Check if an owned record exists by ID."""
        return await self.get_by_id_or_none(id, owner_id) is not None

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: str | UUID, owner_id: str, **kwargs: Any) -> ModelType:
        """
        Update an owned record. updated_at is re-stamped even when no field changes.

        Raises:
            NotFoundError: If no owned record matches
        """
        instance = await self.get_by_id(id, owner_id)

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        instance.updated_at = utc_now()

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: str | UUID, owner_id: str) -> None:
        """
        Delete an owned record and its dependents.

        Raises:
            NotFoundError: If no owned record matches
        """
        instance = await self.get_by_id(id, owner_id)
        await self.session.delete(instance)
        await self.session.flush()


def date_range_conditions(
    column: Any,
    before: date | None = None,
    after: date | None = None,
) -> list[Any]:
    """Inclusive range conditions on a date/datetime column."""
    conditions = []
    if before is not None:
        conditions.append(column <= before)
    if after is not None:
        conditions.append(column >= after)
    return conditions
