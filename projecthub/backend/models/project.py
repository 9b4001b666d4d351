"""
Project Model.

Top of the ownership chain. Deleting a project removes its tasks and,
through them, their notes.
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projecthub.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from projecthub.backend.models.task import Task


class Project(UUIDMixin, TimestampMixin, Base):
    """Project owned by a single user."""

    __tablename__ = "projects"

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )
    due_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        index=True,
    )

    tasks: Mapped[list["Task"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name!r})>"
