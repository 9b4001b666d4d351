"""
Task Model.

Tasks belong to a project and carry priority, completion and due date.
"""

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projecthub.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from projecthub.backend.models.note import Note
    from projecthub.backend.models.project import Project


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Task(UUIDMixin, TimestampMixin, Base):
    """Task under a project. Completion is independent of the due date."""

    __tablename__ = "tasks"

    project_id: Mapped[str] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    priority: Mapped[Priority] = mapped_column(
        SAEnum(
            Priority,
            name="task_priority",
            native_enum=False,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=Priority.MEDIUM,
        nullable=False,
        index=True,
    )
    completed: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    due_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        index=True,
    )

    project: Mapped["Project"] = relationship(back_populates="tasks")
    notes: Mapped[list["Note"]] = relationship(
        back_populates="task",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, name={self.name!r}, completed={self.completed})>"
