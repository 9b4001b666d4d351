"""
Note Model.

Free-form text attached to a task. The title is optional.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projecthub.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from projecthub.backend.models.task import Task


class Note(UUIDMixin, TimestampMixin, Base):
    """Note attached to a task."""

    __tablename__ = "notes"

    task_id: Mapped[str] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    task: Mapped["Task"] = relationship(back_populates="notes")

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, task_id={self.task_id})>"
