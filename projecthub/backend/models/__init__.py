# SQLAlchemy models package
from projecthub.backend.models.base import Base
from projecthub.backend.models.note import Note
from projecthub.backend.models.project import Project
from projecthub.backend.models.task import Priority, Task

__all__ = [
    "Base",
    "Note",
    "Priority",
    "Project",
    "Task",
]
