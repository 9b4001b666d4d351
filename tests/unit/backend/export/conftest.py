"""
Export Test Fixtures.

Response-schema builders for export document tests.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from projecthub.backend.models.task import Priority
from projecthub.backend.schemas.note import NoteResponse
from projecthub.backend.schemas.project import ProjectResponse
from projecthub.backend.schemas.task import TaskResponse

STAMP = datetime(2024, 3, 1, 14, 30)

@pytest.fixture
def project_response() -> Callable[..., ProjectResponse]:
    def _make(**overrides: Any) -> ProjectResponse:
        values = {
            "id": "project-1",
            "user_id": "user-1",
            "name": "Q1 Launch Plan",
            "description": "Ship the new site",
            "due_date": None,
            "created_at": STAMP,
            "updated_at": STAMP,
        }
        values.update(overrides)
        return ProjectResponse(**values)

    return _make


@pytest.fixture
def task_response() -> Callable[..., TaskResponse]:
    def _make(task_id: str, completed: bool = False, **overrides: Any) -> TaskResponse:
        values = {
            "id": task_id,
            "project_id": "project-1",
            "name": f"Task {task_id}",
            "priority": Priority.MEDIUM,
            "completed": completed,
            "due_date": None,
            "created_at": STAMP,
            "updated_at": STAMP,
        }
        values.update(overrides)
        return TaskResponse(**values)

    return _make


@pytest.fixture
def note_response() -> Callable[..., NoteResponse]:
    def _make(note_id: str, task_id: str, content: str = "- first\n- second") -> NoteResponse:
        return NoteResponse(
            id=note_id,
            task_id=task_id,
            title=None,
            content=content,
            created_at=STAMP,
            updated_at=STAMP,
        )

    return _make
