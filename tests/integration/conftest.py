"""
Integration Test Fixtures.

Fixtures for integration tests - uses the real database and services.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.backend.core.security import Identity
from projecthub.backend.services.export import ExportService
from projecthub.backend.services.note import NoteService
from projecthub.backend.services.project import ProjectService
from projecthub.backend.services.task import TaskService


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def project_service(db_session: AsyncSession) -> ProjectService:
    return ProjectService(db_session)


@pytest.fixture
def task_service(db_session: AsyncSession) -> TaskService:
    return TaskService(db_session)


@pytest.fixture
def note_service(db_session: AsyncSession) -> NoteService:
    return NoteService(db_session)


@pytest.fixture
def export_service(db_session: AsyncSession, export_config) -> ExportService:
    return ExportService(db_session, config=export_config)


# =============================================================================
# Data Builders
# =============================================================================


@pytest.fixture
def create_project(project_service: ProjectService) -> Callable[..., Awaitable[Any]]:
    """
    Create a project through the service and return its data.

    Usage:
        project = await create_project(identity, name="Website Redesign")
    """

    async def _create(identity: Identity, **fields: Any) -> Any:
        fields.setdefault("name", "Website Redesign")
        result = await project_service.create_project(identity, fields)
        assert result.success, result.error_message
        return result.data

    return _create


@pytest.fixture
def create_task(task_service: TaskService) -> Callable[..., Awaitable[Any]]:
    async def _create(identity: Identity, project_id: str, **fields: Any) -> Any:
        fields.setdefault("name", "Draft wireframes")
        result = await task_service.create_task(identity, {"project_id": project_id, **fields})
        assert result.success, result.error_message
        return result.data

    return _create


@pytest.fixture
def create_note(note_service: NoteService) -> Callable[..., Awaitable[Any]]:
    async def _create(identity: Identity, task_id: str, **fields: Any) -> Any:
        fields.setdefault("content", "- call vendor\n- confirm budget")
        result = await note_service.create_note(identity, {"task_id": task_id, **fields})
        assert result.success, result.error_message
        return result.data

    return _create
