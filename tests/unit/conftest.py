"""
Unit Test Fixtures.

Fixtures for unit tests - the database session is mocked and repository
calls are patched. Model instances are built detached from any session.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from projecthub.backend.models import Note, Priority, Project, Task

CREATED_AT = datetime(2024, 3, 1, 9, 30)


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = ProjectService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


# =============================================================================
# Model Factories
# =============================================================================


@pytest.fixture
def make_project() -> Callable[..., Project]:
    """
    Build a detached Project.

    Usage:
        project = make_project(name="Launch", due_date=date(2024, 3, 8))
    """

    def _make(**overrides: Any) -> Project:
        values = {
            "id": "project-1",
            "user_id": "user-1",
            "name": "Website Redesign",
            "description": None,
            "due_date": None,
            "created_at": CREATED_AT,
            "updated_at": CREATED_AT,
        }
        values.update(overrides)
        return Project(**values)

    return _make


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """Build a detached Task."""

    def _make(**overrides: Any) -> Task:
        values = {
            "id": "task-1",
            "project_id": "project-1",
            "name": "Draft wireframes",
            "priority": Priority.MEDIUM,
            "completed": False,
            "due_date": None,
            "created_at": CREATED_AT,
            "updated_at": CREATED_AT,
        }
        values.update(overrides)
        return Task(**values)

    return _make


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """Build a detached Note."""

    def _make(**overrides: Any) -> Note:
        values = {
            "id": "note-1",
            "task_id": "task-1",
            "title": None,
            "content": "- call vendor\n- confirm budget",
            "created_at": CREATED_AT,
            "updated_at": CREATED_AT,
        }
        values.update(overrides)
        return Note(**values)

    return _make


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.get_logger", return_value=mock_logger):
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
