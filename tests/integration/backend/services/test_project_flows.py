"""
Integration Tests for Project Operations.

Runs ProjectService against the test database.
"""

from datetime import date, timedelta
from unittest.mock import patch

from sqlalchemy import update

from projecthub.backend.core.utils import utc_now, utc_today
from projecthub.backend.models import Project


class TestProjectLifecycle:
    """Create, read, update and delete through the service."""

    async def test_create_then_get(self, project_service, identity):
        due = utc_today() + timedelta(days=30)

        created = await project_service.create_project(
            identity, {"name": "Website Redesign", "description": "New look", "due_date": due}
        )
        fetched = await project_service.get_project(identity, created.data.id)

        assert fetched.success
        project = fetched.data
        assert project.id
        assert project.name == "Website Redesign"
        assert project.description == "New look"
        assert project.due_date == due
        assert project.user_id == identity.user_id
        assert project.created_at and project.updated_at

    async def test_update_without_changes_advances_updated_at(self, project_service, identity, create_project):
        project = await create_project(identity, description="Keep me")
        later = project.updated_at + timedelta(seconds=5)

        with patch("projecthub.backend.repositories.base.utc_now", return_value=later):
            result = await project_service.update_project(identity, project.id, {})

        updated = result.data
        assert updated.updated_at == later
        assert updated.name == project.name
        assert updated.description == project.description
        assert updated.due_date == project.due_date
        assert updated.created_at == project.created_at

    async def test_blank_description_on_update_clears_it(self, project_service, identity, create_project):
        project = await create_project(identity, description="Old plan")

        result = await project_service.update_project(identity, project.id, {"description": "   "})

        assert result.success, result.error_message
        assert result.data.description is None
        assert (await project_service.get_project(identity, project.id)).data.description is None

    async def test_delete_then_get_fails(self, project_service, identity, create_project):
        project = await create_project(identity)

        assert (await project_service.delete_project(identity, project.id)).success
        result = await project_service.get_project(identity, project.id)

        assert result.error.code == "RES_NOT_FOUND"


class TestProjectQueries:
    """Listing, filters and helpers."""

    async def test_list_is_newest_first(self, project_service, identity, create_project, db_session):
        first = await create_project(identity, name="First")
        second = await create_project(identity, name="Second")
        await db_session.execute(
            update(Project).where(Project.id == first.id).values(created_at=utc_now() - timedelta(hours=1))
        )

        result = await project_service.list_projects(identity)

        assert [p.id for p in result.data] == [second.id, first.id]

    async def test_due_date_range_filter(self, project_service, identity, create_project):
        today = utc_today()
        await create_project(identity, name="Soon", due_date=today + timedelta(days=2))
        await create_project(identity, name="Later", due_date=today + timedelta(days=40))
        await create_project(identity, name="Undated")

        result = await project_service.list_projects(
            identity, {"due_date_before": today + timedelta(days=10)}
        )

        assert [p.name for p in result.data] == ["Soon"]

    async def test_upcoming_projects(self, project_service, identity, create_project):
        today = utc_today()
        await create_project(identity, name="Later", due_date=today + timedelta(days=6))
        await create_project(identity, name="Sooner", due_date=today + timedelta(days=1))
        await create_project(identity, name="Far", due_date=today + timedelta(days=20))

        result = await project_service.list_upcoming_projects(identity)

        assert [p.name for p in result.data] == ["Sooner", "Later"]

    async def test_count_and_exists(self, project_service, identity, create_project):
        project = await create_project(identity)
        await create_project(identity, name="Second")

        assert (await project_service.count_projects(identity)).data == 2
        assert (await project_service.project_exists(identity, project.id)).data is True
        assert (await project_service.project_exists(identity, "missing")).data is False


class TestDueDateBuckets:
    """Due-date classification on fetched projects."""

    async def test_three_days_out_is_soon(self, project_service, identity, create_project):
        project = await create_project(identity, due_date=utc_today() + timedelta(days=3))

        fetched = (await project_service.get_project(identity, project.id)).data

        assert fetched.due_status == "soon"

    async def test_yesterday_is_overdue(self, project_service, identity, create_project):
        project = await create_project(identity)
        yesterday = utc_today() - timedelta(days=1)

        await project_service.update_project(identity, project.id, {"due_date": yesterday})
        fetched = (await project_service.get_project(identity, project.id)).data

        assert fetched.due_status == "overdue"
        assert fetched.due_label == "1 days overdue"

    async def test_past_due_date_rejected_on_create(self, project_service, identity):
        result = await project_service.create_project(
            identity, {"name": "Late", "due_date": date(2000, 1, 1)}
        )

        assert result.error_message == "Due date cannot be in the past"
        assert (await project_service.count_projects(identity)).data == 0
