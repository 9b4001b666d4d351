"""
Integration Tests for Project Export.

Exports a real project tree as JSON and PDF, and checks that a failure
fetching one task's notes degrades that task instead of the export.
"""

import json

from sqlalchemy.exc import OperationalError

from projecthub.backend.schemas.export import PDF_DATA_URI_PREFIX


class TestExportFlows:
    """End-to-end exports through ExportService."""

    async def test_json_export_counts(
        self, export_service, task_service, identity, create_project, create_task, create_note
    ):
        project = await create_project(identity, name="Website Redesign", description="Refresh")
        first = await create_task(identity, project.id, name="Wireframes")
        second = await create_task(identity, project.id, name="Copy")
        await create_note(identity, first.id)
        await create_note(identity, first.id, content="Second note")
        await task_service.toggle_task_completion(identity, second.id)

        result = await export_service.generate_export(identity, project.id, "json")

        assert result.success, result.error_message
        assert result.data.filename.startswith("website_redesign_export_")
        document = json.loads(result.data.content)
        assert document["project"]["tasks_count"] == 2
        assert document["project"]["completed_tasks_count"] == 1
        assert document["project"]["total_notes_count"] == 2
        assert document["project"]["completion_percentage"] == 50
        assert document["metadata"]["total_notes"] == 2

    async def test_failed_notes_degrade_one_task(
        self, export_service, db_session, identity, create_project, create_task, create_note
    ):
        project = await create_project(identity)
        tasks = [await create_task(identity, project.id, name=f"Task {i}") for i in range(3)]
        for task in tasks:
            await create_note(identity, task.id)
        await db_session.commit()

        broken_id = tasks[1].id
        search = export_service.notes.repo.search

        async def flaky_search(owner_id, **criteria):
            if criteria.get("task_id") == broken_id:
                raise OperationalError("SELECT", {}, Exception("database is locked"))
            return await search(owner_id, **criteria)

        export_service.notes.repo.search = flaky_search

        result = await export_service.get_export_stats(identity, project.id)
        data = await export_service.aggregate_project(identity, project.id)

        assert result.success, result.error_message
        assert result.data.task_count == 3
        assert result.data.total_note_count == 2
        notes = {task.id: task.notes_count for task in data.project.tasks}
        assert notes[broken_id] == 0
        assert sum(notes.values()) == 2

    async def test_pdf_export_is_data_uri(self, export_service, identity, create_project, create_task):
        project = await create_project(identity, name="Launch")
        await create_task(identity, project.id)

        result = await export_service.generate_export(identity, project.id, "pdf")

        assert result.success, result.error_message
        assert result.data.content.startswith(PDF_DATA_URI_PREFIX)
        assert result.data.to_bytes().startswith(b"%PDF")
        assert result.data.media_type == "application/pdf"

    async def test_foreign_project_export_fails(self, export_service, identity, other_identity, create_project):
        project = await create_project(identity)

        result = await export_service.generate_export(other_identity, project.id, "json")

        assert result.error.code == "RES_NOT_FOUND"

    async def test_has_exportable_data(self, export_service, identity, create_project, create_task):
        empty = await create_project(identity, name="Empty")
        described = await create_project(identity, name="Described", description="Plans")
        with_task = await create_project(identity, name="Busy")
        await create_task(identity, with_task.id)

        assert (await export_service.has_exportable_data(identity, empty.id)).data is False
        assert (await export_service.has_exportable_data(identity, described.id)).data is True
        assert (await export_service.has_exportable_data(identity, with_task.id)).data is True
