"""
Note Service.

Business logic layer for notes. A note is reachable only through a task
the caller owns via its project.
"""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.backend.core.exceptions import NotFoundError
from projecthub.backend.core.security import Identity
from projecthub.backend.core.utils import utc_now
from projecthub.backend.repositories.note import NoteRepository
from projecthub.backend.repositories.task import TaskRepository
from projecthub.backend.schemas.note import NoteCreate, NoteFilters, NoteResponse, NoteUpdate
from projecthub.backend.schemas.base import ApiResponse
from projecthub.backend.services.base import BaseService, service_operation

_NOT_NULL_FIELDS = frozenset({"task_id", "content"})


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, updates, search and retrieval with
    ownership checks through the task/project chain.
    """

    entity = "Note"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.tasks = TaskRepository(session)

    async def _ensure_task(self, task_id: str, owner_id: str, message: str) -> None:
        if not await self._execute_db_operation("check_task", self.tasks.exists(task_id, owner_id)):
            raise NotFoundError(message)

    @service_operation("create_note")
    async def create_note(
        self,
        identity: Identity | None,
        data: NoteCreate | Mapping[str, Any],
    ) -> NoteResponse:
        """
        Attach a note to one of the caller's tasks.

        Args:
            identity: Authenticated caller
            data: Note creation data

        Returns:
            Created note
        """
        owner_id = self._require_identity(identity)
        payload = self._parse(NoteCreate, data)
        await self._ensure_task(payload.task_id, owner_id, "Task not found or access denied")

        self._log_operation("Creating note", task_id=payload.task_id)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                task_id=payload.task_id,
                title=payload.title or None,
                content=payload.content,
            ),
        )
        return NoteResponse.model_validate(note)

    @service_operation("get_note")
    async def get_note(self, identity: Identity | None, note_id: str) -> NoteResponse:
        owner_id = self._require_identity(identity)
        note_id = self._require_id(note_id, "Note")
        note = await self._execute_db_operation("get_note", self.repo.get_by_id(note_id, owner_id))
        return NoteResponse.model_validate(note)

    @service_operation("list_notes")
    async def list_notes(
        self,
        identity: Identity | None,
        filters: NoteFilters | Mapping[str, Any] | None = None,
    ) -> list[NoteResponse]:
        """List the caller's notes, newest first, optionally filtered."""
        owner_id = self._require_identity(identity)
        criteria = self._parse(NoteFilters, filters or {})
        notes = await self._execute_db_operation(
            "list_notes",
            self.repo.search(owner_id, **criteria.model_dump()),
        )
        return [NoteResponse.model_validate(n) for n in notes]

    @service_operation("list_notes_by_task")
    async def list_notes_by_task(self, identity: Identity | None, task_id: str) -> list[NoteResponse]:
        owner_id = self._require_identity(identity)
        task_id = self._require_id(task_id, "Task")
        notes = await self._execute_db_operation(
            "list_notes_by_task",
            self.repo.search(owner_id, task_id=task_id),
        )
        return [NoteResponse.model_validate(n) for n in notes]

    @service_operation("list_recent_notes")
    async def list_recent_notes(
        self,
        identity: Identity | None,
        days_back: int = 7,
    ) -> list[NoteResponse]:
        """Notes created within the last days_back days."""
        owner_id = self._require_identity(identity)
        notes = await self._execute_db_operation(
            "list_recent_notes",
            self.repo.search(owner_id, created_after=utc_now() - timedelta(days=days_back)),
        )
        return [NoteResponse.model_validate(n) for n in notes]

    async def search_notes(self, identity: Identity | None, term: str) -> ApiResponse:
        """Case-insensitive content search across the caller's notes."""
        return await self.list_notes(identity, {"content_contains": term})

    @service_operation("update_note")
    async def update_note(
        self,
        identity: Identity | None,
        note_id: str,
        data: NoteUpdate | Mapping[str, Any],
    ) -> NoteResponse:
        owner_id = self._require_identity(identity)
        note_id = self._require_id(note_id, "Note")
        payload = self._parse(NoteUpdate, data)
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key not in _NOT_NULL_FIELDS
        }

        if not await self._execute_db_operation("check_note", self.repo.exists(note_id, owner_id)):
            raise NotFoundError("Note not found or access denied")
        if "task_id" in changes:
            await self._ensure_task(
                changes["task_id"], owner_id, "Target task not found or access denied"
            )

        self._log_operation("Updating note", note_id=note_id, fields=list(changes))

        note = await self._execute_db_operation(
            "update_note",
            self.repo.update(note_id, owner_id, **changes),
        )
        return NoteResponse.model_validate(note)

    @service_operation("delete_note")
    async def delete_note(self, identity: Identity | None, note_id: str) -> None:
        owner_id = self._require_identity(identity)
        note_id = self._require_id(note_id, "Note")

        if not await self._execute_db_operation("check_note", self.repo.exists(note_id, owner_id)):
            raise NotFoundError("Note not found or access denied")

        self._log_operation("Deleting note", note_id=note_id)
        await self._execute_db_operation("delete_note", self.repo.delete(note_id, owner_id))

    @service_operation("count_notes")
    async def count_notes(self, identity: Identity | None, task_id: str | None = None) -> int:
        owner_id = self._require_identity(identity)
        return await self._execute_db_operation(
            "count_notes",
            self.repo.count_for_task(owner_id, task_id),
        )

    @service_operation("note_exists")
    async def note_exists(self, identity: Identity | None, note_id: str) -> bool:
        owner_id = self._require_identity(identity)
        note_id = self._require_id(note_id, "Note")
        return await self._execute_db_operation("note_exists", self.repo.exists(note_id, owner_id))
