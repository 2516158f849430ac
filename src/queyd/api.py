"""Query and mutation surface over a :class:`~queyd.repository.NoteRepository`.

Queries return notes (or ``None`` for an absent id).  Mutations never raise
store errors: they return a :class:`MutationResult` carrying either the
affected note or a human-readable error message.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from queyd.errors import QueydError
from queyd.filters import DateRange, NoteFilter
from queyd.note import Note
from queyd.repository import NoteRepository

logger = logging.getLogger(__name__)


@dataclass
class MutationResult:
    ok: bool
    note: Note | None = None
    error: str = ""
    code: str = ""

    @classmethod
    def failure(cls, exc: QueydError) -> "MutationResult":
        return cls(ok=False, error=exc.message, code=exc.code.name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "note": self.note.to_dict() if self.note else None,
            "error": self.error or None,
            "code": self.code or None,
        }


class NotesAPI:
    """note / notes / add / edit / delete / archive over a repository."""

    def __init__(self, repository: NoteRepository) -> None:
        self.repository = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def note(self, id: str) -> Note | None:
        return self.repository.get(id)

    def notes(
        self,
        area: str | None = None,
        project: str | None = None,
        tags: Iterable[str] | None = None,
        created: DateRange | None = None,
        last_modified: DateRange | None = None,
    ) -> list[Note]:
        """Notes matching every supplied criterion, sorted by id."""
        note_filter = NoteFilter.build(
            area=area,
            project=project,
            tags=tags,
            created=created,
            last_modified=last_modified,
        )
        return sorted(self.repository.list_notes(note_filter), key=lambda n: n.id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _mutate(self, action: str, fn: Callable[[], Note | None]) -> MutationResult:
        try:
            note = fn()
        except QueydError as exc:
            logger.info("%s failed: %s", action, exc.message)
            return MutationResult.failure(exc)
        return MutationResult(ok=True, note=note)

    def add(
        self,
        title: str,
        body: str,
        project: str = "",
        area: str = "",
        tags: Iterable[str] = (),
        id: str | None = None,
    ) -> MutationResult:
        return self._mutate(
            "add",
            lambda: self.repository.create(
                title, body, project=project, area=area, tags=tags, note_id=id
            ),
        )

    def edit(
        self,
        id: str,
        title: str | None = None,
        body: str | None = None,
        project: str | None = None,
        area: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> MutationResult:
        return self._mutate(
            "edit",
            lambda: self.repository.edit(
                id, title=title, body=body, project=project, area=area, tags=tags
            ),
        )

    def archive(self, id: str) -> MutationResult:
        return self._mutate("archive", lambda: self.repository.archive(id))

    def delete(self, id: str) -> MutationResult:
        return self._mutate("delete", lambda: self.repository.delete(id))
