"""Exception hierarchy for the note store.

Every failure raised by :mod:`queyd` derives from :class:`QueydError`, which
carries a human-readable message, a machine-readable :class:`ErrorCode` and a
``details`` mapping.  The API layer turns these into error results.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    NOTE_NOT_FOUND = 1001
    NOTE_MALFORMED = 1002
    NOTE_ALREADY_EXISTS = 1003
    NOTE_ID_EMPTY = 1004

    STORAGE_IO_FAILED = 4001

    PATH_TRAVERSAL_DETECTED = 7005


class QueydError(Exception):
    """Base exception for all note store errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "code_name": self.code.name,
            "message": self.message,
            "details": self.details,
        }


class NotFound(QueydError):
    """No note is stored under the requested id."""

    def __init__(self, note_id: str) -> None:
        super().__init__(
            f"Cannot find note with id {note_id}",
            ErrorCode.NOTE_NOT_FOUND,
            {"note_id": note_id},
        )
        self.note_id = note_id


class PathEscape(QueydError):
    """A note id resolves to a location outside the store root."""

    def __init__(self, note_id: str, reason: str = "resolves outside the store root") -> None:
        super().__init__(
            f"Invalid note id {note_id!r}: {reason}",
            ErrorCode.PATH_TRAVERSAL_DETECTED,
            {"note_id": note_id},
        )
        self.note_id = note_id


class MalformedNote(QueydError):
    """A file starts like a note but its header cannot be parsed."""

    def __init__(self, reason: str, path: str | None = None) -> None:
        message = f"Malformed note {path}: {reason}" if path else f"Malformed note: {reason}"
        super().__init__(message, ErrorCode.NOTE_MALFORMED, {"path": path} if path else {})
        self.reason = reason
        self.path = path


class EmptyIdentifier(QueydError):
    def __init__(self) -> None:
        super().__init__(
            "Cannot derive id from empty title and body",
            ErrorCode.NOTE_ID_EMPTY,
        )


class IdCollision(QueydError):
    def __init__(self, note_id: str) -> None:
        super().__init__(
            f"A note with id {note_id} already exists",
            ErrorCode.NOTE_ALREADY_EXISTS,
            {"note_id": note_id},
        )
        self.note_id = note_id


class IoFailure(QueydError):
    """An underlying read, write or stat call failed."""

    def __init__(self, operation: str, path: str, cause: OSError) -> None:
        super().__init__(
            f"Failed to {operation} {path}: {cause.strerror or cause}",
            ErrorCode.STORAGE_IO_FAILED,
            {"operation": operation, "path": path},
        )
        self.operation = operation
        self.path = path
