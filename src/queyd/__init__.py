"""queyd: a personal note store on plain markdown files."""

from queyd.api import MutationResult, NotesAPI
from queyd.config import QueydConfig, configure_logging, load_config
from queyd.errors import (
    EmptyIdentifier,
    IdCollision,
    IoFailure,
    MalformedNote,
    NotFound,
    PathEscape,
    QueydError,
)
from queyd.filters import NoteFilter
from queyd.note import Note, NoteDates
from queyd.repository import NoteRepository, ScanResult, ScanStatus

__all__ = [
    "Note",
    "NoteDates",
    "NoteFilter",
    "NoteRepository",
    "ScanResult",
    "ScanStatus",
    "NotesAPI",
    "MutationResult",
    "QueydConfig",
    "load_config",
    "configure_logging",
    "QueydError",
    "NotFound",
    "PathEscape",
    "MalformedNote",
    "EmptyIdentifier",
    "IdCollision",
    "IoFailure",
]
