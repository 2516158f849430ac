"""Containment checks for paths derived from note ids."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from queyd.errors import PathEscape

NOTE_SUFFIX = ".md"


def resolve_note_path(root: Path, note_id: str, suffix: str = NOTE_SUFFIX) -> Path:
    """Return the absolute file path for *note_id* inside *root*.

    Raises :class:`~queyd.errors.PathEscape` when the id is empty, absolute,
    contains a ``..`` segment, or resolves to anything that is not strictly
    below the resolved root.
    """
    if not note_id or not note_id.strip("/"):
        raise PathEscape(note_id, "id is empty")
    if "\\" in note_id or note_id.startswith("/") or Path(note_id).is_absolute():
        raise PathEscape(note_id, "id must be a relative slash-separated path")
    if ".." in PurePosixPath(note_id).parts:
        raise PathEscape(note_id, "id must not contain '..' segments")

    base = Path(root).resolve()
    candidate = (base / f"{note_id}{suffix}").resolve()
    if candidate == base or not candidate.is_relative_to(base):
        raise PathEscape(note_id)
    return candidate


def note_id_for(root: Path, path: Path, suffix: str = NOTE_SUFFIX) -> str:
    """Inverse of :func:`resolve_note_path`: the id of the file at *path*."""
    relative = Path(path).relative_to(root).as_posix()
    return relative[: -len(suffix)] if suffix and relative.endswith(suffix) else relative
