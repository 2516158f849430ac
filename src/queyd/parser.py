"""Note file splitter and YAML header codec.

A note file looks like::

    ---
    tags: [python, notes]
    project: queyd
    date_of:
      creation: '2024-05-01T09:30:00+00:00'
    ---
    # Title

    Markdown body.

The header is everything between the first two ``---`` lines; the body is the
rest of the file.  Files that do not start with ``---`` are not notes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import yaml

from queyd.errors import MalformedNote
from queyd.note import Note, NoteDates, unique_tags

# A delimiter line: exactly three hyphens, trailing blanks tolerated
_DELIMITER_RE = re.compile(r"^---[ \t]*(?:\r?\n|\Z)", re.MULTILINE)

# Characters that would otherwise be read as markdown or HTML in a heading
_TITLE_SPECIALS_RE = re.compile(r"([\\`*_\[\]#])")


@dataclass
class NoteHeader:
    """Metadata decoded from a note's header block."""

    tags: list[str] = field(default_factory=list)
    project: str = ""
    area: str = ""
    url: str = ""
    uuid: str = ""
    date_of: NoteDates = field(default_factory=NoteDates)
    #: Only set by older files that stored the title in the header
    title: str = ""


def split_content(content: str) -> tuple[str, str] | None:
    """Split raw file text into ``(header, body)``.

    Returns ``None`` when *content* does not start with a delimiter line, i.e.
    the file is not a note.  Raises :class:`MalformedNote` when the opening
    delimiter is present but the closing one is missing.
    """
    if not _DELIMITER_RE.match(content):
        return None
    parts = _DELIMITER_RE.split(content, maxsplit=2)
    if len(parts) != 3 or parts[0] != "":
        raise MalformedNote("header block is not closed by a '---' line")
    _, header, body = parts
    return header, body


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def load_header(header: str) -> NoteHeader:
    """Decode a YAML header block, applying defaults for absent keys."""
    try:
        meta = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        raise MalformedNote(f"invalid YAML header ({exc.__class__.__name__})") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise MalformedNote("header is not a key/value mapping")

    tags = meta.get("tags")
    if tags is not None and not isinstance(tags, (str, list, tuple, set)):
        raise MalformedNote("'tags' must be a list or comma-separated string")

    dates = meta.get("date_of") or {}
    if not isinstance(dates, dict):
        raise MalformedNote("'date_of' must be a mapping")

    return NoteHeader(
        tags=unique_tags(tags),
        project=_as_text(meta.get("project")),
        area=_as_text(meta.get("area")),
        url=_as_text(meta.get("url")),
        uuid=_as_text(meta.get("uuid")),
        date_of=NoteDates(
            creation=_as_text(dates.get("creation")),
            last_modification=_as_text(dates.get("last_modification")),
        ),
        title=_as_text(meta.get("title")),
    )


def dump_header(note: Note) -> str:
    """Encode *note*'s metadata as a YAML block, omitting empty fields.

    ``id``, ``title`` and ``body`` are never written: the id is the file's
    location and the title lives in the body's first heading.
    """
    meta: dict[str, Any] = {}
    if note.uuid:
        meta["uuid"] = note.uuid
    if note.tags:
        meta["tags"] = list(note.tags)
    for key in ("project", "area", "url"):
        value = getattr(note, key)
        if value:
            meta[key] = value
    dates = {
        key: value
        for key, value in (
            ("creation", note.date_of.creation),
            ("last_modification", note.date_of.last_modification),
        )
        if value
    }
    if dates:
        meta["date_of"] = dates
    if not meta:
        return ""
    return yaml.safe_dump(meta, sort_keys=False, allow_unicode=True, default_flow_style=False)


def compose_note(note: Note) -> str:
    """Return the full file text for *note*: header, title heading, body."""
    text = f"---\n{dump_header(note)}---\n"
    if note.title:
        text += f"# {escape_title(note.title)}\n\n"
    source = note.source.strip("\n")
    if source:
        text += f"{source}\n"
    return text


def escape_title(title: str) -> str:
    """Escape *title* so that it renders back to exactly the same text.

    >>> escape_title("Issue #1 *draft*")
    'Issue \\\\#1 \\\\*draft\\\\*'
    """
    escaped = title.replace("&", "&amp;").replace("<", "&lt;")
    return _TITLE_SPECIALS_RE.sub(r"\\\1", escaped)
