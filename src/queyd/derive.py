"""Fill in the fields of a note that are not stored in its header.

Dates missing from the header come from the file system, the title comes from
the first top-level heading of the rendered body, and the id comes from the
file's location.  Nothing derived here is written back to disk.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from queyd.note import Note, NoteDates
from queyd.parser import NoteHeader
from queyd.paths import NOTE_SUFFIX, note_id_for
from queyd.render import extract_and_strip_leading_heading, render

logger = logging.getLogger(__name__)

# "# Title" (ATX) or "Title\n=====" (setext) level-one headings in raw markdown
_ATX_H1_RE = re.compile(r"^#[ \t]+.*?$\n?", re.MULTILINE)
_SETEXT_H1_RE = re.compile(r"^[^\n]*\S[^\n]*\n=+[ \t]*$\n?", re.MULTILINE)
_BETWEEN_TAGS_RE = re.compile(r">\s+<")


@dataclass
class Derivation:
    """A derived note plus any problems met while deriving it."""

    note: Note
    warnings: list[str] = field(default_factory=list)


def format_timestamp(moment: datetime | float) -> str:
    """RFC 3339 string for a datetime or POSIX timestamp, in UTC."""
    if not isinstance(moment, datetime):
        moment = datetime.fromtimestamp(moment, tz=timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


def file_times(stat: os.stat_result) -> tuple[str, str]:
    """``(creation, last_modification)`` strings from a stat result.

    Uses the birth time where the platform records it, the inode change time
    otherwise.
    """
    created = getattr(stat, "st_birthtime", None) or stat.st_ctime
    return format_timestamp(created), format_timestamp(stat.st_mtime)


def _squeeze(html_text: str) -> str:
    return _BETWEEN_TAGS_RE.sub("><", html_text.strip())


def strip_source_heading(source: str, expected: str | None = None) -> str:
    """Remove the level-one heading that became the title from markdown *source*.

    Candidate heading lines are tried in order; one is accepted only when the
    source without it renders to *expected*, the rendered body minus its first
    ``<h1>``.  This skips look-alike lines such as ``# comment`` inside fenced
    code.  The source is returned unchanged when no candidate qualifies.
    """
    if expected is None:
        _, expected = extract_and_strip_leading_heading(render(source))
    target = _squeeze(expected)
    candidates = sorted(
        [*_ATX_H1_RE.finditer(source), *_SETEXT_H1_RE.finditer(source)],
        key=lambda m: m.start(),
    )
    for match in candidates:
        remaining = source[: match.start()] + source[match.end() :]
        if _squeeze(render(remaining)) == target:
            return remaining.strip("\n")
    return source.strip("\n")


def _derive_dates(path: Path, declared: NoteDates, warnings: list[str]) -> NoteDates:
    dates = NoteDates(declared.creation, declared.last_modification)
    if dates.creation and dates.last_modification:
        return dates
    try:
        created, modified = file_times(path.stat())
    except OSError as exc:
        message = f"cannot read timestamps of {path}: {exc}"
        logger.warning(message)
        warnings.append(message)
        return dates
    dates.creation = dates.creation or created
    dates.last_modification = dates.last_modification or modified
    return dates


def derive_note(
    root: Path,
    path: Path,
    header: NoteHeader,
    raw_body: str,
    suffix: str = NOTE_SUFFIX,
) -> Derivation:
    """Build the full :class:`Note` for the file at *path*.

    Never raises for per-file problems: render and stat failures degrade to
    raw text or empty values and are reported in :attr:`Derivation.warnings`.
    """
    warnings: list[str] = []
    date_of = _derive_dates(path, header.date_of, warnings)

    try:
        rendered = render(raw_body)
    except Exception as exc:  # noqa: BLE001
        message = f"cannot render {path}: {exc}"
        logger.warning(message)
        warnings.append(message)
        title, body, source = header.title, raw_body.strip(), raw_body.strip("\n")
    else:
        if header.title:
            title, body, source = header.title, rendered.strip(), raw_body.strip("\n")
        else:
            title, body = extract_and_strip_leading_heading(rendered)
            source = strip_source_heading(raw_body, body) if title else raw_body.strip("\n")

    note = Note(
        id=note_id_for(root, path, suffix),
        title=title,
        body=body,
        tags=list(header.tags),
        project=header.project,
        area=header.area,
        url=header.url,
        uuid=header.uuid,
        date_of=date_of,
        source=source,
        path=path,
    )
    return Derivation(note, warnings)
