"""Stable, filesystem-safe note identifiers."""

from __future__ import annotations

import re
import unicodedata

from queyd.errors import EmptyIdentifier
from queyd.render import render, strip_tags, unwrap_paragraph

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str, separator: str = "-") -> str:
    """Lowercase ASCII slug of *text*; non-alphanumeric runs become *separator*.

    >>> slugify("Hello, world!")
    'hello-world'
    """
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM_RE.sub(separator, ascii_text.lower()).strip(separator)


def first_line(body: str) -> str:
    """Plain text of the first non-blank line of *body* once rendered."""
    for line in render(body).splitlines():
        if line.strip():
            return strip_tags(unwrap_paragraph(line))
    return ""


def build_id(project: str, title: str, body: str, note_id: str | None = None) -> str:
    """Compute the id (and relative file path) of a new note.

    An explicit *note_id* is returned verbatim.  Otherwise the id is
    ``<project-slug>/<title-slug>``, dropping empty parts; the title slug falls
    back to the first line of the body.  Raises :class:`EmptyIdentifier` when
    nothing usable remains.
    """
    if note_id:
        return note_id

    project_slug = slugify(project) if project else ""
    name_slug = slugify(title) if title else ""
    if not name_slug and body:
        name_slug = slugify(first_line(body))

    if not project_slug and not name_slug:
        raise EmptyIdentifier()
    return "/".join(part for part in (project_slug, name_slug) if part)
