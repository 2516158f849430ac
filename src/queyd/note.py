"""Core Note dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class NoteDates:
    """Creation and last-modification timestamps as RFC 3339 strings.

    An empty string means "not recorded in the header"; the deriver fills it
    from the file system at read time.
    """

    creation: str = ""
    last_modification: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"creation": self.creation, "lastModification": self.last_modification}


@dataclass
class Note:
    """A single markdown note in the store."""

    #: Path relative to the store root, without extension, ``/``-separated
    id: str = ""
    title: str = ""
    #: Rendered HTML with the leading heading removed
    body: str = ""
    tags: list[str] = field(default_factory=list)
    project: str = ""
    area: str = ""
    url: str = ""
    uuid: str = ""
    date_of: NoteDates = field(default_factory=NoteDates)
    #: Raw markdown after the title heading, as stored on disk
    source: str = field(default="", repr=False)
    path: Path | None = field(default=None, repr=False, compare=False)

    @property
    def tag_set(self) -> set[str]:
        return set(self.tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "uuid": self.uuid,
            "title": self.title,
            "body": self.body,
            "tags": self.tags,
            "project": self.project,
            "area": self.area,
            "url": self.url,
            "dateOf": self.date_of.to_dict(),
        }


def unique_tags(tags: Any) -> list[str]:
    """Normalise *tags* into a de-duplicated, order-preserving list of strings.

    Accepts a list/tuple/set or a comma-separated string.
    """
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    elif isinstance(tags, (set, frozenset)):
        tags = sorted(tags, key=str)
    cleaned = (str(t).strip() for t in tags)
    return list(dict.fromkeys(t for t in cleaned if t))
