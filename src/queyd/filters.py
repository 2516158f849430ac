"""In-memory filtering of listed notes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from queyd.note import Note

DateRange = tuple[datetime, datetime]


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC.

    Returns ``None`` for empty or unparsable input.
    """
    if not value:
        return None
    try:
        moment = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def _in_range(value: str, bounds: DateRange) -> bool:
    moment = parse_timestamp(value)
    if moment is None:
        return False
    start, end = bounds
    return _aware(start) <= moment <= _aware(end)


@dataclass(frozen=True)
class NoteFilter:
    """Criteria a note must meet to be listed; ``None`` means "any".

    ``tags`` matches when the note shares at least one tag with the filter.
    Date ranges are inclusive on both ends.
    """

    area: str | None = None
    project: str | None = None
    tags: frozenset[str] | None = None
    created: DateRange | None = None
    last_modified: DateRange | None = None

    @classmethod
    def build(
        cls,
        *,
        area: str | None = None,
        project: str | None = None,
        tags: Iterable[str] | None = None,
        created: DateRange | None = None,
        last_modified: DateRange | None = None,
    ) -> "NoteFilter":
        return cls(
            area=area,
            project=project,
            tags=frozenset(tags) if tags else None,
            created=created,
            last_modified=last_modified,
        )

    def satisfies(self, note: Note) -> bool:
        if self.area is not None and note.area != self.area:
            return False
        if self.project is not None and note.project != self.project:
            return False
        if self.tags is not None and not (self.tags & note.tag_set):
            return False
        if self.created is not None and not _in_range(note.date_of.creation, self.created):
            return False
        if self.last_modified is not None and not _in_range(
            note.date_of.last_modification, self.last_modified
        ):
            return False
        return True
