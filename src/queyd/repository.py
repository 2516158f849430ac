"""NoteRepository: the file system as the single source of truth for notes."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
import uuid
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from queyd.derive import derive_note, format_timestamp
from queyd.errors import IdCollision, IoFailure, MalformedNote, NotFound
from queyd.filters import NoteFilter
from queyd.note import Note, unique_tags
from queyd.parser import compose_note, load_header, split_content
from queyd.paths import NOTE_SUFFIX, resolve_note_path
from queyd.slug import build_id

logger = logging.getLogger(__name__)

ARCHIVE_AREA = "archive"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_uuid() -> str:
    return str(uuid.uuid4())


class ScanStatus(Enum):
    OK = "ok"
    #: The note was read but some derived field fell back to a default
    WARN = "warn"
    #: The file is not a note, or could not be read or parsed
    SKIP = "skip"


@dataclass
class ScanResult:
    """Outcome of reading one file during a directory scan."""

    status: ScanStatus
    path: Path
    note: Note | None = None
    reason: str = ""


class NoteRepository:
    """Reads and writes notes stored as markdown files under *root*.

    No state is kept between calls besides the root path: every query walks
    the directory tree again.
    """

    def __init__(
        self,
        root: Path,
        *,
        suffix: str = NOTE_SUFFIX,
        clock: Callable[[], datetime] = _utcnow,
        uuid_factory: Callable[[], str] = _new_uuid,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.suffix = suffix
        self._clock = clock
        self._uuid_factory = uuid_factory

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def scan(self) -> Iterator[ScanResult]:
        """Yield one :class:`ScanResult` per note-like file under the root."""
        if not self.root.is_dir():
            return
        for path in self.root.rglob(f"*{self.suffix}"):
            if path.is_file():
                yield self._scan_file(path)

    def _scan_file(self, path: Path) -> ScanResult:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable file %s: %s", path, exc)
            return ScanResult(ScanStatus.SKIP, path, reason=f"unreadable: {exc}")

        try:
            note, warnings = self._parse(path, content)
        except MalformedNote as exc:
            logger.warning("Skipping malformed note %s: %s", path, exc.reason)
            return ScanResult(ScanStatus.SKIP, path, reason=exc.reason)
        if note is None:
            logger.debug("Ignoring %s: no header block", path)
            return ScanResult(ScanStatus.SKIP, path, reason="not a note")
        if warnings:
            return ScanResult(ScanStatus.WARN, path, note, "; ".join(warnings))
        return ScanResult(ScanStatus.OK, path, note)

    def _parse(self, path: Path, content: str) -> tuple[Note | None, list[str]]:
        parts = split_content(content)
        if parts is None:
            return None, []
        header_text, body = parts
        try:
            header = load_header(header_text)
        except MalformedNote as exc:
            exc.path = str(path)
            raise
        derivation = derive_note(self.root, path, header, body, self.suffix)
        return derivation.note, derivation.warnings

    def list_notes(self, note_filter: NoteFilter | None = None) -> list[Note]:
        """Return every readable note matching *note_filter*.

        Order follows directory traversal and is not stable across calls.
        """
        notes: list[Note] = []
        for result in self.scan():
            if result.note is None:
                continue
            if note_filter is None or note_filter.satisfies(result.note):
                notes.append(result.note)
        return notes

    def get(self, note_id: str) -> Note | None:
        """Return the note stored under *note_id*, or ``None`` if there is none.

        Raises :class:`MalformedNote` when the file exists but its header
        cannot be parsed.
        """
        path = resolve_note_path(self.root, note_id, self.suffix)
        if not path.is_file():
            return None
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise MalformedNote("file is not valid UTF-8", str(path)) from exc
        except OSError as exc:
            raise IoFailure("read", str(path), exc) from exc
        note, _ = self._parse(path, content)
        return note

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def create(
        self,
        title: str,
        body: str,
        *,
        project: str = "",
        area: str = "",
        tags: Iterable[str] = (),
        url: str = "",
        note_id: str | None = None,
        overwrite: bool = False,
    ) -> Note:
        """Write a new note and return it as read back from disk.

        The id is derived from *project*, *title* and *body* unless *note_id*
        is given.  Raises :class:`IdCollision` if a note already lives at that
        id and *overwrite* is false.
        """
        new_id = build_id(project, title, body, note_id)
        path = resolve_note_path(self.root, new_id, self.suffix)
        if path.exists() and not overwrite:
            raise IdCollision(new_id)

        now = format_timestamp(self._clock())
        note = Note(
            id=new_id,
            title=title.strip(),
            tags=unique_tags(tags),
            project=project,
            area=area,
            url=url,
            uuid=self._uuid_factory(),
            source=body,
        )
        note.date_of.creation = now
        note.date_of.last_modification = now

        self._write(path, compose_note(note))
        logger.info("Created note %s", new_id)
        return self._reload(new_id)

    def edit(
        self,
        note_id: str,
        *,
        title: str | None = None,
        body: str | None = None,
        project: str | None = None,
        area: str | None = None,
        tags: Iterable[str] | None = None,
        url: str | None = None,
        new_id: str | None = None,
    ) -> Note:
        """Apply the supplied fields to an existing note.

        Fields left as ``None`` keep their current value.  The creation date is
        preserved and the modification date set to now.  When *new_id* is given
        the note moves there; the old file is removed only after the new one is
        in place.
        """
        current = self.get(note_id)
        if current is None:
            raise NotFound(note_id)

        target_id = new_id or note_id
        target = resolve_note_path(self.root, target_id, self.suffix)
        if target_id != note_id and target.exists():
            raise IdCollision(target_id)

        updated = replace(
            current,
            id=target_id,
            title=current.title if title is None else title.strip(),
            source=current.source if body is None else body,
            project=current.project if project is None else project,
            area=current.area if area is None else area,
            url=current.url if url is None else url,
            tags=list(current.tags) if tags is None else unique_tags(tags),
            uuid=current.uuid or self._uuid_factory(),
            date_of=replace(current.date_of),
        )
        updated.date_of.last_modification = format_timestamp(self._clock())

        old = resolve_note_path(self.root, note_id, self.suffix)
        self._write(target, compose_note(updated), mode_from=old)
        if target_id != note_id:
            try:
                old.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                raise IoFailure("remove", str(old), exc) from exc
            logger.info("Moved note %s to %s", note_id, target_id)
        else:
            logger.info("Edited note %s", note_id)
        return self._reload(target_id)

    def archive(self, note_id: str) -> Note:
        """Move a note into the ``archive`` area."""
        return self.edit(note_id, area=ARCHIVE_AREA)

    def delete(self, note_id: str) -> None:
        """Remove the note stored under *note_id*.

        Raises :class:`NotFound` when no such note exists.
        """
        path = resolve_note_path(self.root, note_id, self.suffix)
        try:
            path.unlink()
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise NotFound(note_id) from exc
        except OSError as exc:
            raise IoFailure("delete", str(path), exc) from exc
        logger.info("Deleted note %s", note_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reload(self, note_id: str) -> Note:
        note = self.get(note_id)
        if note is None:
            raise NotFound(note_id)
        return note

    def _write(self, path: Path, text: str, mode_from: Path | None = None) -> None:
        """Atomically replace *path* with *text*.

        The content goes to a temporary file in the same directory, which is
        then renamed over the target, so a reader sees either the old or the
        new note and never neither.  Permission bits are taken from
        *mode_from* (default: *path* itself) when that file exists.
        """
        tmp_name = None
        replaced = False
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            mode = _file_mode(mode_from or path)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, path)
            replaced = True
        except UnicodeEncodeError as exc:
            raise MalformedNote("content cannot be encoded as UTF-8", str(path)) from exc
        except OSError as exc:
            raise IoFailure("write", str(path), exc) from exc
        finally:
            if tmp_name is not None and not replaced and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Wrote %s", path)


def _file_mode(path: Path) -> int:
    """Permission bits for a note written to *path*.

    An existing file keeps its mode; a new one gets ``0o666`` minus the umask.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
