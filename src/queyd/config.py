"""Runtime configuration.

Environment variables (all optional; direct kwargs take precedence):
    QUEYD_NOTES_DIR   – root directory of the note store (default: ``~/.queyd/notes``)
    QUEYD_LOG_LEVEL   – logging level name (default: ``WARNING``)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from queyd.paths import NOTE_SUFFIX
from queyd.repository import NoteRepository

DEFAULT_ROOT = Path("~/.queyd/notes")
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class QueydConfig:
    root: Path
    suffix: str = NOTE_SUFFIX
    log_level: str = DEFAULT_LOG_LEVEL

    def repository(self) -> NoteRepository:
        """Build a repository over :attr:`root`, creating the directory if needed."""
        root = self.root.expanduser()
        root.mkdir(parents=True, exist_ok=True)
        return NoteRepository(root, suffix=self.suffix)


def load_config(
    root: Path | str | None = None,
    *,
    log_level: str | None = None,
) -> QueydConfig:
    env_root = os.getenv("QUEYD_NOTES_DIR", "")
    return QueydConfig(
        root=Path(root or env_root or DEFAULT_ROOT).expanduser(),
        log_level=(log_level or os.getenv("QUEYD_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper(),
    )


def configure_logging(level: str | int = DEFAULT_LOG_LEVEL) -> None:
    """Send ``queyd`` log records to stderr at *level*."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("queyd").setLevel(level)
