"""Shared fixtures for the queyd test-suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from queyd.repository import NoteRepository

START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Returns *start*, then advances by *step* on every call."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(minutes=1)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def repo(tmp_path: Path, clock: FakeClock) -> NoteRepository:
    counter = iter(range(1, 1000))
    return NoteRepository(
        tmp_path,
        clock=clock,
        uuid_factory=lambda: f"uuid-{next(counter)}",
    )
