from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Iterator

import pytest

from reaction_board import EntryStore, Leaderboard, ReservedCodeRegistry


class SequenceRng:
    """Deterministic stand-in for random.SystemRandom."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values: Iterator[int] = iter(values)
        self.calls = 0

    def randrange(self, stop: int) -> int:
        self.calls += 1
        value = next(self._values)
        assert 0 <= value < stop
        return value


class StepClock:
    """Clock advancing one millisecond per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(milliseconds=1)
        return current


@pytest.fixture()
def entries_path(tmp_path):
    return tmp_path / "data" / "leaderboard.txt"


@pytest.fixture()
def reserved_path(tmp_path):
    return tmp_path / "data" / "reserved_codes.txt"


@pytest.fixture()
def entry_store(entries_path):
    return EntryStore(entries_path)


@pytest.fixture()
def registry(reserved_path):
    return ReservedCodeRegistry(reserved_path)


@pytest.fixture()
def board(entry_store, registry):
    return Leaderboard(entry_store, registry, clock=StepClock())


@pytest.fixture()
def sequence_rng():
    """Factory: ``sequence_rng([1, 2])`` yields those draws in order."""
    return SequenceRng


@pytest.fixture()
def step_clock():
    return StepClock()
