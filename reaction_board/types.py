"""Type definitions for leaderboard entries and submission results."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Entry:
    """One persisted reaction-time result.

    ``rank`` is derived from sort order and recomputed on every read and
    write; a freshly built entry carries 0 until it is persisted.
    """

    rank: int
    reaction_time: float  # milliseconds
    timestamp: str  # ISO-8601 UTC, e.g. "2026-10-19T12:00:00.000000Z"
    code: str  # exactly 6 digits
    info: str = ""

    def as_dict(self) -> Dict[str, Any]:
        """Shape used by the HTTP layer when rendering JSON."""
        return {
            "rank": self.rank,
            "reactionTime": self.reaction_time,
            "time": self.timestamp,
            "code": self.code,
            "info": self.info,
        }


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a successful submission."""

    entry: Entry
    leaderboard: Tuple[Entry, ...]

    @property
    def rank(self) -> int:
        return self.entry.rank

    @property
    def code(self) -> str:
        return self.entry.code
