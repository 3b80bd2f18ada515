"""Error taxonomy raised by the leaderboard core."""
from __future__ import annotations

from pathlib import Path


class LeaderboardError(RuntimeError):
    """Base class for all leaderboard failures."""


class InvalidReactionTime(LeaderboardError, ValueError):
    """Reaction time is non-numeric or outside (0, 3000] ms."""


class CodeAlreadyUsed(LeaderboardError):
    """An explicit code collides with an existing entry."""

    def __init__(self, code: str) -> None:
        super().__init__(f"code {code} is already used")
        self.code = code


class AllocationExhausted(LeaderboardError):
    """No free code was found within the attempt budget."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"failed to allocate a code after {attempts} attempts")
        self.attempts = attempts


class StorageIOError(LeaderboardError):
    """The backing file could not be read or written."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


__all__ = [
    "LeaderboardError",
    "InvalidReactionTime",
    "CodeAlreadyUsed",
    "AllocationExhausted",
    "StorageIOError",
]
