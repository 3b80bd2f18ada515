"""Ordering, ranking and the line format of the entries resource.

Single source of truth for leaderboard order:
- Comparator: lower reaction time first; then earlier timestamp.
- Rank is the 1-based position in that order. It is never trusted from disk.

Line format: ``rank,reactionTime,timestamp,code,info``. ``info`` is the tail
after the fourth comma and may be empty.
"""
from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, List, Tuple

from .types import Entry

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _timestamp_sort_key(timestamp: str) -> str:
    # Millisecond and microsecond stamps do not compare correctly as text.
    try:
        parsed = datetime.fromisoformat(timestamp)
    except ValueError:
        return timestamp
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return format_timestamp(parsed)


def _entry_sort_key(entry: Entry) -> Tuple[float, str]:
    return (entry.reaction_time, _timestamp_sort_key(entry.timestamp))


def rank_entries(entries: Iterable[Entry]) -> List[Entry]:
    """Sort by (reaction time, timestamp) and reassign ranks 1..N."""
    ordered = sorted(entries, key=_entry_sort_key)
    return [replace(entry, rank=i + 1) for i, entry in enumerate(ordered)]


def _coerce_number(value: str) -> float | None:
    # float() takes digit separators, plain numeric text does not
    if "_" in value:
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def parse_entry_line(line: str) -> Entry | None:
    """Parse one stored line; None for a malformed record."""
    rank_str, _, rest = line.partition(",")
    rt_str, _, rest = rest.partition(",")
    timestamp, _, rest = rest.partition(",")
    code, _, info = rest.partition(",")
    if not rank_str or not rt_str or not timestamp or not code:
        return None
    rank = _coerce_number(rank_str)
    reaction_time = _coerce_number(rt_str)
    if rank is None or reaction_time is None:
        return None
    return Entry(
        rank=int(rank),
        reaction_time=reaction_time,
        timestamp=timestamp,
        code=code,
        info=info,
    )


def format_entry_line(entry: Entry) -> str:
    return ",".join(
        [
            str(entry.rank),
            _format_number(entry.reaction_time),
            entry.timestamp,
            entry.code,
            entry.info,
        ]
    )


__all__ = [
    "TIMESTAMP_FORMAT",
    "format_entry_line",
    "format_timestamp",
    "parse_entry_line",
    "rank_entries",
]
