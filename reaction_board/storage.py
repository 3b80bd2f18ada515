"""File-backed stores for entries and reserved codes.

Both stores read and rewrite their whole resource on every call and hold no
open handle between calls. Writes go to a temporary sibling file that is
fsynced and then renamed over the target, so a crash leaves either the old or
the new contents, never a truncated file.

Neither store is safe for concurrent read-modify-write on its own; callers
serialize mutations through a ``MutationSerializer``.
"""
from __future__ import annotations

import logging
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set

from .errors import StorageIOError
from .ranking import format_entry_line, parse_entry_line, rank_entries
from .types import Entry

logger = logging.getLogger(__name__)

_NEWLINE = re.compile(r"\r?\n")


def _ensure_file(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.write_text("", encoding="utf-8")
    except OSError as exc:
        logger.error(f"Cannot create {path}: {exc}")
        raise StorageIOError(path, f"cannot create: {exc}") from exc


def _read_lines(path: Path) -> List[str]:
    """Non-blank, trimmed lines of ``path`` (created empty when missing)."""
    _ensure_file(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error(f"Cannot read {path}: {exc}")
        raise StorageIOError(path, f"cannot read: {exc}") from exc
    return [line.strip() for line in _NEWLINE.split(text) if line.strip()]


def _write_lines(path: Path, lines: List[str]) -> None:
    payload = "\n".join(lines) + ("\n" if lines else "")
    tmp_name: Optional[str] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # mkstemp uses 0600; keep the target's mode (umask default when new)
        path.touch(exist_ok=True)
        mode = stat.S_IMODE(path.stat().st_mode)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        logger.error(f"Cannot write {path}: {exc}")
        raise StorageIOError(path, f"cannot write: {exc}") from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug(f"Leftover temp file {tmp_name}")
    logger.debug(f"Wrote {len(lines)} line(s) to {path}")


class EntryStore:
    """Durable, ordered collection of leaderboard entries."""

    def __init__(
        self,
        path: Path | str,
        on_dropped: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.path = Path(path)
        self._on_dropped = on_dropped

    def list_entries(self) -> List[Entry]:
        """Load, sort and rank every well-formed record.

        Malformed records are skipped, logged and reported to ``on_dropped``.
        """
        entries: List[Entry] = []
        dropped = 0
        for line in _read_lines(self.path):
            entry = parse_entry_line(line)
            if entry is None:
                dropped += 1
                continue
            entries.append(entry)
        if dropped:
            logger.warning(f"Dropped {dropped} malformed record(s) from {self.path}")
            if self._on_dropped is not None:
                self._on_dropped(dropped)
        return rank_entries(entries)

    def persist_entries(self, entries: Iterable[Entry]) -> List[Entry]:
        """Rank ``entries`` and replace the stored set with them."""
        ranked = rank_entries(entries)
        _write_lines(self.path, [format_entry_line(entry) for entry in ranked])
        return ranked


class ReservedCodeRegistry:
    """Durable set of codes handed out but not yet attached to an entry."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def list_reserved(self) -> Set[str]:
        return set(_read_lines(self.path))

    def persist_reserved(self, codes: Iterable[str]) -> None:
        # Sorted so that the same set always produces the same bytes
        _write_lines(self.path, sorted(set(codes)))

    def release(self, code: str) -> bool:
        """Remove ``code`` if reserved. Returns whether anything changed."""
        reserved = self.list_reserved()
        if code not in reserved:
            return False
        reserved.discard(code)
        self.persist_reserved(reserved)
        logger.debug(f"Released reserved code {code}")
        return True


__all__ = ["EntryStore", "ReservedCodeRegistry"]
