"""File-backed cache of the 1Password item list.

Holds only titles, vault names and ids. One slot per user; the file is replaced
wholesale on every write and never deleted when stale.
"""

import contextlib
import dataclasses
import logging
import os
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from tmux_op.items import ItemList, parse_items

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Raw cached payload and the time it was written."""

    payload: bytes
    written_at: float

    def age(self, now: float) -> float:
        """Seconds elapsed since the entry was written."""
        return now - self.written_at


class MetadataCache:
    """Item list cache with an age-based freshness policy and atomic replacement."""

    def __init__(self, path: Path, max_age: int, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the cache.

        Args:
            path: Cache file location.
            max_age: Maximum age in seconds; ``<= 0`` means entries never expire.
            clock: Source of the current time (seconds since the epoch).

        """
        self._path = path
        self._max_age = max_age
        self._clock = clock

    @property
    def max_age(self) -> int:
        """Maximum entry age in seconds."""
        return self._max_age

    def is_fresh(self, entry: CacheEntry) -> bool:
        """Check the entry against the freshness policy."""
        return self._max_age <= 0 or entry.age(self._clock()) < self._max_age

    def load(self) -> CacheEntry | None:
        """Return the cached entry, or None if missing, unreadable or stale."""
        try:
            written_at = self._path.stat().st_mtime
            payload = self._path.read_bytes()
        except OSError:
            return None
        entry = CacheEntry(payload=payload, written_at=written_at)
        if not self.is_fresh(entry):
            logger.debug("Cache is stale (age %.0fs)", entry.age(self._clock()))
            return None
        return entry

    def read(self) -> ItemList | None:
        """Return the cached item list, or None on any miss. A corrupt payload is a miss."""
        entry = self.load()
        if entry is None:
            return None
        try:
            items = parse_items(entry.payload)
        except ValueError:
            logger.warning("Ignoring unparsable cache file %s", self._path)
            return None
        return dataclasses.replace(items, cached_age=entry.age(self._clock()))

    def write(self, payload: bytes) -> bool:
        """Atomically replace the cache file with payload. Return True on success.

        A symlink at the target path is removed first; the data lands in an owner-only
        temporary file in the same directory and is renamed over the target. Failures
        are logged and swallowed; the temporary file never outlives a failed write.
        """
        tmp: Path | None = None
        try:
            if self._path.is_symlink():
                self._path.unlink()
            # mkstemp creates the file with 0o600 regardless of umask
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
            tmp = Path(tmp_name)
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            # os.replace swaps the directory entry, so a symlink recreated in the meantime is replaced, not followed
            tmp.replace(self._path)
        except OSError:
            logger.exception("Failed to write cache file %s", self._path)
            if tmp is not None:
                with contextlib.suppress(OSError):
                    tmp.unlink()
            return False
        return True
