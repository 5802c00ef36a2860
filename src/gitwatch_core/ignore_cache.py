"""Bounded, age-limited cache of ignore verdicts.

Entries are kept in a deque in insertion order next to a dict for lookup. A path
is only inserted after any previous entry for it has been evicted, and every
entry shares the same max age, so the front of the deque is always both the
oldest and the first to expire.
"""

import logging
import os
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gitwatch_core.models import CacheEntry
from gitwatch_core.oracle import IgnoreOracle

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Counters describing cache behaviour since creation."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0


class IgnoreCache:
    """Map path -> ignored verdict, consulting an IgnoreOracle on miss."""

    def __init__(
        self,
        oracle: IgnoreOracle,
        max_age: float = 30.0,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize cache.

        Args:
            oracle: Answers ignore queries on cache miss
            max_age: Seconds a verdict stays valid
            max_size: Maximum number of cached verdicts (0 disables caching)
            clock: Monotonic time source, injectable for tests

        Raises:
            ValueError: If max_age or max_size is negative
        """
        if max_age < 0:
            raise ValueError(f"max_age must be >= 0, got {max_age}")
        if max_size < 0:
            raise ValueError(f"max_size must be >= 0, got {max_size}")

        self.oracle = oracle
        self.max_age = max_age
        self.max_size = max_size
        self._clock = clock
        self._verdicts: dict[str, bool] = {}
        self._entries: deque[CacheEntry] = deque()
        self._lock = threading.Lock()
        self.stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return os.fspath(path) in self._verdicts

    def _evict_oldest(self) -> None:
        entry = self._entries.popleft()
        del self._verdicts[entry.path]
        self.stats.evictions += 1

    def query(self, path: str | Path) -> bool:
        """Return True if path is ignored, False if it is actionable.

        Capacity eviction runs first, then age eviction from the front; only then
        is the path looked up. On miss the oracle is consulted and its answer
        stored. Oracle errors propagate unchanged.
        """
        key = os.fspath(path)
        with self._lock:
            now = self._clock()

            while self._entries and len(self._entries) >= self.max_size:
                self._evict_oldest()

            while self._entries and self._entries[0].expired(self.max_age, now):
                self._evict_oldest()

            if key in self._verdicts:
                self.stats.hits += 1
                return self._verdicts[key]

            self.stats.misses += 1
            verdict = self.oracle.is_ignored(key)
            if self.max_size > 0:
                self._verdicts[key] = verdict
                self._entries.append(CacheEntry(path=key, verdict=verdict, inserted_at=now))
            logger.debug(f"Ignore check for {key}: {'ignored' if verdict else 'actionable'}")
            return verdict

    def clear(self) -> None:
        """Drop every cached verdict."""
        with self._lock:
            self._verdicts.clear()
            self._entries.clear()
