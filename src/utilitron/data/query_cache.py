"""Thread-safe memoisation of computed query text."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class QueryCache:
    """Caches query text by key, computing each key at most once.

    Concurrent callers asking for the same missing key wait for a single
    computation; callers asking for different keys never block each other.
    A computation that raises stores nothing, so the next caller retries.
    A computation still running when the cache is cleared returns its value
    without storing it.
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._values: dict[str, str] = {}

        # Map from key to the lock guarding its computation
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

        # Incremented by clear so computations started before it are not stored
        self._generation = 0

    def get_or_add(self, key: str, factory: Callable[[str], str]) -> str:
        """Return the cached value for a key, computing it if needed.

        Args:
            key: The cache key.
            factory: Called with the key to compute a missing value.

        Returns:
            The cached or newly computed value.
        """
        value = self._values.get(key)
        if value is not None:
            return value

        with self._locks_guard:
            lock = self._locks.setdefault(key, threading.Lock())

        with lock:
            value = self._values.get(key)
            if value is None:
                generation = self._generation
                value = factory(key)
                with self._locks_guard:
                    if generation != self._generation:
                        logger.debug(f"Not caching query {key}, cache was cleared")
                        return value
                    self._values[key] = value
                logger.debug(f"Cached query {key}")

        return value

    def clear(self) -> None:
        """Remove all cached values."""
        with self._locks_guard:
            self._values.clear()
            self._locks.clear()
            self._generation += 1

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)
