"""In-memory response cache with time-to-live expiry."""

from __future__ import annotations

import logging
import time
from typing import Callable, Hashable, Iterable

from volcano_quakes.models import CacheEntry, SeismicEvent

logger = logging.getLogger(__name__)


class ResponseCache:
    """Time-bounded memoization of normalized catalog responses.

    Entries are replaced wholesale on store and are never evicted; an entry
    older than ``ttl_seconds`` is simply not returned by :meth:`get`.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry] = {}

    def get(self, key: Hashable) -> CacheEntry | None:
        """Return the entry for ``key`` if it is still fresh, else None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.age(self._clock()) >= self.ttl_seconds:
            logger.debug("Cache expired for %s", key)
            return None
        logger.debug("Cache hit for %s", key)
        return entry

    def peek(self, key: Hashable) -> CacheEntry | None:
        """Return the entry for ``key`` regardless of its age."""
        return self._entries.get(key)

    def put(self, key: Hashable, events: Iterable[SeismicEvent]) -> CacheEntry:
        entry = CacheEntry(events=tuple(events), fetched_at=self._clock())
        self._entries[key] = entry
        logger.debug("Cached %s (%d events)", key, len(entry.events))
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries
