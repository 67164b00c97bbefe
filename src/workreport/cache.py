"""Tag-based read-through cache for sheet reads."""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DAILY_REPORTS_TAG = "daily-reports"
PROJECTS_TAG = "projects"
MANAGERS_TAG = "managers"
ITEM_DATA_TAG = "item-data"
PROJECT_HISTORY_TAG = "project-history"

ALL_TAGS = [
    DAILY_REPORTS_TAG,
    PROJECTS_TAG,
    MANAGERS_TAG,
    ITEM_DATA_TAG,
    PROJECT_HISTORY_TAG,
]


@dataclass
class _Entry:
    value: Any
    expires_at: float
    tags: frozenset = field(default_factory=frozenset)


class TaggedCache:
    """In-process cache whose entries expire by TTL or by tag invalidation.

    Loaders run outside the lock, so two concurrent misses on the same key
    may both hit the backend. A loaded value is not stored if one of its
    tags was invalidated while the loader ran.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        # Bumped on every invalidation of a tag, or of everything on clear
        self._generations: dict[str, int] = {}
        self._epoch = 0

    def get(self, key: str) -> Optional[Any]:
        """Return a live cached value, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl: float, tags: tuple = ()) -> None:
        with self._lock:
            self._entries[key] = _Entry(
                value=value,
                expires_at=self._clock() + ttl,
                tags=frozenset(tags),
            )

    def get_or_load(
        self,
        key: str,
        loader: Callable[[], Any],
        ttl: float,
        tags: tuple = (),
    ) -> Any:
        """Return the cached value for key, calling loader on a miss.

        Loader exceptions propagate and nothing is cached.
        """
        value = self.get(key)
        if value is not None:
            logger.debug(f"Cache hit: {key}")
            return value

        logger.debug(f"Cache miss: {key}")
        before = self._generation(tags)
        value = loader()
        with self._lock:
            if self._generation_locked(tags) != before:
                logger.debug(f"Tags of {key} invalidated during load, not caching")
                return value
            self._entries[key] = _Entry(
                value=value,
                expires_at=self._clock() + ttl,
                tags=frozenset(tags),
            )
        return value

    def _generation_locked(self, tags) -> tuple:
        return (self._epoch, tuple(self._generations.get(tag, 0) for tag in tags))

    def _generation(self, tags) -> tuple:
        with self._lock:
            return self._generation_locked(tags)

    def invalidate_tags(self, *tags: str) -> int:
        """Drop every entry carrying any of the tags.

        Returns:
            Number of entries removed
        """
        wanted = set(tags)
        with self._lock:
            for tag in wanted:
                self._generations[tag] = self._generations.get(tag, 0) + 1
            stale = [k for k, e in self._entries.items() if e.tags & wanted]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.info(f"Invalidated {len(stale)} cache entries for tags {sorted(wanted)}")
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._epoch += 1
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
