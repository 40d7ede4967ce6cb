"""In-memory cache of rendered listing data, invalidated per path."""

from collections import OrderedDict, defaultdict
from collections.abc import Callable, Hashable
from threading import Lock
from typing import Any

from invoicedesk.core.config import settings


class ListingCache:
    """Cache computed listing results grouped by the page path that shows them.

    Mutations call ``revalidate(path)`` so the next read of that path is
    recomputed from the database. Each path holds at most ``max_entries``
    results; the least recently used one is dropped first.
    """

    def __init__(self, max_entries: int = 256) -> None:
        self.max_entries = max_entries
        self._entries: dict[str, OrderedDict[Hashable, Any]] = defaultdict(OrderedDict)
        self._generations: dict[str, int] = defaultdict(int)
        self._lock = Lock()

    def get_or_compute(self, path: str, key: Hashable, compute: Callable[[], Any]) -> Any:
        with self._lock:
            entries = self._entries.get(path)
            if entries is not None and key in entries:
                entries.move_to_end(key)
                return entries[key]
            generation = self._generations[path]

        value = compute()

        with self._lock:
            # A revalidate during compute() means the value may predate the write
            if self._generations[path] != generation:
                return value
            entries = self._entries[path]
            entries[key] = value
            entries.move_to_end(key)
            while len(entries) > self.max_entries:
                entries.popitem(last=False)
        return value

    def revalidate(self, path: str) -> None:
        """Drop every cached entry for ``path``."""
        with self._lock:
            self._entries.pop(path, None)
            self._generations[path] += 1

    def is_cached(self, path: str, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries.get(path, {})

    def size(self, path: str) -> int:
        with self._lock:
            return len(self._entries.get(path, {}))

    def clear(self) -> None:
        """Clear all cached state (useful for testing)."""
        with self._lock:
            self._entries.clear()
            self._generations.clear()


listing_cache = ListingCache(max_entries=settings.LISTING_CACHE_MAX_ENTRIES)


def get_listing_cache() -> ListingCache:
    return listing_cache
