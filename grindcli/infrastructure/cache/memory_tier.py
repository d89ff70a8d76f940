"""In-memory cache tier bounded by a soft byte budget."""

import logging
from typing import Dict, Optional

from grindcli.domain.models.cache import CacheEntry
from grindcli.domain.models.common import CacheKey
from grindcli.infrastructure.cache.key_deriver import key_in_namespace

logger = logging.getLogger(__name__)

DEFAULT_MAX_MEMORY_BYTES = 100 * 1024 * 1024  # 100 MiB
# Eviction starts above max_size and stops at this fraction of it
EVICTION_TARGET_RATIO = 0.8


class MemoryTier:
    """Key -> entry mapping with a running size total.

    Inserting past `max_size` evicts the oldest entries (by timestamp) until
    the total is at most 80% of `max_size`, so the next insert does not
    immediately trigger another eviction.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_MEMORY_BYTES):
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._size = 0
        self.max_size = max_size

    @property
    def entries(self) -> int:
        return len(self._entries)

    @property
    def size(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def lookup(self, key: CacheKey) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def insert(self, key: CacheKey, entry: CacheEntry) -> None:
        previous = self._entries.pop(key, None)
        if previous is not None:
            self._size -= previous.size
        self._entries[key] = entry
        self._size += entry.size

        if self._size > self.max_size:
            self.evict()

    def remove(self, key: CacheKey) -> bool:
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        self._size -= entry.size
        return True

    def remove_namespace(self, namespace: str) -> int:
        """Removes every entry keyed under `namespace`; returns the count."""
        doomed = [key for key in self._entries if key_in_namespace(key, namespace)]
        for key in doomed:
            self.remove(key)
        return len(doomed)

    def evict(self) -> int:
        """Drops oldest-first until at or below the eviction target; returns the count."""
        target = self.max_size * EVICTION_TARGET_RATIO
        # sorted() is stable, so equal timestamps keep insertion order
        oldest_first = sorted(self._entries.items(), key=lambda item: item[1].timestamp)
        evicted = 0
        for key, entry in oldest_first:
            if self._size <= target:
                break
            self.remove(key)
            evicted += 1
            logger.debug(f"Evicted from memory cache: key={key}, size={entry.size}")
        return evicted
