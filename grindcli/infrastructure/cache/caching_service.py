"""Concrete implementation of the two-tier Caching Service.

Manages a memory tier (bounded by a byte budget) in front of a file tier
(one JSON file per entry plus a metadata index per namespace). Entries are
scoped by namespace and expire after a TTL measured in seconds. Caching is
an optimization only: no failure in here is ever raised to the caller.
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Union

# Domain Layer Imports
from grindcli.domain.interfaces.cache import CacheService
from grindcli.domain.models.cache import (
    CacheEntry,
    CacheError,
    CacheStatusReport,
    InvalidNamespaceError,
    MemoryCacheStatus,
    NamespaceCacheStatus,
)

from grindcli.infrastructure.cache.file_tier import FileTier, is_valid_namespace
from grindcli.infrastructure.cache.key_deriver import derive_key, fingerprint, make_serializable
from grindcli.infrastructure.cache.memory_tier import DEFAULT_MAX_MEMORY_BYTES, MemoryTier

logger = logging.getLogger(__name__)

# Default Configuration Constants (overridable via settings, see main.create_dependencies)
DEFAULT_TTL_SECONDS = 24 * 60 * 60  # 24 hours
DEFAULT_CACHE_DIR_NAME = "cache"  # Resolved against the working directory
# Namespaces used by the question fetchers
DEFAULT_NAMESPACES = ("grind75", "leetcode", "companies")


class CachingServiceImpl(CacheService):
    """Two-level cache implementation (memory, file)."""

    def __init__(
        self,
        cache_dir: Optional[Union[Path, str]] = None,
        max_memory_size: int = DEFAULT_MAX_MEMORY_BYTES,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        namespaces: Iterable[str] = DEFAULT_NAMESPACES,
        clock: Callable[[], float] = time.time,
    ):
        """Initializes the caching service and provisions its directories."""
        self.memory = MemoryTier(max_size=max_memory_size)
        self.files = FileTier(cache_dir if cache_dir is not None else Path.cwd() / DEFAULT_CACHE_DIR_NAME)
        self.default_ttl = default_ttl
        self.namespaces = tuple(ns for ns in namespaces if self._check_namespace(ns))
        self._clock = clock
        self._setup_cache_dir()

        logger.info(
            f"CachingService initialized. Memory(max={max_memory_size} bytes), "
            f"File(dir={self.files.root}, namespaces={list(self.namespaces)}), default_ttl={default_ttl}s"
        )

    def _setup_cache_dir(self) -> None:
        """Creates the cache directory and the known namespace directories."""
        try:
            self.files.ensure_namespaces(self.namespaces)
        except OSError as e:
            # Writes will fail and be logged individually; reads simply miss
            logger.error(f"Failed to create cache directory {self.files.root}: {e}")

    @staticmethod
    def _check_namespace(namespace: str) -> bool:
        """Logs and rejects namespaces that would resolve outside the cache root."""
        if is_valid_namespace(namespace):
            return True
        logger.error(str(InvalidNamespaceError(namespace)))
        return False

    def known_namespaces(self) -> List[str]:
        """Configured namespaces plus any created ad hoc on disk."""
        known = list(self.namespaces)
        for namespace in self.files.discover_namespaces():
            if namespace not in known:
                known.append(namespace)
        return known

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return entry.is_expired(now)

    # --- CacheService Interface Implementation ---

    async def get(
        self,
        namespace: str,
        identifier: str,
        accept_expired: bool = False
    ) -> Optional[Any]:
        """Retrieves an item, checking memory first and promoting file hits."""
        if not self._check_namespace(namespace):
            return None
        key = derive_key(namespace, identifier)
        now = self._clock()

        # Check memory tier
        memory_entry = self.memory.lookup(key)
        if memory_entry is not None:
            if accept_expired or not self._is_expired(memory_entry, now):
                logger.debug(f"Cache hit (memory): key={key}, namespace={namespace}")
                return memory_entry.data
            self.memory.remove(key)
            logger.debug(f"Memory cache entry expired: key={key}")

        # Check file tier
        loaded = self.files.read(namespace, key)
        if loaded is not None:
            file_entry, raw_size = loaded
            if accept_expired or not self._is_expired(file_entry, now):
                # Promote to memory tier, sized by what was read from disk
                file_entry.size = raw_size
                self.memory.insert(key, file_entry)
                self.files.touch(namespace, key, now)
                logger.debug(
                    f"Cache hit (file): key={key}, namespace={namespace}, "
                    f"age={now - file_entry.timestamp:.1f}s"
                )
                return file_entry.data

            logger.debug(f"Cache file expired, removing: key={key}, namespace={namespace}")
            self.files.delete(namespace, key)
            return None

        logger.debug(f"Cache miss: key={key}, namespace={namespace}")
        return None

    async def set(
        self,
        namespace: str,
        identifier: str,
        data: Any,
        ttl: Optional[float] = None
    ) -> None:
        """Stores an item in both tiers. Errors are logged, never raised."""
        if not self._check_namespace(namespace):
            return
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            logger.error(f"Refusing to cache {namespace}/{identifier} with non-positive ttl={ttl}")
            return

        key = derive_key(namespace, identifier)
        try:
            payload = make_serializable(data)
            entry = CacheEntry(key=key, data=payload, timestamp=self._clock(), ttl=ttl)
            self.files.write(namespace, entry, fingerprint(payload))
        except (CacheError, RecursionError) as e:
            logger.error(f"Failed to store cache entry: key={key}, namespace={namespace}: {e}")
            # A later get reloads whatever the file tier still holds for this key
            self.memory.remove(key)
            return

        self.memory.insert(key, entry)
        logger.debug(f"Cache stored: key={key}, namespace={namespace}, size={entry.size}")

    async def invalidate(self, namespace: str, identifier: Optional[str] = None) -> None:
        """Removes one entry from both tiers, or wipes a whole namespace."""
        if not self._check_namespace(namespace):
            return
        if identifier is not None:
            key = derive_key(namespace, identifier)
            self.memory.remove(key)
            self.files.delete(namespace, key)
            logger.info(f"Cache invalidated: key={key}, namespace={namespace}")
            return

        self.files.delete_namespace(namespace)
        purged = self.memory.remove_namespace(namespace)
        logger.info(f"Cache namespace cleared: {namespace} ({purged} memory entries purged)")

    async def clear(self) -> None:
        """Clears every known namespace."""
        for namespace in self.known_namespaces():
            await self.invalidate(namespace)

    async def cleanup(self) -> int:
        """Deletes expired entries in every known namespace; returns how many."""
        now = self._clock()
        total_removed = 0

        for namespace in self.known_namespaces():
            records = self.files.load_metadata(namespace)
            valid = {}
            removed = 0
            for key, record in records.items():
                if record.is_expired(now):
                    self.files.remove_file(namespace, key)
                    removed += 1
                else:
                    valid[key] = record

            if removed:
                try:
                    self.files.save_metadata(namespace, valid)
                except CacheError as e:
                    logger.error(f"Cache cleanup could not rewrite metadata for '{namespace}': {e}")
                logger.info(f"Cache cleanup completed: namespace={namespace}, removed={removed}")
            total_removed += removed

        return total_removed

    def get_cache_status(self, namespace: Optional[str] = None) -> CacheStatusReport:
        """Reports memory occupancy and file totals from the metadata documents."""
        now = self._clock()
        report = CacheStatusReport(
            memory_cache=MemoryCacheStatus(
                entries=self.memory.entries,
                size=self.memory.size,
                max_size=self.memory.max_size,
            )
        )

        if namespace and not self._check_namespace(namespace):
            raise InvalidNamespaceError(namespace)
        scope = [namespace] if namespace else self.known_namespaces()
        for ns in scope:
            records = list(self.files.load_metadata(ns).values())
            if not records:
                report.file_cache[ns] = NamespaceCacheStatus()
                continue
            timestamps = [r.timestamp for r in records]
            report.file_cache[ns] = NamespaceCacheStatus(
                total_entries=len(records),
                valid_entries=sum(1 for r in records if not r.is_expired(now)),
                total_size=sum(r.size for r in records),
                oldest_entry=min(timestamps),
                newest_entry=max(timestamps),
            )

        return report
