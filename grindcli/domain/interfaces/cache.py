"""Interface for the practice-question cache.

Defines the contract the question fetchers rely on for storing, retrieving
and managing cached data. Entries are scoped by namespace and expire after
a TTL; implementations decide how many storage tiers back them.
"""

import abc
from typing import Any, Optional

# Import relevant domain models
from grindcli.domain.models.cache import CacheStatusReport

class CacheService(abc.ABC):
    """Abstract Base Class for caching operations."""

    @abc.abstractmethod
    async def get(
        self,
        namespace: str,
        identifier: str,
        accept_expired: bool = False
    ) -> Optional[Any]:
        """Retrieves an item from the cache asynchronously.

        Args:
            namespace: The cache partition to look in.
            identifier: The caller's identifier for the item.
            accept_expired: Return an entry even if its TTL has passed.

        Returns:
            The cached item if found (and not expired, unless accepted), otherwise None.
        """
        pass

    @abc.abstractmethod
    async def set(
        self,
        namespace: str,
        identifier: str,
        data: Any,
        ttl: Optional[float] = None
    ) -> None:
        """Stores an item asynchronously. Never raises.

        Args:
            namespace: The cache partition to store in.
            identifier: The caller's identifier for the item.
            data: A JSON-representable value.
            ttl: Time-to-live in seconds (uses the configured default if None).
        """
        pass

    @abc.abstractmethod
    async def invalidate(self, namespace: str, identifier: Optional[str] = None) -> None:
        """Removes one entry, or the whole namespace when no identifier is given.

        Args:
            namespace: The cache partition.
            identifier: The item to remove; None wipes the namespace.
        """
        pass

    @abc.abstractmethod
    async def cleanup(self) -> int:
        """Deletes expired entries from every known namespace.

        Returns:
            The number of entries removed.
        """
        pass

    @abc.abstractmethod
    def get_cache_status(self, namespace: Optional[str] = None) -> CacheStatusReport:
        """Reports memory occupancy and per-namespace file totals.

        Args:
            namespace: Limit the file report to this namespace (all known if None).
        """
        pass

    @abc.abstractmethod
    async def clear(self) -> None:
        """Clears every known namespace."""
        pass
