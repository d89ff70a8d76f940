"""Domain models for the practice-question cache.

Entries and metadata records mirror the JSON documents persisted under the
cache root; the status dataclasses are what `get_cache_status` reports.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from grindcli.domain.models.common import CacheKey, Fingerprint

# Marker substituted for a container that refers back to itself.
CIRCULAR_MARKER = "[Circular]"


def is_expired(timestamp: float, ttl: float, now: float) -> bool:
    """True when more than `ttl` seconds have passed since `timestamp`.

    Both tiers, the cleanup sweep and the status report use this one rule.
    """
    return now - timestamp > ttl


class CacheError(Exception):
    """Base class for errors raised inside the cache layer."""


class CacheWriteError(CacheError):
    """Raised by the file tier when an entry or metadata document cannot be written."""

    def __init__(self, namespace: str, key: str, reason: Any):
        self.namespace = namespace
        self.key = key
        self.reason = reason
        super().__init__(f"Failed to write cache entry {namespace}/{key}: {reason}")


class InvalidNamespaceError(CacheError):
    """Raised when a namespace is not a plain directory name under the cache root."""

    def __init__(self, namespace: str):
        self.namespace = namespace
        super().__init__(f"Invalid cache namespace {namespace!r}: must be a single directory name")


@dataclass
class CacheEntry:
    """One cached value plus its expiration data."""
    key: CacheKey
    data: Any
    timestamp: float
    ttl: float
    size: int = 0  # Serialized byte length, authoritative for eviction

    def is_expired(self, now: float) -> bool:
        return is_expired(self.timestamp, self.ttl, now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.data,
            "timestamp": self.timestamp,
            "ttl": self.ttl,
            "size": self.size,
            "key": self.key,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CacheEntry":
        """Builds an entry from a parsed entry file.

        Raises:
            KeyError, TypeError, ValueError: If the document is malformed.
        """
        return cls(
            key=CacheKey(str(raw["key"])),
            data=raw["data"],
            timestamp=float(raw["timestamp"]),
            ttl=float(raw["ttl"]),
            size=int(raw.get("size", 0)),
        )


@dataclass
class CacheMetadata:
    """Index record kept for every entry in a namespace's metadata.json."""
    key: CacheKey
    timestamp: float
    ttl: float
    size: int
    fingerprint: Fingerprint
    accessed: float

    def is_expired(self, now: float) -> bool:
        return is_expired(self.timestamp, self.ttl, now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CacheMetadata":
        return cls(
            key=CacheKey(str(raw["key"])),
            timestamp=float(raw["timestamp"]),
            ttl=float(raw["ttl"]),
            size=int(raw["size"]),
            fingerprint=Fingerprint(str(raw.get("fingerprint", ""))),
            accessed=float(raw.get("accessed", raw["timestamp"])),
        )


# --- Status Report ---

@dataclass
class MemoryCacheStatus:
    """Occupancy of the in-memory tier."""
    entries: int
    size: int
    max_size: int

    @property
    def usage_percent(self) -> float:
        if self.max_size <= 0:
            return 0.0
        return self.size / self.max_size * 100


@dataclass
class NamespaceCacheStatus:
    """File tier totals for one namespace, computed from its metadata document."""
    total_entries: int = 0
    valid_entries: int = 0
    total_size: int = 0
    oldest_entry: Optional[float] = None
    newest_entry: Optional[float] = None


@dataclass
class CacheStatusReport:
    """Aggregate report returned by `CacheService.get_cache_status`."""
    memory_cache: MemoryCacheStatus
    file_cache: Dict[str, NamespaceCacheStatus] = field(default_factory=dict)
