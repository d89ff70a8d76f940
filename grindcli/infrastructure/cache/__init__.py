"""Caching Service Implementation.

Provides the concrete implementation of the CacheService interface:
a memory tier bounded by a byte budget in front of a JSON file tier with a
metadata index per namespace.
Bounded Context: Cache Management
"""

from grindcli.infrastructure.cache.caching_service import CachingServiceImpl

__all__ = ["CachingServiceImpl"]
