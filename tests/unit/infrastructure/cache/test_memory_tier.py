import pytest

from grindcli.domain.models.cache import CacheEntry
from grindcli.domain.models.common import CacheKey
from grindcli.infrastructure.cache.key_deriver import derive_key
from grindcli.infrastructure.cache.memory_tier import MemoryTier

def make_entry(key: str, size: int, timestamp: float = 0.0) -> CacheEntry:
    return CacheEntry(key=CacheKey(key), data={"k": key}, timestamp=timestamp, ttl=60, size=size)

def test_insert_and_lookup_track_size():
    tier = MemoryTier(max_size=1000)
    tier.insert(CacheKey("ns_a"), make_entry("ns_a", 100))
    tier.insert(CacheKey("ns_b"), make_entry("ns_b", 200))

    assert tier.entries == 2
    assert tier.size == 300
    assert tier.lookup(CacheKey("ns_a")).size == 100
    assert tier.lookup(CacheKey("ns_missing")) is None

def test_overwrite_replaces_previous_size():
    tier = MemoryTier(max_size=1000)
    tier.insert(CacheKey("ns_a"), make_entry("ns_a", 100))
    tier.insert(CacheKey("ns_a"), make_entry("ns_a", 40))

    assert tier.entries == 1
    assert tier.size == 40

def test_remove_adjusts_size():
    tier = MemoryTier(max_size=1000)
    tier.insert(CacheKey("ns_a"), make_entry("ns_a", 100))

    assert tier.remove(CacheKey("ns_a")) is True
    assert tier.remove(CacheKey("ns_a")) is False
    assert tier.size == 0
    assert tier.entries == 0

def test_no_eviction_at_exact_capacity():
    tier = MemoryTier(max_size=300)
    for i in range(3):
        tier.insert(CacheKey(f"ns_{i}"), make_entry(f"ns_{i}", 100, timestamp=i))

    assert tier.entries == 3
    assert tier.size == 300

def test_eviction_removes_oldest_until_eighty_percent():
    tier = MemoryTier(max_size=1000)
    for i in range(10):
        tier.insert(CacheKey(f"ns_{i}"), make_entry(f"ns_{i}", 100, timestamp=i))

    # 1100 bytes > 1000 triggers eviction down to <= 800
    tier.insert(CacheKey("ns_10"), make_entry("ns_10", 100, timestamp=10))

    assert tier.size == 800
    assert tier.entries == 8
    for evicted in ("ns_0", "ns_1", "ns_2"):
        assert CacheKey(evicted) not in tier
    assert CacheKey("ns_10") in tier

def test_eviction_orders_by_timestamp_not_insertion():
    tier = MemoryTier(max_size=250)
    tier.insert(CacheKey("ns_new"), make_entry("ns_new", 100, timestamp=50))
    tier.insert(CacheKey("ns_old"), make_entry("ns_old", 100, timestamp=10))
    tier.insert(CacheKey("ns_mid"), make_entry("ns_mid", 100, timestamp=30))

    assert CacheKey("ns_old") not in tier
    assert CacheKey("ns_new") in tier
    assert CacheKey("ns_mid") in tier
    assert tier.size == 200

def test_oversized_entry_empties_tier():
    tier = MemoryTier(max_size=100)
    tier.insert(CacheKey("ns_small"), make_entry("ns_small", 50, timestamp=0))
    tier.insert(CacheKey("ns_huge"), make_entry("ns_huge", 500, timestamp=1))

    assert tier.entries == 0
    assert tier.size == 0

@pytest.mark.parametrize("sizes", [
    [400, 400, 400, 400],
    [999, 1, 1000, 250, 250, 250],
    [10] * 150,
])
def test_running_total_never_exceeds_capacity(sizes):
    tier = MemoryTier(max_size=1000)
    for i, size in enumerate(sizes):
        tier.insert(CacheKey(f"ns_{i}"), make_entry(f"ns_{i}", size, timestamp=i))
        assert tier.size <= tier.max_size
        assert tier.size == sum(tier.lookup(CacheKey(f"ns_{j}")).size
                                for j in range(i + 1) if CacheKey(f"ns_{j}") in tier)

def test_remove_namespace_only_touches_that_namespace():
    tier = MemoryTier(max_size=1000)
    keys = [derive_key(ns, ident) for ns, ident in
            (("demo", "a"), ("demo", "b"), ("demo2", "a"), ("demo_b", "a"))]
    for key in keys:
        tier.insert(key, make_entry(key, 10))

    assert tier.remove_namespace("demo") == 2
    assert keys[2] in tier
    assert keys[3] in tier
    assert tier.size == 20
