"""Tests for the match outcome cache."""

from cardview.search import ResultCache


def test_cache_get_miss_and_hit() -> None:
    """Test that misses return None and hits return the stored outcome."""
    cache = ResultCache()
    assert cache.get(("a.md", 1.0)) is None
    cache.put(("a.md", 1.0), False)
    assert cache.get(("a.md", 1.0)) is False
    assert cache.hits == 1
    assert cache.misses == 1


def test_cache_key_includes_mtime() -> None:
    """Test that a newer version of a document is a different entry."""
    cache = ResultCache()
    cache.put(("a.md", 1.0), True)
    assert ("a.md", 1.0) in cache
    assert ("a.md", 2.0) not in cache


def test_cache_evicts_oldest_entry() -> None:
    """Test that the cache stays within max_entries."""
    cache = ResultCache(max_entries=2)
    cache.put(("a.md", 1.0), True)
    cache.put(("b.md", 1.0), True)
    cache.put(("c.md", 1.0), False)
    assert len(cache) == 2
    assert ("a.md", 1.0) not in cache
    assert ("c.md", 1.0) in cache


def test_cache_overwrite_does_not_evict() -> None:
    """Test that re-putting an existing key keeps the size unchanged."""
    cache = ResultCache(max_entries=2)
    cache.put(("a.md", 1.0), True)
    cache.put(("b.md", 1.0), True)
    cache.put(("a.md", 1.0), False)
    assert len(cache) == 2
    assert cache.get(("a.md", 1.0)) is False


def test_cache_clear() -> None:
    """Test that clear forgets entries and counters."""
    cache = ResultCache()
    cache.put(("a.md", 1.0), True)
    cache.get(("a.md", 1.0))
    cache.clear()
    assert len(cache) == 0
    assert cache.hits == 0
    assert cache.misses == 0


def test_cache_hit_keeps_entry_from_eviction() -> None:
    """Test that reading an entry makes it the most recently used."""
    cache = ResultCache(max_entries=2)
    cache.put(("a.md", 1.0), True)
    cache.put(("b.md", 1.0), True)
    assert cache.get(("a.md", 1.0)) is True
    cache.put(("c.md", 1.0), False)
    assert ("a.md", 1.0) in cache
    assert ("b.md", 1.0) not in cache


def test_cache_overwrite_refreshes_recency() -> None:
    """Test that re-putting an entry makes it the most recently used."""
    cache = ResultCache(max_entries=2)
    cache.put(("a.md", 1.0), True)
    cache.put(("b.md", 1.0), True)
    cache.put(("a.md", 1.0), False)
    cache.put(("c.md", 1.0), False)
    assert ("a.md", 1.0) in cache
    assert ("b.md", 1.0) not in cache
