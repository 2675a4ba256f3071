"""Memoized match outcomes keyed by document version."""

from collections import OrderedDict

from ..constants import DEFAULT_CACHE_SIZE

CacheKey = tuple[str, float]


class ResultCache:
    """Maps (path, mtime) to whether the document matched the current predicate.

    Outcomes are only meaningful for one predicate, so the owner clears the
    cache whenever the predicate changes. A saved document gets a new mtime and
    therefore a new key; its old entry is simply never looked up again and is
    eventually evicted once the cache is full.
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_SIZE) -> None:
        self.max_entries = max(1, max_entries)
        self._entries: OrderedDict[CacheKey, bool] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> bool | None:
        """Return the cached outcome for a key, or None on a miss."""
        outcome = self._entries.get(key)
        if outcome is None:
            self.misses += 1
        else:
            self.hits += 1
            self._entries.move_to_end(key)
        return outcome

    def put(self, key: CacheKey, matched: bool) -> None:
        """Store an outcome, evicting the least recently used entry when full."""
        if key in self._entries:
            self._entries[key] = matched
            self._entries.move_to_end(key)
            return
        self._entries[key] = matched
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        """Forget every outcome (and reset the hit/miss counters)."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
