"""Cache entry holding the last server response for a query key."""

from typing import Any

from console_sync.cache.query_key import QueryKey


class CacheEntry:
    """Last fetched value for a query key.

    An invalidated entry keeps its value so screens can keep showing it
    until the next fetch for the key completes.
    """

    def __init__(self, key: QueryKey, value: Any, fetched_at: float, invalidated: bool = False):
        """Initialize cache entry.

        Args:
            key: Query key the value was fetched for
            value: Server response (usually a Page)
            fetched_at: Clock reading when the fetch completed
            invalidated: Whether the entry starts out stale
        """
        self.key = key
        self.value = value
        self.fetched_at = fetched_at
        self.invalidated = invalidated

    def age(self, now: float) -> float:
        return max(0.0, now - self.fetched_at)

    def is_stale(self, now: float, stale_after_seconds: float) -> bool:
        """Check whether the entry must be refetched before being served.

        Args:
            now: Current clock reading
            stale_after_seconds: Freshness window

        Returns:
            True if invalidated or older than the freshness window
        """
        return self.invalidated or self.age(now) >= stale_after_seconds

    def __repr__(self) -> str:
        return (
            f"CacheEntry(key={self.key}, fetched_at={self.fetched_at:.3f}, "
            f"invalidated={self.invalidated})"
        )
