"""Process-wide keyed cache of server-owned list pages.

The cache is read-through and write-invalidate: values only ever come from
a loader (a network fetch), and mutations elsewhere only mark entries stale.
Concurrent fetches of the same key share one loader call (single-flight).
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

import structlog

from console_sync.cache.entry import CacheEntry
from console_sync.cache.query_key import QueryKey
from console_sync.constants import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_LIST_STALE_SECONDS
from console_sync.enums.resource import ResourceKind

logger = structlog.get_logger(__name__)

Loader = Callable[[], Any]
KeyPredicate = Callable[[QueryKey], bool]


class ResourceCache:
    """Thread-safe keyed store with single-flight fetches.

    All shared state is guarded by one lock that is never held across a
    loader call. Entries are bounded by ``max_entries`` and evicted in
    least-recently-fetched order.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        stale_after_seconds: float = DEFAULT_LIST_STALE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the resource cache.

        Args:
            max_entries: Maximum number of cached query keys
            stale_after_seconds: How long a fetched page is served without refetching
            clock: Monotonic time source (injectable for tests)

        Raises:
            ValueError: If max_entries is not positive or the window is negative
        """
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got: {max_entries}")
        if stale_after_seconds < 0:
            raise ValueError(
                f"stale_after_seconds must not be negative, got: {stale_after_seconds}"
            )

        self.max_entries = max_entries
        self.stale_after_seconds = stale_after_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[QueryKey, CacheEntry] = OrderedDict()
        self._in_flight: dict[QueryKey, Future] = {}
        # In-flight keys invalidated after their fetch started
        self._invalidated_in_flight: set[QueryKey] = set()

        self.hits = 0
        self.misses = 0
        self.joins = 0

    def get(self, key: QueryKey) -> CacheEntry | None:
        """Look up an entry without fetching.

        Args:
            key: Query key to look up

        Returns:
            The entry (possibly stale), or None if the key was never fetched
        """
        with self._lock:
            return self._entries.get(key)

    def is_stale(self, entry: CacheEntry) -> bool:
        return entry.is_stale(self._clock(), self.stale_after_seconds)

    def fetch(self, key: QueryKey, loader: Loader) -> CacheEntry:
        """Return a fresh entry for ``key``, loading it at most once.

        A fresh entry is returned as is. If a fetch for the key is already in
        flight, this call waits for it and observes the same result or the
        same error. Otherwise ``loader`` runs on the calling thread and its
        result is stored with a new timestamp.

        Args:
            key: Query key to fetch
            loader: Zero-argument callable performing the network fetch

        Returns:
            The stored entry

        Raises:
            Exception: Whatever the loader raised, for the owner and all joiners
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not entry.is_stale(
                self._clock(), self.stale_after_seconds
            ):
                self.hits += 1
                return entry

            future = self._in_flight.get(key)
            is_owner = future is None
            if is_owner:
                future = Future()
                self._in_flight[key] = future
                self.misses += 1
            else:
                self.joins += 1

        if not is_owner:
            logger.debug("Joining in-flight fetch", query_key=str(key))
            return future.result()

        return self._load(key, loader, future)

    def _load(self, key: QueryKey, loader: Loader, future: Future) -> CacheEntry:
        logger.debug("Fetching into cache", query_key=str(key))
        try:
            value = loader()
        except BaseException as e:
            # Joiners must never wait on an abandoned fetch, so interrupts
            # are handed to them too before propagating
            with self._lock:
                self._in_flight.pop(key, None)
                self._invalidated_in_flight.discard(key)
            logger.warning("Cache fetch failed", query_key=str(key), error=str(e))
            future.set_exception(e)
            raise

        with self._lock:
            invalidated = key in self._invalidated_in_flight
            self._invalidated_in_flight.discard(key)
            entry = CacheEntry(key, value, self._clock(), invalidated=invalidated)
            self._entries[key] = entry
            self._entries.move_to_end(key)
            evicted = self._evict_overflow()
            self._in_flight.pop(key, None)

        if evicted:
            logger.debug("Evicted cache entries", count=evicted, max_entries=self.max_entries)
        future.set_result(entry)
        return entry

    def _evict_overflow(self) -> int:
        evicted = 0
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            evicted += 1
        return evicted

    def invalidate(self, predicate: KeyPredicate) -> int:
        """Mark every entry whose key matches ``predicate`` as stale.

        Values are kept, not evicted. Fetches for matching keys that are
        still in flight store their result already stale.

        Args:
            predicate: Callable selecting the keys to invalidate

        Returns:
            Number of cached entries marked stale
        """
        count = 0
        with self._lock:
            for key, entry in self._entries.items():
                if predicate(key):
                    entry.invalidated = True
                    count += 1
            for key in self._in_flight:
                if predicate(key):
                    self._invalidated_in_flight.add(key)

        logger.debug("Invalidated cache entries", count=count)
        return count

    def invalidate_kind(self, kind: ResourceKind | str) -> int:
        """Mark every entry of one resource kind as stale."""
        kind = ResourceKind(kind)
        return self.invalidate(lambda key: key.kind == kind)

    def entries_for_kind(self, kind: ResourceKind | str) -> list[CacheEntry]:
        """Snapshot the cached entries of one resource kind, newest last."""
        kind = ResourceKind(kind)
        with self._lock:
            return [entry for key, entry in self._entries.items() if key.kind == kind]

    def clear(self) -> None:
        """Drop every entry (teardown)."""
        with self._lock:
            self._entries.clear()
            self._invalidated_in_flight.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
