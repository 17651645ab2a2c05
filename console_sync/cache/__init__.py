"""Keyed resource cache with single-flight fetches."""

from console_sync.cache.entry import CacheEntry
from console_sync.cache.query_key import QueryKey, canonicalize_filters
from console_sync.cache.resource_cache import ResourceCache

__all__ = ["CacheEntry", "QueryKey", "ResourceCache", "canonicalize_filters"]
