"""Builds canonical query keys and performs cached list fetches.

The composer is the only component that fills the resource cache: every
list fetch goes through ``ResourceCache.fetch`` with a loader bound to the
canonical key, so equal queries share one cache slot and one in-flight
request.
"""

import time
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from console_sync.cache import CacheEntry, QueryKey, ResourceCache, canonicalize_filters
from console_sync.constants import (
    DEFAULT_FETCH_MAX_RETRIES,
    DEFAULT_FETCH_RETRY_BASE_DELAY,
    DEFAULT_FETCH_RETRY_MAX_DELAY,
    DEFAULT_PAGE_SIZE,
    FIRST_PAGE,
    MAX_PAGE_SIZE,
)
from console_sync.enums.notification import (
    NotificationCategory,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from console_sync.enums.resource import ResourceKind
from console_sync.enums.review import ReviewStatus
from console_sync.exceptions import ApiError, InvalidQueryError
from console_sync.schemas.notification import Notification
from console_sync.schemas.page import Page
from console_sync.schemas.review import ReviewItem
from console_sync.services.api import NotificationApiClient, ReviewApiClient
from console_sync.services.api.notification_client import NOTIFICATION_FILTER_PARAMS
from console_sync.services.api.review_client import REVIEW_DEFAULT_SORT, REVIEW_FILTER_PARAMS

logger = structlog.get_logger(__name__)

# Filters each resource kind accepts
KIND_FILTERS: dict[ResourceKind, frozenset[str]] = {
    ResourceKind.NOTIFICATIONS: frozenset(NOTIFICATION_FILTER_PARAMS),
    ResourceKind.REVIEWS: frozenset(REVIEW_FILTER_PARAMS),
}

# Filter values equal to these are the server default and are dropped from keys
KIND_FILTER_DEFAULTS: dict[ResourceKind, dict[str, str]] = {
    ResourceKind.NOTIFICATIONS: {},
    ResourceKind.REVIEWS: REVIEW_DEFAULT_SORT,
}

# Enumerated filters: (kind, filter name) -> allowed values
FILTER_CHOICES: dict[tuple[ResourceKind, str], frozenset[str]] = {
    (ResourceKind.NOTIFICATIONS, "status"): frozenset(s.value for s in NotificationStatus),
    (ResourceKind.NOTIFICATIONS, "type"): frozenset(t.value for t in NotificationType),
    (ResourceKind.NOTIFICATIONS, "category"): frozenset(
        c.value for c in NotificationCategory
    ),
    (ResourceKind.NOTIFICATIONS, "priority"): frozenset(
        p.value for p in NotificationPriority
    ),
    (ResourceKind.REVIEWS, "status"): frozenset(s.value for s in ReviewStatus),
    (ResourceKind.REVIEWS, "sort_order"): frozenset({"asc", "desc"}),
}


class FetchComposer:
    """Composes query keys and fetches list pages through the resource cache."""

    def __init__(
        self,
        cache: ResourceCache,
        notification_client: NotificationApiClient,
        review_client: ReviewApiClient,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
        max_retries: int = DEFAULT_FETCH_MAX_RETRIES,
        retry_base_delay: float = DEFAULT_FETCH_RETRY_BASE_DELAY,
        retry_max_delay: float = DEFAULT_FETCH_RETRY_MAX_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the fetch composer.

        Args:
            cache: Resource cache to read through
            notification_client: Notifications API client
            review_client: Review moderation API client
            default_page_size: Page size used when the caller gives none
            max_page_size: Largest page size a caller may request
            max_retries: Retries for transient list fetch failures
            retry_base_delay: First backoff delay in seconds
            retry_max_delay: Backoff cap in seconds
            sleep: Delay function (injectable for tests)
        """
        self.cache = cache
        self.notification_client = notification_client
        self.review_client = review_client
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay
        self._sleep = sleep
        self._list_loaders: dict[ResourceKind, Callable[[QueryKey], Page]] = {
            ResourceKind.NOTIFICATIONS: notification_client.list_notifications,
            ResourceKind.REVIEWS: review_client.list_reviews,
        }

    def build_query_key(
        self,
        kind: ResourceKind | str,
        filters: Mapping[str, Any] | None = None,
        page: int = FIRST_PAGE,
        page_size: int | None = None,
    ) -> QueryKey:
        """Build the canonical key for a list query.

        Absent, blank and default-valued filters are dropped so that
        semantically equal queries produce equal keys.

        Args:
            kind: Resource kind to list
            filters: Optional filter name -> value mapping
            page: 1-based page number
            page_size: Items per page (defaults to ``default_page_size``)

        Returns:
            Canonical query key

        Raises:
            InvalidQueryError: For unknown kinds or filters, bad filter
                values, or out-of-range page numbers and sizes
        """
        try:
            kind = ResourceKind(kind)
        except ValueError as e:
            raise InvalidQueryError(f"Unknown resource kind: {kind!r}") from e

        page_size = self.default_page_size if page_size is None else page_size
        if not isinstance(page, int) or page < FIRST_PAGE:
            raise InvalidQueryError(f"Page must be a positive integer, got: {page!r}")
        if not isinstance(page_size, int) or not 1 <= page_size <= self.max_page_size:
            raise InvalidQueryError(
                f"Page size must be between 1 and {self.max_page_size}, got: {page_size!r}"
            )

        canonical = dict(canonicalize_filters(filters))
        unknown = sorted(set(canonical) - KIND_FILTERS[kind])
        if unknown:
            raise InvalidQueryError(
                f"Unsupported filters for {kind.value}: {', '.join(unknown)}"
            )

        defaults = KIND_FILTER_DEFAULTS[kind]
        for name, value in list(canonical.items()):
            choices = FILTER_CHOICES.get((kind, name))
            if choices is not None and value not in choices:
                raise InvalidQueryError(
                    f"Invalid {name} filter for {kind.value}: {value!r}"
                )
            if defaults.get(name) == value:
                del canonical[name]

        return QueryKey.build(kind, page, page_size, canonical)

    def fetch(
        self,
        kind: ResourceKind | str,
        filters: Mapping[str, Any] | None = None,
        page: int = FIRST_PAGE,
        page_size: int | None = None,
    ) -> Page:
        """Fetch a list page, serving it from the cache while fresh.

        Raises:
            InvalidQueryError: If the query is malformed
            ApiError: If the fetch fails after retries
        """
        key = self.build_query_key(kind, filters, page, page_size)
        return self.fetch_key(key).value

    def fetch_key(self, key: QueryKey) -> CacheEntry:
        """Fetch the cache entry for an already-built key."""
        return self.cache.fetch(key, lambda: self._load_with_retry(key))

    def peek(
        self,
        kind: ResourceKind | str,
        filters: Mapping[str, Any] | None = None,
        page: int = FIRST_PAGE,
        page_size: int | None = None,
    ) -> Page | None:
        """Return the last fetched page for a query without fetching.

        Stale pages are returned too, so a screen can keep showing the
        previous data while a refetch is pending.
        """
        entry = self.cache.get(self.build_query_key(kind, filters, page, page_size))
        return entry.value if entry is not None else None

    def get_notification(self, notification_id: str) -> Notification:
        """Fetch one notification directly from the server (not cached)."""
        return self.notification_client.get_notification(notification_id)

    def get_review(self, review_id: str) -> ReviewItem:
        """Fetch one review directly from the server (not cached)."""
        return self.review_client.get_review(review_id)

    def _load_with_retry(self, key: QueryKey) -> Page:
        load = self._list_loaders[key.kind]
        attempt = 0
        while True:
            try:
                return load(key)
            except ApiError as e:
                if not e.retryable or attempt >= self.max_retries:
                    raise
                delay = self._calculate_backoff(attempt)
                attempt += 1
                logger.warning(
                    "Retrying list fetch after transient failure",
                    query_key=str(key),
                    attempt=attempt,
                    max_retries=self.max_retries,
                    delay_seconds=delay,
                    error=str(e),
                )
                self._sleep(delay)

    def _calculate_backoff(self, attempt: int) -> float:
        """Calculate the delay before retry number ``attempt + 1``.

        Returns:
            ``retry_base_delay * 2**attempt`` capped at ``retry_max_delay``
        """
        return min(self.retry_base_delay * (2**attempt), self.retry_max_delay)
