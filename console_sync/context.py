"""Explicitly constructed owner of the synchronization core.

One ``SyncContext`` is built per console session and passed to every
screen that needs it. It owns the resource cache, the fetch composer, the
unread count poller and the mutation executor; nothing is held in module
globals.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

import structlog

from console_sync.cache import ResourceCache
from console_sync.config import SyncSettings
from console_sync.constants import FIRST_PAGE
from console_sync.enums.resource import ResourceKind
from console_sync.enums.review import ReviewView
from console_sync.enums.transition import Transition
from console_sync.schemas.batch_result import BatchResult
from console_sync.schemas.notification import Notification
from console_sync.schemas.page import Page
from console_sync.schemas.review import ReviewItem
from console_sync.services import (
    AggregatePoller,
    FetchComposer,
    MutationExecutor,
    SelectionController,
)
from console_sync.services.api import NotificationApiClient, ReviewApiClient, TokenProvider

logger = structlog.get_logger(__name__)


class SyncContext:
    """Cache, poller, composer and executor of one console session.

    Usage::

        with SyncContext(token_provider=session.token) as sync:
            unsubscribe = sync.subscribe_to_aggregate(badge.update)
            page = sync.fetch("reviews", {"status": "pending"})
            result = sync.run_batch_transition(
                "reviews", page.ids, "publish", view="pending"
            )
    """

    def __init__(
        self,
        settings: SyncSettings | None = None,
        token_provider: TokenProvider | None = None,
        *,
        notification_client: NotificationApiClient | None = None,
        review_client: ReviewApiClient | None = None,
    ) -> None:
        """Build the core for one session.

        Args:
            settings: Tunables (defaults to ``SyncSettings.from_env()``)
            token_provider: Supplies the bearer token for API calls
            notification_client: Prebuilt notifications client
            review_client: Prebuilt review client
        """
        self.settings = settings or SyncSettings.from_env()

        self.notification_client = notification_client or NotificationApiClient(
            base_url=self.settings.api_base_url,
            token_provider=token_provider,
            timeout=self.settings.request_timeout_seconds,
        )
        self.review_client = review_client or ReviewApiClient(
            base_url=self.settings.api_base_url,
            token_provider=token_provider,
            timeout=self.settings.request_timeout_seconds,
        )

        self.cache = ResourceCache(
            max_entries=self.settings.cache_max_entries,
            stale_after_seconds=self.settings.list_stale_seconds,
        )
        self.composer = FetchComposer(
            self.cache,
            self.notification_client,
            self.review_client,
            default_page_size=self.settings.default_page_size,
            max_page_size=self.settings.max_page_size,
            max_retries=self.settings.fetch_max_retries,
            retry_base_delay=self.settings.fetch_retry_base_delay_seconds,
            retry_max_delay=self.settings.fetch_retry_max_delay_seconds,
        )
        self.poller = AggregatePoller(
            self.notification_client.get_unread_count,
            interval_seconds=self.settings.unread_poll_interval_seconds,
        )
        self.executor = MutationExecutor(
            self.cache,
            self.notification_client,
            self.review_client,
            poller=self.poller,
        )

    def start(self) -> None:
        """Start background polling of the unread count."""
        self.poller.start()
        logger.info("Sync context started", api_base_url=self.settings.api_base_url)

    def stop(self) -> None:
        """Stop polling and drop every cached page."""
        self.poller.stop()
        self.cache.clear()
        logger.info("Sync context stopped")

    def __enter__(self) -> "SyncContext":
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()

    def fetch(
        self,
        kind: ResourceKind | str,
        filters: Mapping[str, Any] | None = None,
        page: int = FIRST_PAGE,
        page_size: int | None = None,
    ) -> Page:
        return self.composer.fetch(kind, filters, page, page_size)

    def subscribe_to_aggregate(self, callback: Callable[[int], None]) -> Callable[[], None]:
        """Subscribe to unread count changes; returns the unsubscribe function."""
        return self.poller.subscribe(callback)

    def unread_count(self) -> int | None:
        return self.poller.current_value()

    def run_batch_transition(
        self,
        kind: ResourceKind | str,
        ids: Iterable[str],
        transition: Transition | str,
        view: ReviewView | str | None = None,
        **options: Any,
    ) -> BatchResult:
        return self.executor.run_batch_transition(kind, ids, transition, view, **options)

    def invalidate(self, kind: ResourceKind | str) -> int:
        """Mark every cached page of ``kind`` stale."""
        return self.cache.invalidate_kind(kind)

    def mark_as_read(self, notification_id: str) -> Notification:
        return self.executor.mark_as_read(notification_id)

    def mark_all_as_read(self) -> None:
        self.executor.mark_all_as_read()

    def get_notification(self, notification_id: str) -> Notification:
        return self.composer.get_notification(notification_id)

    def get_review(self, review_id: str) -> ReviewItem:
        return self.composer.get_review(review_id)

    def selection_controller(
        self, kind: ResourceKind | str, page_size: int | None = None
    ) -> SelectionController:
        """New per-screen controller bound to this context."""
        return SelectionController(kind, self.composer, self.executor, page_size=page_size)
