"""Sequential status transitions against the remote API."""

import threading
from collections.abc import Iterable

import structlog

from console_sync.cache import ResourceCache
from console_sync.enums.resource import ResourceKind
from console_sync.enums.review import ReviewView
from console_sync.enums.transition import Transition
from console_sync.exceptions import InvalidTransitionError
from console_sync.logging.context import (
    clear_operation_id,
    get_operation_id,
    new_operation_id,
    set_operation_id,
)
from console_sync.schemas.batch_result import BatchItemFailure, BatchResult
from console_sync.schemas.notification import Notification
from console_sync.services.aggregate_poller import AggregatePoller
from console_sync.services.api import NotificationApiClient, ReviewApiClient
from console_sync.services.transitions import (
    RemoteOperation,
    TransitionPlan,
    resolve_notification_transition,
    resolve_review_transition,
)

logger = structlog.get_logger(__name__)


class MutationExecutor:
    """Applies status transitions and reconciles the cache afterwards.

    Batches run one remote call per identifier, each awaited before the
    next is issued. Nothing is rolled back: a batch reports, per
    identifier, what took effect, what failed and what was never tried.
    """

    def __init__(
        self,
        cache: ResourceCache,
        notification_client: NotificationApiClient,
        review_client: ReviewApiClient,
        poller: AggregatePoller | None = None,
    ) -> None:
        """Initialize the mutation executor.

        Args:
            cache: Resource cache to invalidate after mutations
            notification_client: Notifications API client
            review_client: Review moderation API client
            poller: Unread count poller refreshed after notification changes
        """
        self.cache = cache
        self.notification_client = notification_client
        self.review_client = review_client
        self.poller = poller

    def run_batch_transition(
        self,
        kind: ResourceKind | str,
        ids: Iterable[str],
        transition: Transition | str,
        view: ReviewView | str | None = None,
        *,
        cancel_event: threading.Event | None = None,
        stop_on_failure: bool = False,
    ) -> BatchResult:
        """Apply one transition to each identifier, in order.

        Items whose last known status already matches the target succeed
        without a remote call. The affected kind is invalidated exactly
        once when the batch ends, whatever its outcome.

        Args:
            kind: Resource kind of the identifiers
            ids: Identifiers in the order the calls must be issued
            transition: Transition to apply
            view: Moderation tab the action was invoked from (reviews only)
            cancel_event: When set, no further items are issued
            stop_on_failure: Stop issuing items after the first failure

        Returns:
            Per-identifier outcome report

        Raises:
            InvalidTransitionError: If the transition does not apply to the
                kind, or a review batch has no view (nothing is sent)
        """
        try:
            kind = ResourceKind(kind)
        except ValueError as e:
            raise InvalidTransitionError(f"Unknown resource kind: {kind!r}") from e

        # Validates the transition, kind and view before anything is sent
        plan = self._resolve(kind, transition, view, None)
        transition = plan.transition
        view = ReviewView(view) if kind is ResourceKind.REVIEWS else None

        item_ids = list(dict.fromkeys(ids))
        result = BatchResult(kind=kind, transition=transition, view=view)
        if not item_ids:
            return result

        known_statuses = self._known_statuses(kind)
        outer_operation_id = get_operation_id()
        operation_id = new_operation_id("batch")
        set_operation_id(operation_id)

        logger.info(
            "Batch transition started",
            kind=kind.value,
            transition=transition.value,
            view=view.value if view else None,
            item_count=len(item_ids),
        )

        try:
            for index, item_id in enumerate(item_ids):
                if cancel_event is not None and cancel_event.is_set():
                    result.not_attempted.extend(item_ids[index:])
                    logger.warning(
                        "Batch transition cancelled",
                        remaining=len(item_ids) - index,
                    )
                    break

                try:
                    plan = self._resolve(kind, transition, view, known_statuses.get(item_id))
                    if plan.is_noop:
                        result.unchanged.append(item_id)
                        logger.debug("Item already in target state", item_id=item_id)
                    else:
                        self._apply(kind, item_id, plan)
                except Exception as e:
                    result.failed.append(BatchItemFailure.from_exception(item_id, e))
                    logger.warning(
                        "Batch item failed",
                        item_id=item_id,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    if stop_on_failure:
                        result.not_attempted.extend(item_ids[index + 1 :])
                        break
                    continue

                result.succeeded.append(item_id)
        finally:
            self.cache.invalidate_kind(kind)

            logger.info(
                "Batch transition finished",
                kind=kind.value,
                transition=transition.value,
                succeeded=len(result.succeeded),
                failed=len(result.failed),
                not_attempted=len(result.not_attempted),
            )
            if outer_operation_id is None:
                clear_operation_id()
            else:
                set_operation_id(outer_operation_id)

        if kind is ResourceKind.NOTIFICATIONS and result.succeeded:
            self._refresh_aggregate()
        return result

    def mark_as_read(self, notification_id: str) -> Notification:
        """Mark one notification as read.

        Returns:
            The notification as the server now holds it

        Raises:
            ResourceNotFoundError: If the notification does not exist
            ApiError: For other failures
        """
        try:
            notification = self.notification_client.mark_as_read(notification_id)
            if notification is None:
                notification = self.notification_client.get_notification(notification_id)
        finally:
            self.cache.invalidate_kind(ResourceKind.NOTIFICATIONS)

        self._refresh_aggregate()
        return notification

    def mark_all_as_read(self) -> None:
        """Mark every notification as read in one server operation.

        On failure the error propagates and the unread count is left as
        it was; it is refreshed only after the server confirms.

        Raises:
            ApiError: If the server call fails
        """
        try:
            self.notification_client.mark_all_as_read()
        finally:
            self.cache.invalidate_kind(ResourceKind.NOTIFICATIONS)

        self._refresh_aggregate()

    def _resolve(
        self,
        kind: ResourceKind,
        transition: Transition | str,
        view: ReviewView | str | None,
        current_status: str | None,
    ) -> TransitionPlan:
        if kind is ResourceKind.REVIEWS:
            return resolve_review_transition(transition, view, current_status)
        return resolve_notification_transition(transition, current_status)

    def _apply(self, kind: ResourceKind, item_id: str, plan: TransitionPlan) -> None:
        if kind is ResourceKind.NOTIFICATIONS:
            if plan.operation is RemoteOperation.MARK_READ:
                self.notification_client.mark_as_read(item_id)
            else:
                self.notification_client.delete_notification(item_id)
            return

        if plan.operation is RemoteOperation.DELETE:
            self.review_client.delete_review(item_id)
        else:
            self.review_client.set_status(item_id, plan.target_status)

    def _known_statuses(self, kind: ResourceKind) -> dict[str, str]:
        """Last known server status per identifier, from valid cached pages.

        Invalidated or expired pages are skipped: they may predate a mutation.
        """
        statuses: dict[str, str] = {}
        for entry in self.cache.entries_for_kind(kind):
            if self.cache.is_stale(entry):
                continue
            for item in getattr(entry.value, "items", ()):
                status = getattr(item, "status", None)
                if status is not None:
                    statuses[item.id] = str(getattr(status, "value", status))
        return statuses

    def _refresh_aggregate(self) -> None:
        if self.poller is not None:
            self.poller.force_refresh()

