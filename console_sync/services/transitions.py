"""Status transition tables for notifications and moderated reviews.

A transition resolves to a ``TransitionPlan`` naming the one remote
operation to issue for an item, or marking the item as already in its
target state. Forbidden transitions raise ``InvalidTransitionError`` before
anything is sent.

Review "delete" depends on the moderation tab it is invoked from: from the
deleted tab it removes a pending review permanently, from every other tab
it only returns a published review to pending.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from console_sync.enums.notification import NotificationStatus
from console_sync.enums.review import REVIEW_STATUS_ALIASES, ReviewStatus, ReviewView
from console_sync.enums.transition import Transition
from console_sync.exceptions import InvalidTransitionError


class RemoteOperation(str, Enum):
    """Remote call issued for one item of a transition."""

    SET_STATUS = "set_status"
    DELETE = "delete"
    MARK_READ = "mark_read"


class TransitionPlan(BaseModel):
    """Resolved remote operation for one item."""

    model_config = ConfigDict(frozen=True)

    transition: Transition
    operation: RemoteOperation
    target_status: str | None = None
    is_noop: bool = False


# transition -> (target status, statuses it may leave)
_REVIEW_STATUS_MOVES: dict[Transition, tuple[ReviewStatus, frozenset[ReviewStatus]]] = {
    Transition.PUBLISH: (ReviewStatus.PUBLISHED, frozenset({ReviewStatus.PENDING})),
    Transition.MOVE_TO_PENDING: (ReviewStatus.PENDING, frozenset({ReviewStatus.PUBLISHED})),
}

# Statuses a review may be permanently removed from (deleted tab only)
_REVIEW_REMOVABLE = frozenset({ReviewStatus.PENDING, ReviewStatus.DELETED})


def _invalid(
    message: str,
    transition: Transition,
    current_status: str | None = None,
    view: ReviewView | None = None,
) -> InvalidTransitionError:
    return InvalidTransitionError(
        message,
        transition=transition.value,
        current_status=current_status,
        view=view.value if view is not None else None,
    )


def _coerce_transition(transition: Transition | str) -> Transition:
    try:
        return Transition(transition)
    except ValueError as e:
        raise InvalidTransitionError(
            f"Unknown transition: {transition!r}", transition=str(transition)
        ) from e


def _known_review_status(value: ReviewStatus | str | None) -> ReviewStatus | None:
    """Map a server status to ReviewStatus; unrecognized values count as unknown."""
    if value is None:
        return None
    text = str(getattr(value, "value", value)).strip().lower()
    if text in REVIEW_STATUS_ALIASES:
        return REVIEW_STATUS_ALIASES[text]
    try:
        return ReviewStatus(text)
    except ValueError:
        return None


def _known_notification_status(
    value: NotificationStatus | str | None,
) -> NotificationStatus | None:
    if value is None:
        return None
    try:
        return NotificationStatus(value)
    except ValueError:
        return None


def resolve_review_transition(
    transition: Transition | str,
    view: ReviewView | str | None,
    current_status: ReviewStatus | str | None = None,
) -> TransitionPlan:
    """Resolve a review transition invoked from a moderation tab.

    Args:
        transition: Requested transition
        view: Moderation tab the action was invoked from (required)
        current_status: Last known server status, or None when unknown

    Returns:
        Plan for the remote call. An unknown current status always yields
        a plan that is sent to the server.

    Raises:
        InvalidTransitionError: If the view is missing or the transition
            is not allowed from the current status
    """
    transition = _coerce_transition(transition)
    if view is None:
        raise _invalid(
            "Review transitions require the moderation view they are invoked from",
            transition,
        )
    try:
        view = ReviewView(view)
    except ValueError as e:
        raise InvalidTransitionError(
            f"Unknown review view: {view!r}", transition=transition.value
        ) from e
    status = _known_review_status(current_status)

    if transition is Transition.DELETE:
        if view is ReviewView.DELETED:
            if status is not None and status not in _REVIEW_REMOVABLE:
                raise _invalid(
                    f"Cannot permanently delete a {status.value} review",
                    transition,
                    status.value,
                    view,
                )
            return TransitionPlan(
                transition=transition,
                operation=RemoteOperation.DELETE,
                target_status=ReviewStatus.DELETED.value,
            )
        # Soft delete: back to the moderation queue
        target = ReviewStatus.PENDING
        allowed_from = frozenset({ReviewStatus.PUBLISHED})
    elif transition in _REVIEW_STATUS_MOVES:
        target, allowed_from = _REVIEW_STATUS_MOVES[transition]
    else:
        raise _invalid(
            f"Transition {transition.value} does not apply to reviews",
            transition,
            status.value if status else None,
            view,
        )

    if status is not None and status is not target and status not in allowed_from:
        raise _invalid(
            f"Cannot {transition.value} a {status.value} review",
            transition,
            status.value,
            view,
        )

    return TransitionPlan(
        transition=transition,
        operation=RemoteOperation.SET_STATUS,
        target_status=target.value,
        is_noop=status is target,
    )


def resolve_notification_transition(
    transition: Transition | str,
    current_status: NotificationStatus | str | None = None,
) -> TransitionPlan:
    """Resolve a notification transition.

    Only ``mark_read`` (unread to read, never back) and ``delete`` apply.

    Raises:
        InvalidTransitionError: For review-only transitions
    """
    transition = _coerce_transition(transition)
    status = _known_notification_status(current_status)

    if transition is Transition.MARK_READ:
        return TransitionPlan(
            transition=transition,
            operation=RemoteOperation.MARK_READ,
            target_status=NotificationStatus.READ.value,
            is_noop=status is NotificationStatus.READ,
        )
    if transition is Transition.DELETE:
        return TransitionPlan(transition=transition, operation=RemoteOperation.DELETE)

    raise _invalid(
        f"Transition {transition.value} does not apply to notifications",
        transition,
        status.value if status else None,
    )
