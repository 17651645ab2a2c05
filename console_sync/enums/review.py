"""Review moderation enumerations."""

from enum import Enum


class ReviewStatus(str, Enum):
    """Moderation status of a customer review.

    The remote API spells PUBLISHED as "approved"; see REVIEW_STATUS_WIRE_VALUES.
    """

    PENDING = "pending"
    PUBLISHED = "published"
    DELETED = "deleted"


# Status values as written to the set-status endpoint
REVIEW_STATUS_WIRE_VALUES: dict[ReviewStatus, str] = {
    ReviewStatus.PENDING: "pending",
    ReviewStatus.PUBLISHED: "approved",
}

# Status values as read back from the API
REVIEW_STATUS_ALIASES: dict[str, ReviewStatus] = {
    "approved": ReviewStatus.PUBLISHED,
}


class ReviewView(str, Enum):
    """Moderation screen tab the user is acting from.

    The tab changes what the "delete" action means, so it is passed
    explicitly to every review transition.
    """

    ALL = "all"
    PENDING = "pending"
    PUBLISHED = "published"
    DELETED = "deleted"

    @property
    def status_filter(self) -> str | None:
        """Status filter applied to the list fetch for this tab."""
        if self is ReviewView.ALL:
            return None
        return self.value
