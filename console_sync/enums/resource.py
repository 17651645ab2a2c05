"""Resource kinds synchronized by the core."""

from enum import Enum


class ResourceKind(str, Enum):
    """Server-owned entity collections held in the resource cache."""

    NOTIFICATIONS = "notifications"
    REVIEWS = "reviews"
