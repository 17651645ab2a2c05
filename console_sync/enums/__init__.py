"""Enumerations for the synchronization core."""

from console_sync.enums.notification import (
    NotificationCategory,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    RecipientType,
)
from console_sync.enums.resource import ResourceKind
from console_sync.enums.review import ReviewStatus, ReviewView
from console_sync.enums.transition import Transition

__all__ = [
    "NotificationCategory",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
    "RecipientType",
    "ResourceKind",
    "ReviewStatus",
    "ReviewView",
    "Transition",
]
