"""Notification schemas."""

from console_sync.schemas.notification.notification import (
    ActionRequired,
    Notification,
    RelatedEntity,
)
from console_sync.schemas.notification.notification_list_response import (
    NotificationListData,
    NotificationListResponse,
)
from console_sync.schemas.notification.notification_response import (
    NotificationResponse,
)
from console_sync.schemas.notification.unread_count import UnreadCount

__all__ = [
    "ActionRequired",
    "Notification",
    "NotificationListData",
    "NotificationListResponse",
    "NotificationResponse",
    "RelatedEntity",
    "UnreadCount",
]
