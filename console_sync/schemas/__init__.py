"""Wire and value schemas for the synchronization core."""

from console_sync.schemas.base_schema_model import BaseSchemaModel
from console_sync.schemas.batch_result import BatchItemFailure, BatchResult
from console_sync.schemas.notification import (
    Notification,
    NotificationListResponse,
    NotificationResponse,
    UnreadCount,
)
from console_sync.schemas.page import Page
from console_sync.schemas.review import ReviewItem, ReviewListResponse, ReviewResponse

__all__ = [
    "BaseSchemaModel",
    "BatchItemFailure",
    "BatchResult",
    "Notification",
    "NotificationListResponse",
    "NotificationResponse",
    "Page",
    "ReviewItem",
    "ReviewListResponse",
    "ReviewResponse",
    "UnreadCount",
]
