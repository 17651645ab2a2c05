"""Schema for single-notification responses."""

from console_sync.schemas.base_schema_model import BaseSchemaModel
from console_sync.schemas.notification.notification import Notification


class NotificationResponse(BaseSchemaModel):
    """Envelope returned by notification detail and mutation endpoints."""

    success: bool = True
    data: Notification | None = None
    message: str | None = None
    error: str | None = None
