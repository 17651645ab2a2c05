"""Schema for a console notification."""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from console_sync.enums.notification import (
    NotificationCategory,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    RecipientType,
)
from console_sync.schemas.base_schema_model import BaseSchemaModel


class RelatedEntity(BaseSchemaModel):
    """Business entity a notification refers to (order, refund, ...)."""

    type: str
    id: str
    reference: str | None = None


class ActionRequired(BaseSchemaModel):
    """Follow-up the recipient is expected to take."""

    type: str
    description: str
    action_url: str | None = None


class Notification(BaseSchemaModel):
    """Schema for a notification owned by the console API.

    A notification is read exactly when it carries a ``read_at`` timestamp.
    """

    id: str = Field(..., alias="_id", description="Notification identifier")
    unique_id: str | None = Field(None, description="Human-facing reference")
    recipient_id: str = Field(..., description="ID of the receiving account")
    recipient_type: RecipientType = Field(..., description="Kind of receiving account")
    title: str = Field(..., description="Notification title")
    message: str = Field(..., description="Notification body")
    type: NotificationType = Field(..., description="Business area")
    category: NotificationCategory = Field(..., description="Display category")
    priority: NotificationPriority = Field(..., description="Priority level")
    status: NotificationStatus = Field(..., description="Read status")
    related_entity: RelatedEntity | None = None
    action_required: ActionRequired | None = None
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Free-form key/value context"
    )
    read_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _default_metadata(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("metadata") is None:
            data = {**data, "metadata": {}}
        return data

    @model_validator(mode="after")
    def _check_read_state(self) -> "Notification":
        is_read = self.status == NotificationStatus.READ
        if is_read and self.read_at is None:
            raise ValueError("read notification must carry readAt")
        if not is_read and self.read_at is not None:
            raise ValueError("unread notification must not carry readAt")
        return self

    @property
    def is_read(self) -> bool:
        return self.status == NotificationStatus.READ
