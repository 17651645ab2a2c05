"""Schema for the unread notification count."""

from typing import Any

from pydantic import Field, model_validator

from console_sync.schemas.base_schema_model import BaseSchemaModel


class UnreadCount(BaseSchemaModel):
    """Unread notifications for the authenticated session.

    Derived server-side; the client only ever replaces it wholesale.
    Accepts both ``{"count": n}`` and ``{"data": {"count": n}}``.
    """

    count: int = Field(..., ge=0, description="Number of unread notifications")

    @model_validator(mode="before")
    @classmethod
    def _unwrap_envelope(cls, data: Any) -> Any:
        if isinstance(data, dict) and "count" not in data:
            inner = data.get("data")
            if isinstance(inner, dict):
                return inner
        return data
