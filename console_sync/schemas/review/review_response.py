"""Schema for single-review responses."""

from typing import Any

from pydantic import model_validator

from console_sync.schemas.base_schema_model import BaseSchemaModel
from console_sync.schemas.review.review_item import ReviewItem


class ReviewResponse(BaseSchemaModel):
    """Envelope returned by review detail and status update endpoints.

    The update endpoint sometimes answers with the bare review instead of
    ``{"data": {"review": ...}}``; both are accepted.
    """

    success: bool = True
    message: str | None = None
    review: ReviewItem

    @model_validator(mode="before")
    @classmethod
    def _unwrap_envelope(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        inner = data.get("data")
        if isinstance(inner, dict) and isinstance(inner.get("review"), dict):
            return {
                "success": data.get("success", True),
                "message": data.get("message"),
                "review": inner["review"],
            }
        if "review" in data and isinstance(data["review"], dict):
            return data
        return {"success": True, "review": data}
