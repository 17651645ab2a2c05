"""Schema for a moderated customer review."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from console_sync.enums.review import REVIEW_STATUS_ALIASES, ReviewStatus
from console_sync.schemas.base_schema_model import BaseSchemaModel


class CustomerInfo(BaseSchemaModel):
    """Author of a review."""

    id: str = Field(..., alias="_id")
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class ProductInfo(BaseSchemaModel):
    """Product a review was written for."""

    id: str = Field(..., alias="_id")
    name: str | None = None
    images: list[str] = Field(default_factory=list)


class ReviewItem(BaseSchemaModel):
    """Schema for a customer review under moderation."""

    id: str = Field(..., alias="_id", description="Review identifier")
    unique_id: str | None = None
    customer: CustomerInfo | None = Field(None, description="Author reference")
    product: ProductInfo | None = None
    order: str | None = None
    rating: int = Field(..., ge=1, le=5)
    title: str = ""
    review: str = Field("", description="Free text of the review")
    images: list[str] = Field(default_factory=list)
    status: ReviewStatus
    is_verified_purchase: bool = False
    helpful_votes: int = Field(0, ge=0)
    report_count: int = Field(0, ge=0)
    created_at: datetime
    updated_at: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return REVIEW_STATUS_ALIASES.get(value.strip().lower(), value.strip().lower())
        return value

    @property
    def author_name(self) -> str:
        if self.customer and self.customer.name:
            return self.customer.name
        return "Unknown Customer"
