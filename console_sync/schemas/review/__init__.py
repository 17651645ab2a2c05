"""Review moderation schemas."""

from console_sync.schemas.review.review_item import CustomerInfo, ProductInfo, ReviewItem
from console_sync.schemas.review.review_list_response import (
    ReviewListData,
    ReviewListResponse,
)
from console_sync.schemas.review.review_response import ReviewResponse

__all__ = [
    "CustomerInfo",
    "ProductInfo",
    "ReviewItem",
    "ReviewListData",
    "ReviewListResponse",
    "ReviewResponse",
]
