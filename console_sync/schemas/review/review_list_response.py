"""Schema for the paginated review list envelope."""

from pydantic import Field

from console_sync.schemas.base_schema_model import BaseSchemaModel
from console_sync.schemas.page import Page, count_pages
from console_sync.schemas.review.review_item import ReviewItem


class ReviewListData(BaseSchemaModel):
    """``data`` member of the review list envelope."""

    reviews: list[ReviewItem] = Field(default_factory=list)
    total: int | None = Field(None, ge=0)
    page: int | None = Field(None, ge=1)
    limit: int | None = Field(None, ge=1)
    total_pages: int | None = Field(None, ge=0)


class ReviewListResponse(BaseSchemaModel):
    """Returned by GET /customer-reviews."""

    success: bool = True
    data: ReviewListData = Field(default_factory=ReviewListData)

    def to_page(self, requested_page: int, requested_page_size: int) -> Page[ReviewItem]:
        """Normalize the envelope into a cacheable page.

        The review API reports ``limit`` inconsistently, so the requested
        page size is authoritative; other missing members fall back to the
        request values or to the item count.
        """
        data = self.data
        total = data.total if data.total is not None else len(data.reviews)
        return Page[ReviewItem](
            items=data.reviews,
            total=total,
            page=data.page or requested_page,
            page_size=requested_page_size,
            total_pages=(
                data.total_pages
                if data.total_pages is not None
                else count_pages(total, requested_page_size)
            ),
        )
