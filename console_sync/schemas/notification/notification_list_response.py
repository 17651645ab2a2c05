"""Schema for the paginated notification list envelope."""

from pydantic import Field

from console_sync.schemas.base_schema_model import BaseSchemaModel
from console_sync.schemas.notification.notification import Notification
from console_sync.schemas.page import Page, count_pages


class NotificationListData(BaseSchemaModel):
    """``data`` member of the notification list envelope."""

    notifications: list[Notification] = Field(default_factory=list)
    total: int | None = Field(None, ge=0)
    page: int | None = Field(None, ge=1)
    limit: int | None = Field(None, ge=1)
    total_pages: int | None = Field(None, ge=0)


class NotificationListResponse(BaseSchemaModel):
    """Returned by GET /private/notifications."""

    success: bool = True
    data: NotificationListData

    def to_page(self, requested_page: int, requested_page_size: int) -> Page[Notification]:
        """Normalize the envelope into a cacheable page.

        Missing pagination members fall back to the request values.
        """
        data = self.data
        total = data.total if data.total is not None else len(data.notifications)
        page_size = data.limit or requested_page_size
        return Page[Notification](
            items=data.notifications,
            total=total,
            page=data.page or requested_page,
            page_size=page_size,
            total_pages=(
                data.total_pages
                if data.total_pages is not None
                else count_pages(total, page_size)
            ),
        )
