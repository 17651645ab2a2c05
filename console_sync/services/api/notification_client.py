"""Client for the console notifications API."""

from typing import Any

import structlog

from console_sync.cache.query_key import QueryKey
from console_sync.config.endpoints import (
    API_BASE_URL,
    NOTIFICATION_DETAIL_PATH,
    NOTIFICATION_READ_PATH,
    NOTIFICATIONS_PATH,
    NOTIFICATIONS_READ_ALL_PATH,
    NOTIFICATIONS_UNREAD_COUNT_PATH,
)
from console_sync.constants import DEFAULT_REQUEST_TIMEOUT
from console_sync.enums.resource import ResourceKind
from console_sync.exceptions import ResourceNotFoundError
from console_sync.schemas.notification import (
    Notification,
    NotificationListResponse,
    NotificationResponse,
    UnreadCount,
)
from console_sync.schemas.page import Page
from console_sync.services.api.base_api_client import BaseApiClient, TokenProvider

logger = structlog.get_logger(__name__)

# Filter name -> query parameter name
NOTIFICATION_FILTER_PARAMS: dict[str, str] = {
    "status": "status",
    "type": "type",
    "category": "category",
    "priority": "priority",
}


class NotificationApiClient(BaseApiClient):
    """Client for communicating with the notifications endpoints."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token_provider: TokenProvider | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize notification client with service configuration."""
        super().__init__(
            service_name="notifications",
            base_url=base_url,
            token_provider=token_provider,
            timeout=timeout,
        )

    def list_notifications(self, query_key: QueryKey) -> Page[Notification]:
        """Fetch one page of notifications for a canonical query key.

        Args:
            query_key: Key built by the fetch composer

        Returns:
            Page of notifications in server order

        Raises:
            ApiError: For any non-successful response (see BaseApiClient)
            ValidationError: If the payload does not match the schema
        """
        params: dict[str, Any] = {"page": query_key.page, "limit": query_key.page_size}
        for name, value in query_key.filters:
            params[NOTIFICATION_FILTER_PARAMS[name]] = value

        response = self._make_request("GET", self._url(NOTIFICATIONS_PATH), params=params)
        envelope = self._parse(response, NotificationListResponse, query_key=str(query_key))
        page = envelope.to_page(query_key.page, query_key.page_size)

        logger.info(
            "Fetched notifications page",
            query_key=str(query_key),
            returned=len(page.items),
            total=page.total,
        )
        return page

    def get_notification(self, notification_id: str) -> Notification:
        """Fetch a notification by ID.

        Raises:
            ResourceNotFoundError: If the notification does not exist
            ApiError: For other failures
        """
        url = self._url(NOTIFICATION_DETAIL_PATH, notification_id=notification_id)
        response = self._make_request("GET", url)
        self._raise_if_missing(response.status_code, notification_id)

        envelope = self._parse(
            response, NotificationResponse, notification_id=notification_id
        )
        self._require_success(
            envelope.success and envelope.data is not None,
            envelope.message or envelope.error,
            "fetch notification",
        )
        return envelope.data

    def mark_as_read(self, notification_id: str) -> Notification | None:
        """Mark a single notification as read.

        Args:
            notification_id: ID of the notification

        Returns:
            The updated notification when the server echoes it back

        Raises:
            ResourceNotFoundError: If the notification does not exist
            ApiRejectedError: If the server refuses the transition
            ApiError: For other failures
        """
        url = self._url(NOTIFICATION_READ_PATH, notification_id=notification_id)
        response = self._make_request("PUT", url)
        self._raise_if_missing(response.status_code, notification_id)
        if not response.content:
            logger.info("Notification marked as read", notification_id=notification_id)
            return None

        envelope = self._parse(
            response, NotificationResponse, notification_id=notification_id
        )
        self._require_success(
            envelope.success, envelope.message or envelope.error, "mark notification as read"
        )
        logger.info("Notification marked as read", notification_id=notification_id)
        return envelope.data

    def mark_all_as_read(self) -> None:
        """Mark every notification of the session as read in one server operation.

        Raises:
            ApiRejectedError: If the server reports the operation failed
            ApiError: For other failures
        """
        response = self._make_request("PUT", self._url(NOTIFICATIONS_READ_ALL_PATH))
        if response.content:
            envelope = self._parse(response, NotificationResponse)
            self._require_success(
                envelope.success,
                envelope.message or envelope.error,
                "mark all notifications as read",
            )
        logger.info("All notifications marked as read")

    def delete_notification(self, notification_id: str) -> None:
        """Delete a notification.

        Raises:
            ResourceNotFoundError: If the notification does not exist
            ApiError: For other failures
        """
        url = self._url(NOTIFICATION_DETAIL_PATH, notification_id=notification_id)
        response = self._make_request("DELETE", url)
        self._raise_if_missing(response.status_code, notification_id)
        logger.info("Notification deleted", notification_id=notification_id)

    def get_unread_count(self) -> int:
        """Fetch the unread notification count of the authenticated session."""
        response = self._make_request("GET", self._url(NOTIFICATIONS_UNREAD_COUNT_PATH))
        return self._parse(response, UnreadCount).count

    def _raise_if_missing(self, status_code: int, notification_id: str) -> None:
        if status_code == 404:
            logger.warning("Notification not found", notification_id=notification_id)
            raise ResourceNotFoundError(
                resource_kind=ResourceKind.NOTIFICATIONS.value,
                resource_id=notification_id,
                service_name=self.service_name,
            )
