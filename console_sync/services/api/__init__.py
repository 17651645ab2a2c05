"""Console API clients package."""

from console_sync.services.api.base_api_client import BaseApiClient, TokenProvider
from console_sync.services.api.notification_client import NotificationApiClient
from console_sync.services.api.review_client import ReviewApiClient

__all__ = [
    "BaseApiClient",
    "NotificationApiClient",
    "ReviewApiClient",
    "TokenProvider",
]
