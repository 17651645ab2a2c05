"""Remote API endpoint configuration.

Paths are relative to the console API base URL, which is taken from
``SyncSettings.api_base_url`` (``CONSOLE_API_BASE_URL`` in the environment).
"""

import os

from console_sync.constants import DEFAULT_API_BASE_URL

# Console API base URL
API_BASE_URL = os.getenv("CONSOLE_API_BASE_URL", DEFAULT_API_BASE_URL)

# Notifications
NOTIFICATIONS_PATH = "/private/notifications"
NOTIFICATION_DETAIL_PATH = "/private/notifications/{notification_id}"
NOTIFICATION_READ_PATH = "/private/notifications/{notification_id}/read"
NOTIFICATIONS_READ_ALL_PATH = "/private/notifications/read-all"
NOTIFICATIONS_UNREAD_COUNT_PATH = "/private/notifications/unread-count"

# Customer reviews (moderation)
REVIEWS_PATH = "/customer-reviews"
REVIEW_DETAIL_PATH = "/customer-reviews/{review_id}"


def build_url(base_url: str, path: str, **path_params: str) -> str:
    """Join a base URL and an endpoint path, filling in path parameters.

    Args:
        base_url: API base URL, with or without a trailing slash
        path: Endpoint path template starting with "/"
        **path_params: Values substituted into the path template

    Returns:
        Absolute URL
    """
    return f"{base_url.rstrip('/')}{path.format(**path_params)}"
