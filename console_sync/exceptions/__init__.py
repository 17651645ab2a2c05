"""Exception types for the synchronization core."""

from console_sync.exceptions.api_exceptions import (
    ApiAuthenticationError,
    ApiConnectionError,
    ApiError,
    ApiRejectedError,
    ApiUnavailableError,
    ResourceNotFoundError,
)
from console_sync.exceptions.client_exceptions import (
    InvalidQueryError,
    InvalidTransitionError,
)

__all__ = [
    "ApiAuthenticationError",
    "ApiConnectionError",
    "ApiError",
    "ApiRejectedError",
    "ApiUnavailableError",
    "InvalidQueryError",
    "InvalidTransitionError",
    "ResourceNotFoundError",
]
