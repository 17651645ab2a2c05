"""Custom exceptions for console API communication."""


class ApiError(Exception):
    """Base exception for console API errors."""

    retryable = False

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        status_code: int | None = None,
    ):
        """Initialize API error.

        Args:
            message: Error message
            service_name: Name of the remote API (for logging/errors)
            status_code: HTTP status code if applicable
        """
        self.service_name = service_name
        self.status_code = status_code
        super().__init__(message)


class ApiUnavailableError(ApiError):
    """Console API is unavailable (500/503 errors)."""

    retryable = True

    def __init__(self, service_name: str, status_code: int, message: str | None = None):
        """Initialize service unavailable error.

        Args:
            service_name: Name of the remote API
            status_code: HTTP status code (500, 503, etc.)
            message: Optional custom error message
        """
        default_message = (
            f"{service_name} service is unavailable (status: {status_code})"
        )
        super().__init__(
            message=message or default_message,
            service_name=service_name,
            status_code=status_code,
        )


class ApiConnectionError(ApiError):
    """Request never completed (timeout or connection failure)."""

    retryable = True

    def __init__(self, service_name: str, message: str):
        """Initialize connection error.

        Args:
            service_name: Name of the remote API
            message: Description of the transport failure
        """
        super().__init__(message=message, service_name=service_name)


class ApiAuthenticationError(ApiError):
    """Bearer credential missing, rejected or not obtainable (401/403)."""


class ApiRejectedError(ApiError):
    """Server rejected the request as invalid or conflicting (400/409/422).

    Not retried automatically: repeating the same request yields the same
    rejection.
    """


class ResourceNotFoundError(ApiError):
    """Single resource not found (404)."""

    def __init__(self, resource_kind: str, resource_id: str, service_name: str):
        """Initialize not found error.

        Args:
            resource_kind: Kind of resource that was requested
            resource_id: ID of the resource that was not found
            service_name: Name of the remote API
        """
        self.resource_kind = resource_kind
        self.resource_id = resource_id
        super().__init__(
            message=f"{resource_kind} with ID {resource_id} not found",
            service_name=service_name,
            status_code=404,
        )
