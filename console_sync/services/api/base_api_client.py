"""Base client for console API communication."""

from collections.abc import Callable
from typing import Any, TypeVar

import requests
import structlog
from pydantic import BaseModel, ValidationError

from console_sync.config.endpoints import build_url
from console_sync.constants import (
    AUTHORIZATION_HEADER,
    BEARER_PREFIX,
    DEFAULT_REQUEST_TIMEOUT,
)
from console_sync.exceptions import (
    ApiAuthenticationError,
    ApiConnectionError,
    ApiError,
    ApiRejectedError,
    ApiUnavailableError,
)

logger = structlog.get_logger(__name__)

# Returns the current bearer token, or None when the session has none
TokenProvider = Callable[[], str | None]

SchemaT = TypeVar("SchemaT", bound=BaseModel)

AUTH_FAILURE_STATUSES = {401, 403}
REJECTION_STATUSES = {400, 409, 422}


class BaseApiClient:
    """Base class for console API HTTP clients."""

    def __init__(
        self,
        service_name: str,
        base_url: str,
        token_provider: TokenProvider | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize base API client.

        Args:
            service_name: Name of the API area (for logging/errors)
            base_url: Base URL for the console API
            token_provider: Supplies the caller's bearer credential
            timeout: Request timeout in seconds
        """
        self.service_name = service_name
        self.base_url = base_url
        self.token_provider = token_provider
        self.timeout = timeout

    def _url(self, path: str, **path_params: str) -> str:
        return build_url(self.base_url, path, **path_params)

    def _get_headers(self) -> dict[str, str]:
        """Get common HTTP headers for requests.

        Returns:
            Dictionary of headers

        Raises:
            ApiAuthenticationError: If the token provider fails
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        if self.token_provider is None:
            return headers

        try:
            token = self.token_provider()
        except Exception as e:
            logger.error(
                "Failed to obtain bearer token for API request",
                service=self.service_name,
                error=str(e),
            )
            raise ApiAuthenticationError(
                message=f"Failed to authenticate with {self.service_name}: {e}",
                service_name=self.service_name,
            ) from e

        if token:
            headers[AUTHORIZATION_HEADER] = f"{BEARER_PREFIX} {token}"

        return headers

    def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        **kwargs,
    ) -> requests.Response:
        """Make HTTP request with error handling.

        Args:
            method: HTTP method (GET, PUT, etc.)
            url: Full URL for the request
            params: Query parameters
            json_data: JSON body data
            **kwargs: Additional arguments to pass to requests

        Returns:
            Response object (404 responses are returned for the caller to map)

        Raises:
            ApiUnavailableError: For server errors (5xx)
            ApiAuthenticationError: For 401/403
            ApiRejectedError: For validation and conflict errors (400/409/422)
            ApiError: For any other client error
            ApiConnectionError: For timeouts and connection failures
        """
        headers = self._get_headers()

        if "headers" in kwargs:
            headers.update(kwargs.pop("headers"))

        if "timeout" not in kwargs:
            kwargs["timeout"] = self.timeout

        logger.info(
            "Making API request",
            service=self.service_name,
            method=method,
            url=url,
            params=params,
        )

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json_data,
                **kwargs,
            )
        except requests.Timeout as e:
            logger.error(
                "API request timed out",
                service=self.service_name,
                method=method,
                url=url,
                timeout=kwargs["timeout"],
            )
            raise ApiConnectionError(
                service_name=self.service_name,
                message=f"{self.service_name} request timed out: {method} {url}",
            ) from e
        except requests.ConnectionError as e:
            logger.error(
                "Failed to connect to API",
                service=self.service_name,
                method=method,
                url=url,
                error=str(e),
            )
            raise ApiConnectionError(
                service_name=self.service_name,
                message=f"Failed to connect to {self.service_name}: {e}",
            ) from e

        logger.info(
            "Received API response",
            service=self.service_name,
            method=method,
            url=url,
            status_code=response.status_code,
        )

        self._raise_for_status(response)
        return response

    def _raise_for_status(self, response: requests.Response) -> None:
        status_code = response.status_code
        if status_code < 400 or status_code == 404:
            return

        detail = self._error_detail(response)
        logger.error(
            "API returned error status",
            service=self.service_name,
            status_code=status_code,
            detail=detail,
        )

        if status_code >= 500:
            raise ApiUnavailableError(
                service_name=self.service_name,
                status_code=status_code,
            )

        message = f"{self.service_name} returned {status_code}: {detail}"
        if status_code in AUTH_FAILURE_STATUSES:
            error_cls = ApiAuthenticationError
        elif status_code in REJECTION_STATUSES:
            error_cls = ApiRejectedError
        else:
            error_cls = ApiError
        raise error_cls(
            message=message,
            service_name=self.service_name,
            status_code=status_code,
        )

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """Extract the server's error message, falling back to the raw body."""
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            for field in ("message", "error", "detail"):
                if body.get(field):
                    return str(body[field])
        return response.text

    def _parse(
        self, response: requests.Response, schema: type[SchemaT], **log_context: Any
    ) -> SchemaT:
        """Validate a JSON response body against a schema.

        Raises:
            ValidationError: If the payload does not match the schema
            ValueError: If the body is not JSON
        """
        try:
            return schema.model_validate(response.json())

        except ValidationError as e:
            logger.error(
                "Failed to validate API response",
                service=self.service_name,
                schema=schema.__name__,
                validation_errors=e.errors(),
                **log_context,
            )
            raise

        except ValueError as e:
            logger.error(
                "Failed to parse API response",
                service=self.service_name,
                schema=schema.__name__,
                error=str(e),
                **log_context,
            )
            raise

    def _require_success(self, success: bool, message: str | None, operation: str) -> None:
        """Reject a 2xx envelope whose ``success`` flag is false."""
        if success:
            return
        logger.warning(
            "API reported unsuccessful operation",
            service=self.service_name,
            operation=operation,
            message=message,
        )
        raise ApiRejectedError(
            message=message or f"{self.service_name} could not {operation}",
            service_name=self.service_name,
        )
