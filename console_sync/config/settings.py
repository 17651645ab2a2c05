"""Runtime settings for the synchronization core."""

import os

from pydantic import BaseModel, ConfigDict, Field, model_validator

from console_sync.config.endpoints import API_BASE_URL
from console_sync.constants import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_FETCH_MAX_RETRIES,
    DEFAULT_FETCH_RETRY_BASE_DELAY,
    DEFAULT_FETCH_RETRY_MAX_DELAY,
    DEFAULT_LIST_STALE_SECONDS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SERVICE_NAME,
    DEFAULT_UNREAD_POLL_INTERVAL,
    MAX_PAGE_SIZE,
)

# Environment variable -> settings field
ENV_VARS: dict[str, str] = {
    "CONSOLE_API_BASE_URL": "api_base_url",
    "CONSOLE_API_TIMEOUT_SECONDS": "request_timeout_seconds",
    "CONSOLE_LIST_STALE_SECONDS": "list_stale_seconds",
    "CONSOLE_CACHE_MAX_ENTRIES": "cache_max_entries",
    "CONSOLE_UNREAD_POLL_INTERVAL_SECONDS": "unread_poll_interval_seconds",
    "CONSOLE_DEFAULT_PAGE_SIZE": "default_page_size",
    "CONSOLE_MAX_PAGE_SIZE": "max_page_size",
    "CONSOLE_FETCH_MAX_RETRIES": "fetch_max_retries",
    "SERVICE_NAME": "service_name",
}


class SyncSettings(BaseModel):
    """Tunables for the cache, poller, composer and API clients.

    Values are validated on construction; use ``from_env`` to read them
    from the process environment.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_base_url: str = Field(default=API_BASE_URL, min_length=1)
    request_timeout_seconds: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    list_stale_seconds: float = Field(default=DEFAULT_LIST_STALE_SECONDS, ge=0)
    cache_max_entries: int = Field(default=DEFAULT_CACHE_MAX_ENTRIES, ge=1)
    unread_poll_interval_seconds: float = Field(
        default=DEFAULT_UNREAD_POLL_INTERVAL, gt=0
    )
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=1)
    fetch_max_retries: int = Field(default=DEFAULT_FETCH_MAX_RETRIES, ge=0)
    fetch_retry_base_delay_seconds: float = Field(
        default=DEFAULT_FETCH_RETRY_BASE_DELAY, ge=0
    )
    fetch_retry_max_delay_seconds: float = Field(
        default=DEFAULT_FETCH_RETRY_MAX_DELAY, ge=0
    )
    service_name: str = DEFAULT_SERVICE_NAME

    @model_validator(mode="after")
    def _check_page_size_bounds(self) -> "SyncSettings":
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) exceeds "
                f"max_page_size ({self.max_page_size})"
            )
        return self

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "SyncSettings":
        """Build settings from environment variables.

        Unset variables fall back to the field defaults.

        Args:
            environ: Mapping to read instead of ``os.environ`` (for tests)

        Returns:
            Validated settings

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        source = os.environ if environ is None else environ
        values = {
            field: source[env_var]
            for env_var, field in ENV_VARS.items()
            if source.get(env_var, "").strip()
        }
        return cls(**values)
