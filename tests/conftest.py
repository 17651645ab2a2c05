"""Pytest configuration and shared fixtures."""

import pytest

from console_sync.cache import ResourceCache
from console_sync.services.api import NotificationApiClient, ReviewApiClient
from tests.base import TEST_API_BASE_URL, FakeClock, make_settings


@pytest.fixture
def settings():
    """Provide settings pointing at the test API."""
    return make_settings()


@pytest.fixture
def clock():
    """Provide a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Provide a resource cache driven by the fake clock."""
    return ResourceCache(max_entries=10, stale_after_seconds=5.0, clock=clock)


@pytest.fixture
def notification_client():
    """Provide a notifications client with a static bearer token."""
    return NotificationApiClient(base_url=TEST_API_BASE_URL, token_provider=lambda: "test-token")


@pytest.fixture
def review_client():
    """Provide a review client with a static bearer token."""
    return ReviewApiClient(base_url=TEST_API_BASE_URL, token_provider=lambda: "test-token")
