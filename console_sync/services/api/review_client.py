"""Client for the customer review moderation API."""

from typing import Any

import structlog

from console_sync.cache.query_key import QueryKey
from console_sync.config.endpoints import API_BASE_URL, REVIEW_DETAIL_PATH, REVIEWS_PATH
from console_sync.constants import DEFAULT_REQUEST_TIMEOUT
from console_sync.enums.resource import ResourceKind
from console_sync.enums.review import REVIEW_STATUS_WIRE_VALUES, ReviewStatus
from console_sync.exceptions import InvalidTransitionError, ResourceNotFoundError
from console_sync.schemas.page import Page
from console_sync.schemas.review import ReviewItem, ReviewListResponse, ReviewResponse
from console_sync.services.api.base_api_client import BaseApiClient, TokenProvider

logger = structlog.get_logger(__name__)

# Filter name -> query parameter name
REVIEW_FILTER_PARAMS: dict[str, str] = {
    "status": "status",
    "search": "q",
    "sort_by": "sortBy",
    "sort_order": "sortOrder",
}

# Sent when the query leaves sorting unspecified
REVIEW_DEFAULT_SORT: dict[str, str] = {
    "sort_by": "createdAt",
    "sort_order": "desc",
}


class ReviewApiClient(BaseApiClient):
    """Client for communicating with the customer review endpoints."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token_provider: TokenProvider | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize review client with service configuration."""
        super().__init__(
            service_name="customer-reviews",
            base_url=base_url,
            token_provider=token_provider,
            timeout=timeout,
        )

    def list_reviews(self, query_key: QueryKey) -> Page[ReviewItem]:
        """Fetch one page of reviews for a canonical query key.

        Args:
            query_key: Key built by the fetch composer

        Returns:
            Page of reviews in server order

        Raises:
            ApiError: For any non-successful response (see BaseApiClient)
            ValidationError: If the payload does not match the schema
        """
        filters = {**REVIEW_DEFAULT_SORT, **query_key.filter_dict}
        params: dict[str, Any] = {"page": query_key.page, "limit": query_key.page_size}
        for name, value in filters.items():
            params[REVIEW_FILTER_PARAMS[name]] = value

        response = self._make_request("GET", self._url(REVIEWS_PATH), params=params)
        envelope = self._parse(response, ReviewListResponse, query_key=str(query_key))
        page = envelope.to_page(query_key.page, query_key.page_size)

        logger.info(
            "Fetched reviews page",
            query_key=str(query_key),
            returned=len(page.items),
            total=page.total,
        )
        return page

    def get_review(self, review_id: str) -> ReviewItem:
        """Fetch a review by ID.

        Raises:
            ResourceNotFoundError: If the review does not exist
            ApiError: For other failures
        """
        response = self._make_request("GET", self._url(REVIEW_DETAIL_PATH, review_id=review_id))
        self._raise_if_missing(response.status_code, review_id)

        envelope = self._parse(response, ReviewResponse, review_id=review_id)
        self._require_success(envelope.success, envelope.message, "fetch review")
        return envelope.review

    def set_status(self, review_id: str, status: ReviewStatus | str) -> ReviewItem | None:
        """Move a review to ``pending`` or ``published``.

        Args:
            review_id: ID of the review
            status: Target status; deletion goes through ``delete_review``

        Returns:
            The updated review when the server echoes it back

        Raises:
            InvalidTransitionError: If the status cannot be set directly
            ResourceNotFoundError: If the review does not exist
            ApiRejectedError: If the server refuses the transition
            ApiError: For other failures
        """
        status = ReviewStatus(status)
        if status not in REVIEW_STATUS_WIRE_VALUES:
            raise InvalidTransitionError(
                f"Review status {status.value} cannot be set directly",
                current_status=None,
            )

        url = self._url(REVIEW_DETAIL_PATH, review_id=review_id)
        response = self._make_request(
            "PUT", url, json_data={"status": REVIEW_STATUS_WIRE_VALUES[status]}
        )
        self._raise_if_missing(response.status_code, review_id)

        logger.info("Review status updated", review_id=review_id, status=status.value)
        if not response.content:
            return None
        return self._parse(response, ReviewResponse, review_id=review_id).review

    def delete_review(self, review_id: str) -> None:
        """Delete a review permanently.

        Raises:
            ResourceNotFoundError: If the review does not exist
            ApiError: For other failures
        """
        url = self._url(REVIEW_DETAIL_PATH, review_id=review_id)
        response = self._make_request("DELETE", url)
        self._raise_if_missing(response.status_code, review_id)
        logger.info("Review deleted", review_id=review_id)

    def _raise_if_missing(self, status_code: int, review_id: str) -> None:
        if status_code == 404:
            logger.warning("Review not found", review_id=review_id)
            raise ResourceNotFoundError(
                resource_kind=ResourceKind.REVIEWS.value,
                resource_id=review_id,
                service_name=self.service_name,
            )
