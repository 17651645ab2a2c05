"""Tests for review wire schemas."""

import unittest

from pydantic import ValidationError

from console_sync.enums import ReviewStatus
from console_sync.schemas.review import ReviewItem, ReviewListResponse, ReviewResponse
from tests.factories import review_list_payload, review_payload


class TestReviewItem(unittest.TestCase):
    """Test suite for the ReviewItem schema."""

    def test_parses_payload(self):
        payload = review_payload(rating=4)

        review = ReviewItem.model_validate(payload)

        self.assertEqual(review.id, payload["_id"])
        self.assertEqual(review.rating, 4)
        self.assertEqual(review.status, ReviewStatus.PENDING)
        self.assertEqual(review.author_name, payload["customer"]["name"])

    def test_approved_is_read_as_published(self):
        review = ReviewItem.model_validate(review_payload(status="approved"))

        self.assertEqual(review.status, "published")

    def test_status_is_case_insensitive(self):
        review = ReviewItem.model_validate(review_payload(status="Pending"))

        self.assertEqual(review.status, "pending")

    def test_unknown_status_is_rejected(self):
        with self.assertRaises(ValidationError):
            ReviewItem.model_validate(review_payload(status="archived"))

    def test_rating_out_of_range_is_rejected(self):
        with self.assertRaises(ValidationError):
            ReviewItem.model_validate(review_payload(rating=6))

    def test_missing_customer_falls_back_to_placeholder_author(self):
        review = ReviewItem.model_validate(review_payload(customer=None))

        self.assertEqual(review.author_name, "Unknown Customer")


class TestReviewEnvelopes(unittest.TestCase):
    """Test suite for list and detail envelopes."""

    def test_list_envelope_uses_requested_page_size(self):
        payloads = [review_payload() for _ in range(2)]
        envelope = ReviewListResponse.model_validate(
            review_list_payload(payloads, limit=50, total=12)
        )

        page = envelope.to_page(requested_page=1, requested_page_size=10)

        self.assertEqual(page.page_size, 10)
        self.assertEqual(page.total, 12)
        self.assertEqual(len(page.items), 2)

    def test_detail_envelope_is_unwrapped(self):
        payload = review_payload()

        response = ReviewResponse.model_validate(
            {"success": True, "message": "ok", "data": {"review": payload}}
        )

        self.assertEqual(response.review.id, payload["_id"])
        self.assertEqual(response.message, "ok")

    def test_bare_review_is_accepted(self):
        payload = review_payload(status="approved")

        response = ReviewResponse.model_validate(payload)

        self.assertTrue(response.success)
        self.assertEqual(response.review.status, "published")
