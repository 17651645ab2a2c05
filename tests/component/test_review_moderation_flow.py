"""Component tests for the review moderation screen flow."""

from console_sync import SyncContext
from console_sync.enums import ReviewStatus, ReviewView
from console_sync.exceptions import InvalidTransitionError
from tests.base import BaseComponentTest
from tests.component.mocks import FakeConsoleApi
from tests.factories import review_payload


class TestReviewModerationFlow(BaseComponentTest):
    """Publishing, demoting and deleting reviews through a real SyncContext."""

    def setUp(self):
        super().setUp()
        self.api = FakeConsoleApi(self.mock_api)
        self.pending = [review_payload(status="pending") for _ in range(3)]
        self.published = review_payload(status="approved")
        self.api.add_reviews(*self.pending, self.published)
        self.sync = SyncContext(settings=self.settings, token_provider=lambda: "t")
        self.addCleanup(self.sync.stop)

    def test_published_reviews_move_between_tabs(self):
        pending_page = self.sync.fetch("reviews", {"status": "pending"})
        self.assertEqual(len(pending_page.items), 3)

        result = self.sync.run_batch_transition(
            "reviews", pending_page.ids, "publish", ReviewView.PENDING
        )

        self.assertEqual(result.summary(), "3 of 3 succeeded")
        list_calls_before = self.api.calls_to("GET", "/customer-reviews?")

        refreshed_pending = self.sync.fetch("reviews", {"status": "pending"})
        published_page = self.sync.fetch("reviews", {"status": "published"})

        self.assertEqual(refreshed_pending.items, [])
        self.assertEqual(set(published_page.ids), {*pending_page.ids, self.published["_id"]})
        self.assertTrue(
            all(item.status == ReviewStatus.PUBLISHED for item in published_page.items)
        )
        # The pending page was refetched, not served from cache
        self.assertEqual(self.api.calls_to("GET", "/customer-reviews?"), list_calls_before + 2)

    def test_published_status_is_sent_in_api_spelling(self):
        review_id = self.pending[0]["_id"]

        self.sync.run_batch_transition("reviews", [review_id], "publish", "all")

        self.assertEqual(self.api.reviews[review_id]["status"], "approved")

    def test_partial_failure_keeps_failed_review_selected(self):
        controller = self.sync.selection_controller("reviews")
        controller.set_view(ReviewView.PENDING)
        page = controller.load()
        controller.select_all(page.ids)
        self.api.failing_ids[page.ids[1]] = 409

        result = controller.run("publish")

        self.assertEqual(result.summary(), "2 of 3 succeeded")
        self.assertEqual(result.failed_ids, [page.ids[1]])
        self.assertEqual(controller.selected_ids, [page.ids[1]])
        self.assertEqual(self.api.reviews[page.ids[0]]["status"], "approved")
        self.assertEqual(self.api.reviews[page.ids[1]]["status"], "pending")

    def test_retrying_failed_selection_succeeds_once_fixed(self):
        controller = self.sync.selection_controller("reviews")
        controller.set_view("pending")
        controller.select_all(controller.load().ids)
        failing_id = controller.selected_ids[0]
        self.api.failing_ids[failing_id] = 503
        controller.run("publish")

        del self.api.failing_ids[failing_id]
        result = controller.run("publish")

        self.assertTrue(result.all_succeeded)
        self.assertEqual(controller.selected_ids, [])

    def test_already_published_review_is_not_sent_again(self):
        self.sync.fetch("reviews")

        result = self.sync.run_batch_transition(
            "reviews", [self.published["_id"]], "publish", "all"
        )

        self.assertEqual(result.unchanged, [self.published["_id"]])
        self.assertEqual(self.api.calls_to("PUT", "/customer-reviews/"), 0)

    def test_delete_from_published_tab_returns_review_to_pending(self):
        self.sync.run_batch_transition(
            "reviews", [self.published["_id"]], "delete", ReviewView.PUBLISHED
        )

        self.assertEqual(self.api.reviews[self.published["_id"]]["status"], "pending")
        self.assertEqual(self.api.calls_to("DELETE", "/customer-reviews/"), 0)

    def test_delete_from_deleted_tab_removes_review(self):
        removed = review_payload(status="deleted")
        self.api.add_reviews(removed)

        result = self.sync.run_batch_transition(
            "reviews", [removed["_id"]], "delete", ReviewView.DELETED
        )

        self.assertTrue(result.all_succeeded)
        self.assertNotIn(removed["_id"], self.api.reviews)

    def test_missing_review_is_reported_not_raised(self):
        result = self.sync.run_batch_transition("reviews", ["missing"], "publish", "all")

        self.assertEqual(result.failed[0].error_type, "ResourceNotFoundError")

    def test_review_batch_without_view_sends_nothing(self):
        with self.assertRaises(InvalidTransitionError):
            self.sync.run_batch_transition("reviews", [self.pending[0]["_id"]], "publish")

        self.assertEqual(self.api.mutation_log, [])

    def test_get_review_reads_through_to_api(self):
        review = self.sync.get_review(self.published["_id"])

        self.assertEqual(review.status, ReviewStatus.PUBLISHED)
        self.assertEqual(len(self.sync.cache), 0)
