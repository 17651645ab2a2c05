"""Tests for AggregatePoller."""

import threading
import unittest
from unittest.mock import MagicMock, patch

from console_sync.exceptions import ApiUnavailableError
from console_sync.services import AggregatePoller


class TestAggregatePollerRefresh(unittest.TestCase):
    """Tests for refresh, failure handling and subscriptions."""

    def setUp(self):
        """Set up test fixtures."""
        self.loader = MagicMock(return_value=5)
        self.poller = AggregatePoller(self.loader, interval_seconds=30)

    def test_value_is_none_before_first_poll(self):
        self.assertIsNone(self.poller.current_value())
        self.assertIsNone(self.poller.last_refreshed_at)

    def test_refresh_replaces_value(self):
        self.assertEqual(self.poller.refresh(), 5)
        self.assertEqual(self.poller.current_value(), 5)
        self.assertIsNotNone(self.poller.last_refreshed_at)

    def test_failed_poll_keeps_last_known_value(self):
        self.poller.refresh()
        self.loader.side_effect = ApiUnavailableError("notifications", 503)

        self.assertEqual(self.poller.refresh(), 5)
        self.assertEqual(self.poller.current_value(), 5)
        self.assertEqual(self.poller.consecutive_failures, 1)

    def test_failure_before_first_success_keeps_none(self):
        self.loader.side_effect = ApiUnavailableError("notifications", 503)

        self.assertIsNone(self.poller.force_refresh())
        self.assertIsNone(self.poller.current_value())

    def test_success_resets_failure_count(self):
        self.loader.side_effect = [ApiUnavailableError("notifications", 503), 2]

        self.poller.refresh()
        self.poller.refresh()

        self.assertEqual(self.poller.consecutive_failures, 0)
        self.assertEqual(self.poller.current_value(), 2)

    def test_prolonged_outage_keeps_polling(self):
        self.loader.side_effect = RuntimeError("unreachable")

        for _ in range(10):
            self.poller.refresh()

        self.assertEqual(self.poller.consecutive_failures, 10)

    def test_subscribers_receive_changed_values_only(self):
        received = []
        self.poller.subscribe(received.append)
        self.loader.side_effect = [5, 5, 0]

        self.poller.refresh()
        self.poller.refresh()
        self.poller.force_refresh()

        self.assertEqual(received, [5, 0])

    def test_unsubscribe_stops_notifications(self):
        received = []
        unsubscribe = self.poller.subscribe(received.append)
        self.poller.refresh()

        unsubscribe()
        unsubscribe()
        self.loader.return_value = 9
        self.poller.refresh()

        self.assertEqual(received, [5])

    def test_failing_subscriber_does_not_affect_others(self):
        received = []
        self.poller.subscribe(MagicMock(side_effect=ValueError("render failed")))
        self.poller.subscribe(received.append)

        self.assertEqual(self.poller.refresh(), 5)
        self.assertEqual(received, [5])

    def test_forced_refresh_waits_for_in_flight_poll(self):
        started = threading.Event()
        release = threading.Event()
        values = iter([3, 0])

        def loader():
            value = next(values)
            if value == 3:
                started.set()
                release.wait(timeout=2)
            return value

        poller = AggregatePoller(loader, interval_seconds=30)
        tick = threading.Thread(target=poller.refresh)
        tick.start()
        self.assertTrue(started.wait(timeout=2))

        forced = {}
        forcer = threading.Thread(target=lambda: forced.setdefault("value", poller.force_refresh()))
        forcer.start()
        release.set()
        tick.join(timeout=2)
        forcer.join(timeout=2)

        # The older poll cannot overwrite the forced result
        self.assertEqual(forced["value"], 0)
        self.assertEqual(poller.current_value(), 0)

    def test_subscriber_may_force_refresh(self):
        self.loader.side_effect = [5, 0]
        received = []

        def on_change(value):
            received.append(value)
            if value == 5:
                self.poller.force_refresh()

        self.poller.subscribe(on_change)
        tick = threading.Thread(target=self.poller.refresh)
        tick.start()
        tick.join(timeout=2)

        self.assertFalse(tick.is_alive())
        self.assertEqual(self.poller.current_value(), 0)
        self.assertEqual(received, [5, 0])

    def test_rejects_non_positive_interval(self):
        with self.assertRaises(ValueError):
            AggregatePoller(self.loader, interval_seconds=0)


class TestAggregatePollerLifecycle(unittest.TestCase):
    """Tests for starting and stopping the polling thread."""

    def test_start_polls_immediately_and_stop_joins(self):
        polled = threading.Event()

        def loader():
            polled.set()
            return 1

        poller = AggregatePoller(loader, interval_seconds=60)
        poller.start()
        try:
            self.assertTrue(polled.wait(timeout=2))
            self.assertTrue(poller.is_running)
        finally:
            poller.stop()

        self.assertFalse(poller.is_running)
        self.assertEqual(poller.current_value(), 1)

    def test_polls_repeatedly_on_interval(self):
        calls = []
        enough = threading.Event()

        def loader():
            calls.append(1)
            if len(calls) >= 3:
                enough.set()
            return len(calls)

        poller = AggregatePoller(loader, interval_seconds=0.01)
        poller.start()
        try:
            self.assertTrue(enough.wait(timeout=2))
        finally:
            poller.stop()

        self.assertGreaterEqual(len(calls), 3)

    def test_start_twice_runs_one_thread(self):
        poller = AggregatePoller(MagicMock(return_value=0), interval_seconds=60)
        poller.start()
        first_thread = poller._poll_thread
        poller.start()
        try:
            self.assertIs(poller._poll_thread, first_thread)
        finally:
            poller.stop()

    def test_stop_without_start_is_harmless(self):
        poller = AggregatePoller(MagicMock(return_value=0), interval_seconds=60)

        poller.stop()

        self.assertFalse(poller.is_running)

    def test_restart_after_slow_stop_leaves_one_thread_polling(self):
        entered = threading.Event()
        release = threading.Event()
        calls = []

        def loader():
            calls.append(1)
            if len(calls) == 1:
                entered.set()
                release.wait(timeout=2)
            return 1

        poller = AggregatePoller(loader, interval_seconds=60)
        poller.start()
        self.assertTrue(entered.wait(timeout=2))
        old_thread = poller._poll_thread

        with patch("console_sync.services.aggregate_poller.POLLER_STOP_TIMEOUT", 0.05):
            poller.stop()
        self.assertTrue(old_thread.is_alive())

        poller.start()
        try:
            release.set()
            old_thread.join(timeout=2)

            self.assertFalse(old_thread.is_alive())
            self.assertTrue(poller.is_running)
            self.assertIsNot(poller._poll_thread, old_thread)
            self.assertTrue(poller._poll_thread.is_alive())
        finally:
            poller.stop()
