"""Background polling of the unread notification count."""

import threading
import time
from collections.abc import Callable

import structlog

from console_sync.constants import (
    DEFAULT_UNREAD_POLL_INTERVAL,
    POLL_FAILURE_LOG_EVERY,
    POLLER_STOP_TIMEOUT,
)
from console_sync.logging.context import (
    clear_operation_id,
    new_operation_id,
    set_operation_id,
)

logger = structlog.get_logger(__name__)

Subscriber = Callable[[int], None]


class AggregatePoller:
    """Keeps one server-derived scalar approximately fresh.

    Polls on a fixed interval from a daemon thread, independent of any
    screen. A failed poll keeps the last known value: ``current_value()``
    never drops to zero because the server was unreachable. Refreshes are
    serialized, so a forced refresh always reflects server state at least
    as new as any poll that started before it.
    """

    def __init__(
        self,
        loader: Callable[[], int],
        interval_seconds: float = DEFAULT_UNREAD_POLL_INTERVAL,
        name: str = "unread_count",
    ) -> None:
        """Initialize the aggregate poller.

        Args:
            loader: Zero-argument callable fetching the current value
            interval_seconds: Seconds between polls
            name: Aggregate name used in logs
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got: {interval_seconds}")

        self.loader = loader
        self.interval_seconds = interval_seconds
        self.name = name
        self._is_running = False
        self._poll_thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._refresh_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._value: int | None = None
        self._subscribers: list[Subscriber] = []
        self._consecutive_failures = 0
        self._last_refreshed_at: float | None = None

    def start(self) -> None:
        """Start the polling thread if not already running.

        The first poll happens immediately.
        """
        if self._is_running:
            logger.debug("Aggregate poller already running", aggregate=self.name)
            return

        self._is_running = True
        # Fresh event per thread: a thread that outlived stop() keeps its own
        stop_event = threading.Event()
        self._stop_event = stop_event

        self._poll_thread = threading.Thread(
            target=self._poll_loop,
            args=(stop_event,),
            name="AggregatePoller",
            daemon=True,
        )
        self._poll_thread.start()
        logger.info(
            "Aggregate poller started",
            aggregate=self.name,
            interval_seconds=self.interval_seconds,
        )

    def stop(self) -> None:
        """Stop the polling thread."""
        if not self._is_running:
            return

        self._is_running = False
        self._stop_event.set()

        thread = self._poll_thread
        self._poll_thread = None
        if thread is not None:
            thread.join(timeout=POLLER_STOP_TIMEOUT)
            if thread.is_alive():
                # Exits after its current poll; its stop event stays set
                logger.warning(
                    "Aggregate poller thread did not stop in time",
                    aggregate=self.name,
                    timeout_seconds=POLLER_STOP_TIMEOUT,
                )

        logger.info("Aggregate poller stopped", aggregate=self.name)

    def current_value(self) -> int | None:
        """Last known value, or None before the first successful poll."""
        with self._state_lock:
            return self._value

    def force_refresh(self) -> int | None:
        """Refresh now instead of waiting for the next tick.

        Returns:
            The value after the refresh (the previous value if it failed)
        """
        logger.debug("Forced aggregate refresh", aggregate=self.name)
        return self.refresh()

    def refresh(self) -> int | None:
        """Fetch the aggregate once, keeping the last value on failure."""
        with self._refresh_lock:
            try:
                value = self.loader()
            except Exception as e:
                with self._state_lock:
                    self._consecutive_failures += 1
                    failures = self._consecutive_failures
                    value = self._value
                logger.error(
                    "Aggregate poll failed, keeping last known value",
                    aggregate=self.name,
                    error=str(e),
                    error_type=type(e).__name__,
                    consecutive_failures=failures,
                    last_value=value,
                )
                if failures % POLL_FAILURE_LOG_EVERY == 0:
                    logger.warning(
                        "Aggregate still unavailable",
                        aggregate=self.name,
                        consecutive_failures=failures,
                        approx_minutes=int(failures * self.interval_seconds) // 60,
                    )
                return value

            with self._state_lock:
                previous = self._value
                self._value = value
                self._consecutive_failures = 0
                self._last_refreshed_at = time.time()
                subscribers = list(self._subscribers)

        # Outside the refresh lock: subscribers may call force_refresh()
        if value != previous:
            logger.info(
                "Aggregate value changed",
                aggregate=self.name,
                previous=previous,
                value=value,
            )
            self._notify(subscribers, value)
        return value

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback invoked with each new value.

        Returns:
            A function that removes the subscription
        """
        with self._state_lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._state_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, subscribers: list[Subscriber], value: int) -> None:
        for callback in subscribers:
            try:
                callback(value)
            except Exception as e:
                logger.error(
                    "Aggregate subscriber failed",
                    aggregate=self.name,
                    subscriber=getattr(callback, "__qualname__", repr(callback)),
                    error=str(e),
                )

    def _poll_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            set_operation_id(new_operation_id("poll"))
            try:
                self.refresh()
            finally:
                clear_operation_id()

            # Wait for next tick (or stop signal)
            stop_event.wait(timeout=self.interval_seconds)

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def consecutive_failures(self) -> int:
        with self._state_lock:
            return self._consecutive_failures

    @property
    def last_refreshed_at(self) -> float | None:
        """Wall-clock time of the last successful refresh."""
        with self._state_lock:
            return self._last_refreshed_at
