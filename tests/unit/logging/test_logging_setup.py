"""Tests for logging configuration, processors and operation context."""

import json
import logging
import logging.handlers
import os
import threading
import time
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import structlog

from console_sync.logging import (
    OperationIDFilter,
    cleanup_old_logs,
    clear_operation_id,
    get_operation_id,
    new_operation_id,
    set_operation_id,
    setup_logging,
)
from console_sync.logging.processors import (
    add_operation_context,
    add_process_info,
    add_service_context,
    console_renderer,
)


class TestOperationContext(unittest.TestCase):
    """Tests for thread-local operation IDs."""

    def tearDown(self):
        clear_operation_id()

    def test_set_get_and_clear(self):
        set_operation_id("batch-1234abcd")
        self.assertEqual(get_operation_id(), "batch-1234abcd")

        clear_operation_id()
        self.assertIsNone(get_operation_id())

    def test_ids_are_thread_local(self):
        set_operation_id("main")
        seen = []

        thread = threading.Thread(target=lambda: seen.append(get_operation_id()))
        thread.start()
        thread.join()

        self.assertEqual(seen, [None])
        self.assertEqual(get_operation_id(), "main")

    def test_new_operation_id_format(self):
        operation_id = new_operation_id("poll")

        self.assertTrue(operation_id.startswith("poll-"))
        self.assertEqual(len(operation_id), len("poll-") + 8)
        self.assertNotEqual(operation_id, new_operation_id("poll"))

    def test_filter_injects_operation_id(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

        self.assertTrue(OperationIDFilter().filter(record))
        self.assertEqual(record.operation_id, "N/A")

        set_operation_id("batch-1")
        OperationIDFilter().filter(record)
        self.assertEqual(record.operation_id, "batch-1")


class TestProcessors(unittest.TestCase):
    """Tests for the custom structlog processors."""

    def tearDown(self):
        clear_operation_id()

    def test_operation_context_only_when_set(self):
        self.assertNotIn("operation_id", add_operation_context(None, "info", {}))

        set_operation_id("poll-1")
        self.assertEqual(add_operation_context(None, "info", {})["operation_id"], "poll-1")

    @patch.dict(os.environ, {"SERVICE_NAME": "console-sync-test", "ENVIRONMENT": "test"})
    def test_service_context(self):
        event = add_service_context(None, "info", {})

        self.assertEqual(event["service_name"], "console-sync-test")
        self.assertEqual(event["environment"], "test")

    def test_process_info_includes_thread_name(self):
        event = add_process_info(None, "info", {})

        self.assertEqual(event["process_id"], os.getpid())
        self.assertEqual(event["thread_name"], threading.current_thread().name)

    def test_console_renderer_formats_extras_and_hides_metadata(self):
        line = console_renderer(
            None,
            "info",
            {
                "level": "warning",
                "event": "Batch item failed",
                "logger": "console_sync.services.batch_executor",
                "operation_id": "batch-1",
                "item_id": "r-1",
                "thread_id": 99,
            },
        )

        self.assertIn("WARNING", line)
        self.assertIn("Batch item failed", line)
        self.assertIn("batch-1", line)
        self.assertIn("item_id=r-1", line)
        self.assertNotIn("thread_id", line)

    def test_console_renderer_shortens_package_logger_names(self):
        line = console_renderer(
            None,
            "info",
            {
                "level": "info",
                "event": "Aggregate value changed",
                "logger": "console_sync.services.aggregate_poller",
                "operation_id": "poll-1a2b3c4d",
                "timestamp": "2026-10-19T08:15:30.123456Z",
            },
        )

        self.assertIn("services.aggregate_poller", line)
        self.assertNotIn("console_sync.services", line)
        self.assertIn("poll-1a2b3c4d", line)
        self.assertIn("08:15:30.123", line)
        self.assertNotIn("2026-10-19", line)

    def test_console_renderer_shows_thread_outside_operations(self):
        line = console_renderer(
            None,
            "info",
            {
                "level": "info",
                "event": "Logging configured",
                "logger": "console_sync.logging.config",
                "thread_name": "AggregatePoller",
            },
        )

        self.assertIn("AggregatePoller", line)
        self.assertNotIn("thread_name=", line)


class TestSetupLogging(unittest.TestCase):
    """Tests for setup_logging and cleanup_old_logs."""

    def setUp(self):
        self.tmp = TemporaryDirectory()
        self.log_path = str(Path(self.tmp.name) / "logs" / "sync.log")
        self.root_handlers = logging.getLogger().handlers[:]
        self.root_level = logging.getLogger().level

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = self.root_handlers
        root.setLevel(self.root_level)
        structlog.reset_defaults()
        self.tmp.cleanup()

    def test_writes_json_lines_to_file(self):
        setup_logging(log_file_path=self.log_path, log_level="debug")

        structlog.get_logger("console_sync.test").info("Fetched reviews page", returned=3)
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = Path(self.log_path).read_text(encoding="utf-8").splitlines()
        events = [json.loads(line) for line in lines]
        fetched = [e for e in events if e["event"] == "Fetched reviews page"]
        self.assertEqual(len(fetched), 1)
        self.assertEqual(fetched[0]["returned"], 3)
        self.assertEqual(fetched[0]["level"], "info")
        self.assertIn("service_name", fetched[0])

    def test_installs_file_and_console_handlers(self):
        setup_logging(log_file_path=self.log_path)

        handlers = logging.getLogger().handlers
        self.assertEqual(len(handlers), 2)
        self.assertTrue(
            any(isinstance(h, logging.handlers.RotatingFileHandler) for h in handlers)
        )

    def test_cleanup_removes_only_old_rotated_files(self):
        log_dir = Path(self.tmp.name)
        active = log_dir / "sync.log"
        old = log_dir / "sync.log.1"
        recent = log_dir / "sync.log.2"
        for path in (active, old, recent):
            path.write_text("x")
        eleven_days_ago = time.time() - 11 * 24 * 60 * 60
        os.utime(old, (eleven_days_ago, eleven_days_ago))
        os.utime(active, (eleven_days_ago, eleven_days_ago))

        deleted = cleanup_old_logs(str(active), retention_days=10)

        self.assertEqual(deleted, 1)
        self.assertFalse(old.exists())
        self.assertTrue(recent.exists())
        self.assertTrue(active.exists())
