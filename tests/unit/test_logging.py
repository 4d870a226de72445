"""Tests for structured logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import QueueHandler

import pytest

from blog_gateway.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    clear_log_context,
    configure_logging,
    get_lazy_logger,
    get_log_context,
    remove_from_log_context,
    set_log_context,
    shutdown,
)


@pytest.fixture(autouse=True)
def _clean_context():
    clear_log_context()
    yield
    clear_log_context()


def make_record(msg: str = "hello %s", *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord("tests", logging.INFO, __file__, 1, msg, args or ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    def test_set_and_remove(self):
        set_log_context(correlation_id="abc", operation="users")
        remove_from_log_context("operation")

        assert get_log_context() == {"correlation_id": "abc"}

    def test_filter_copies_context(self):
        set_log_context(correlation_id="abc")
        record = make_record()

        assert ContextInjectingFilter().filter(record) is True
        assert record.correlation_id == "abc"

    def test_filter_keeps_existing_attributes(self):
        set_log_context(correlation_id="abc")
        record = make_record(correlation_id="explicit")

        ContextInjectingFilter().filter(record)

        assert record.correlation_id == "explicit"


class TestJSONFormatter:
    def test_one_json_object_per_record(self):
        formatter = JSONFormatter(static={"service": "blog-gateway"})
        record = make_record(user_id="42")

        line = formatter.format(record)
        data = json.loads(line)

        assert "\n" not in line
        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["service"] == "blog-gateway"
        assert data["user_id"] == "42"
        assert data["timestamp"].endswith("Z")

    def test_exception_stays_on_one_line(self):
        formatter = JSONFormatter()
        try:
            msg = "boom"
            raise ValueError(msg)
        except ValueError:
            record = logging.LogRecord("tests", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        line = formatter.format(record)

        assert "\n" not in line
        assert "ValueError: boom" in json.loads(line)["exception"]


def test_lazy_logger_skips_disabled_levels(caplog):
    calls = []

    def build() -> str:
        calls.append(1)
        return "expensive"

    lazy = get_lazy_logger("tests.lazy")
    with caplog.at_level(logging.INFO, logger="tests.lazy"):
        lazy.debug(build)
    assert calls == []

    with caplog.at_level(logging.DEBUG, logger="tests.lazy"):
        lazy.debug(build)
    assert calls == [1]
    assert "expensive" in caplog.text


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    shutdown()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_json(restore_root_logger):
    configure_logging(
        log_level="WARNING",
        json_logs=True,
        enable_queue=False,
        capture_warnings=False,
        logger_levels={"sqlalchemy.engine": "ERROR"},
    )

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    assert any(isinstance(f, ContextInjectingFilter) for f in root.handlers[0].filters)
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR


def test_configure_logging_queue(restore_root_logger):
    configure_logging(json_logs=False, enable_queue=True, capture_warnings=False)

    root = restore_root_logger
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], QueueHandler)
