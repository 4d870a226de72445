"""Logging configuration setup.

Uses:
- dictConfig for formatters, filters, and the root logger
- QueueHandler + QueueListener for non-blocking I/O (optional)
- ContextInjectingFilter for automatic context propagation
- All handlers on the root logger (child loggers propagate)
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener
from queue import Queue
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from blog_gateway.core.settings.logs import LoggingSettings

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_LOGGING_INITIALIZED = False

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def shutdown() -> None:
    """Stop the QueueListener, flushing pending records."""
    global _log_queue, _listener

    if _listener is not None:
        _listener.stop()
        _listener = None

    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from blog_gateway.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    log_config = {**log_settings.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    include_context: bool = True,
    enable_queue: bool = True,
    capture_warnings: bool = True,
    service_name: str = "blog-gateway",
    logger_levels: dict[str, str] | None = None,
) -> None:
    """Configure logging with dictConfig and, optionally, the QueueHandler pattern.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Enable JSONL structured logging.
        include_context: Enable ContextInjectingFilter for auto context.
        enable_queue: Route records through a QueueListener thread.
        capture_warnings: Forward Python warnings to logging system.
        service_name: Static ``service`` field added to JSON records.
        logger_levels: Per-logger level overrides.

    Example:
        from blog_gateway.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    shutdown()

    if capture_warnings:
        logging.captureWarnings(True)

    formatter_name = "json" if json_logs else "text"
    root_filters = ["context"] if include_context else []

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": _build_formatters_config(json_logs, service_name),
        "filters": _build_filters_config(include_context),
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter_name,
                "filters": root_filters,
            },
        },
        "loggers": {
            name: {"level": level.upper()} for name, level in (logger_levels or {}).items()
        },
        "root": {
            "level": log_level.upper(),
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(logging_config)

    if enable_queue:
        _setup_queue_logging()


def _build_formatters_config(json_logs: bool, service_name: str) -> dict[str, Any]:
    """Build formatters configuration for dictConfig."""
    if json_logs:
        return {
            "json": {
                "()": "blog_gateway.infra.logging.formatters.JSONFormatter",
                "fmt_keys": {"level": "levelname", "logger": "name", "message": "message"},
                "static": {"service": service_name},
            },
        }
    return {"text": {"format": TEXT_FORMAT, "datefmt": DATE_FORMAT}}


def _build_filters_config(include_context: bool) -> dict[str, Any]:
    """Build filters configuration for dictConfig."""
    if not include_context:
        return {}
    return {
        "context": {
            "()": "blog_gateway.infra.logging.context.ContextInjectingFilter",
        },
    }


def _setup_queue_logging() -> None:
    """Move the root logger's handlers behind a QueueHandler + QueueListener.

    Context filters stay on the moved handlers. ContextInjectingFilter must
    run in the emitting task, so it is also attached to the QueueHandler.
    """
    global _log_queue, _listener

    from blog_gateway.infra.logging.context import ContextInjectingFilter

    root = logging.getLogger()
    handlers = list(root.handlers)
    if not handlers:
        return

    _log_queue = Queue()
    queue_handler = QueueHandler(_log_queue)
    if any(isinstance(f, ContextInjectingFilter) for h in handlers for f in h.filters):
        queue_handler.addFilter(ContextInjectingFilter())

    for handler in handlers:
        root.removeHandler(handler)

    _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
    _listener.start()
    atexit.register(shutdown)

    root.addHandler(queue_handler)
    logger.debug("Queue logging enabled with %d handler(s)", len(handlers))
