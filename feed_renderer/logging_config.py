"""Structured logging configuration for the feed renderer."""

import json
import logging
import sys
import uuid
from datetime import UTC, datetime

# Context attributes copied from the record into the JSON entry when present
CONTEXT_FIELDS = (
    "request_id",
    "component",
    "feed_url",
    "items_count",
    "status_code",
    "content_length",
    "error",
    "error_code",
    "duration_seconds",
    "method",
    "path",
)

COMPONENTS = (
    "app",
    "renderer",
    "feed_fetcher",
    "sanitizer",
    "composer",
    "lambda",
)


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class RequestLogger:
    """Logger bound to one request and one pipeline component."""

    def __init__(self, request_id: str, component: str = "renderer"):
        """Initialize request logger.

        Args:
            request_id: Identifier shared by every log line of one request
            component: Component name (e.g., 'feed_fetcher', 'composer')
        """
        self.request_id = request_id
        self.component = component
        self.logger = logging.getLogger(f"feed_renderer.{component}")
        self.start_time: datetime | None = None

    def _log_with_context(self, level: int, message: str, **kwargs) -> None:
        extra = {
            "request_id": self.request_id,
            "component": self.component,
            **kwargs,
        }
        self.logger.log(level, message, extra=extra)

    def info(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log error message with the active exception's traceback."""
        extra = {"request_id": self.request_id, "component": self.component, **kwargs}
        self.logger.exception(message, extra=extra)

    def log_request_start(self, **kwargs) -> None:
        """Log request start and remember the start time."""
        self.start_time = datetime.now(UTC)
        self.info(f"Starting {self.component} request", **kwargs)

    def log_request_end(self, success: bool = True, **kwargs) -> None:
        """Log request end with its duration."""
        duration_seconds = None
        if self.start_time:
            duration_seconds = (datetime.now(UTC) - self.start_time).total_seconds()

        level = logging.INFO if success else logging.WARNING
        self._log_with_context(
            level,
            f"Completed {self.component} request",
            duration_seconds=duration_seconds,
            **kwargs,
        )

    def log_feed_rendered(self, feed_url: str, items_count: int) -> None:
        self.info(
            f"Rendered feed: {items_count} items",
            feed_url=feed_url,
            items_count=items_count,
        )


def setup_structured_logging(log_level: str = "INFO") -> None:
    """Setup structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    for component in ("",) + COMPONENTS:
        name = f"feed_renderer.{component}" if component else "feed_renderer"
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = True


def create_request_logger(
    component: str, request_id: str | None = None
) -> RequestLogger:
    """Create a request logger for a component.

    Args:
        component: Component name
        request_id: Optional request ID (a random one is generated if missing)

    Returns:
        RequestLogger instance
    """
    if not request_id:
        request_id = f"req_{uuid.uuid4().hex[:12]}"

    return RequestLogger(request_id, component)
