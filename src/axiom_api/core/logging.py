"""Structured request logging.

Every log line produced here is a JSON-serialized ``RequestLog`` tied to the
request id of the HTTP request that caused it. The request id is always passed
in explicitly by the caller.
"""

import logging
import random
import string
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel
from pymongo.results import DeleteResult, InsertOneResult

from axiom_api.config import get_settings

T = TypeVar("T")

SENSITIVE_KEYS = {"email", "password", "token"}


class LogEvent(str, Enum):
    """Event types for structured request logging."""

    # HTTP
    REQUEST_START = "request.start"
    REQUEST_COMPLETE = "request.complete"
    REQUEST_ERROR = "request.error"

    # Database
    DB_OPERATION_START = "db.operation.start"
    DB_OPERATION_COMPLETE = "db.operation.complete"
    DB_OPERATION_FAILED = "db.operation.failed"

    # Analysis
    ANALYSIS_COMPLETE = "analysis.complete"
    ANALYSIS_FAILED = "analysis.failed"
    ANALYSIS_MOCK = "analysis.mock"

    # Feedback
    FEEDBACK_CREATED = "feedback.created"
    FEEDBACK_UPDATED = "feedback.updated"
    FEEDBACK_DELETED = "feedback.deleted"
    FEEDBACK_NOT_FOUND = "feedback.not_found"


class RequestLog(BaseModel):
    """Structured log entry."""

    timestamp: datetime
    request_id: str | None
    event: LogEvent
    data: dict[str, Any]
    duration_ms: int | None = None


class RequestLogger:
    """Logger that writes one JSON line per event."""

    def __init__(self) -> None:
        self.logger = logging.getLogger("axiom.requests")
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Attach a JSON-lines file handler when a log file is configured."""
        log_file = get_settings().request_log_file
        if log_file and not self.logger.handlers:
            handler = logging.FileHandler(log_file, encoding="utf-8")
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)

    def log(
        self,
        event: LogEvent,
        request_id: str | None = None,
        data: dict[str, Any] | None = None,
        duration_ms: int | None = None,
        level: int = logging.INFO,
    ) -> RequestLog:
        """Log a single event."""
        entry = RequestLog(
            timestamp=datetime.now(timezone.utc),
            request_id=request_id,
            event=event,
            data=data or {},
            duration_ms=duration_ms,
        )
        self.logger.log(level, entry.model_dump_json())
        return entry

    def debug(self, event: LogEvent, request_id: str | None = None, **data: Any) -> RequestLog:
        return self.log(event, request_id, data, level=logging.DEBUG)

    def log_request(
        self,
        method: str,
        path: str,
        status: int,
        latency_ms: int,
        request_id: str,
        error: str | None = None,
    ) -> None:
        """Log the completion of an HTTP request."""
        data: dict[str, Any] = {"method": method, "path": path, "status": status}
        if error:
            data["error"] = error
        self.log(
            LogEvent.REQUEST_ERROR if error else LogEvent.REQUEST_COMPLETE,
            request_id=request_id,
            data=data,
            duration_ms=latency_ms,
            level=logging.WARNING if status >= 500 else logging.INFO,
        )


def generate_request_id() -> str:
    """Generate an opaque request correlation id, e.g. ``req_1718000000000_k3j9x0a``."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def mask_email(email: str | None) -> str | None:
    """Mask the local part of an email address for logging."""
    if not email or "@" not in email:
        return email
    local, domain = email.split("@", 1)
    return f"{local[:1]}***@{domain}"


def sanitize_filter(value: Any) -> Any:
    """Return a log-safe copy of a query filter or payload."""
    if isinstance(value, dict):
        sanitized = {}
        for key, item in value.items():
            if key == "email":
                sanitized[key] = mask_email(item) if isinstance(item, str) else "***"
            elif key in SENSITIVE_KEYS:
                sanitized[key] = "***"
            else:
                sanitized[key] = sanitize_filter(item)
        return sanitized
    if isinstance(value, (list, tuple)):
        return [sanitize_filter(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


async def with_database_logging(
    operation: Callable[[], Awaitable[T]],
    *,
    name: str,
    collection: str,
    request_id: str | None = None,
    query: dict[str, Any] | None = None,
) -> T:
    """Run a database operation, logging its start, duration and record count."""
    start_time = time.time()
    request_logger.debug(
        LogEvent.DB_OPERATION_START,
        request_id,
        operation=name,
        collection=collection,
        filter=sanitize_filter(query) if query is not None else None,
    )

    try:
        result = await operation()
    except Exception as e:
        request_logger.log(
            LogEvent.DB_OPERATION_FAILED,
            request_id=request_id,
            data={"operation": name, "collection": collection, "error": str(e)},
            duration_ms=int((time.time() - start_time) * 1000),
            level=logging.ERROR,
        )
        raise

    record_count: int | None = None
    if isinstance(result, list):
        record_count = len(result)
    elif isinstance(result, InsertOneResult):
        record_count = 1
    elif isinstance(result, DeleteResult):
        record_count = result.deleted_count

    request_logger.log(
        LogEvent.DB_OPERATION_COMPLETE,
        request_id=request_id,
        data={"operation": name, "collection": collection, "record_count": record_count},
        duration_ms=int((time.time() - start_time) * 1000),
    )
    return result


# Global request logger instance
request_logger = RequestLogger()
