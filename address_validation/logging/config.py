"""Logging configuration for the address validation service.

Two output formats share one record model: the mandatory fields (timestamp,
level, logger, message) followed by every field passed through ``extra`` or
pushed with ``log_context``. Provider credentials are masked in both formats.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import IO, Any, Dict, Literal, Optional

from .context import get_log_context

LogFormat = Literal["json", "key-value"]

SERVICE_NAME = "address-validation-service"

# Attributes every LogRecord carries; anything else came from extra or context
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

REDACTED_FIELDS = frozenset({"auth_id", "auth_token", "auth-id", "auth-token"})
REDACTED_VALUE = "***"


def _plain_value(value: Any) -> Any:
    """Reduce enums and datetimes to JSON-friendly scalars."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def record_fields(record: logging.LogRecord, skip: frozenset = frozenset()) -> Dict[str, Any]:
    """Collect the structured fields attached to a record.

    Args:
        record: Log record
        skip: Extra field names to leave out

    Returns:
        Field name -> plain value, credentials masked
    """
    fields = {}
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS or key in skip or key.startswith("_"):
            continue
        fields[key] = REDACTED_VALUE if key in REDACTED_FIELDS else _plain_value(value)
    return fields


class ContextualFilter(logging.Filter):
    """Filter that enriches log records with static metadata and active context.

    This filter merges:
    1. Static fields (service, environment) into every record
    2. Active context from LogContextVar (request_id, provider, etc.)

    Fields passed explicitly through ``extra`` win over context fields.
    """

    def __init__(self, service: str = SERVICE_NAME, environment: str = "local"):
        """Initialize contextual filter.

        Args:
            service: Service name stamped on every record
            environment: Environment label (production, staging, local)
        """
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        """Enrich record with static metadata and active context.

        Args:
            record: Log record to enrich

        Returns:
            Always True (the record is never dropped)
        """
        record.service = self.service
        record.environment = self.environment

        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Mandatory keys come first: timestamp (ISO-8601 UTC, milliseconds, 'Z'),
    level, logger and message. Exceptions are rendered under exc_info.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single-line JSON object.

        Args:
            record: Log record to format

        Returns:
            JSON string with mandatory fields first, then structured fields
        """
        log_obj: Dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_obj.update(record_fields(record))

        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False, default=str)

    def _format_timestamp(self, created: float) -> str:
        """Format a record timestamp as ISO-8601 UTC with milliseconds.

        Args:
            created: Unix timestamp from LogRecord.created

        Returns:
            Timestamp such as "2025-11-04T12:00:00.123Z"
        """
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class KeyValueFormatter(logging.Formatter):
    """Human-readable logs for local runs.

    Produces logs in format:
    timestamp [level] logger: message key1=value1 key2=value2

    Static service/environment fields are omitted to keep lines short.
    """

    STATIC_FIELDS = frozenset({"service", "environment"})

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a prefix line followed by key=value pairs.

        Args:
            record: Log record to format

        Returns:
            Formatted line with structured fields sorted by key
        """
        base = super().format(record)

        pairs = [
            f"{key}={self._render(value)}"
            for key, value in sorted(record_fields(record, skip=self.STATIC_FIELDS).items())
        ]

        if pairs:
            return f"{base} {' '.join(pairs)}"
        return base

    @staticmethod
    def _render(value: Any) -> str:
        """Render one field value: null, lower-case booleans, quoted strings with spaces."""
        if value is None:
            return "null"
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, str):
            # Quote strings with spaces or special chars
            if " " in value or "=" in value or "," in value:
                return f'"{value}"'
            return value
        return str(value)


def configure_logging(
    level: str = "INFO",
    format_type: LogFormat = "key-value",
    environment: str = "local",
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Configure the root logger with the specified level and format.

    Logs go to stderr by default so stdout stays reserved for command output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Output format - 'json' or 'key-value'
        environment: Environment label (production, staging, local)
        stream: Optional stream to write to (default: sys.stderr)

    Raises:
        ValueError: If level or format_type is invalid
    """
    if isinstance(level, Enum):
        level = level.value
    if isinstance(format_type, Enum):
        format_type = format_type.value

    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    if format_type == "json":
        formatter: logging.Formatter = JSONFormatter()
    elif format_type == "key-value":
        formatter = KeyValueFormatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        raise ValueError(f"Invalid log format: {format_type}. Must be 'json' or 'key-value'")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    handler.addFilter(ContextualFilter(service=SERVICE_NAME, environment=environment))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # urllib3 logs full request URLs (including credential query params) at DEBUG
    logging.getLogger("urllib3").setLevel(max(numeric_level, logging.INFO))

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "event": "logging.configured",
            "component": "logging",
            "log_level": str(level).upper(),
            "log_format": format_type,
        },
    )
