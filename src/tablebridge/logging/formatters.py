"""Log formatters for tablebridge.

Classes:
    JSONFormatter: One JSON object per record, for log aggregation
    TextFormatter: Human-readable single-line output

Functions:
    get_formatter: Formatter for a configured format name
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict

# Attributes every LogRecord carries; anything else is structured context.
_STANDARD_RECORD_FIELDS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "message", "exc_info",
    "exc_text", "stack_info", "taskName",
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_FIELDS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured log output.

    Example:
        {"message":"Connection registered","timestamp":"2024-05-02T10:30:45.123456",
         "level":"INFO","logger":"database.registry","connection_id":"notes"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        log_data.update(_extra_fields(record))
        return json.dumps(log_data, default=str, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """Human-readable text formatter.

    Example:
        2024-05-02 10:30:45.123 [INFO] database.registry: Connection registered (connection_id=notes)
    """

    def __init__(self, *, include_extras: bool = True) -> None:
        super().__init__()
        self.include_extras = include_extras

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        timestamp = dt.strftime("%Y-%m-%d %H:%M:%S.") + f"{dt.microsecond:06d}"[:3]
        line = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"

        if self.include_extras:
            extras = _extra_fields(record)
            if extras:
                rendered = ", ".join(f"{key}={value}" for key, value in extras.items())
                line = f"{line} ({rendered})"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_formatter(format_name: str) -> logging.Formatter:
    """Get a formatter by name ("json" or "text")."""
    if format_name.lower() == "text":
        return TextFormatter()
    return JSONFormatter()
