"""Structured logging for tablebridge.

Provides a structlog-backed logger with thread-local context and
correlation ids, so every line written while serving one registry operation
carries the connection it was about.

Classes:
    StructuredLogger: Main structured logging interface
    LogContext: Thread-local context storage
    ContextFilter: Filter copying context onto stdlib log records

Functions:
    correlation_scope: Share one correlation id across a block
    current_correlation_id: Id of the active scope, if any

Example:
    >>> logger = StructuredLogger("database.registry")
    >>> with logger.context(connection_id="notes", operation="query"):
    ...     logger.info("Statement finished", row_count=3)
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import structlog


class LogContext:
    """Thread-local context for log correlation and metadata."""

    def __init__(self) -> None:
        self._local = threading.local()

    def _data(self) -> Dict[str, Any]:
        if not hasattr(self._local, "context"):
            self._local.context = {}
        return self._local.context

    def set(self, key: str, value: Any) -> None:
        self._data()[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._data().get(key, default)

    def get_all(self) -> Dict[str, Any]:
        return self._data().copy()

    def update(self, context: Dict[str, Any]) -> None:
        self._data().update(context)

    def clear(self) -> None:
        self._data().clear()


_correlation_context = LogContext()


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Generator[str, None, None]:
    """Tag every line logged by this thread inside the block with one correlation id.

    Scopes nest; the outer id is restored on exit.

    Example:
        >>> with correlation_scope() as correlation_id:
        ...     registry_logger.info("Connection registered")
    """
    previous = _correlation_context.get("correlation_id")
    correlation_id = correlation_id or str(uuid.uuid4())
    _correlation_context.set("correlation_id", correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_context.set("correlation_id", previous)


def current_correlation_id() -> Optional[str]:
    """Correlation id of the innermost active scope on this thread."""
    return _correlation_context.get("correlation_id")


class ContextFilter(logging.Filter):
    """Logging filter that adds context and the correlation id to log records."""

    def __init__(self, context: Optional[LogContext] = None) -> None:
        super().__init__()
        self._context = context or LogContext()

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self._context.get_all().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        if not hasattr(record, "correlation_id"):
            record.correlation_id = current_correlation_id() or "unknown"

        return True


class StructuredLogger:
    """Structured logger with context management and correlation.

    Fields given to ``bind`` are attached to every event from any thread;
    ``context`` adds fields for the current thread only. The correlation id
    comes from the innermost ``correlation_scope``.

    Attributes:
        name: Logger name

    Example:
        >>> logger = StructuredLogger("connector.sqlite")
        >>> db_logger = logger.bind(connection_id="notes")
        >>> db_logger.info("Connection opened", path="/tmp/notes.db")
    """

    def __init__(
        self,
        name: str,
        *,
        level: str = "INFO",
        enable_correlation: bool = True,
    ) -> None:
        """Initialize structured logger.

        Args:
            name: Logger name (typically module name)
            level: Initial log level
            enable_correlation: Whether to attach correlation ids
        """
        self.name = name
        self._enable_correlation = enable_correlation
        self._logger = structlog.get_logger(name)
        self._context = LogContext()
        self._bound: Dict[str, Any] = {}

        self._stdlib_logger = logging.getLogger(name)
        self._stdlib_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        # One filter per stdlib logger, however many wrappers share it
        if not any(isinstance(f, ContextFilter) for f in self._stdlib_logger.filters):
            self._stdlib_logger.addFilter(ContextFilter())

    def _prepare_event_dict(self, **kwargs: Any) -> Dict[str, Any]:
        event_dict = {**self._bound, **self._context.get_all()}
        if self._enable_correlation:
            correlation_id = current_correlation_id()
            if correlation_id:
                event_dict["correlation_id"] = correlation_id
        event_dict.update(kwargs)
        return event_dict

    @contextmanager
    def context(self, **context_data: Any) -> Generator[None, None, None]:
        """Add context data for the duration of a block."""
        old_context = self._context.get_all()
        try:
            self._context.update(context_data)
            yield
        finally:
            self._context.clear()
            self._context.update(old_context)

    def bind(self, **context_data: Any) -> "StructuredLogger":
        """Create a new logger carrying the current context plus ``context_data``."""
        bound_logger = StructuredLogger(
            self.name,
            level=self.get_level(),
            enable_correlation=self._enable_correlation,
        )
        bound_logger._bound = {**self._bound, **self._context.get_all(), **context_data}
        return bound_logger

    def set_level(self, level: str) -> None:
        log_level = getattr(logging, level.upper(), None)
        if not isinstance(log_level, int):
            raise ValueError(f"Unknown log level: {level}")
        self._stdlib_logger.setLevel(log_level)

    def get_level(self) -> str:
        return logging.getLevelName(self._stdlib_logger.getEffectiveLevel())

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, **self._prepare_event_dict(**kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, **self._prepare_event_dict(**kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, **self._prepare_event_dict(**kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, **self._prepare_event_dict(**kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an error with the active exception's traceback."""
        self._logger.error(message, exc_info=True, **self._prepare_event_dict(**kwargs))

    def log(self, level: str, message: str, **kwargs: Any) -> None:
        getattr(self, level.lower())(message, **kwargs)

    def get_correlation_id(self) -> Optional[str]:
        if not self._enable_correlation:
            return None
        return current_correlation_id()

    def get_context(self) -> Dict[str, Any]:
        return {**self._bound, **self._context.get_all()}

    def __repr__(self) -> str:
        return (
            f"StructuredLogger("
            f"name={self.name!r}, "
            f"level={self.get_level()!r}, "
            f"correlation={self._enable_correlation})"
        )
