"""tablebridge structured logging.

Classes:
    StructuredLogger: Main structured logging interface
    PerformanceLogger: Operation timing and metrics
    LoggerFactory: Logger creation and configuration

Example:
    >>> from tablebridge.logging import get_logger, get_performance_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Registry created")
    >>> perf_logger = get_performance_logger("connector.sqlite")
    >>> with perf_logger.measure("query"):
    ...     pass
"""

from .factory import (
    LoggerConfig,
    LoggerFactory,
    configure_logging,
    get_factory,
    get_logger,
    get_performance_logger,
    shutdown_logging,
)
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .handlers import ConsoleHandler, RotatingFileHandler
from .performance import PerformanceLogger, PerformanceMetrics, TimingContext, TimingMetrics
from .structured import LogContext, StructuredLogger, correlation_scope, current_correlation_id

__all__ = [
    "LoggerConfig",
    "LoggerFactory",
    "configure_logging",
    "get_factory",
    "get_logger",
    "get_performance_logger",
    "shutdown_logging",
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    "ConsoleHandler",
    "RotatingFileHandler",
    "PerformanceLogger",
    "PerformanceMetrics",
    "TimingContext",
    "TimingMetrics",
    "LogContext",
    "StructuredLogger",
    "correlation_scope",
    "current_correlation_id",
]
