"""Logger factory and configuration for tablebridge.

structlog is configured to hand its event dictionaries to the standard
library (``render_to_log_kwargs``), so the stdlib handlers and the
formatters in this package decide the final output format.

Classes:
    LoggerConfig: Runtime settings of the factory
    LoggerFactory: Logger creation and configuration

Functions:
    configure_logging: Configure logging globally
    get_logger: Structured logger from the global factory
    get_performance_logger: Performance logger from the global factory

Example:
    >>> from tablebridge.logging import configure_logging, get_logger
    >>> configure_logging(level="INFO", format="text")
    >>> logger = get_logger("database.registry")
    >>> logger.info("Connection registered", connection_id="notes")
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import structlog

from ..config.models import LoggingConfig
from .formatters import get_formatter
from .handlers import ConsoleHandler, RotatingFileHandler
from .performance import PerformanceLogger
from .structured import StructuredLogger


@dataclass
class LoggerConfig:
    """Configuration applied by the logger factory."""

    level: str = "INFO"
    format: str = "json"
    console_output: bool = True
    file_path: Optional[str] = None
    max_file_size: int = 10485760  # 10MB
    backup_count: int = 5
    correlation_ids: bool = True


class LoggerFactory:
    """Factory for creating and configuring tablebridge loggers.

    Example:
        >>> factory = LoggerFactory()
        >>> factory.configure_from_config(LoggingConfig(level="DEBUG"))
        >>> logger = factory.get_logger("connector.sqlite")
    """

    _VALID_KEYS = frozenset(LoggerConfig.__dataclass_fields__)

    def __init__(self, config: Optional[LoggerConfig] = None) -> None:
        self.config = config or LoggerConfig()
        self.initialized = False
        self._loggers: Dict[str, StructuredLogger] = {}
        self._performance_loggers: Dict[str, PerformanceLogger] = {}

    def configure_from_config(self, logging_config: LoggingConfig) -> None:
        """Configure factory from a LoggingConfig instance."""
        self.config = LoggerConfig(
            level=logging_config.level,
            format=logging_config.format,
            console_output=logging_config.console_output,
            file_path=str(logging_config.file_path) if logging_config.file_path else None,
            max_file_size=logging_config.max_file_size,
            backup_count=logging_config.backup_count,
        )
        self._configure_logging_system()

    def configure_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Configure factory from a dictionary, ignoring unknown keys."""
        for key, value in config_dict.items():
            if key in self._VALID_KEYS:
                setattr(self.config, key, value)
        self._configure_logging_system()

    def _configure_logging_system(self) -> None:
        self._configure_stdlib_logging()
        self._configure_structlog()
        for logger in self._loggers.values():
            logger.set_level(self.config.level)
        self.initialized = True

    def _configure_stdlib_logging(self) -> None:
        level = getattr(logging, self.config.level.upper(), logging.INFO)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        for handler in list(root_logger.handlers):
            if isinstance(handler, (ConsoleHandler, RotatingFileHandler)):
                root_logger.removeHandler(handler)
                handler.close()

        formatter = get_formatter(self.config.format)

        if self.config.console_output:
            console_handler = ConsoleHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        if self.config.file_path:
            file_handler = RotatingFileHandler(
                self.config.file_path,
                maxBytes=self.config.max_file_size,
                backupCount=self.config.backup_count,
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    def _configure_structlog(self) -> None:
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                structlog.stdlib.render_to_log_kwargs,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=False,
        )

    def get_logger(self, name: str, *, level: Optional[str] = None) -> StructuredLogger:
        """Get or create a structured logger."""
        if not self.initialized:
            self._configure_logging_system()

        cache_key = f"{name}_{level}"
        if cache_key not in self._loggers:
            self._loggers[cache_key] = StructuredLogger(
                name=name,
                level=level or self.config.level,
                enable_correlation=self.config.correlation_ids,
            )
        return self._loggers[cache_key]

    def get_performance_logger(
        self,
        name: str,
        *,
        auto_log: bool = True,
        track_metrics: bool = True,
    ) -> PerformanceLogger:
        """Get or create a performance logger."""
        cache_key = f"{name}_{auto_log}_{track_metrics}"
        if cache_key not in self._performance_loggers:
            self._performance_loggers[cache_key] = PerformanceLogger(
                name=name,
                auto_log=auto_log,
                track_metrics=track_metrics,
                logger=self.get_logger(f"perf.{name}"),
            )
        return self._performance_loggers[cache_key]

    def shutdown(self) -> None:
        """Drop cached loggers and detach the handlers this factory installed."""
        self._loggers.clear()
        self._performance_loggers.clear()

        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            if isinstance(handler, (ConsoleHandler, RotatingFileHandler)):
                root_logger.removeHandler(handler)
                handler.close()

        self.initialized = False

    def __repr__(self) -> str:
        return (
            f"LoggerFactory("
            f"level={self.config.level!r}, "
            f"format={self.config.format!r}, "
            f"initialized={self.initialized})"
        )


_global_factory = LoggerFactory()


def configure_logging(
    logging_config: Optional[LoggingConfig] = None,
    *,
    level: str = "INFO",
    format: str = "json",
    console_output: bool = True,
    file_path: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """Configure tablebridge logging globally.

    Args:
        logging_config: Settings loaded from a configuration file; when
            given, the keyword arguments are ignored
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (json, text)
        console_output: Enable console output
        file_path: Optional rotating log file
        **kwargs: Additional LoggerConfig fields
    """
    if logging_config is not None:
        _global_factory.configure_from_config(logging_config)
        return

    _global_factory.configure_from_dict({
        "level": level,
        "format": format,
        "console_output": console_output,
        "file_path": file_path,
        **kwargs,
    })


def get_logger(name: str, *, level: Optional[str] = None) -> StructuredLogger:
    """Get or create a structured logger using the global factory."""
    return _global_factory.get_logger(name, level=level)


def get_performance_logger(
    name: str,
    *,
    auto_log: bool = True,
    track_metrics: bool = True,
) -> PerformanceLogger:
    """Get or create a performance logger using the global factory."""
    return _global_factory.get_performance_logger(
        name,
        auto_log=auto_log,
        track_metrics=track_metrics,
    )


def get_factory() -> LoggerFactory:
    """Get the global logger factory instance."""
    return _global_factory


def shutdown_logging() -> None:
    """Shut down the global logging factory."""
    _global_factory.shutdown()
