"""Performance logging for tablebridge operations.

Drivers wrap every native call in ``PerformanceLogger.measure`` so the same
timer that fills ``execution_time_ms`` also feeds the log and the per
operation metrics.

Classes:
    TimingMetrics: A single timing measurement
    PerformanceMetrics: Aggregated metrics for one operation
    TimingContext: Context manager for operation timing
    PerformanceLogger: Main performance logging interface

Example:
    >>> perf_logger = PerformanceLogger("connector.sqlite")
    >>> with perf_logger.measure("query", connection_id="notes") as timer:
    ...     cursor = connection.execute("SELECT * FROM cards")
    >>> timer.elapsed_ms
    3
"""

import statistics
import threading
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Generator, Optional, Union

from .structured import StructuredLogger

# Window of recent durations kept for the median, and of recent error texts.
MAX_SAMPLES = 1000
MAX_ERRORS = 50


@dataclass
class TimingMetrics:
    """Metrics for a single timing measurement."""

    operation: str
    start_time: float
    end_time: Optional[float] = None
    duration: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    error: Optional[str] = None

    def complete(self, success: bool = True, error: Optional[str] = None) -> None:
        """Mark timing as complete."""
        self.end_time = time.perf_counter()
        self.duration = self.end_time - self.start_time
        self.success = success
        self.error = error

    @property
    def duration_ms(self) -> Optional[float]:
        return self.duration * 1000 if self.duration is not None else None

    @property
    def is_complete(self) -> bool:
        return self.end_time is not None


@dataclass
class PerformanceMetrics:
    """Aggregated performance metrics for an operation.

    Counts, totals and extremes are running aggregates over every call. The
    median covers the last ``MAX_SAMPLES`` durations and ``errors`` keeps the
    last ``MAX_ERRORS`` messages, so memory stays flat however long the
    process runs.
    """

    operation: str
    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    total_duration: float = 0.0
    min_duration: Optional[float] = None
    max_duration: Optional[float] = None
    avg_duration: Optional[float] = None
    errors: Deque[str] = field(default_factory=lambda: deque(maxlen=MAX_ERRORS))
    _samples: Deque[float] = field(default_factory=lambda: deque(maxlen=MAX_SAMPLES), repr=False)

    def add_timing(self, timing: TimingMetrics) -> None:
        """Add a completed timing measurement."""
        if not timing.is_complete or timing.duration is None:
            return

        self.total_calls += 1
        if timing.success:
            self.successful_calls += 1
        else:
            self.failed_calls += 1
            if timing.error:
                self.errors.append(timing.error)

        duration = timing.duration
        self.total_duration += duration
        self._samples.append(duration)

        if self.min_duration is None or duration < self.min_duration:
            self.min_duration = duration
        if self.max_duration is None or duration > self.max_duration:
            self.max_duration = duration

        self.avg_duration = self.total_duration / self.total_calls

    @property
    def median_duration(self) -> Optional[float]:
        """Median of the recent sample window, computed on demand."""
        if not self._samples:
            return None
        return statistics.median(self._samples)

    @property
    def success_rate(self) -> float:
        """Success rate as a percentage (0-100)."""
        if self.total_calls == 0:
            return 0.0
        return (self.successful_calls / self.total_calls) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "total_calls": self.total_calls,
            "successful_calls": self.successful_calls,
            "failed_calls": self.failed_calls,
            "success_rate": self.success_rate,
            "total_duration": self.total_duration,
            "min_duration": self.min_duration,
            "max_duration": self.max_duration,
            "avg_duration": self.avg_duration,
            "median_duration": self.median_duration,
            "error_count": len(self.errors),
        }


class TimingContext:
    """Context manager for measuring operation timing.

    The measurement is only available after the block exits.
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[StructuredLogger] = None,
        metadata: Optional[Dict[str, Any]] = None,
        auto_log: bool = True,
    ) -> None:
        self.operation = operation
        self.logger = logger
        self.metadata = metadata or {}
        self.auto_log = auto_log
        self._timing: Optional[TimingMetrics] = None

    @property
    def timing(self) -> Optional[TimingMetrics]:
        return self._timing

    @property
    def duration(self) -> Optional[float]:
        """Duration in seconds, None until the block has exited."""
        return self._timing.duration if self._timing else None

    @property
    def duration_ms(self) -> Optional[float]:
        return self._timing.duration_ms if self._timing else None

    @property
    def elapsed_ms(self) -> int:
        """Duration in whole milliseconds, 0 until the block has exited."""
        duration_ms = self.duration_ms
        return int(duration_ms) if duration_ms is not None else 0

    def __enter__(self) -> "TimingContext":
        self._timing = TimingMetrics(
            operation=self.operation,
            start_time=time.perf_counter(),
            metadata=self.metadata,
        )
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._timing is None:
            return

        success = exc_type is None
        error = str(exc_val) if exc_val else None
        self._timing.complete(success=success, error=error)

        if self.logger and self.auto_log:
            if success:
                self.logger.debug(
                    "Operation completed",
                    operation=self.operation,
                    duration_ms=self._timing.duration_ms,
                    **self.metadata,
                )
            else:
                self.logger.warning(
                    "Operation failed",
                    operation=self.operation,
                    duration_ms=self._timing.duration_ms,
                    error=error,
                    **self.metadata,
                )


class PerformanceLogger:
    """Performance logger for monitoring operation timings.

    Example:
        >>> perf_logger = PerformanceLogger("connector.mysql")
        >>> with perf_logger.measure("execute"):
        ...     cursor.execute("DELETE FROM cards WHERE archived = 1")
        >>> perf_logger.get_metrics("execute").total_calls
        1
    """

    def __init__(
        self,
        name: str,
        *,
        auto_log: bool = True,
        track_metrics: bool = True,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self.name = name
        self.auto_log = auto_log
        self.track_metrics = track_metrics
        self.logger = logger or StructuredLogger(f"perf.{name}")
        self._metrics: Dict[str, PerformanceMetrics] = {}
        # Shared by every connection of an engine, across registries.
        self._metrics_lock = threading.Lock()

    @contextmanager
    def measure(self, operation: str, **metadata: Any) -> Generator[TimingContext, None, None]:
        """Measure the enclosed block.

        Args:
            operation: Operation name
            **metadata: Additional metadata attached to the log line

        Yields:
            TimingContext for the operation
        """
        timing_context = TimingContext(
            operation=operation,
            logger=self.logger if self.auto_log else None,
            metadata=metadata,
            auto_log=self.auto_log,
        )

        try:
            with timing_context as ctx:
                yield ctx
        finally:
            if self.track_metrics and timing_context.timing:
                self._add_timing_to_metrics(timing_context.timing)

    def _add_timing_to_metrics(self, timing: TimingMetrics) -> None:
        with self._metrics_lock:
            if timing.operation not in self._metrics:
                self._metrics[timing.operation] = PerformanceMetrics(operation=timing.operation)
            self._metrics[timing.operation].add_timing(timing)

    def get_metrics(
        self, operation: Optional[str] = None
    ) -> Union[PerformanceMetrics, Dict[str, PerformanceMetrics]]:
        """Get metrics for one operation, or all metrics keyed by operation."""
        with self._metrics_lock:
            if operation:
                return self._metrics.get(operation, PerformanceMetrics(operation=operation))
            return dict(self._metrics)

    def reset_metrics(self, operation: Optional[str] = None) -> None:
        with self._metrics_lock:
            if operation:
                self._metrics.pop(operation, None)
            else:
                self._metrics.clear()
