"""Base classes for tablebridge components.

Classes:
    BaseComponent: Generic base class with a synchronous initialize/cleanup
        lifecycle, used by every database driver

Example:
    >>> class SQLiteConnection(BaseComponent[ConnectionConfig]):
    ...     def _initialize(self) -> None:
    ...         self._connection = sqlite3.connect(self.config.file_path)
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Generic, TypeVar

import structlog

from .exceptions import TableBridgeException, ValidationError

T = TypeVar("T")  # Configuration type


class BaseComponent(Generic[T], ABC):
    """Base class for tablebridge components.

    Provides configuration ownership, a guarded initialize/cleanup lifecycle
    and health reporting. Subclasses implement ``_initialize`` and may
    override ``_cleanup``.

    Type Parameters:
        T: Type of configuration object this component accepts

    Attributes:
        component_name: Name of the component for logging and identification
        version: Component version
    """

    component_name: ClassVar[str] = "BaseComponent"
    version: ClassVar[str] = "1.0.0"

    def __init__(self, config: T) -> None:
        """Initialize base component.

        Args:
            config: Configuration object for this component

        Raises:
            ValidationError: If configuration is None
        """
        if config is None:
            raise ValidationError(
                "Configuration cannot be None",
                code="CONFIG_NULL",
                context={"component": self.component_name},
            )

        self._config: T = config
        self._initialized: bool = False
        self._creation_time: float = time.time()
        self._lifecycle_lock = threading.Lock()
        self._logger = structlog.get_logger(self.__class__.__name__)

    @property
    def config(self) -> T:
        """Get component configuration."""
        return self._config

    @property
    def is_initialized(self) -> bool:
        """Check if component is initialized."""
        return self._initialized

    @property
    def uptime(self) -> float:
        """Get time since component creation in seconds."""
        return time.time() - self._creation_time

    def initialize(self) -> None:
        """Initialize the component once.

        Raises:
            TableBridgeException: If initialization fails. Package exceptions
                raised by ``_initialize`` propagate unchanged.
        """
        with self._lifecycle_lock:
            if self._initialized:
                return

            self._logger.debug("Initializing component", component=self.component_name)
            try:
                self._initialize()
            except TableBridgeException:
                raise
            except Exception as e:
                raise TableBridgeException(
                    f"Failed to initialize {self.component_name}: {e}",
                    code="INIT_FAILED",
                    context={"component": self.component_name},
                    cause=e,
                ) from e

            self._initialized = True
            self._logger.debug("Component initialized", component=self.component_name)

    def cleanup(self) -> None:
        """Release component resources.

        Safe to call more than once. Errors raised by ``_cleanup`` are logged
        and not re-raised.
        """
        with self._lifecycle_lock:
            if not self._initialized:
                return

            try:
                self._cleanup()
            except Exception as e:
                self._logger.error(
                    "Component cleanup failed",
                    component=self.component_name,
                    error=str(e),
                )
            finally:
                self._initialized = False

    @abstractmethod
    def _initialize(self) -> None:
        """Acquire the component's resources."""

    def _cleanup(self) -> None:
        """Release the component's resources."""

    def get_health_status(self) -> Dict[str, Any]:
        """Get component health status."""
        return {
            "component": self.component_name,
            "version": self.version,
            "initialized": self._initialized,
            "uptime_seconds": self.uptime,
            "status": "healthy" if self._initialized else "not_initialized",
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"name={self.component_name!r}, "
            f"initialized={self._initialized}, "
            f"uptime={self.uptime:.2f}s)"
        )
