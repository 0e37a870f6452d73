"""tablebridge exception hierarchy.

This module defines the exception hierarchy used across tablebridge. Every
exception carries an error code, optional context and the original cause,
and belongs to one of four categories so callers can tell failures apart
programmatically.

Classes:
    TableBridgeException: Base exception for all tablebridge operations
    ConfigurationError: Invalid or incomplete connection configuration
    ConnectionError: Native connect or handshake failures
    StatementError: Engine-side statement failures
    ConnectionNotFoundError: Unknown registry identifier

Example:
    >>> try:
    ...     registry.query("analytics", "SELECT 1")
    ... except ConnectionNotFoundError as e:
    ...     logger.error("Lookup failed", error_code=e.code, context=e.context)
"""

from typing import Any, ClassVar, Dict, Optional


class TableBridgeException(Exception):
    """Base exception for all tablebridge operations.

    Attributes:
        message: Human-readable error description
        code: Unique error code for categorization
        context: Additional context information about the error
        cause: Original exception that caused this error (if any)
        category: Error taxonomy bucket shared by a family of exceptions

    Example:
        >>> raise TableBridgeException(
        ...     "Operation failed",
        ...     code="OPERATION_FAILED",
        ...     context={"connection_id": "local"}
        ... )
    """

    category: ClassVar[str] = "internal"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.code: str = code or self.__class__.__name__
        self.context: Dict[str, Any] = context or {}
        self.cause: Optional[Exception] = cause

    def __str__(self) -> str:
        """Return formatted error message with code."""
        return f"{self.code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"context={self.context!r}, "
            f"cause={self.cause!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "category": self.category,
            "message": self.message,
            "code": self.code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(TableBridgeException):
    """Configuration related errors.

    Raised before any native call when a connection configuration is
    missing a field its engine requires, names an unsupported engine, or
    cannot be parsed.
    """

    category: ClassVar[str] = "configuration"


class ValidationError(ConfigurationError):
    """Data validation errors raised while parsing configuration input."""
    pass


class ConnectionError(TableBridgeException):
    """Database connection related errors.

    Base class for native connect failures: unreachable hosts, refused
    handshakes, rejected credentials and use of a closed driver.
    """

    category: ClassVar[str] = "connection"


class DatabaseConnectionError(ConnectionError):
    """Raised when unable to establish or use a database connection."""
    pass


class AuthenticationError(DatabaseConnectionError):
    """Raised when the engine rejects the supplied credentials."""
    pass


class StatementError(TableBridgeException):
    """Engine-side statement failures.

    The engine's own message is kept verbatim behind a short prefix that
    names the operation.
    """

    category: ClassVar[str] = "statement"


class QueryError(StatementError):
    """Raised when a query or write statement fails inside the engine."""
    pass


class MetadataError(StatementError):
    """Raised when schema introspection fails."""
    pass


class ConnectionNotFoundError(TableBridgeException):
    """Raised when an operation names an identifier the registry does not hold."""

    category: ClassVar[str] = "lookup"


class ErrorCodes:
    """Common error codes for tablebridge exceptions."""

    # Configuration errors
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_VALIDATION_FAILED = "CONFIG_VALIDATION_FAILED"
    UNSUPPORTED_ENGINE = "UNSUPPORTED_ENGINE"

    # Connection errors
    CONNECTION_REFUSED = "CONNECTION_REFUSED"
    AUTH_FAILED = "AUTH_FAILED"
    NOT_CONNECTED = "NOT_CONNECTED"

    # Statement errors
    QUERY_EXECUTION_FAILED = "QUERY_EXECUTION_FAILED"
    STATEMENT_EXECUTION_FAILED = "STATEMENT_EXECUTION_FAILED"
    METADATA_EXTRACTION_FAILED = "METADATA_EXTRACTION_FAILED"

    # Lookup errors
    CONNECTION_NOT_FOUND = "CONNECTION_NOT_FOUND"

    # Command boundary
    INTERNAL_ERROR = "INTERNAL_ERROR"
