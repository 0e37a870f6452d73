"""tablebridge core infrastructure.

Modules:
    base: Component base class with a synchronous lifecycle
    exceptions: Exception hierarchy and error codes

Example:
    >>> from tablebridge.core import BaseComponent
    >>> from tablebridge.core.exceptions import QueryError
"""

from .base import BaseComponent
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    ConnectionNotFoundError,
    DatabaseConnectionError,
    ErrorCodes,
    MetadataError,
    QueryError,
    StatementError,
    TableBridgeException,
    ValidationError,
)

__all__ = [
    "BaseComponent",
    "TableBridgeException",
    "ConfigurationError",
    "ValidationError",
    "ConnectionError",
    "DatabaseConnectionError",
    "AuthenticationError",
    "StatementError",
    "QueryError",
    "MetadataError",
    "ConnectionNotFoundError",
    "ErrorCodes",
]
