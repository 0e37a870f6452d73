"""Unit tests for the tablebridge exception hierarchy.

This module tests the exception classes, their taxonomy categories and the
error code constants.
"""

import pytest

from tablebridge.core.exceptions import (
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


class TestTableBridgeException:
    """Test base tablebridge exception class."""

    def test_basic_exception_creation(self):
        """Test basic exception creation with message only."""
        exc = TableBridgeException("Test error message")

        assert str(exc) == "TableBridgeException: Test error message"
        assert exc.message == "Test error message"
        assert exc.code == "TableBridgeException"
        assert exc.context == {}
        assert exc.cause is None
        assert exc.category == "internal"

    def test_exception_with_custom_code(self):
        """Test exception creation with custom error code."""
        exc = TableBridgeException("Test error", code="CUSTOM_ERROR")

        assert exc.code == "CUSTOM_ERROR"
        assert str(exc) == "CUSTOM_ERROR: Test error"

    def test_exception_to_dict(self):
        """Test exception serialization to dictionary."""
        original_error = ValueError("Original")
        exc = QueryError(
            "Query error: no such table: cards",
            code=ErrorCodes.QUERY_EXECUTION_FAILED,
            context={"connection_id": "notes"},
            cause=original_error,
        )

        result = exc.to_dict()

        assert result["error_type"] == "QueryError"
        assert result["category"] == "statement"
        assert result["message"] == "Query error: no such table: cards"
        assert result["code"] == "QUERY_EXECUTION_FAILED"
        assert result["context"] == {"connection_id": "notes"}
        assert result["cause"] == "Original"

    def test_exception_repr(self):
        """Test exception string representation."""
        exc = TableBridgeException("Test message", code="TEST_CODE", context={"key": "value"})

        repr_str = repr(exc)

        assert "TableBridgeException" in repr_str
        assert "Test message" in repr_str
        assert "TEST_CODE" in repr_str
        assert "{'key': 'value'}" in repr_str


class TestExceptionHierarchy:
    """Test exception inheritance and taxonomy categories."""

    def test_configuration_errors(self):
        for exc in [ConfigurationError("bad"), ValidationError("bad")]:
            assert isinstance(exc, TableBridgeException)
            assert isinstance(exc, ConfigurationError)
            assert exc.category == "configuration"

    def test_connection_errors(self):
        for exc in [DatabaseConnectionError("down"), AuthenticationError("denied")]:
            assert isinstance(exc, ConnectionError)
            assert isinstance(exc, DatabaseConnectionError)
            assert exc.category == "connection"

    def test_connection_error_does_not_shadow_builtin_handling(self):
        """The package ConnectionError is not the builtin one."""
        assert not issubclass(ConnectionError, OSError)

    def test_statement_errors(self):
        for exc in [QueryError("boom"), MetadataError("boom")]:
            assert isinstance(exc, StatementError)
            assert exc.category == "statement"

    def test_lookup_error(self):
        exc = ConnectionNotFoundError("Connection not found: x", code=ErrorCodes.CONNECTION_NOT_FOUND)

        assert exc.category == "lookup"
        assert exc.code == "CONNECTION_NOT_FOUND"

    def test_catch_by_category_base(self):
        with pytest.raises(ConnectionError):
            raise AuthenticationError("denied", code=ErrorCodes.AUTH_FAILED)


class TestErrorCodes:
    """Test error code constants."""

    @pytest.mark.parametrize(
        "name",
        [
            "CONFIG_NOT_FOUND",
            "CONFIG_INVALID",
            "CONFIG_VALIDATION_FAILED",
            "UNSUPPORTED_ENGINE",
            "CONNECTION_REFUSED",
            "AUTH_FAILED",
            "NOT_CONNECTED",
            "QUERY_EXECUTION_FAILED",
            "STATEMENT_EXECUTION_FAILED",
            "METADATA_EXTRACTION_FAILED",
            "CONNECTION_NOT_FOUND",
            "INTERNAL_ERROR",
        ],
    )
    def test_error_code_matches_its_name(self, name):
        assert getattr(ErrorCodes, name) == name


class TestExceptionUsagePatterns:
    """Test common exception usage patterns."""

    def test_exception_chaining(self):
        """Test exception chaining with cause."""
        try:
            try:
                raise ValueError("Inner error")
            except ValueError as e:
                raise ConfigurationError(
                    "Configuration parsing failed",
                    code=ErrorCodes.CONFIG_INVALID,
                    context={"file": "tablebridge.yaml"},
                    cause=e,
                ) from e
        except ConfigurationError as exc:
            assert exc.cause.__class__ == ValueError
            assert exc.__cause__ is exc.cause
            assert exc.context["file"] == "tablebridge.yaml"
