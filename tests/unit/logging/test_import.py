"""Simple import test to verify logging module can be imported."""

import pytest


def test_import_logging_module():
    """Test that logging module can be imported without errors."""
    try:
        from tablebridge.logging import (
            PerformanceLogger,
            StructuredLogger,
            configure_logging,
            get_logger,
        )
        assert callable(configure_logging)
        assert StructuredLogger is not None
        assert PerformanceLogger is not None
        assert callable(get_logger)
    except ImportError as e:
        pytest.fail(f"Failed to import logging module: {e}")


def test_create_simple_logger():
    """Test creating a simple logger."""
    from tablebridge.logging import get_logger

    logger = get_logger("test.simple")
    assert logger.name == "test.simple"


def test_basic_logging(log_output):
    """Test that every level reaches structlog."""
    from tablebridge.logging import get_logger

    logger = get_logger("test.basic")

    logger.debug("Test debug message")
    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")

    assert [entry["log_level"] for entry in log_output] == ["debug", "info", "warning", "error"]
