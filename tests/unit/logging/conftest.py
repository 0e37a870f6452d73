"""Logging-specific test configuration and fixtures."""

from pathlib import Path

import pytest

from tablebridge.config.models import LoggingConfig
from tablebridge.logging import configure_logging
from tablebridge.logging.factory import LoggerFactory


@pytest.fixture
def temp_log_file(temp_dir: Path) -> Path:
    """Path of a log file inside a temporary directory."""
    return temp_dir / "logs" / "tablebridge.log"


@pytest.fixture
def sample_logging_config(temp_log_file):
    """Logging configuration writing JSON to a temporary file."""
    return LoggingConfig(
        level="INFO",
        format="json",
        file_path=temp_log_file,
        console_output=False,
        max_file_size=1048576,  # 1MB
        backup_count=3,
    )


@pytest.fixture
def logger_factory():
    """Clean logger factory, shut down after the test."""
    factory = LoggerFactory()
    yield factory
    factory.shutdown()


@pytest.fixture(autouse=True)
def restore_global_logging():
    """Put back the quiet test configuration after each test."""
    yield
    configure_logging(level="DEBUG", format="text", console_output=False)
