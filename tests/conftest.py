"""Pytest configuration and shared fixtures.

This module provides pytest configuration and shared fixtures for all tests
in the tablebridge test suite.
"""

import tempfile
from pathlib import Path
from typing import Generator, List

import pytest
import structlog

from tablebridge.config.models import ConnectionConfig, EngineKind
from tablebridge.logging import configure_logging

# Keep test runs quiet: no console handler, every level reaches structlog.
configure_logging(level="DEBUG", format="text", console_output=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def log_output() -> Generator[List[dict], None, None]:
    """Capture structlog event dictionaries emitted during the test."""
    with structlog.testing.capture_logs() as captured:
        yield captured


@pytest.fixture
def sqlite_path(temp_dir: Path) -> Path:
    """Path of a not-yet-created SQLite database file."""
    return temp_dir / "tablebridge-test.db"


@pytest.fixture
def sqlite_config(sqlite_path: Path) -> ConnectionConfig:
    """SQLite connection configuration pointing at a temporary file."""
    return ConnectionConfig(id="local", db_type=EngineKind.SQLITE, file_path=str(sqlite_path))


@pytest.fixture
def postgres_config() -> ConnectionConfig:
    """PostgreSQL connection configuration for mocked driver tests."""
    return ConnectionConfig(
        id="analytics",
        name="Analytics",
        db_type=EngineKind.POSTGRES,
        host="db.internal",
        port=5432,
        database="analytics",
        username="reporter",
        password="test_password",
    )


@pytest.fixture
def mysql_config() -> ConnectionConfig:
    """MySQL connection configuration for mocked driver tests."""
    return ConnectionConfig(
        id="shop",
        db_type=EngineKind.MYSQL,
        host="mysql.internal",
        port=3306,
        database="shop",
        username="shop_user",
        password="test_password",
        pool_size=2,
    )


# Pytest markers for different test categories
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (slower, real dependencies)"
    )
    config.addinivalue_line(
        "markers", "performance: marks tests as performance tests"
    )
    config.addinivalue_line(
        "markers", "database: marks tests exercising a database driver"
    )


# Auto-mark tests based on their location
def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    tests_root = Path(__file__).parent
    for item in items:
        try:
            test_path = Path(str(item.fspath)).relative_to(tests_root)
        except ValueError:
            continue

        if test_path.parts[0] == "unit":
            item.add_marker(pytest.mark.unit)
        elif test_path.parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        elif test_path.parts[0] == "performance":
            item.add_marker(pytest.mark.performance)

        if "database" in test_path.parts or "connectors" in test_path.parts:
            item.add_marker(pytest.mark.database)
