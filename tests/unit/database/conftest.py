"""Database-layer fixtures: an in-memory driver standing in for a server engine."""

import threading
import time
from typing import List

import pytest

from tablebridge.config.models import ConnectionConfig, EngineKind
from tablebridge.core.exceptions import DatabaseConnectionError, ErrorCodes
from tablebridge.database.base import BaseDatabaseConnection
from tablebridge.database.connectors import SQLiteConnection
from tablebridge.database.factory import ConnectionFactory
from tablebridge.database.models import ColumnInfo, TableInfo


class FakeServerConnection(BaseDatabaseConnection):
    """Driver double that keeps its rows in memory.

    ``delay`` slows every fetch down so tests can look for overlapping
    calls; ``active``/``max_active`` are shared across all instances.
    """

    component_name = "FakeServerConnection"
    engine = EngineKind.POSTGRES
    native_errors = (RuntimeError,)

    delay = 0.0
    fail_connect = False
    active = 0
    max_active = 0
    instances: List["FakeServerConnection"] = []
    _counter_lock = threading.Lock()

    def __init__(self, config: ConnectionConfig):
        super().__init__(config)
        self.closed = False
        FakeServerConnection.instances.append(self)

    def _initialize(self) -> None:
        if self.fail_connect:
            raise DatabaseConnectionError("refused", code=ErrorCodes.CONNECTION_REFUSED)
        self._server_version = "PostgreSQL 16.2"

    def _cleanup(self) -> None:
        self.closed = True

    def _fetch(self, sql, params=None):
        cls = FakeServerConnection
        with cls._counter_lock:
            cls.active += 1
            cls.max_active = max(cls.max_active, cls.active)
        try:
            time.sleep(self.delay)
            if sql == "FAIL":
                raise RuntimeError("syntax error at or near \"FAIL\"")
            return ["value"], [(sql,)]
        finally:
            with cls._counter_lock:
                cls.active -= 1

    def _execute(self, sql):
        return 1, None

    def _list_tables(self):
        return [TableInfo("boards", "public")]

    def _list_columns(self, table):
        return [ColumnInfo("id", "integer", False, None, True)]


@pytest.fixture
def fake_server():
    FakeServerConnection.delay = 0.0
    FakeServerConnection.fail_connect = False
    FakeServerConnection.active = 0
    FakeServerConnection.max_active = 0
    FakeServerConnection.instances = []
    yield FakeServerConnection


@pytest.fixture
def factory(fake_server):
    return ConnectionFactory({
        EngineKind.SQLITE: SQLiteConnection,
        EngineKind.POSTGRES: fake_server,
    })


@pytest.fixture
def server_config():
    return ConnectionConfig(
        id="analytics",
        db_type=EngineKind.POSTGRES,
        host="db.internal",
        database="analytics",
        username="reporter",
    )
