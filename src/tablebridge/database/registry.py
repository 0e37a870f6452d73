# src/tablebridge/database/registry.py
"""Connection registry for tablebridge.

The registry owns every live connection handle under a caller-chosen
identifier and routes all operations to it. A single lock covers both the
lookup and the driver call of each operation, so no two operations ever run
at the same time, whichever connections they target.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Generator, List, Optional

from tablebridge.config.models import ConnectionConfig
from tablebridge.core.exceptions import ConnectionNotFoundError, ErrorCodes
from tablebridge.database.base import BaseDatabaseConnection
from tablebridge.database.factory import ConnectionFactory
from tablebridge.database.models import (
    ColumnInfo,
    ConnectionInfo,
    ExecuteResult,
    QueryResult,
    TableInfo,
)
from tablebridge.logging import correlation_scope, get_logger


class ConnectionRegistry:
    """Keyed store of live database connections.

    Example:
        >>> registry = ConnectionRegistry()
        >>> info = registry.connect(ConnectionConfig(id="notes", db_type="sqlite", file_path="notes.db"))
        >>> info.db_type
        'sqlite'
        >>> registry.query("notes", "SELECT 1 AS one").rows
        [['1']]
        >>> registry.disconnect("notes")
    """

    def __init__(self, factory: Optional[ConnectionFactory] = None):
        self.logger = get_logger("database.registry")
        self._factory = factory or ConnectionFactory()
        self._connections: Dict[str, BaseDatabaseConnection] = {}
        self._lock = threading.Lock()

    @property
    def factory(self) -> ConnectionFactory:
        return self._factory

    @contextmanager
    def _operation(self) -> Generator[None, None, None]:
        """Hold the registry lock and tag the operation's log lines with one correlation id."""
        with self._lock, correlation_scope():
            yield

    def connect(self, config: ConnectionConfig) -> ConnectionInfo:
        """Open a connection and register it under ``config.id``.

        A connection already registered under the same id is closed and
        replaced once the new one is open. A failed connect registers
        nothing.
        """
        with self._operation():
            connection = self._factory.create(config)
            previous = self._connections.get(config.id)
            self._connections[config.id] = connection

            if previous is not None:
                self.logger.warning(
                    "Replacing live connection",
                    connection_id=config.id,
                    previous_handle=previous.connection_id,
                )
                previous.close()

            self.logger.info(
                "Connection registered",
                connection_id=config.id,
                engine=config.db_type.value,
                handle=connection.connection_id,
            )
            return connection.info()

    def disconnect(self, connection_id: str) -> None:
        """Remove and close a connection. Unknown ids are ignored."""
        with self._operation():
            connection = self._connections.pop(connection_id, None)
            if connection is None:
                self.logger.debug("Disconnect for unknown connection", connection_id=connection_id)
                return

            connection.close()
            self.logger.info("Connection removed", connection_id=connection_id)

    def query(self, connection_id: str, sql: str) -> QueryResult:
        with self._operation():
            return self._get(connection_id).query(sql)

    def execute(self, connection_id: str, sql: str) -> ExecuteResult:
        with self._operation():
            return self._get(connection_id).execute(sql)

    def get_tables(self, connection_id: str) -> List[TableInfo]:
        with self._operation():
            return self._get(connection_id).get_tables()

    def get_columns(self, connection_id: str, table: str) -> List[ColumnInfo]:
        with self._operation():
            return self._get(connection_id).get_columns(table)

    def get_info(self, connection_id: str) -> ConnectionInfo:
        with self._operation():
            return self._get(connection_id).info()

    def list_connections(self) -> Dict[str, ConnectionInfo]:
        """Snapshot of every registered connection, keyed by id."""
        with self._operation():
            return {key: connection.info() for key, connection in self._connections.items()}

    def close_all(self) -> None:
        """Close and remove every registered connection."""
        with self._operation():
            connections = list(self._connections.items())
            self._connections.clear()

            for connection_id, connection in connections:
                connection.close()
                self.logger.info("Connection removed", connection_id=connection_id)

    def _get(self, connection_id: str) -> BaseDatabaseConnection:
        connection = self._connections.get(connection_id)
        if connection is None:
            raise ConnectionNotFoundError(
                f"Connection not found: {connection_id}",
                code=ErrorCodes.CONNECTION_NOT_FOUND,
                context={
                    "connection_id": connection_id,
                    "available_connections": sorted(self._connections),
                },
            )
        return connection

    def __contains__(self, connection_id: object) -> bool:
        with self._lock:
            return connection_id in self._connections

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)


_default_registry: Optional[ConnectionRegistry] = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> ConnectionRegistry:
    """Get the process-wide registry, creating it on first use."""
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = ConnectionRegistry()
        return _default_registry
