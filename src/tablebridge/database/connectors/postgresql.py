# src/tablebridge/database/connectors/postgresql.py
"""PostgreSQL driver for tablebridge."""

import asyncio
from typing import Any, Awaitable, Dict, List, Optional, Sequence, Tuple, TypeVar

import asyncpg

from tablebridge.config.models import ConnectionConfig, EngineKind
from tablebridge.core.exceptions import (
    AuthenticationError,
    DatabaseConnectionError,
    ErrorCodes,
)
from tablebridge.database.base import BaseDatabaseConnection, Row
from tablebridge.database.models import ColumnInfo, TableInfo

R = TypeVar("R")

_TABLES_SQL = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = $1 AND table_type = 'BASE TABLE'
    ORDER BY table_name
"""

_COLUMNS_SQL = """
    SELECT
        c.column_name,
        c.data_type,
        c.is_nullable,
        c.column_default,
        EXISTS (
            SELECT 1
            FROM information_schema.table_constraints tc
            JOIN information_schema.key_column_usage kcu
              ON kcu.constraint_name = tc.constraint_name
             AND kcu.table_schema = tc.table_schema
             AND kcu.table_name = tc.table_name
            WHERE tc.constraint_type = 'PRIMARY KEY'
              AND tc.table_schema = c.table_schema
              AND tc.table_name = c.table_name
              AND kcu.column_name = c.column_name
        ) AS is_primary_key
    FROM information_schema.columns c
    WHERE c.table_schema = $1 AND c.table_name = $2
    ORDER BY c.ordinal_position
"""


def _rows_from_status(status: str) -> int:
    """Rows affected from a command tag such as ``INSERT 0 1`` or ``UPDATE 3``."""
    parts = status.split() if status else []
    if parts and parts[-1].isdigit():
        return int(parts[-1])
    return 0


class PostgreSQLConnection(BaseDatabaseConnection):
    """PostgreSQL driver built on ``asyncpg``.

    asyncpg only offers coroutines, so each handle owns a private event loop
    created at connect time. Every operation drives that loop until the
    coroutine finishes; the loop is closed only by ``close()``, after the
    native connection.
    """

    component_name = "PostgreSQLConnection"
    version = "1.0.0"
    engine = EngineKind.POSTGRES
    native_errors = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

    def __init__(self, config: ConnectionConfig):
        super().__init__(config)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._connection: Optional[asyncpg.Connection] = None

    def _connect_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "host": self.config.host,
            "port": self.config.port,
            "database": self.config.database,
            "user": self.config.username,
            "password": self.config.password_value,
        }
        if self.config.use_ssl is not None:
            kwargs["ssl"] = "require" if self.config.use_ssl else "disable"
        return kwargs

    def _run(self, awaitable: Awaitable[R]) -> R:
        return self._loop.run_until_complete(awaitable)

    def _initialize(self) -> None:
        """Open the event loop and the asyncpg connection."""
        self.logger.info(
            "Connecting to PostgreSQL",
            host=self.config.host,
            port=self.config.port,
            database=self.config.database,
        )
        self._loop = asyncio.new_event_loop()
        context = {
            "host": self.config.host,
            "port": self.config.port,
            "database": self.config.database,
        }

        try:
            self._connection = self._run(asyncpg.connect(**self._connect_kwargs()))
        except asyncpg.InvalidAuthorizationSpecificationError as e:
            self._discard_loop()
            raise AuthenticationError(
                f"PostgreSQL authentication failed: {e}",
                code=ErrorCodes.AUTH_FAILED,
                context=context,
                cause=e,
            ) from e
        except Exception as e:
            self._discard_loop()
            raise DatabaseConnectionError(
                f"PostgreSQL connection error: {e}",
                code=ErrorCodes.CONNECTION_REFUSED,
                context=context,
                cause=e,
            ) from e

        server_version = self._connection.get_server_version()
        self._server_version = f"PostgreSQL {server_version.major}.{server_version.minor}"
        self.logger.info("PostgreSQL connection opened", version=self._server_version)

    def _discard_loop(self) -> None:
        if self._loop is not None:
            self._loop.close()
            self._loop = None

    def _cleanup(self) -> None:
        """Close the asyncpg connection, then its event loop."""
        try:
            if self._connection is not None:
                self._run(self._connection.close())
                self.logger.info("PostgreSQL connection closed")
        finally:
            self._connection = None
            self._discard_loop()

    def _fetch(self, sql: str, params: Optional[Sequence[Any]] = None) -> Tuple[List[str], List[Row]]:
        records = self._run(self._connection.fetch(sql, *(params or ())))
        if not records:
            return [], []
        columns = list(records[0].keys())
        return columns, [list(record.values()) for record in records]

    def _execute(self, sql: str) -> Tuple[int, Optional[int]]:
        status = self._run(self._connection.execute(sql))
        # No session-wide last insert id without RETURNING
        return _rows_from_status(status), None

    def _list_tables(self) -> List[TableInfo]:
        schema = self.config.schema_name
        _, rows = self._fetch(_TABLES_SQL, (schema,))
        return [TableInfo(name=row[0], schema=schema) for row in rows]

    def _list_columns(self, table: str) -> List[ColumnInfo]:
        _, rows = self._fetch(_COLUMNS_SQL, (self.config.schema_name, table))
        return [
            ColumnInfo(
                name=row[0],
                data_type=row[1],
                nullable=row[2] == "YES",
                default=row[3],
                primary_key=bool(row[4]),
            )
            for row in rows
        ]
