# src/tablebridge/database/connectors/mysql.py
"""MySQL/MariaDB driver for tablebridge."""

from contextlib import contextmanager
from typing import Any, Generator, List, Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import errorcode, pooling

from tablebridge.config.models import ConnectionConfig, EngineKind
from tablebridge.core.exceptions import (
    AuthenticationError,
    DatabaseConnectionError,
    ErrorCodes,
)
from tablebridge.database.base import BaseDatabaseConnection, Row
from tablebridge.database.models import ColumnInfo, TableInfo

# DESCRIBE column order: the default comes after the key flag.
_COLUMNS_SQL = """
    SELECT COLUMN_NAME, COLUMN_TYPE, IS_NULLABLE, COLUMN_KEY, COLUMN_DEFAULT
    FROM information_schema.columns
    WHERE table_schema = DATABASE() AND table_name = %s
    ORDER BY ORDINAL_POSITION
"""


def _text(value: Any) -> Optional[str]:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return value


class MySQLConnection(BaseDatabaseConnection):
    """MySQL/MariaDB driver using a ``mysql.connector`` connection pool.

    Every operation checks a connection out of the pool and returns it
    afterwards. The pool runs in autocommit mode.
    """

    component_name = "MySQLConnection"
    version = "1.0.0"
    engine = EngineKind.MYSQL
    native_errors = (mysql.connector.Error,)

    def __init__(self, config: ConnectionConfig):
        super().__init__(config)
        self._connection_pool: Optional[pooling.MySQLConnectionPool] = None

    def _initialize(self) -> None:
        """Create the connection pool and read the server version."""
        self.logger.info(
            "Connecting to MySQL",
            host=self.config.host,
            port=self.config.port,
            database=self.config.database,
            pool_size=self.config.pool_size,
        )
        context = {
            "host": self.config.host,
            "port": self.config.port,
            "database": self.config.database,
        }

        try:
            self._connection_pool = pooling.MySQLConnectionPool(
                pool_name=f"tablebridge-{self.connection_id[:8]}",
                pool_size=self.config.pool_size,
                host=self.config.host,
                port=self.config.port,
                database=self.config.database,
                user=self.config.username,
                password=self.config.password_value,
                charset="utf8mb4",
                autocommit=True,
            )
            with self._checkout() as conn:
                server_info = conn.get_server_info()
        except mysql.connector.Error as e:
            self._connection_pool = None
            if e.errno == errorcode.ER_ACCESS_DENIED_ERROR:
                raise AuthenticationError(
                    f"MySQL authentication failed: {e}",
                    code=ErrorCodes.AUTH_FAILED,
                    context=context,
                    cause=e,
                ) from e
            raise DatabaseConnectionError(
                f"MySQL connection error: {e}",
                code=ErrorCodes.CONNECTION_REFUSED,
                context=context,
                cause=e,
            ) from e

        self._server_version = f"MySQL {server_info}"
        self.logger.info("MySQL connection pool opened", version=self._server_version)

    def _cleanup(self) -> None:
        """Close the idle pooled connections."""
        pool, self._connection_pool = self._connection_pool, None
        if pool is None:
            return

        # Connections are checked out per operation, so only idle ones remain.
        # The pool has no public close; without the private hook they are
        # released when the pool is collected.
        remove_connections = getattr(pool, "_remove_connections", None)
        if remove_connections is not None:
            remove_connections()
        self.logger.info("MySQL connection pool closed")

    @contextmanager
    def _checkout(self) -> Generator[Any, None, None]:
        conn = self._connection_pool.get_connection()
        try:
            yield conn
        finally:
            # close() hands a pooled connection back to the pool
            conn.close()

    def _fetch(self, sql: str, params: Optional[Sequence[Any]] = None) -> Tuple[List[str], List[Row]]:
        with self._checkout() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(sql, tuple(params) if params else None)
                if cursor.description is None:
                    return [], []
                columns = [desc[0] for desc in cursor.description]
                return columns, cursor.fetchall()
            finally:
                cursor.close()

    def _execute(self, sql: str) -> Tuple[int, Optional[int]]:
        with self._checkout() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(sql)
                if cursor.with_rows:
                    cursor.fetchall()
                # lastrowid is 0 or None unless the statement generated an id
                return cursor.rowcount, cursor.lastrowid or None
            finally:
                cursor.close()

    def _list_tables(self) -> List[TableInfo]:
        _, rows = self._fetch("SHOW FULL TABLES WHERE Table_type = 'BASE TABLE'")
        names = sorted(_text(row[0]) for row in rows)
        return [TableInfo(name=name, schema=self.config.database) for name in names]

    def _list_columns(self, table: str) -> List[ColumnInfo]:
        _, rows = self._fetch(_COLUMNS_SQL, (table,))
        return [
            ColumnInfo(
                name=_text(row[0]),
                data_type=_text(row[1]),
                nullable=_text(row[2]) == "YES",
                default=_text(row[4]),
                primary_key=_text(row[3]) == "PRI",
            )
            for row in rows
        ]
