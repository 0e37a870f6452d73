# src/tablebridge/database/connectors/sqlite.py
"""SQLite driver for tablebridge."""

import sqlite3
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from tablebridge.config.models import ConnectionConfig, EngineKind
from tablebridge.core.exceptions import DatabaseConnectionError, ErrorCodes
from tablebridge.database.base import BaseDatabaseConnection, Row
from tablebridge.database.models import ColumnInfo, TableInfo


class SQLiteConnection(BaseDatabaseConnection):
    """SQLite driver backed by the standard library ``sqlite3`` module.

    Runs synchronously on a single connection opened in autocommit mode.
    The database file is created when it does not exist yet.
    """

    component_name = "SQLiteConnection"
    version = "1.0.0"
    engine = EngineKind.SQLITE
    native_errors = (sqlite3.Error,)

    def __init__(self, config: ConnectionConfig):
        super().__init__(config)
        self._connection: Optional[sqlite3.Connection] = None
        self._database_path = Path(config.file_path)

    def _default_name(self) -> str:
        return self.config.file_path

    def _initialize(self) -> None:
        """Open the SQLite database file."""
        try:
            # The registry lock serializes access, so the handle may move
            # between caller threads.
            self._connection = sqlite3.connect(
                str(self._database_path),
                check_same_thread=False,
                isolation_level=None,
            )
        except sqlite3.Error as e:
            raise DatabaseConnectionError(
                f"SQLite connection error: {e}",
                code=ErrorCodes.CONNECTION_REFUSED,
                context={"database_path": str(self._database_path)},
                cause=e,
            ) from e

        self._server_version = f"SQLite {sqlite3.sqlite_version}"
        self.logger.info(
            "SQLite connection opened",
            database_path=str(self._database_path),
            version=self._server_version,
        )

    def _cleanup(self) -> None:
        """Close the SQLite connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            self.logger.info("SQLite connection closed")

    def _fetch(self, sql: str, params: Optional[Sequence[Any]] = None) -> Tuple[List[str], List[Row]]:
        cursor = self._connection.execute(sql, params or ())
        try:
            columns = [desc[0] for desc in cursor.description] if cursor.description else []
            return columns, cursor.fetchall()
        finally:
            cursor.close()

    def _execute(self, sql: str) -> Tuple[int, Optional[int]]:
        cursor = self._connection.execute(sql)
        try:
            # rowcount is -1 for DDL; the base class clamps it to 0
            return cursor.rowcount, cursor.lastrowid
        finally:
            cursor.close()

    def _list_tables(self) -> List[TableInfo]:
        _, rows = self._fetch(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
            "ORDER BY name"
        )
        return [TableInfo(name=row[0]) for row in rows]

    def _list_columns(self, table: str) -> List[ColumnInfo]:
        _, rows = self._fetch(
            "SELECT cid, name, type, \"notnull\", dflt_value, pk "
            "FROM pragma_table_info(?) ORDER BY cid",
            (table,),
        )
        return [
            ColumnInfo(
                name=row[1],
                data_type=row[2],
                nullable=row[3] == 0,
                default=row[4],
                primary_key=row[5] > 0,
            )
            for row in rows
        ]
