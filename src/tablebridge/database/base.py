"""Common driver contract for tablebridge.

``BaseDatabaseConnection`` implements the backend-agnostic operations once
(timing, empty-result normalization, cell rendering, error translation) and
leaves the native calls to one subclass per engine.
"""

from __future__ import annotations

import json
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, ClassVar, Generator, List, Optional, Sequence, Tuple, Type

from tablebridge.config.models import ConnectionConfig, EngineKind
from tablebridge.core import BaseComponent
from tablebridge.core.exceptions import (
    DatabaseConnectionError,
    ErrorCodes,
    MetadataError,
    QueryError,
    TableBridgeException,
)
from tablebridge.database.models import (
    ColumnInfo,
    ConnectionInfo,
    ExecuteResult,
    QueryResult,
    TableInfo,
)
from tablebridge.logging import TimingContext, get_logger, get_performance_logger

Row = Sequence[Any]


def render_cell(value: Any) -> Optional[str]:
    """Render a native cell value as text, keeping NULL as None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return "\\x" + raw.hex()
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


class BaseDatabaseConnection(BaseComponent[ConnectionConfig], ABC):
    """
    Abstract base class for all database drivers.
    Provides the public connection contract, timing and error translation.
    """

    engine: ClassVar[EngineKind]
    native_errors: ClassVar[Tuple[Type[BaseException], ...]] = ()

    def __init__(self, config: ConnectionConfig) -> None:
        super().__init__(config)
        self.connection_id = str(uuid.uuid4())
        self.name = config.name or self._default_name()
        self.logger = get_logger(f"connector.{self.engine.value}").bind(connection_id=config.id)
        self.perf_logger = get_performance_logger(f"connector.{self.engine.value}")
        self._server_version: Optional[str] = None

    def _default_name(self) -> str:
        return f"{self.config.host}/{self.config.database}"

    @property
    def is_connected(self) -> bool:
        return self.is_initialized

    def connect(self) -> None:
        """Open the native connection via component initialization."""
        self.initialize()

    def close(self) -> None:
        """Release native resources. Safe to call more than once."""
        self.cleanup()

    def info(self) -> ConnectionInfo:
        """Snapshot of this handle; performs no I/O."""
        return ConnectionInfo(
            id=self.connection_id,
            name=self.name,
            db_type=self.engine.value,
            version=self._server_version or self.engine.display_name,
            connected=self.is_connected,
        )

    def query(self, sql: str) -> QueryResult:
        """Run a read statement and return every cell rendered as text.

        A statement that yields no rows returns an empty column list as well.
        """
        with self._native_call(
            "query", QueryError, "Query error: ", ErrorCodes.QUERY_EXECUTION_FAILED
        ) as timer:
            columns, rows = self._fetch(sql)

        if not rows:
            return QueryResult.empty(timer.elapsed_ms)

        rendered = [[render_cell(value) for value in row] for row in rows]
        return QueryResult(
            columns=list(columns),
            rows=rendered,
            row_count=len(rendered),
            execution_time_ms=timer.elapsed_ms,
        )

    def execute(self, sql: str) -> ExecuteResult:
        """Run a write or DDL statement."""
        with self._native_call(
            "execute", QueryError, "Execute error: ", ErrorCodes.STATEMENT_EXECUTION_FAILED
        ) as timer:
            rows_affected, last_insert_id = self._execute(sql)

        return ExecuteResult(
            rows_affected=max(rows_affected, 0),
            last_insert_id=last_insert_id,
            execution_time_ms=timer.elapsed_ms,
        )

    def get_tables(self) -> List[TableInfo]:
        """List base tables, ascending by name."""
        with self._native_call(
            "get_tables", MetadataError, "Metadata error: ", ErrorCodes.METADATA_EXTRACTION_FAILED
        ):
            tables = self._list_tables()
        self.logger.debug("Tables listed", table_count=len(tables))
        return tables

    def get_columns(self, table: str) -> List[ColumnInfo]:
        """List the columns of ``table`` in ordinal order; [] if it does not exist."""
        with self._native_call(
            "get_columns",
            MetadataError,
            "Metadata error: ",
            ErrorCodes.METADATA_EXTRACTION_FAILED,
            table=table,
        ):
            return self._list_columns(table)

    @contextmanager
    def _native_call(
        self,
        operation: str,
        error_class: Type[TableBridgeException],
        prefix: str,
        code: str,
        **context: Any,
    ) -> Generator[TimingContext, None, None]:
        """Time the enclosed native call and translate the driver's errors."""
        self._ensure_connected()
        with self.perf_logger.measure(operation, connection_id=self.config.id) as timer:
            try:
                yield timer
            except self.native_errors as e:
                raise error_class(
                    f"{prefix}{e}",
                    code=code,
                    context={"connection_id": self.config.id, "engine": self.engine.value, **context},
                    cause=e,
                ) from e

    def _ensure_connected(self) -> None:
        if not self.is_connected:
            raise DatabaseConnectionError(
                f"{self.engine.display_name} connection {self.config.id!r} is not connected",
                code=ErrorCodes.NOT_CONNECTED,
                context={"connection_id": self.config.id},
            )

    @abstractmethod
    def _fetch(self, sql: str, params: Optional[Sequence[Any]] = None) -> Tuple[List[str], List[Row]]:
        """Run a statement and return (column names, native rows)."""
        pass

    @abstractmethod
    def _execute(self, sql: str) -> Tuple[int, Optional[int]]:
        """Run a write statement and return (rows affected, last insert id)."""
        pass

    @abstractmethod
    def _list_tables(self) -> List[TableInfo]:
        pass

    @abstractmethod
    def _list_columns(self, table: str) -> List[ColumnInfo]:
        pass
