"""Database result models for tablebridge.

Backend-agnostic value types every driver translates its native responses
into. Cells are text: drivers render each native value before building a
``QueryResult``.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ConnectionInfo:
    """Snapshot of a live connection handle."""
    id: str
    name: str
    db_type: str
    version: str
    connected: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QueryResult:
    """Tabular result of a read statement.

    Column order (and duplicate names) follow the engine's result set. Every
    row is aligned positionally with ``columns``.
    """
    columns: List[str]
    rows: List[List[Optional[str]]]
    row_count: int
    execution_time_ms: int

    def __post_init__(self):
        if self.row_count != len(self.rows):
            raise ValueError(
                f"row_count {self.row_count} does not match {len(self.rows)} rows"
            )
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} cells, expected {width}"
                )

    @classmethod
    def empty(cls, execution_time_ms: int = 0) -> "QueryResult":
        """Result of a statement that produced no rows."""
        return cls(columns=[], rows=[], row_count=0, execution_time_ms=execution_time_ms)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a write or DDL statement."""
    rows_affected: int
    last_insert_id: Optional[int]
    execution_time_ms: int

    def __post_init__(self):
        if self.rows_affected < 0:
            raise ValueError("rows_affected cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TableInfo:
    """Base table descriptor. ``schema`` is None for SQLite."""
    name: str
    schema: Optional[str] = None
    row_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ColumnInfo:
    """Column descriptor. ``data_type`` is the engine's own label."""
    name: str
    data_type: str
    nullable: bool
    default: Optional[str] = None
    primary_key: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IndexInfo:
    """Index descriptor (not produced by any driver yet)."""
    name: str
    columns: List[str] = field(default_factory=list)
    unique: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
