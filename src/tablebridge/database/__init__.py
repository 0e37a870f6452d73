"""
tablebridge database layer.

One synchronous connection contract over three relational engines:

- SQLite (sqlite3)
- PostgreSQL (asyncpg, driven by a private event loop)
- MySQL/MariaDB (mysql-connector-python pooling)
"""

from .base import BaseDatabaseConnection, render_cell
from .connectors import MySQLConnection, PostgreSQLConnection, SQLiteConnection
from .factory import DEFAULT_PORTS, REQUIRED_FIELDS, ConnectionFactory, config_from_dict
from .models import (
    ColumnInfo,
    ConnectionInfo,
    ExecuteResult,
    IndexInfo,
    QueryResult,
    TableInfo,
)
from .registry import ConnectionRegistry, get_default_registry

__all__ = [
    # Models
    "ColumnInfo",
    "ConnectionInfo",
    "ExecuteResult",
    "IndexInfo",
    "QueryResult",
    "TableInfo",

    # Core classes
    "BaseDatabaseConnection",
    "ConnectionFactory",
    "ConnectionRegistry",
    "config_from_dict",
    "get_default_registry",
    "render_cell",
    "DEFAULT_PORTS",
    "REQUIRED_FIELDS",

    # Drivers
    "MySQLConnection",
    "PostgreSQLConnection",
    "SQLiteConnection",
]
