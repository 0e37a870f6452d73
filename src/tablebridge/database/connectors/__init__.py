"""Engine-specific database drivers."""

from .mysql import MySQLConnection
from .postgresql import PostgreSQLConnection
from .sqlite import SQLiteConnection

__all__ = [
    "MySQLConnection",
    "PostgreSQLConnection",
    "SQLiteConnection",
]
