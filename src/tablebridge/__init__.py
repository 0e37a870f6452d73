"""tablebridge - unified access to SQLite, PostgreSQL and MySQL.

tablebridge opens, queries, introspects and closes connections to several
relational engines through one synchronous, engine-agnostic contract.
Results come back as plain value types with every cell rendered as text.

Modules:
    core: Base component and exception hierarchy
    config: Configuration models
    logging: Structured logging framework
    database: Result model, drivers, factory and connection registry
    commands: Never-raising command layer for UI hosts

Example:
    >>> from tablebridge import ConnectionConfig, ConnectionRegistry
    >>> registry = ConnectionRegistry()
    >>> registry.connect(ConnectionConfig(id="notes", db_type="sqlite", file_path="notes.db"))
    >>> registry.execute("notes", "CREATE TABLE t(id INTEGER PRIMARY KEY, name TEXT)")
    >>> registry.get_tables("notes")
    [TableInfo(name='t', schema=None, row_count=None)]
"""

from . import config, core, database, logging
from .commands import CommandResult, DatabaseCommands
from .config import BridgeConfig, ConnectionConfig, EngineKind
from .database import ConnectionFactory, ConnectionRegistry, get_default_registry

__version__ = "0.1.0"
__title__ = "tablebridge"
__description__ = "Unified synchronous access layer for SQLite, PostgreSQL and MySQL"
__license__ = "MIT"

__all__ = [
    "core",
    "config",
    "database",
    "logging",
    "BridgeConfig",
    "CommandResult",
    "ConnectionConfig",
    "ConnectionFactory",
    "ConnectionRegistry",
    "DatabaseCommands",
    "EngineKind",
    "get_default_registry",
    "__version__",
    "__title__",
    "__description__",
    "__license__",
]
