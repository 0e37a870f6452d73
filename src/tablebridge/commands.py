"""Command layer for tablebridge.

Thin, never-raising wrappers around a ``ConnectionRegistry`` for hosts that
dispatch commands from a UI process. Every command returns a
``CommandResult`` whose ``data`` is JSON-ready.

Example:
    >>> commands = DatabaseCommands(ConnectionRegistry())
    >>> result = commands.db_connect({"id": "notes", "db_type": "sqlite", "file_path": "notes.db"})
    >>> result.ok
    True
    >>> commands.db_query("missing", "SELECT 1").to_dict()["category"]
    'lookup'
"""

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Union

from tablebridge.config.models import ConnectionConfig
from tablebridge.core.exceptions import ErrorCodes, TableBridgeException
from tablebridge.database.factory import config_from_dict
from tablebridge.database.registry import ConnectionRegistry, get_default_registry
from tablebridge.logging import get_logger


@dataclass(frozen=True)
class CommandResult:
    """Success or failure value returned by every command."""

    ok: bool
    data: Any = None
    error: Optional[str] = None
    code: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None) -> "CommandResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: TableBridgeException) -> "CommandResult":
        return cls(
            ok=False,
            error=error.message,
            code=error.code,
            category=error.category,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DatabaseCommands:
    """Database commands exposed to the surrounding application.

    Args:
        registry: Registry to route commands through; the process-wide
            default registry when omitted
    """

    def __init__(self, registry: Optional[ConnectionRegistry] = None):
        self.registry = registry if registry is not None else get_default_registry()
        self.logger = get_logger("commands")

    def db_connect(self, config: Union[ConnectionConfig, Dict[str, Any]]) -> CommandResult:
        def connect() -> Dict[str, Any]:
            connection_config = config if isinstance(config, ConnectionConfig) else config_from_dict(config)
            return self.registry.connect(connection_config).to_dict()

        return self._run("db_connect", connect)

    def db_disconnect(self, connection_id: str) -> CommandResult:
        return self._run(
            "db_disconnect",
            lambda: self.registry.disconnect(connection_id),
            connection_id=connection_id,
        )

    def db_query(self, connection_id: str, sql: str) -> CommandResult:
        return self._run(
            "db_query",
            lambda: self.registry.query(connection_id, sql).to_dict(),
            connection_id=connection_id,
        )

    def db_execute(self, connection_id: str, sql: str) -> CommandResult:
        return self._run(
            "db_execute",
            lambda: self.registry.execute(connection_id, sql).to_dict(),
            connection_id=connection_id,
        )

    def db_get_tables(self, connection_id: str) -> CommandResult:
        return self._run(
            "db_get_tables",
            lambda: [table.to_dict() for table in self.registry.get_tables(connection_id)],
            connection_id=connection_id,
        )

    def db_get_columns(self, connection_id: str, table: str) -> CommandResult:
        return self._run(
            "db_get_columns",
            lambda: [column.to_dict() for column in self.registry.get_columns(connection_id, table)],
            connection_id=connection_id,
            table=table,
        )

    def db_list_connections(self) -> CommandResult:
        return self._run(
            "db_list_connections",
            lambda: {
                key: info.to_dict()
                for key, info in self.registry.list_connections().items()
            },
        )

    def _run(self, command: str, action: Callable[[], Any], **context: Any) -> CommandResult:
        try:
            data = action()
        except TableBridgeException as e:
            self.logger.warning(
                "Command failed",
                command=command,
                error_code=e.code,
                category=e.category,
                error=e.message,
                **context,
            )
            return CommandResult.failure(e)
        except Exception as e:
            self.logger.exception("Unexpected command failure", command=command, **context)
            return CommandResult(
                ok=False,
                error=f"Internal error: {e}",
                code=ErrorCodes.INTERNAL_ERROR,
                category="internal",
            )
        return CommandResult.success(data)
