# src/tablebridge/database/factory.py
"""Database connection factory for tablebridge."""

from typing import Any, Dict, Mapping, Optional, Tuple, Type

from pydantic import ValidationError as PydanticValidationError

from tablebridge.config.models import ConnectionConfig, EngineKind
from tablebridge.core.exceptions import ConfigurationError, ErrorCodes
from tablebridge.database.base import BaseDatabaseConnection
from tablebridge.database.connectors import (
    MySQLConnection,
    PostgreSQLConnection,
    SQLiteConnection,
)
from tablebridge.logging import get_logger

REQUIRED_FIELDS: Dict[EngineKind, Tuple[str, ...]] = {
    EngineKind.SQLITE: ("file_path",),
    EngineKind.POSTGRES: ("host", "database", "username"),
    EngineKind.MYSQL: ("host", "database", "username"),
}

DEFAULT_PORTS: Dict[EngineKind, int] = {
    EngineKind.POSTGRES: 5432,
    EngineKind.MYSQL: 3306,
}

_BUILTIN_CONNECTIONS: Dict[EngineKind, Type[BaseDatabaseConnection]] = {
    EngineKind.SQLITE: SQLiteConnection,
    EngineKind.POSTGRES: PostgreSQLConnection,
    EngineKind.MYSQL: MySQLConnection,
}


class ConnectionFactory:
    """Factory for creating database connections with validation.

    Validates a configuration against the fields its engine requires, fills
    in engine defaults and builds the matching driver. A driver is only
    returned once its native connection is open.

    Example:
        >>> factory = ConnectionFactory()
        >>> connection = factory.create(
        ...     ConnectionConfig(id="notes", db_type="sqlite", file_path="notes.db")
        ... )
        >>> connection.info().db_type
        'sqlite'
    """

    def __init__(
        self,
        connection_types: Optional[Mapping[EngineKind, Type[BaseDatabaseConnection]]] = None,
    ):
        self.logger = get_logger("database.factory")
        self._connection_types: Dict[EngineKind, Type[BaseDatabaseConnection]] = dict(
            _BUILTIN_CONNECTIONS if connection_types is None else connection_types
        )

    def register_engine(
        self,
        engine: EngineKind,
        connection_class: Type[BaseDatabaseConnection],
    ) -> None:
        """Register (or replace) the driver class used for an engine.

        Raises:
            ConfigurationError: If the class is not a database connection
        """
        if not (isinstance(connection_class, type) and issubclass(connection_class, BaseDatabaseConnection)):
            raise ConfigurationError(
                f"Driver class {connection_class!r} must extend BaseDatabaseConnection",
                code=ErrorCodes.CONFIG_INVALID,
                context={"engine": engine.value},
            )

        if engine in self._connection_types:
            self.logger.warning(
                "Overriding existing driver registration",
                engine=engine.value,
                existing_class=self._connection_types[engine].__name__,
                new_class=connection_class.__name__,
            )
        self._connection_types[engine] = connection_class

    def is_engine_supported(self, engine: EngineKind) -> bool:
        return engine in self._connection_types

    def validate(self, config: ConnectionConfig) -> ConnectionConfig:
        """Validate a configuration for its engine and apply engine defaults.

        Returns:
            The configuration with the default port filled in

        Raises:
            ConfigurationError: If the engine is unsupported or a required
                field is missing
        """
        engine = config.db_type
        if not self.is_engine_supported(engine):
            raise ConfigurationError(
                f"Unsupported database engine: {engine.value}",
                code=ErrorCodes.UNSUPPORTED_ENGINE,
                context={
                    "engine": engine.value,
                    "available_engines": [e.value for e in self._connection_types],
                },
            )

        for field_name in REQUIRED_FIELDS.get(engine, ()):
            if not getattr(config, field_name):
                raise ConfigurationError(
                    f"{engine.display_name} requires {field_name}",
                    code=ErrorCodes.CONFIG_VALIDATION_FAILED,
                    context={"field": field_name, "engine": engine.value, "connection_id": config.id},
                )

        if config.port is None and engine in DEFAULT_PORTS:
            config = config.model_copy(update={"port": DEFAULT_PORTS[engine]})

        self.logger.debug(
            "Connection configuration validated",
            engine=engine.value,
            connection_id=config.id,
        )
        return config

    def create(self, config: ConnectionConfig) -> BaseDatabaseConnection:
        """Validate ``config`` and open a driver for it.

        Raises:
            ConfigurationError: If the configuration is invalid
            DatabaseConnectionError: If the native connect fails
        """
        config = self.validate(config)
        connection_class = self._connection_types[config.db_type]

        self.logger.info(
            "Creating database connection",
            engine=config.db_type.value,
            connection_id=config.id,
            target=config.connection_string,
        )

        connection = connection_class(config)
        try:
            connection.connect()
        except Exception as e:
            self.logger.error(
                "Failed to create database connection",
                engine=config.db_type.value,
                connection_id=config.id,
                error=str(e),
            )
            raise

        self.logger.info(
            "Database connection created",
            engine=config.db_type.value,
            connection_id=config.id,
            connection_class=connection_class.__name__,
        )
        return connection

    def create_from_dict(self, config_dict: Dict[str, Any]) -> BaseDatabaseConnection:
        """Create a connection from a configuration dictionary.

        Raises:
            ConfigurationError: If the dictionary is not a valid configuration
        """
        return self.create(config_from_dict(config_dict))


def config_from_dict(config_dict: Dict[str, Any]) -> ConnectionConfig:
    """Parse a plain dictionary into a ConnectionConfig.

    Raises:
        ConfigurationError: If the dictionary is not a valid configuration
    """
    try:
        return ConnectionConfig.model_validate(config_dict)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid connection configuration: {e}",
            code=ErrorCodes.CONFIG_INVALID,
            context={"connection_id": config_dict.get("id"), "error_count": e.error_count()},
            cause=e,
        ) from e
