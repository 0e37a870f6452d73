"""Configuration models for tablebridge.

This module defines the Pydantic models used to describe database
connections and the logging setup. Models validate field shapes only;
engine-specific requirements (which fields each engine needs) are checked by
``tablebridge.database.factory.ConnectionFactory`` so that a missing field is
reported with an engine-specific message.

Classes:
    BaseConfig: Base configuration class
    EngineKind: Closed set of supported engines
    ConnectionConfig: Database connection configuration
    LoggingConfig: Logging configuration
    BridgeConfig: Top-level configuration file model

Example:
    >>> config = ConnectionConfig(
    ...     id="local",
    ...     name="Local notes",
    ...     db_type=EngineKind.SQLITE,
    ...     file_path="/tmp/notes.db",
    ... )
    >>> print(config.connection_string)
    sqlite:////tmp/notes.db
"""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    SecretStr,
    field_validator,
    model_validator,
)

from ..core.exceptions import ConfigurationError, ErrorCodes

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


class BaseConfig(BaseModel):
    """Base configuration class with common functionality.

    Provides strict field handling, environment variable resolution and
    secret-masking serialization for every configuration model.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_environment_variables(cls, values: Any) -> Any:
        """Resolve environment variables in configuration values.

        Supports ${VAR_NAME} and ${VAR_NAME:default_value} syntax.
        """
        def replace_env_var(match: "re.Match[str]") -> str:
            var_name, _, default = match.group(1).partition(":")
            return os.getenv(var_name, default)

        def resolve_value(value: Any) -> Any:
            if isinstance(value, str):
                return _ENV_PATTERN.sub(replace_env_var, value)
            if isinstance(value, dict):
                return {k: resolve_value(v) for k, v in value.items()}
            if isinstance(value, list):
                return [resolve_value(item) for item in value]
            return value

        if isinstance(values, dict):
            return {key: resolve_value(value) for key, value in values.items()}
        return values

    def to_dict(self, *, mask_secrets: bool = True) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Args:
            mask_secrets: Whether to mask secret values

        Returns:
            Dictionary representation of configuration
        """
        data = self.model_dump(mode="python")

        def convert(value: Any) -> Any:
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            if isinstance(value, list):
                return [convert(item) for item in value]
            if isinstance(value, SecretStr):
                return "***MASKED***" if mask_secrets else value.get_secret_value()
            if isinstance(value, Enum):
                return value.value
            if isinstance(value, Path):
                return str(value)
            return value

        return convert(data)


class EngineKind(str, Enum):
    """Relational engines a connection can target."""

    SQLITE = "sqlite"
    POSTGRES = "postgres"
    MYSQL = "mysql"

    @property
    def display_name(self) -> str:
        return _ENGINE_DISPLAY_NAMES[self]


_ENGINE_DISPLAY_NAMES = {
    EngineKind.SQLITE: "SQLite",
    EngineKind.POSTGRES: "PostgreSQL",
    EngineKind.MYSQL: "MySQL",
}


class ConnectionConfig(BaseConfig):
    """Database connection configuration.

    Immutable once created. Which of the optional fields are required
    depends on ``db_type``: SQLite needs ``file_path``; PostgreSQL and MySQL
    need ``host``, ``database`` and ``username``.

    Attributes:
        id: Caller-chosen identifier, used as the registry key
        name: Display name
        db_type: Target engine
        host: Server host
        port: Server port (engine default when unset)
        database: Database name
        username: Login user
        password: Login password (empty when unset)
        file_path: SQLite database file
        use_ssl: PostgreSQL transport security (driver default when unset)
        schema_name: PostgreSQL namespace used for introspection
        pool_size: MySQL connection pool size
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Registry identifier")
    name: str = Field("", description="Display name")
    db_type: EngineKind = Field(..., description="Database engine")
    host: Optional[str] = Field(None, description="Database host")
    port: Optional[int] = Field(None, ge=1, le=65535, description="Database port")
    database: Optional[str] = Field(None, description="Database name")
    username: Optional[str] = Field(None, description="Database username")
    password: Optional[SecretStr] = Field(None, description="Database password")
    file_path: Optional[str] = Field(None, description="SQLite database file path")
    use_ssl: Optional[bool] = Field(None, description="PostgreSQL transport security")
    schema_name: str = Field("public", min_length=1, description="PostgreSQL schema")
    pool_size: PositiveInt = Field(5, description="MySQL pool size")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Connection id cannot be blank")
        return v

    @field_validator("host", "database", "username", "file_path")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank strings as unset so required-field checks see them."""
        if v is not None and not v.strip():
            return None
        return v.strip() if v is not None else v

    @property
    def password_value(self) -> str:
        """Plain password, empty when unset."""
        return self.password.get_secret_value() if self.password else ""

    @property
    def connection_string(self) -> str:
        """Connection string with the password masked."""
        if self.db_type == EngineKind.SQLITE:
            return f"sqlite:///{self.file_path}"
        port = f":{self.port}" if self.port else ""
        return f"{self.db_type.value}://{self.username}:***@{self.host}{port}/{self.database}"


class LoggingConfig(BaseConfig):
    """Logging configuration.

    Attributes:
        level: Log level
        format: Log format (json, text)
        file_path: Log file path
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup files to keep
        console_output: Enable console output
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )
    format: Literal["json", "text"] = Field("json", description="Log format")
    file_path: Optional[Path] = Field(None, description="Log file path")
    max_file_size: PositiveInt = Field(10485760, description="Max file size in bytes (10MB)")
    backup_count: int = Field(5, ge=0, description="Number of backup files")
    console_output: bool = Field(True, description="Enable console output")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class BridgeConfig(BaseConfig):
    """Top-level tablebridge configuration.

    Example YAML::

        logging:
          level: INFO
          format: text
        connections:
          notes:
            id: notes
            db_type: sqlite
            file_path: ${HOME}/notes.db
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    connections: Dict[str, ConnectionConfig] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_connection_keys(self) -> "BridgeConfig":
        for key, connection in self.connections.items():
            if connection.id != key:
                raise ValueError(
                    f"Connection config id '{connection.id}' doesn't match key '{key}'"
                )
        return self

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "BridgeConfig":
        """Load configuration from a YAML file.

        Raises:
            ConfigurationError: If the file is missing or cannot be parsed
        """
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                code=ErrorCodes.CONFIG_NOT_FOUND,
                context={"path": str(config_path)},
            )

        try:
            with config_path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            return cls.model_validate(data)
        except Exception as e:
            raise ConfigurationError(
                f"Invalid configuration file {config_path}: {e}",
                code=ErrorCodes.CONFIG_INVALID,
                context={"path": str(config_path)},
                cause=e,
            ) from e

    def get_connection_config(self, connection_id: str) -> Optional[ConnectionConfig]:
        """Get connection configuration by id."""
        return self.connections.get(connection_id)
