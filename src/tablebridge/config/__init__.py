"""tablebridge configuration management.

Classes:
    BaseConfig: Base configuration class
    EngineKind: Supported database engines
    ConnectionConfig: Database connection configuration
    LoggingConfig: Logging configuration
    BridgeConfig: Top-level configuration loaded from YAML

Example:
    >>> from tablebridge.config import BridgeConfig
    >>> config = BridgeConfig.from_file("tablebridge.yaml")
    >>> notes = config.get_connection_config("notes")
"""

from .models import (
    BaseConfig,
    BridgeConfig,
    ConnectionConfig,
    EngineKind,
    LoggingConfig,
)

__all__ = [
    "BaseConfig",
    "BridgeConfig",
    "ConnectionConfig",
    "EngineKind",
    "LoggingConfig",
]
