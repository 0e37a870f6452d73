"""Unit tests for the connection factory."""

import pytest

from tablebridge.config.models import ConnectionConfig, EngineKind
from tablebridge.core.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    ErrorCodes,
)
from tablebridge.database.connectors import (
    MySQLConnection,
    PostgreSQLConnection,
    SQLiteConnection,
)
from tablebridge.database.factory import DEFAULT_PORTS, ConnectionFactory, config_from_dict


class TestValidation:
    """Test engine-specific required fields."""

    @pytest.mark.parametrize(
        "db_type, fields, message",
        [
            ("sqlite", {}, "SQLite requires file_path"),
            ("postgres", {"database": "d", "username": "u"}, "PostgreSQL requires host"),
            ("postgres", {"host": "h", "username": "u"}, "PostgreSQL requires database"),
            ("postgres", {"host": "h", "database": "d"}, "PostgreSQL requires username"),
            ("mysql", {"database": "d", "username": "u"}, "MySQL requires host"),
            ("mysql", {"host": "h", "username": "u"}, "MySQL requires database"),
            ("mysql", {"host": "h", "database": "d"}, "MySQL requires username"),
        ],
    )
    def test_missing_required_field(self, db_type, fields, message):
        config = ConnectionConfig(id="x", db_type=db_type, **fields)

        with pytest.raises(ConfigurationError) as exc_info:
            ConnectionFactory().validate(config)

        assert exc_info.value.message == message
        assert exc_info.value.code == ErrorCodes.CONFIG_VALIDATION_FAILED
        assert exc_info.value.category == "configuration"

    def test_blank_field_counts_as_missing(self):
        config = ConnectionConfig(id="x", db_type="sqlite", file_path="   ")

        with pytest.raises(ConfigurationError):
            ConnectionFactory().validate(config)

    @pytest.mark.parametrize("engine", [EngineKind.POSTGRES, EngineKind.MYSQL])
    def test_default_port(self, engine):
        config = ConnectionConfig(id="x", db_type=engine, host="h", database="d", username="u")

        validated = ConnectionFactory().validate(config)

        assert validated.port == DEFAULT_PORTS[engine]
        assert config.port is None

    def test_explicit_port_kept(self):
        config = ConnectionConfig(id="x", db_type="mysql", host="h", port=3307, database="d", username="u")

        assert ConnectionFactory().validate(config).port == 3307

    def test_sqlite_has_no_port(self):
        config = ConnectionConfig(id="x", db_type="sqlite", file_path="a.db")

        assert ConnectionFactory().validate(config).port is None

    def test_unsupported_engine(self):
        factory = ConnectionFactory({EngineKind.SQLITE: SQLiteConnection})
        config = ConnectionConfig(id="x", db_type="mysql", host="h", database="d", username="u")

        with pytest.raises(ConfigurationError) as exc_info:
            factory.validate(config)

        assert exc_info.value.code == ErrorCodes.UNSUPPORTED_ENGINE


class TestCreate:
    """Test driver construction."""

    def test_builtin_drivers(self):
        factory = ConnectionFactory()

        assert factory._connection_types == {
            EngineKind.SQLITE: SQLiteConnection,
            EngineKind.POSTGRES: PostgreSQLConnection,
            EngineKind.MYSQL: MySQLConnection,
        }

    def test_create_sqlite(self, factory, sqlite_config):
        connection = factory.create(sqlite_config)
        try:
            assert isinstance(connection, SQLiteConnection)
            assert connection.is_connected
            assert connection.info().db_type == "sqlite"
        finally:
            connection.close()

    def test_create_applies_default_port(self, factory, server_config, fake_server):
        connection = factory.create(server_config)

        assert isinstance(connection, fake_server)
        assert connection.config.port == 5432
        assert connection.info().connected is True

    def test_validation_happens_before_construction(self, factory, fake_server):
        config = ConnectionConfig(id="x", db_type="postgres", database="d", username="u")

        with pytest.raises(ConfigurationError):
            factory.create(config)

        assert fake_server.instances == []

    def test_failed_connect_propagates(self, factory, server_config, fake_server):
        fake_server.fail_connect = True

        with pytest.raises(DatabaseConnectionError):
            factory.create(server_config)

        assert fake_server.instances[0].is_connected is False

    def test_create_from_dict(self, factory, sqlite_path):
        connection = factory.create_from_dict(
            {"id": "notes", "db_type": "sqlite", "file_path": str(sqlite_path)}
        )
        try:
            assert connection.config.id == "notes"
        finally:
            connection.close()

    def test_create_from_invalid_dict(self, factory):
        with pytest.raises(ConfigurationError) as exc_info:
            factory.create_from_dict({"id": "x", "db_type": "oracle"})

        assert exc_info.value.code == ErrorCodes.CONFIG_INVALID


class TestRegistration:
    """Test driver registration."""

    def test_register_engine_replaces_driver(self, fake_server, server_config):
        factory = ConnectionFactory()

        factory.register_engine(EngineKind.POSTGRES, fake_server)

        assert isinstance(factory.create(server_config), fake_server)

    def test_register_rejects_non_driver(self):
        with pytest.raises(ConfigurationError):
            ConnectionFactory().register_engine(EngineKind.MYSQL, dict)


def test_config_from_dict_parses_plain_values():
    config = config_from_dict({"id": "pg", "db_type": "postgres", "password": "pw"})

    assert config.password_value == "pw"
