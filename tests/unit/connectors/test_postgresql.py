"""Tests for the PostgreSQL driver with a mocked asyncpg client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import asyncpg
import pytest

from tablebridge.config.models import ConnectionConfig
from tablebridge.core.exceptions import (
    AuthenticationError,
    DatabaseConnectionError,
    ErrorCodes,
    MetadataError,
    QueryError,
)
from tablebridge.database.connectors.postgresql import PostgreSQLConnection, _rows_from_status
from tablebridge.database.models import ColumnInfo, TableInfo

CONNECT = "tablebridge.database.connectors.postgresql.asyncpg.connect"


def make_native_connection():
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.execute = AsyncMock(return_value="SELECT 0")
    conn.close = AsyncMock()
    conn.get_server_version.return_value = SimpleNamespace(major=16, minor=2, micro=0)
    return conn


@pytest.fixture
def native():
    return make_native_connection()


@pytest.fixture
def connection(postgres_config, native):
    with patch(CONNECT, new_callable=AsyncMock, return_value=native):
        conn = PostgreSQLConnection(postgres_config)
        conn.connect()
    yield conn
    conn.close()


class TestPostgreSQLLifecycle:
    """Test connect and close."""

    def test_connect(self, postgres_config, native):
        with patch(CONNECT, new_callable=AsyncMock, return_value=native) as connect:
            conn = PostgreSQLConnection(postgres_config)
            conn.connect()

        try:
            connect.assert_awaited_once_with(
                host="db.internal",
                port=5432,
                database="analytics",
                user="reporter",
                password="test_password",
            )
            info = conn.info()
            assert info.db_type == "postgres"
            assert info.connected is True
            assert info.version == "PostgreSQL 16.2"
            assert info.name == "Analytics"
        finally:
            conn.close()

    def test_default_name(self, native):
        config = ConnectionConfig(
            id="pg", db_type="postgres", host="db", port=5432, database="app", username="u"
        )

        assert PostgreSQLConnection(config).name == "db/app"

    @pytest.mark.parametrize("use_ssl, expected", [(True, "require"), (False, "disable")])
    def test_ssl_flag_is_honored(self, postgres_config, native, use_ssl, expected):
        config = postgres_config.model_copy(update={"use_ssl": use_ssl})

        with patch(CONNECT, new_callable=AsyncMock, return_value=native) as connect:
            conn = PostgreSQLConnection(config)
            conn.connect()
        conn.close()

        assert connect.await_args.kwargs["ssl"] == expected

    def test_ssl_unset_uses_driver_default(self, connection):
        assert "ssl" not in connection._connect_kwargs()

    def test_private_event_loop_lifecycle(self, postgres_config, native):
        with patch(CONNECT, new_callable=AsyncMock, return_value=native):
            first = PostgreSQLConnection(postgres_config)
            second = PostgreSQLConnection(postgres_config)
            first.connect()
            second.connect()

        loop = first._loop
        assert loop is not None
        assert loop is not second._loop
        assert not loop.is_closed()

        first.close()
        second.close()

        native.close.assert_awaited()
        assert loop.is_closed()
        assert first._loop is None

    def test_auth_failure(self, postgres_config):
        error = asyncpg.InvalidPasswordError('password authentication failed for user "reporter"')
        with patch(CONNECT, new_callable=AsyncMock, side_effect=error):
            conn = PostgreSQLConnection(postgres_config)
            with pytest.raises(AuthenticationError) as exc_info:
                conn.connect()

        assert exc_info.value.code == ErrorCodes.AUTH_FAILED
        assert conn.is_connected is False
        assert conn._loop is None

    def test_unreachable_host(self, postgres_config):
        with patch(CONNECT, new_callable=AsyncMock, side_effect=OSError("Connect call failed")):
            conn = PostgreSQLConnection(postgres_config)
            with pytest.raises(DatabaseConnectionError) as exc_info:
                conn.connect()

        assert exc_info.value.code == ErrorCodes.CONNECTION_REFUSED
        assert not isinstance(exc_info.value, AuthenticationError)
        assert conn._loop is None


class TestPostgreSQLStatements:
    """Test query and execute translation."""

    def test_query_renders_cells(self, connection, native):
        native.fetch.return_value = [
            {"id": 1, "title": "Roadmap", "meta": {"pinned": True}, "active": True},
            {"id": 2, "title": None, "meta": [], "active": False},
        ]

        result = connection.query("SELECT id, title, meta, active FROM boards")

        native.fetch.assert_awaited_with("SELECT id, title, meta, active FROM boards")
        assert result.columns == ["id", "title", "meta", "active"]
        assert result.rows == [
            ["1", "Roadmap", '{"pinned": true}', "true"],
            ["2", None, "[]", "false"],
        ]
        assert result.row_count == 2

    def test_empty_result_is_normalized(self, connection, native):
        native.fetch.return_value = []

        result = connection.query("SELECT * FROM boards WHERE false")

        assert result.columns == []
        assert result.rows == []
        assert result.row_count == 0

    def test_execute(self, connection, native):
        native.execute.return_value = "INSERT 0 1"

        result = connection.execute("INSERT INTO boards(title) VALUES ('x')")

        assert result.rows_affected == 1
        assert result.last_insert_id is None

    def test_query_error(self, connection, native):
        native.fetch.side_effect = asyncpg.InterfaceError("connection is closed")

        with pytest.raises(QueryError) as exc_info:
            connection.query("SELECT 1")

        assert exc_info.value.message == "Query error: connection is closed"
        assert connection.is_connected is True

    def test_execute_error(self, connection, native):
        native.execute.side_effect = asyncpg.InterfaceError("connection is closed")

        with pytest.raises(QueryError) as exc_info:
            connection.execute("DELETE FROM boards")

        assert exc_info.value.message.startswith("Execute error: ")
        assert exc_info.value.code == ErrorCodes.STATEMENT_EXECUTION_FAILED

    @pytest.mark.parametrize(
        "status, expected",
        [
            ("INSERT 0 1", 1),
            ("UPDATE 3", 3),
            ("DELETE 0", 0),
            ("CREATE TABLE", 0),
            ("", 0),
        ],
    )
    def test_rows_from_status(self, status, expected):
        assert _rows_from_status(status) == expected


class TestPostgreSQLIntrospection:
    """Test get_tables and get_columns."""

    def test_get_tables_binds_schema(self, connection, native):
        native.fetch.return_value = [{"table_name": "boards"}, {"table_name": "cards"}]

        tables = connection.get_tables()

        assert tables == [TableInfo("boards", "public"), TableInfo("cards", "public")]
        args = native.fetch.await_args.args
        assert "information_schema.tables" in args[0]
        assert args[1:] == ("public",)

    def test_get_columns(self, connection, native):
        native.fetch.return_value = [
            {
                "column_name": "id",
                "data_type": "integer",
                "is_nullable": "NO",
                "column_default": "nextval('boards_id_seq'::regclass)",
                "is_primary_key": True,
            },
            {
                "column_name": "title",
                "data_type": "text",
                "is_nullable": "YES",
                "column_default": None,
                "is_primary_key": False,
            },
        ]

        columns = connection.get_columns("boards")

        assert columns == [
            ColumnInfo("id", "integer", False, "nextval('boards_id_seq'::regclass)", True),
            ColumnInfo("title", "text", True, None, False),
        ]
        assert native.fetch.await_args.args[1:] == ("public", "boards")

    def test_get_columns_uses_configured_schema(self, postgres_config, native):
        config = postgres_config.model_copy(update={"schema_name": "reporting"})
        with patch(CONNECT, new_callable=AsyncMock, return_value=native):
            conn = PostgreSQLConnection(config)
            conn.connect()

        try:
            conn.get_columns("daily")
            assert native.fetch.await_args.args[1:] == ("reporting", "daily")
        finally:
            conn.close()

    def test_get_columns_missing_table(self, connection, native):
        native.fetch.return_value = []

        assert connection.get_columns("absent") == []

    def test_metadata_error(self, connection, native):
        native.fetch.side_effect = OSError("connection reset")

        with pytest.raises(MetadataError) as exc_info:
            connection.get_tables()

        assert exc_info.value.code == ErrorCodes.METADATA_EXTRACTION_FAILED
