"""
Unit tests for connection.py
"""

from datetime import datetime
from decimal import Decimal
from unittest import mock

import pymssql
import pytest

from sqldatadump.connection import DatabaseConnection
from sqldatadump.models import ConnectionSettings, SqlValue, ValueKind


def make_connection(**overrides):
    params = dict(host="localhost", port=1433, user="sa", password="secret", database="Shop")
    params.update(overrides)
    return DatabaseConnection(**params)


class TestDatabaseConnection:
    """Tests for DatabaseConnection class."""

    def test_init(self):
        """Test connection initialization."""
        conn = make_connection()
        assert conn.host == "localhost"
        assert conn.port == 1433
        assert conn.user == "sa"
        assert conn.password == "secret"
        assert conn.database == "Shop"
        assert conn.connection is None

    def test_from_settings(self):
        settings = ConnectionSettings(
            host="sql01", port=1533, user="u", password="p", database="d"
        )
        conn = DatabaseConnection.from_settings(settings)
        assert (conn.host, conn.port, conn.user, conn.password, conn.database) == (
            "sql01", 1533, "u", "p", "d"
        )

    def test_default_constants(self):
        """Test default constants."""
        assert DatabaseConnection.DEFAULT_CHARSET == 'UTF-8'

    @mock.patch('sqldatadump.connection.pymssql.connect')
    def test_connect(self, mock_connect):
        """Test database connection establishment."""
        mock_connection = mock.MagicMock()
        mock_connect.return_value = mock_connection

        conn = make_connection()
        conn.connect()

        mock_connect.assert_called_once_with(
            server="localhost",
            port=1433,
            user="sa",
            password="secret",
            database="Shop",
            charset='UTF-8'
        )
        assert conn.connection == mock_connection

    @mock.patch('sqldatadump.connection.pymssql.connect')
    def test_connect_error(self, mock_connect):
        """Test connection errors are logged and re-raised."""
        mock_connect.side_effect = pymssql.OperationalError("Login failed")

        conn = make_connection(password="wrong_password")

        with pytest.raises(pymssql.Error):
            conn.connect()

    @mock.patch('sqldatadump.connection.pymssql.connect')
    def test_disconnect(self, mock_connect):
        """Test database disconnection."""
        mock_connection = mock.MagicMock()
        mock_connect.return_value = mock_connection

        conn = make_connection()
        conn.connect()
        conn.disconnect()

        mock_connection.close.assert_called_once()
        assert conn.connection is None

    def test_disconnect_not_connected(self):
        """Test disconnect when not connected."""
        conn = make_connection()
        # Should not raise any errors
        conn.disconnect()

    @mock.patch('sqldatadump.connection.pymssql.connect')
    def test_context_manager(self, mock_connect):
        """Test context manager usage."""
        mock_connection = mock.MagicMock()
        mock_connect.return_value = mock_connection

        with make_connection() as conn:
            assert conn.connection == mock_connection

        mock_connection.close.assert_called_once()

    @mock.patch('sqldatadump.connection.pymssql.connect')
    def test_context_manager_closes_on_error(self, mock_connect):
        """Test the connection is closed when the body raises."""
        mock_connection = mock.MagicMock()
        mock_connect.return_value = mock_connection

        with pytest.raises(RuntimeError):
            with make_connection():
                raise RuntimeError("boom")

        mock_connection.close.assert_called_once()


class TestQueries:
    """Tests for query helpers."""

    @pytest.fixture
    def mock_cursor(self):
        return mock.MagicMock()

    @pytest.fixture
    def conn(self, mock_cursor):
        with mock.patch('sqldatadump.connection.pymssql.connect') as mock_connect:
            mock_connection = mock.MagicMock()
            mock_connection.cursor.return_value = mock_cursor
            mock_connect.return_value = mock_connection
            conn = make_connection()
            conn.connect()
            yield conn

    def test_execute_query(self, conn, mock_cursor):
        """Test query execution."""
        mock_cursor.fetchall.return_value = [("row1",), ("row2",)]

        result = conn.execute_query("SELECT 1")

        assert result == [("row1",), ("row2",)]
        mock_cursor.execute.assert_called_once_with("SELECT 1", None)
        mock_cursor.close.assert_called_once()

    def test_execute_query_with_params(self, conn, mock_cursor):
        """Test query execution with parameters."""
        mock_cursor.fetchall.return_value = [("row1",)]

        conn.execute_query("SELECT * FROM t WHERE [TABLE_SCHEMA] = %s", ("dbo",))

        mock_cursor.execute.assert_called_once_with(
            "SELECT * FROM t WHERE [TABLE_SCHEMA] = %s",
            ("dbo",)
        )

    def test_execute_query_closes_cursor_on_error(self, conn, mock_cursor):
        mock_cursor.execute.side_effect = pymssql.ProgrammingError("Invalid object name")

        with pytest.raises(pymssql.Error):
            conn.execute_query("SELECT * FROM missing")
        mock_cursor.close.assert_called_once()

    def test_fetch_rows(self, conn, mock_cursor):
        """Test rows are returned as column name to SqlValue mappings."""
        mock_cursor.description = (("Id", 3), ("Price", 5), ("Name", 1), ("Seen", 4))
        mock_cursor.fetchall.return_value = [
            (1, Decimal("9.99"), "a", datetime(2024, 1, 15)),
            (2, None, "b", None),
        ]

        columns, rows = conn.fetch_rows("SELECT [Id], [Price], [Name], [Seen] FROM [Shop].[dbo].[Items]")

        assert columns == ["Id", "Price", "Name", "Seen"]
        assert rows[0] == {
            "Id": SqlValue(ValueKind.INTEGER, 1),
            "Price": SqlValue(ValueKind.DECIMAL, Decimal("9.99")),
            "Name": SqlValue(ValueKind.TEXT, "a"),
            "Seen": SqlValue(ValueKind.TIMESTAMP, datetime(2024, 1, 15)),
        }
        assert rows[1]["Price"] == SqlValue(ValueKind.NULL)
        mock_cursor.close.assert_called_once()

    def test_fetch_rows_empty(self, conn, mock_cursor):
        """Test an empty result is zero rows, not an error."""
        mock_cursor.description = (("Id", 3),)
        mock_cursor.fetchall.return_value = []

        columns, rows = conn.fetch_rows("SELECT [Id] FROM [Shop].[dbo].[Empty]")

        assert columns == ["Id"]
        assert rows == []
