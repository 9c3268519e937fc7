"""
Database connection management for sqldatadump.
"""

import logging
from typing import Optional

import pymssql

from .models import ConnectionSettings, Row, SqlValue


class DatabaseConnection:
    """Manages a SQL Server connection with context manager support."""

    DEFAULT_CHARSET = 'UTF-8'

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connection = None

    @classmethod
    def from_settings(cls, settings: ConnectionSettings) -> "DatabaseConnection":
        return cls(
            host=settings.host,
            port=settings.port,
            user=settings.user,
            password=settings.password,
            database=settings.database,
        )

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = pymssql.connect(
                server=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.DEFAULT_CHARSET
            )
            logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except pymssql.Error as e:
            logging.error(f"Failed to connect to database: {e}")
            raise

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None
            logging.debug("Database connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def fetch_rows(self, query: str) -> tuple[list[str], list[Row]]:
        """
        Run a SELECT and buffer every row as a column name -> SqlValue mapping.

        Returns the column names reported by the driver and the rows in the
        order the server returned them. A result with no rows is an empty list.
        """
        cursor = self.connection.cursor()
        try:
            cursor.execute(query)
            columns = [desc[0] for desc in cursor.description or ()]
            rows = [
                {name: SqlValue.of(value) for name, value in zip(columns, record)}
                for record in cursor.fetchall()
            ]
            return columns, rows
        finally:
            cursor.close()
