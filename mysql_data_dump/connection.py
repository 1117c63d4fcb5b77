"""
Database connection management for MySQL Data Dumper.
"""

import logging
from typing import Any, Iterator, Optional

import mysql.connector
from mysql.connector import Error as MySQLError

from .errors import SourceConnectionError
from .models import ColumnInfo, TableDescriptor


class DatabaseConnection:
    """Manages MySQL database connections with context manager support."""

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

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
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.DEFAULT_CHARSET,
                use_unicode=True,
                consume_results=True
            )
            logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise SourceConnectionError(f"Failed to connect to {self.host}:{self.port}: {e}") from e

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def execute(self, statement: str) -> None:
        """Execute a statement that returns no rows."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(statement)
        finally:
            cursor.close()

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def get_cursor(self, buffered: bool = False, dictionary: bool = False):
        """Get a cursor for streaming large results.

        Args:
            buffered: If False (default), uses server-side cursor for memory-efficient
                     streaming of large result sets. If True, uses buffered cursor.
            dictionary: If True, rows are returned as dicts keyed by column name.
        """
        if dictionary:
            return self.connection.cursor(buffered=buffered, dictionary=True)
        return self.connection.cursor(buffered=buffered)

    def stream_query(self, query: str) -> Iterator[tuple]:
        """Yield the rows of a query one at a time, in server order.

        The rows are read through an unbuffered cursor, so only the row in
        hand is held in memory. Driver errors surface as SourceConnectionError.
        """
        cursor = self.get_cursor()
        try:
            cursor.execute(query)
            for row in cursor:
                yield row
        except MySQLError as e:
            raise SourceConnectionError(f"Query failed: {query[:200]}: {e}") from e
        finally:
            cursor.close()

    def get_index_catalog(self, table: str) -> list[dict[str, Any]]:
        """Get the SHOW INDEX rows of a table as dicts."""
        cursor = self.get_cursor(buffered=True, dictionary=True)
        try:
            cursor.execute(f"SHOW INDEX FROM `{table}`")
            return cursor.fetchall()
        finally:
            cursor.close()

    def get_table_columns(self, table: str) -> list[ColumnInfo]:
        """Get column information for a table."""
        results = self.execute_query(f"DESCRIBE `{table}`")
        return [
            ColumnInfo(
                name=row[0],
                type=row[1],
                nullable=row[2],
                key=row[3],
                default=row[4],
                extra=row[5]
            )
            for row in results
        ]

    def get_tables(self) -> list[TableDescriptor]:
        """Describe every table and view in the current database."""
        try:
            results = self.execute_query("SHOW FULL TABLES")
            return [
                TableDescriptor(
                    name=row[0],
                    columns=tuple(self.get_table_columns(row[0])),
                    is_view=(row[1] == 'VIEW')
                )
                for row in results
            ]
        except MySQLError as e:
            raise SourceConnectionError(f"Failed to list tables: {e}") from e
