"""
Schema enumeration and table metadata assembly for sqldatadump.
"""

import logging
from typing import Iterable

from .connection import DatabaseConnection
from .models import Column, ColumnRow, TableMetadata


def assemble_tables(rows: Iterable[ColumnRow]) -> list[TableMetadata]:
    """
    Group flat (table, column) rows into one TableMetadata per table.

    Rows must arrive grouped by table and ordered by ordinal position within
    each table. Tables keep first-seen order and columns keep input order.
    Columns are never deduplicated: a repeated name stays twice in the column
    sequence while the name lookup keeps the last one.
    """
    groups: list[tuple[tuple[str, str, str], list[Column]]] = []
    for row in rows:
        if not groups or groups[-1][0] != row.table_identity:
            groups.append((row.table_identity, []))
        groups[-1][1].append(Column(
            name=row.column,
            ordinal_position=row.ordinal_position,
            is_nullable=row.is_nullable,
            data_type=row.data_type,
        ))

    return [
        TableMetadata.from_columns(catalog, schema, name, columns)
        for (catalog, schema, name), columns in groups
    ]


class SchemaEnumerator:
    """Lists the base tables of a schema and their columns."""

    COLUMNS_QUERY = """
        SELECT c.[TABLE_CATALOG], c.[TABLE_SCHEMA], c.[TABLE_NAME], c.[COLUMN_NAME],
               c.[ORDINAL_POSITION], c.[IS_NULLABLE], c.[DATA_TYPE]
        FROM INFORMATION_SCHEMA.COLUMNS c
        JOIN INFORMATION_SCHEMA.TABLES t
            ON c.[TABLE_CATALOG] = t.[TABLE_CATALOG]
            AND c.[TABLE_SCHEMA] = t.[TABLE_SCHEMA]
            AND c.[TABLE_NAME] = t.[TABLE_NAME]
        WHERE t.[TABLE_TYPE] = 'BASE TABLE'
            AND c.[TABLE_SCHEMA] = %s{ignore_clause}
        ORDER BY c.[TABLE_SCHEMA], c.[TABLE_NAME], c.[ORDINAL_POSITION]
    """

    def __init__(self, connection: DatabaseConnection, schema: str, ignore_tables: Iterable[str] = ()):
        self.connection = connection
        self.schema = schema
        self.ignore_tables = frozenset(ignore_tables)

    def build_query(self) -> tuple[str, tuple]:
        """Build the column listing query and its parameters."""
        ignored = sorted(self.ignore_tables)
        ignore_clause = ""
        if ignored:
            placeholders = ', '.join(['%s'] * len(ignored))
            ignore_clause = f"\n            AND t.[TABLE_NAME] COLLATE Latin1_General_BIN2 NOT IN ({placeholders})"
        query = self.COLUMNS_QUERY.format(ignore_clause=ignore_clause)
        return query, (self.schema, *ignored)

    def fetch_column_rows(self) -> list[ColumnRow]:
        query, params = self.build_query()
        results = self.connection.execute_query(query, params)
        rows = [ColumnRow(*result) for result in results]

        # Ignored names match exactly, whatever the server collation.
        kept = [row for row in rows if row.table not in self.ignore_tables]
        if len(kept) != len(rows):
            logging.debug(f"Dropped {len(rows) - len(kept)} column row(s) of ignored tables")
        return kept

    def get_tables(self) -> list[TableMetadata]:
        """Return the metadata of every exportable table in the schema."""
        tables = assemble_tables(self.fetch_column_rows())
        logging.info(f"Found {len(tables)} table(s) in schema '{self.schema}'")
        if self.ignore_tables:
            logging.info(f"Ignoring table(s): {', '.join(sorted(self.ignore_tables))}")
        return tables
