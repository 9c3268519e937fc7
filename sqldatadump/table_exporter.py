"""
Table export functionality for sqldatadump.
"""

import gzip
import logging
import time
from pathlib import Path
from typing import Optional, TextIO
from urllib.parse import quote

from .connection import DatabaseConnection
from .models import ExportSettings, Row, TableMetadata, TableStats
from .renderer import ValueRenderer
from .utils import chunk, format_elapsed


def generate_comment_block(host: str, database: str, schema: str) -> str:
    """Header written at the top of each file when headers are enabled."""
    return (
        "/*\n"
        "    Data Dump Created by sqldatadump\n"
        "\n"
        f"    Data Exported from {host}/{database}/{schema}\n"
        "*/\n"
        "\n"
    )


class TableExporter:
    """Exports the rows of one table at a time as INSERT statement files."""

    def __init__(
        self,
        connection: DatabaseConnection,
        settings: ExportSettings,
        header: Optional[str] = None
    ):
        self.connection = connection
        self.settings = settings
        self.output_dir = Path(settings.directory)
        self.header = header
        self.renderer = ValueRenderer(settings.binary_format)

    def export_table(self, table: TableMetadata) -> TableStats:
        """
        Export a table to one or more files.

        Rows are fetched in full, rendered into INSERT statements of at most
        `rows_per_batch` rows, and written `batches_per_file` statements per
        file. Any fetch or write error propagates to the caller.

        Args:
            table: Metadata of the table to export.

        Returns:
            TableStats with export statistics.
        """
        stats = TableStats(table=table.display_name)
        started = time.monotonic()

        phase = time.monotonic()
        rows = self.fetch_rows(table)
        logging.info(
            f"Retrieved table data for {table.display_name} "
            f"({len(rows)} rows) in {format_elapsed(time.monotonic() - phase)}"
        )

        phase = time.monotonic()
        statements = self.build_insert_statements(table, rows)
        logging.info(
            f"Created {len(statements)} insert statement(s) for {table.display_name} "
            f"in {format_elapsed(time.monotonic() - phase)}"
        )

        phase = time.monotonic()
        paths = self.write_files(table, statements)
        logging.info(
            f"Wrote {len(paths)} file(s) for {table.display_name} "
            f"in {format_elapsed(time.monotonic() - phase)}"
        )

        stats.rows_exported = len(rows)
        stats.statements = len(statements)
        stats.files_written = [str(p) for p in paths]
        stats.elapsed = time.monotonic() - started
        stats.success = True
        logging.info(f"Completed data dump for {table.display_name} in {format_elapsed(stats.elapsed)}")
        return stats

    def build_select_query(self, table: TableMetadata) -> str:
        return f"SELECT {table.quoted_columns} FROM {table.qualified_name}"

    def fetch_rows(self, table: TableMetadata) -> list[Row]:
        query = self.build_select_query(table)
        logging.debug(f"Fetching {table.display_name} with query: {query[:200]}")
        _, rows = self.connection.fetch_rows(query)
        return rows

    def build_insert_statements(self, table: TableMetadata, rows: list[Row]) -> list[str]:
        """Render rows into multi-row INSERT statements."""
        prefix = f"INSERT INTO {table.qualified_name} ({table.quoted_columns}) VALUES"
        names = table.column_names
        data_types = [column.data_type for column in table.columns]
        statements = []

        for batch in chunk(rows, self.settings.rows_per_batch):
            value_lines = [
                f"  {self.renderer.render_row([row[name] for name in names], data_types)}"
                for row in batch
            ]
            statements.append(f"{prefix}\n" + ',\n'.join(value_lines) + ';')

        return statements

    def build_file_content(self, table: TableMetadata, statements: list[str]) -> str:
        """Wrap a group of statements in the IDENTITY_INSERT bracket."""
        target = table.identity_insert_target
        parts = [
            f"SET IDENTITY_INSERT {target} ON",
            *statements,
            f"SET IDENTITY_INSERT {target} OFF",
        ]
        return (self.header or '') + '\n\n'.join(parts) + '\n'

    def file_name(self, table: TableMetadata, index: int) -> str:
        """
        Output file name for the 1-based file group `index`.

        Each name part is percent-encoded so path separators and characters
        that are invalid in file names stay inside the output directory.
        """
        parts = [quote(part, safe='') for part in (table.catalog, table.schema, table.name)]
        name = f"{'_'.join(parts)}_{index}.sql"
        if self.settings.compress:
            name += '.gz'
        return name

    def write_files(self, table: TableMetadata, statements: list[str]) -> list[Path]:
        paths = []
        for index, group in enumerate(chunk(statements, self.settings.batches_per_file), start=1):
            output_path = self.output_dir / self.file_name(table, index)
            file_handle = self._open_output_file(output_path)
            try:
                file_handle.write(self.build_file_content(table, group))
            finally:
                file_handle.close()
            logging.debug(f"Wrote {output_path}")
            paths.append(output_path)
        return paths

    def _open_output_file(self, output_path: Path) -> TextIO:
        """Open output file with optional compression."""
        if self.settings.compress:
            return gzip.open(output_path, 'wt', encoding='utf-8')
        return open(output_path, 'w', encoding='utf-8')
