"""
Main export orchestration for sqldatadump.
"""

import logging
from pathlib import Path
from typing import Optional

from .connection import DatabaseConnection
from .models import ConnectionSettings, DumpStats, ExportSettings, TableMetadata, TableStats
from .schema import SchemaEnumerator
from .table_exporter import TableExporter, generate_comment_block
from .utils import print_dry_run_info


class DatabaseExporter:
    """Exports every base table of one schema."""

    def __init__(self, connection_settings: ConnectionSettings, settings: ExportSettings):
        self.connection_settings = connection_settings
        self.settings = settings
        self.stats = DumpStats()

    def run(self, dry_run: bool = False) -> DumpStats:
        """Run the export.

        One connection is opened for the whole run and shared, one table at a
        time, by schema enumeration and the table exports.

        Args:
            dry_run: If True, only list the tables that would be exported.
        """
        output_dir = Path(self.settings.directory)
        if not dry_run:
            output_dir.mkdir(parents=True, exist_ok=True)

        with DatabaseConnection.from_settings(self.connection_settings) as conn:
            enumerator = SchemaEnumerator(conn, self.settings.schema, self.settings.ignore_tables)
            tables = enumerator.get_tables()

            if dry_run:
                print_dry_run_info(tables, self.settings)
                return self.stats

            logging.info(f"Starting export of {len(tables)} table(s) to {output_dir}")
            exporter = TableExporter(conn, self.settings, header=self._build_header())
            for table in tables:
                table_stats = self._export_single_table(exporter, table)
                self._record(table_stats)

        return self.stats

    def _build_header(self) -> Optional[str]:
        if not self.settings.include_header:
            return None
        return generate_comment_block(
            self.connection_settings.host,
            self.connection_settings.database,
            self.settings.schema,
        )

    def _export_single_table(self, exporter: TableExporter, table: TableMetadata) -> TableStats:
        """Export one table; failures propagate unless continue_on_error is set."""
        if not self.settings.continue_on_error:
            return exporter.export_table(table)

        try:
            return exporter.export_table(table)
        except Exception as e:
            logging.error(f"Error exporting table {table.display_name}: {e}")
            return TableStats(table=table.display_name, error=str(e))

    def _record(self, table_stats: TableStats) -> None:
        self.stats.tables.append(table_stats)
        self.stats.total_tables += 1
        self.stats.total_rows += table_stats.rows_exported
        self.stats.total_files += len(table_stats.files_written)
        self._log_table_result(table_stats)

    def _log_table_result(self, table_stats: TableStats) -> None:
        """Log the result of a table export."""
        if table_stats.success:
            logging.info(
                f"  ✓ {table_stats.table}: {table_stats.rows_exported} rows, "
                f"{len(table_stats.files_written)} file(s)"
            )
        else:
            logging.error(f"  ✗ {table_stats.table}: {table_stats.error}")
            self.stats.errors.append({
                'table': table_stats.table,
                'error': table_stats.error
            })
