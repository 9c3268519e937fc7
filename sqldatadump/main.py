#!/usr/bin/env python3
"""
sqldatadump - CLI Entry Point
=============================
Exports the rows of every base table in a SQL Server schema as files of
INSERT statements with support for:
- Configurable rows per INSERT statement and statements per file
- Ignoring tables by name
- IDENTITY_INSERT wrapping for replay into identity columns
- Optional YAML configuration and gzip compression
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader, parse_connection_string
from .database_exporter import DatabaseExporter
from .models import BinaryFormat, ExportSettings
from .utils import setup_logging

# SQL Server accepts at most this many row value expressions per VALUES clause.
MAX_ROWS_PER_INSERT = 1000


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sqldatadump',
        description='Export SQL Server table data as INSERT statement files',
        usage=(
            '%(prog)s --directory DIR [--schema SCHEMA] [--batches-per-file N] '
            '[--rows-per-batch N] [options] <username>:<password>@<address>:<port>/<database>'
        )
    )
    parser.add_argument(
        'connection',
        nargs='?',
        help='Connection string <username>:<password>@<address>:<port>/<database> '
             '(optional when the config file has a connection section)'
    )
    parser.add_argument(
        '--directory',
        help='Root directory to export to'
    )
    parser.add_argument(
        '--schema',
        help='Schema to export (default: dbo)'
    )
    parser.add_argument(
        '--batches-per-file', '--batchesPerFile',
        dest='batches_per_file',
        type=int,
        help='Number of insert batches per file (default: 10)'
    )
    parser.add_argument(
        '--rows-per-batch', '--rowsPerBatch',
        dest='rows_per_batch',
        type=int,
        help='Number of rows to insert per batch (default: 1000)'
    )
    parser.add_argument(
        '--ignore-tables', '--ignoreTables',
        dest='ignore_tables',
        help='Comma separated list of tables that should be ignored'
    )
    parser.add_argument(
        '--compress',
        action='store_true',
        default=None,
        help='Write gzip compressed files'
    )
    parser.add_argument(
        '--binary-format',
        choices=[f.value for f in BinaryFormat],
        help='How binary values are written (default: raw)'
    )
    parser.add_argument(
        '--header',
        dest='include_header',
        action='store_true',
        default=None,
        help='Write a comment header at the top of each file'
    )
    parser.add_argument(
        '--continue-on-error',
        action='store_true',
        default=None,
        help='Log failed tables and keep exporting the rest'
    )
    parser.add_argument(
        '-c', '--config',
        help='Path to an optional YAML configuration file'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='List the tables that would be exported without exporting them'
    )
    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        parser.error(f"configuration file '{args.config}' not found")
    except yaml.YAMLError as e:
        parser.error(f"invalid YAML in configuration file: {e}")

    # Setup logging
    try:
        log_settings = dict(config.get_logging_settings())
    except ValueError as e:
        parser.error(str(e))
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    try:
        if args.connection:
            connection_settings = parse_connection_string(args.connection)
        else:
            connection_settings = config.get_connection_settings()
        settings = ExportSettings.from_configs(config.get_export_settings(), vars(args))
        settings.validate()
    except ValueError as e:
        parser.error(str(e))

    if connection_settings is None:
        parser.error("a connection string is required")

    if settings.rows_per_batch > MAX_ROWS_PER_INSERT:
        logging.warning(
            f"rows_per_batch={settings.rows_per_batch} exceeds the {MAX_ROWS_PER_INSERT} rows "
            f"SQL Server accepts in a single INSERT ... VALUES statement"
        )

    if args.dry_run:
        logging.info("DRY RUN MODE - No data will be exported")

    try:
        exporter = DatabaseExporter(connection_settings, settings)
        stats = exporter.run(dry_run=args.dry_run)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)

    if args.dry_run:
        sys.exit(0)

    # Print summary
    logging.info("=" * 50)
    logging.info("EXPORT COMPLETE")
    logging.info(f"Tables: {stats.total_tables}")
    logging.info(f"Total Rows: {stats.total_rows}")
    logging.info(f"Files: {stats.total_files}")

    if stats.errors:
        logging.warning(f"Errors: {len(stats.errors)}")
        for err in stats.errors:
            logging.warning(f"  - {err['table']}: {err['error']}")
        sys.exit(1)


if __name__ == '__main__':
    main()
