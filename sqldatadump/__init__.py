"""
sqldatadump
===========
Exports the rows of every base table in a SQL Server schema as files of
INSERT statements with support for:
- Configurable rows per INSERT statement and statements per file
- Ignoring tables by name
- IDENTITY_INSERT wrapping for replay into identity columns
- Optional YAML configuration and gzip compression
"""

from .config import ConfigLoader, parse_connection_string
from .connection import DatabaseConnection
from .database_exporter import DatabaseExporter
from .main import main
from .models import (
    BinaryFormat,
    Column,
    ColumnRow,
    ConnectionSettings,
    DumpStats,
    ExportSettings,
    SqlValue,
    TableMetadata,
    TableStats,
    ValueKind,
    parse_ignore_tables,
)
from .renderer import ValueRenderer
from .schema import SchemaEnumerator, assemble_tables
from .table_exporter import TableExporter, generate_comment_block
from .utils import chunk, print_dry_run_info, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseExporter",
    "SchemaEnumerator",
    "TableExporter",
    "ValueRenderer",
    # Models
    "BinaryFormat",
    "Column",
    "ColumnRow",
    "ConnectionSettings",
    "DumpStats",
    "ExportSettings",
    "SqlValue",
    "TableMetadata",
    "TableStats",
    "ValueKind",
    # Utilities
    "assemble_tables",
    "chunk",
    "generate_comment_block",
    "parse_connection_string",
    "parse_ignore_tables",
    "print_dry_run_info",
    "setup_logging",
]
