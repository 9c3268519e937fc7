"""
Data models and enums for sqldatadump.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

DEFAULT_PORT = 1433


class ValueKind(Enum):
    """Tag of a single cell value fetched from the database."""
    NULL = "null"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    TEXT = "text"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    OTHER = "other"


class BinaryFormat(Enum):
    """How binary column values are written to INSERT statements."""
    RAW = "raw"
    HEX = "hex"


@dataclass(frozen=True)
class SqlValue:
    """A cell value together with its kind."""
    kind: ValueKind
    value: Any = None

    @classmethod
    def of(cls, value: Any) -> "SqlValue":
        """
        Classify a driver value.

        bool is checked before int since bool is a subclass of int.
        """
        if value is None:
            return cls(ValueKind.NULL)
        if isinstance(value, bool):
            return cls(ValueKind.BOOLEAN, value)
        if isinstance(value, int):
            return cls(ValueKind.INTEGER, value)
        if isinstance(value, float):
            return cls(ValueKind.FLOAT, value)
        if isinstance(value, Decimal):
            return cls(ValueKind.DECIMAL, value)
        if isinstance(value, str):
            return cls(ValueKind.TEXT, value)
        if isinstance(value, datetime):
            return cls(ValueKind.TIMESTAMP, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(ValueKind.BINARY, bytes(value))
        return cls(ValueKind.OTHER, value)


Row = dict[str, SqlValue]


def parse_ignore_tables(value: str) -> list[str]:
    """Split a comma separated table list, dropping blanks."""
    return [name.strip() for name in value.split(',') if name.strip()]


@dataclass(frozen=True)
class ColumnRow:
    """One row of the information schema column listing."""
    catalog: str
    schema: str
    table: str
    column: str
    ordinal_position: int
    is_nullable: str
    data_type: str

    @property
    def table_identity(self) -> tuple[str, str, str]:
        return (self.catalog, self.schema, self.table)


@dataclass(frozen=True)
class Column:
    """Database column metadata."""
    name: str
    ordinal_position: int
    is_nullable: str
    data_type: str


def quote_identifier(name: str) -> str:
    """Bracket-quote a SQL Server identifier."""
    return "[" + name.replace("]", "]]") + "]"


@dataclass(frozen=True)
class TableMetadata:
    """A table and its columns in ordinal order."""
    catalog: str
    schema: str
    name: str
    columns: tuple[Column, ...] = ()
    column_map: dict[str, Column] = field(default_factory=dict, compare=False)

    @classmethod
    def from_columns(
        cls,
        catalog: str,
        schema: str,
        name: str,
        columns: list[Column]
    ) -> "TableMetadata":
        """Build table metadata; for duplicate names the map keeps the last column."""
        return cls(
            catalog=catalog,
            schema=schema,
            name=name,
            columns=tuple(columns),
            column_map={col.name: col for col in columns},
        )

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    @property
    def display_name(self) -> str:
        return f"[{self.catalog}].[{self.schema}].[{self.name}]"

    @property
    def qualified_name(self) -> str:
        """Three-part name used in SELECT and INSERT statements."""
        return '.'.join(quote_identifier(part) for part in (self.catalog, self.schema, self.name))

    @property
    def identity_insert_target(self) -> str:
        """Two-part name used by SET IDENTITY_INSERT."""
        return f"{quote_identifier(self.schema)}.{quote_identifier(self.name)}"

    @property
    def quoted_columns(self) -> str:
        return ', '.join(quote_identifier(col.name) for col in self.columns)


@dataclass
class ConnectionSettings:
    """Connection parameters for the source database."""
    host: str
    user: str
    password: str
    database: str
    port: int = DEFAULT_PORT


@dataclass
class TableStats:
    """Statistics for a single table export."""
    table: str
    rows_exported: int = 0
    statements: int = 0
    files_written: list[str] = field(default_factory=list)
    elapsed: float = 0.0
    success: bool = False
    error: Optional[str] = None


@dataclass
class DumpStats:
    """Overall export statistics."""
    tables: list[TableStats] = field(default_factory=list)
    total_tables: int = 0
    total_rows: int = 0
    total_files: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ExportSettings:
    """Merged settings for an export run."""
    directory: Optional[str] = None
    schema: str = "dbo"
    rows_per_batch: int = 1000
    batches_per_file: int = 10
    ignore_tables: list[str] = field(default_factory=list)
    compress: bool = False
    binary_format: BinaryFormat = BinaryFormat.RAW
    include_header: bool = False
    continue_on_error: bool = False

    KEYS = (
        'directory', 'schema', 'rows_per_batch', 'batches_per_file', 'ignore_tables',
        'compress', 'binary_format', 'include_header', 'continue_on_error',
    )

    @classmethod
    def from_configs(
        cls,
        file_config: dict[str, Any],
        overrides: dict[str, Any]
    ) -> "ExportSettings":
        """
        Create ExportSettings by merging configs with priority: overrides > file config > defaults.

        Override values of None are treated as unset.
        """
        settings = {}
        for key in cls.KEYS:
            if file_config.get(key) is not None:
                settings[key] = file_config[key]
            if overrides.get(key) is not None:
                settings[key] = overrides[key]

        if 'ignore_tables' in settings and isinstance(settings['ignore_tables'], str):
            settings['ignore_tables'] = parse_ignore_tables(settings['ignore_tables'])
        if 'binary_format' in settings:
            settings['binary_format'] = BinaryFormat(settings['binary_format'])
        for key in ('rows_per_batch', 'batches_per_file'):
            if key in settings:
                settings[key] = int(settings[key])
        return cls(**settings)

    def validate(self) -> None:
        """Raise ValueError for settings that cannot be exported with."""
        if not self.directory:
            raise ValueError("an output directory is required")
        if self.rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {self.rows_per_batch}")
        if self.batches_per_file <= 0:
            raise ValueError(f"batches_per_file must be positive, got {self.batches_per_file}")
