"""
Rendering of cell values as SQL literals.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from .models import BinaryFormat, SqlValue, ValueKind


def format_float(value: float) -> str:
    """Fixed-point text using the shortest digits that round-trip."""
    return format(Decimal(repr(value)), 'f')


# SQL Server types that reject more than three fractional second digits.
MILLISECOND_TYPES = frozenset({'datetime', 'smalldatetime'})


def format_timestamp(value: datetime, data_type: Optional[str] = None) -> str:
    """ISO 8601 literal; full microseconds unless the column type only holds milliseconds."""
    if not value.microsecond:
        timespec = 'seconds'
    elif data_type and data_type.lower() in MILLISECOND_TYPES:
        timespec = 'milliseconds'
    else:
        timespec = 'microseconds'
    return f"'{value.isoformat(timespec=timespec)}'"


def quote_text(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class ValueRenderer:
    """Renders SqlValue cells into literals for INSERT statements."""

    def __init__(self, binary_format: BinaryFormat = BinaryFormat.RAW):
        self.binary_format = binary_format

        # One formatter per value kind
        self._formatters: dict[ValueKind, Callable[[object], str]] = {
            ValueKind.NULL: lambda v: 'NULL',
            ValueKind.INTEGER: lambda v: str(int(v)),
            ValueKind.FLOAT: format_float,
            ValueKind.DECIMAL: lambda v: format(v, 'f'),
            ValueKind.TEXT: quote_text,
            ValueKind.BOOLEAN: lambda v: '1' if v else '0',
            ValueKind.TIMESTAMP: format_timestamp,
            ValueKind.BINARY: self._format_binary,
            ValueKind.OTHER: lambda v: f"'{v}'",
        }

    def render(self, value: SqlValue, data_type: Optional[str] = None) -> str:
        if value.kind == ValueKind.TIMESTAMP:
            return format_timestamp(value.value, data_type)
        return self._formatters[value.kind](value.value)

    def render_row(self, values: list[SqlValue], data_types: Optional[list[str]] = None) -> str:
        """Render one parenthesised VALUES tuple, using column types where given."""
        if data_types is None:
            data_types = [None] * len(values)
        rendered = (self.render(v, t) for v, t in zip(values, data_types))
        return f"({', '.join(rendered)})"

    def _format_binary(self, value: bytes) -> str:
        # Raw output is neither quoted nor escaped and can produce invalid SQL.
        if self.binary_format == BinaryFormat.HEX:
            return f"0x{value.hex()}"
        return value.decode('utf-8', errors='replace')
