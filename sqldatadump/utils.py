"""
Utility functions for sqldatadump.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Sequence, TypeVar

from .models import ExportSettings, TableMetadata

T = TypeVar('T')


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration."""
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """
    Split items into consecutive chunks of `size`.

    Every chunk holds exactly `size` items except the last, which holds the
    remainder. An empty sequence yields no chunks.
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def format_elapsed(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.2f}s"


def print_dry_run_info(tables: list[TableMetadata], settings: ExportSettings) -> None:
    """Log the tables an export would cover in dry-run mode."""
    logging.info(
        f"Would export {len(tables)} table(s) from schema '{settings.schema}' "
        f"to {settings.directory} ({', '.join(format_settings_display(settings))})"
    )
    for table in tables:
        logging.info(f"  - {table.display_name} ({len(table.columns)} columns)")


def format_settings_display(settings: ExportSettings) -> list[str]:
    """Format settings for display in dry-run mode."""
    parts = [
        f"rows_per_batch={settings.rows_per_batch}",
        f"batches_per_file={settings.batches_per_file}",
    ]
    if settings.ignore_tables:
        parts.append(f"ignore={','.join(settings.ignore_tables)}")
    if settings.compress:
        parts.append("compress")
    return parts
