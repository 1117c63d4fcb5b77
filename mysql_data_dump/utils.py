"""
Utility functions for MySQL Data Dumper.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .models import DumpOptions, TableDescriptor


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


def print_dry_run_info(tables: list[TableDescriptor], options: DumpOptions) -> None:
    """Print information about what would be dumped in dry-run mode."""
    option_parts = format_options_display(options)
    logging.info(f"Options: {', '.join(option_parts) if option_parts else 'defaults'}")

    for table in tables:
        if table.is_view and not options.include_view_data:
            logging.info(f"  - {table.name} (view, data skipped)")
            continue

        where_clause = options.where_for(table.name)
        if where_clause:
            logging.info(f"  - {table.name} (where='{where_clause}')")
        else:
            logging.info(f"  - {table.name}")


def format_options_display(options: DumpOptions) -> list[str]:
    """Format options for display in dry-run mode."""
    parts = [f"rows_per_statement={options.max_rows_per_insert_statement or 'all'}"]
    if options.use_replace:
        parts.append("replace")
    if options.lock_tables:
        parts.append("lock_tables")
    if options.drop_index:
        parts.append("drop_index")
    if options.include_view_data:
        parts.append("include_view_data")
    if options.format:
        parts.append("format")
    return parts
