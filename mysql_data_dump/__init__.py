"""
MySQL Data Dumper
=================
Exports MySQL table rows as replayable SQL statements with support for:
- Streaming, one table at a time
- Batched multi-row INSERT/REPLACE statements
- Global read lock during the dump
- Secondary index drop/recreate around the reload
- Per-table WHERE clauses
- File and/or in-memory output
"""

from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper
from .errors import (
    DumpError,
    IndexQueryError,
    LockError,
    LockReleaseError,
    SourceConnectionError,
    WriteError,
)
from .index_manager import IndexManager
from .lock_manager import LockManager
from .main import main
from .models import (
    ColumnInfo,
    DumpOptions,
    DumpStats,
    IndexPlan,
    SlotState,
    TableDescriptor,
    TableStats,
)
from .output_sink import FileDestination, MemoryDestination, OutputSink
from .statement_builder import StatementBuilder
from .table_dumper import TableDumper
from .utils import format_options_display, print_dry_run_info, setup_logging
from .value_renderer import ValueRenderer

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseDumper",
    "TableDumper",
    "IndexManager",
    "LockManager",
    "StatementBuilder",
    "ValueRenderer",
    "OutputSink",
    "FileDestination",
    "MemoryDestination",
    # Models
    "ColumnInfo",
    "DumpOptions",
    "DumpStats",
    "IndexPlan",
    "SlotState",
    "TableDescriptor",
    "TableStats",
    # Errors
    "DumpError",
    "IndexQueryError",
    "LockError",
    "LockReleaseError",
    "SourceConnectionError",
    "WriteError",
    # Utilities
    "format_options_display",
    "print_dry_run_info",
    "setup_logging",
]
