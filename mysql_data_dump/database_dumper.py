"""
Main row-data dumping orchestration for MySQL Data Dumper.
"""

import fnmatch
import logging
import re
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Optional

from .connection import DatabaseConnection
from .errors import LockReleaseError
from .index_manager import IndexManager
from .lock_manager import LockManager
from .models import DumpOptions, DumpStats, TableDescriptor, TableStats
from .output_sink import OutputSink
from .table_dumper import TableDumper
from .value_renderer import RenderRow


class DatabaseDumper:
    """Dumps the rows of a list of tables, one table at a time."""

    def __init__(
        self,
        connection: DatabaseConnection,
        options: DumpOptions,
        metadata_connection: Optional[DatabaseConnection] = None,
        render_row: Optional[RenderRow] = None
    ):
        self.connection = connection
        self.options = options
        self.metadata_connection = metadata_connection
        self.render_row = render_row
        self.stats = DumpStats()

    def dump(
        self,
        tables: list[TableDescriptor],
        output_file: Optional[str | Path] = None,
        compress: bool = False
    ) -> list[TableDescriptor]:
        """Dump the row data of the given tables.

        Args:
            tables: Tables in the order they should be dumped.
            output_file: If given, statements are appended to this file.
            compress: Gzip the output file.

        Returns:
            A copy of each table descriptor, in input order, whose ``data`` holds
            the dumped text when ``return_from_function`` is set. Views that
            were skipped always carry ``data=None``.
        """
        tables = list(tables)
        sink = OutputSink.for_options(output_file, self.options.return_from_function, compress)
        table_dumper = TableDumper(
            self.connection,
            self.options,
            sink,
            render_row=self.render_row,
            index_manager=self._index_manager()
        )
        lock = LockManager(self.connection).held() if self.options.lock_tables else nullcontext()

        logging.info(f"Starting data dump of {len(tables)} table(s)")

        results: Optional[list[TableDescriptor]] = None
        try:
            with lock:
                results = self._dump_tables(tables, table_dumper, sink)
                # trailing pad goes to the file only; the last table was already taken
                sink.write('', in_memory=False)
        except LockReleaseError as e:
            # None when the export itself failed first
            e.tables = results
            raise
        finally:
            sink.close()

        return results

    def _index_manager(self) -> Optional[IndexManager]:
        if not self.options.drop_index:
            return None
        if self.metadata_connection is None:
            logging.warning("drop_index requested without a metadata connection; indexes will not be dropped")
            return None
        return IndexManager(self.metadata_connection)

    def _dump_tables(
        self,
        tables: list[TableDescriptor],
        table_dumper: TableDumper,
        sink: OutputSink
    ) -> list[TableDescriptor]:
        """Process each table strictly in order. Any error aborts the rest."""
        results: list[TableDescriptor] = []

        for table in tables:
            if table.is_view and not self.options.include_view_data:
                logging.debug(f"Skipping data of view '{table.name}'")
                results.append(table.with_data(None))
                self._log_table_result(TableStats(table=table.name, skipped=True))
                continue

            sink.start_table()
            if results:
                # pad the dump between tables
                sink.write('')

            table_stats = table_dumper.dump_table(table)
            results.append(table.with_data(sink.finish_table()))
            self._log_table_result(table_stats)

        return results

    def _log_table_result(self, table_stats: TableStats) -> None:
        """Log the result of a table dump."""
        self.stats.add(table_stats)
        if table_stats.skipped:
            logging.info(f"  - {table_stats.table}: view, data skipped")
        else:
            logging.info(
                f"  ✓ {table_stats.table}: {table_stats.rows_dumped} rows "
                f"in {table_stats.statements} statement(s)"
            )

    # Table selection

    def _compile_exclusion_patterns(self, exclude_patterns: list[str]) -> list[re.Pattern]:
        """
        Pre-compile exclusion patterns to regex for faster matching.

        Converts fnmatch patterns to compiled regex patterns.
        """
        return [re.compile(fnmatch.translate(pattern)) for pattern in exclude_patterns]

    def _is_table_excluded(
        self,
        table_name: str,
        exclude_patterns: list[str],
        compiled_patterns: Optional[list[re.Pattern]] = None
    ) -> bool:
        """
        Check if a table should be excluded based on patterns.

        Supports:
        - Exact matches: 'users_backup'
        - Wildcard patterns: '*_old', 'tmp_*', '*_backup_*'
        """
        if compiled_patterns is None:
            compiled_patterns = self._compile_exclusion_patterns(exclude_patterns)
        for i, compiled in enumerate(compiled_patterns):
            if compiled.match(table_name):
                logging.debug(f"Table '{table_name}' excluded by pattern '{exclude_patterns[i]}'")
                return True
        return False

    def select_tables(
        self,
        available: list[TableDescriptor],
        tables_config: Any = '*',
        exclude_patterns: Optional[list[str]] = None
    ) -> list[TableDescriptor]:
        """Pick the tables to dump, applying exclusion patterns.

        ``tables_config`` is ``'*'`` for every table, or a list of names (or
        ``{'name': ...}`` dicts) giving both the selection and the order.
        """
        exclude_patterns = exclude_patterns or []
        compiled_patterns = self._compile_exclusion_patterns(exclude_patterns)

        if tables_config == '*':
            selected = list(available)
        else:
            by_name = {table.name: table for table in available}
            selected = []
            for entry in tables_config:
                name = entry['name'] if isinstance(entry, dict) else entry
                if name not in by_name:
                    logging.warning(f"Table '{name}' not found in database, skipping")
                    continue
                selected.append(by_name[name])

        if exclude_patterns:
            original_count = len(selected)
            selected = [
                t for t in selected
                if not self._is_table_excluded(t.name, exclude_patterns, compiled_patterns)
            ]
            excluded_count = original_count - len(selected)
            if excluded_count > 0:
                logging.info(f"Excluded {excluded_count} table(s) matching exclusion patterns")

        return selected
