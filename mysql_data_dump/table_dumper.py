"""
Table dumping functionality for MySQL Data Dumper.
"""

import logging
from typing import Optional

from .connection import DatabaseConnection
from .index_manager import IndexManager
from .models import DumpOptions, IndexPlan, TableDescriptor, TableStats
from .output_sink import OutputSink
from .statement_builder import StatementBuilder
from .value_renderer import RenderRow, ValueRenderer

HEADER_RULE = '# ------------------------------------------------------------'


class TableDumper:
    """Streams the rows of one table at a time into batched statements."""

    def __init__(
        self,
        connection: DatabaseConnection,
        options: DumpOptions,
        sink: OutputSink,
        builder: Optional[StatementBuilder] = None,
        render_row: Optional[RenderRow] = None,
        index_manager: Optional[IndexManager] = None
    ):
        self.connection = connection
        self.options = options
        self.sink = sink
        self.builder = builder or StatementBuilder.for_options(options.use_replace, options.format)
        self.render_row = render_row or ValueRenderer().render_row
        self.index_manager = index_manager

    def dump_table(self, table: TableDescriptor) -> TableStats:
        """
        Dump the rows of a table to the sink.

        The index drop statement (if any) is written right before the first
        statement of rows and the recreate statement right after the last one.
        A table without rows gets neither.

        Args:
            table: Table to dump.

        Returns:
            TableStats with dump statistics.
        """
        stats = TableStats(table=table.name)

        if self.options.verbose:
            self._write_header(table)

        plan = self.index_manager.plan(table) if self.index_manager else IndexPlan.empty()

        query = self._build_select_query(table)
        logging.info(f"Dumping table '{table.name}' with query: {query[:200]}")

        max_rows = self.options.max_rows_per_insert_statement
        batch: list[tuple[str, ...]] = []

        for row in self.connection.stream_query(query):
            batch.append(self.render_row(table, row))
            stats.rows_dumped += 1

            drop_statement = plan.take_drop()
            if drop_statement:
                self.sink.write(drop_statement)

            if len(batch) == max_rows:
                self._write_batch(table, batch, stats)
                batch = []

        # Write remaining rows
        if batch:
            self._write_batch(table, batch, stats)

        recreate_statement = plan.take_recreate()
        if recreate_statement:
            self.sink.write(recreate_statement)

        return stats

    def _write_header(self, table: TableDescriptor) -> None:
        locked = ' (locked)' if self.options.lock_tables else ''
        self.sink.write([
            HEADER_RULE,
            f"# DATA DUMP FOR TABLE: {table.name}{locked}",
            HEADER_RULE,
            '',
        ])

    def _build_select_query(self, table: TableDescriptor) -> str:
        """Build SELECT query with the table's WHERE override, if any."""
        query = f"SELECT * FROM `{table.name}`"
        where_clause = self.options.where_for(table.name)
        if where_clause:
            query += f" WHERE {where_clause}"
        return query

    def _write_batch(
        self,
        table: TableDescriptor,
        batch: list[tuple[str, ...]],
        stats: TableStats
    ) -> None:
        """Write a batch of rows as one INSERT/REPLACE statement."""
        self.sink.write(self.builder.build(table, batch))
        stats.statements += 1
