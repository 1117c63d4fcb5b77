"""
Secondary index drop/recreate planning for MySQL Data Dumper.
"""

import logging
from typing import Any

from mysql.connector import Error as MySQLError

from .connection import DatabaseConnection
from .errors import IndexQueryError
from .models import IndexPlan, TableDescriptor


class IndexManager:
    """Builds the index plan of a table from its SHOW INDEX catalog.

    Only non-unique secondary indexes are planned. Primary keys and unique
    indexes stay in place so that a reload cannot hit uniqueness violations
    against a half-built index.
    """

    PRIMARY_KEY = 'PRIMARY'

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection

    def plan(self, table: TableDescriptor) -> IndexPlan:
        """Compute the drop/recreate statements for a table."""
        try:
            catalog = self.connection.get_index_catalog(table.name)
        except MySQLError as e:
            raise IndexQueryError(f"Failed to read indexes of '{table.name}': {e}") from e

        indexes = self._group_indexes(catalog)
        if not indexes:
            logging.debug(f"Table '{table.name}' has no droppable secondary indexes")
            return IndexPlan.empty()

        drops = [f"DROP INDEX `{name}` ON `{table.name}`;" for name in indexes]
        adds = [
            f"ADD INDEX `{name}` ({','.join(f'`{col}`' for col in columns)})"
            for name, columns in indexes.items()
        ]
        logging.debug(f"Table '{table.name}': planned drop/recreate of {len(indexes)} index(es)")

        return IndexPlan(
            drop_statement='\n'.join(drops),
            recreate_statement=f"ALTER TABLE `{table.name}`\n " + ',\n '.join(adds) + ';'
        )

    def _group_indexes(self, catalog: list[dict[str, Any]]) -> dict[str, list[str]]:
        """Group eligible catalog rows by index name, columns in index order."""
        grouped: dict[str, list[tuple[int, str]]] = {}
        functional: set[str] = set()
        for entry in catalog:
            if entry['Key_name'] == self.PRIMARY_KEY or int(entry['Non_unique']) != 1:
                continue
            # Functional key parts have no column and cannot be rebuilt from a column list
            if entry.get('Column_name') is None:
                functional.add(entry['Key_name'])
                continue
            grouped.setdefault(entry['Key_name'], []).append(
                (int(entry.get('Seq_in_index', 0)), entry['Column_name'])
            )

        for name in functional:
            logging.warning(f"Skipping functional index '{name}'; it will not be dropped")
            grouped.pop(name, None)

        return {
            name: [column for _, column in sorted(parts, key=lambda part: part[0])]
            for name, parts in grouped.items()
        }
