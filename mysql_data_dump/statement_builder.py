"""
INSERT/REPLACE statement rendering for MySQL Data Dumper.
"""

import re
from typing import Callable, Optional, Sequence

import sqlparse

from .models import TableDescriptor

Formatter = Callable[[str], str]

# sqlparse splits X'aaff' and b'0101' literals apart, so they are hidden in a
# fake function call while formatting and restored afterwards.
UNFORMATTABLE_LITERAL = re.compile(r"^[xXbB]'[^']*'$")
NOFORMAT_WRAPPED = re.compile(r'NOFORMAT_WRAP\("##(.+?)##"\)')


def sqlparse_formatter(sql: str) -> str:
    """Pretty-print a statement with sqlparse."""
    return sqlparse.format(sql, reindent=True, keyword_case='upper')


class StatementBuilder:
    """Joins rendered value tuples into a single INSERT or REPLACE statement."""

    def __init__(self, use_replace: bool = False, formatter: Optional[Formatter] = None):
        self.use_replace = use_replace
        self.formatter = formatter

    @classmethod
    def for_options(cls, use_replace: bool, format: bool) -> "StatementBuilder":
        return cls(use_replace=use_replace, formatter=sqlparse_formatter if format else None)

    @property
    def keyword(self) -> str:
        return 'REPLACE' if self.use_replace else 'INSERT'

    def build(self, table: TableDescriptor, rows: Sequence[Sequence[str]]) -> str:
        """
        Build one statement for a batch of rows.

        Args:
            table: Table the rows belong to; its column order defines the column list.
            rows: Rendered values, one tuple per row, in column order.

        Returns:
            The statement text, terminated by ``;``.
        """
        if not rows:
            raise ValueError(f"Cannot build a statement for '{table.name}' without rows")

        quoted_columns = '`,`'.join(table.column_names)
        values = ','.join(self._render_tuple(row) for row in rows)
        sql = f"{self.keyword} INTO `{table.name}` (`{quoted_columns}`) VALUES {values};"

        if self.formatter is None:
            return sql
        return NOFORMAT_WRAPPED.sub(r'\1', self.formatter(sql))

    def _render_tuple(self, row: Sequence[str]) -> str:
        if self.formatter is not None:
            row = [self._protect(value) for value in row]
        return f"({','.join(row)})"

    @staticmethod
    def _protect(value: str) -> str:
        if UNFORMATTABLE_LITERAL.match(value):
            return f'NOFORMAT_WRAP("##{value}##")'
        return value
