"""
Rendering of raw column values into SQL literal text.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Callable, Sequence

from .models import ColumnInfo, TableDescriptor

RenderRow = Callable[[TableDescriptor, Sequence[Any]], tuple[str, ...]]


def _format_timedelta(value: timedelta) -> str:
    # TIME columns come back as timedelta and may be negative or exceed 24h
    total = int(value.total_seconds())
    sign = '-' if total < 0 else ''
    hours, rest = divmod(abs(total), 3600)
    minutes, seconds = divmod(rest, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if value.microseconds:
        text += f".{value.microseconds:06d}"
    return f"'{text}'"


def _bit_width(column_type: str) -> int:
    """Get the declared width of a bit(N) column."""
    if '(' in column_type:
        return int(column_type[column_type.index('(') + 1:column_type.index(')')])
    return 1


class ValueRenderer:
    """Renders row values as SQL literals based on value and column type."""

    def __init__(self):
        # Pre-build type formatters for faster dispatch
        self._type_formatters: dict[type, Callable[[Any], str]] = {
            type(None): lambda v: 'NULL',
            bool: lambda v: '1' if v else '0',
            int: str,
            float: str,
            Decimal: lambda v: format(v, 'f'),
            bytes: lambda v: f"X'{v.hex()}'",
            bytearray: lambda v: f"X'{bytes(v).hex()}'",
            datetime: lambda v: f"'{v.isoformat(sep=' ')}'",
            date: lambda v: f"'{v.isoformat()}'",
            time: lambda v: f"'{v.isoformat()}'",
            timedelta: _format_timedelta,
            set: lambda v: self.escape_string(','.join(sorted(v))),
        }

    def render_row(self, table: TableDescriptor, row: Sequence[Any]) -> tuple[str, ...]:
        """Render one fetched row, pairing values with columns by position."""
        if len(row) != len(table.columns):
            raise ValueError(
                f"Table '{table.name}' returned {len(row)} value(s) "
                f"but has {len(table.columns)} known column(s)"
            )
        return tuple(
            self.render_value(value, column)
            for value, column in zip(row, table.columns)
        )

    def render_value(self, value: Any, column: ColumnInfo | None = None) -> str:
        """Format a value for SQL INSERT statement."""
        if column is not None and column.type.lower().startswith('bit') and value is not None:
            return self._format_bit(value, _bit_width(column.type))

        formatter = self._type_formatters.get(type(value))
        if formatter:
            return formatter(value)
        return self.escape_string(str(value))

    @staticmethod
    def escape_string(value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        escaped = escaped.replace("\n", "\\n").replace("\r", "\\r").replace("\x00", "\\0")
        return f"'{escaped}'"

    @staticmethod
    def _format_bit(value: Any, width: int) -> str:
        if isinstance(value, (bytes, bytearray)):
            value = int.from_bytes(value, 'big')
        return f"b'{int(value):0{width}b}'"
