"""
Data models and enums for MySQL Data Dumper.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Optional, Any


class SlotState(Enum):
    """Emission state of a single index plan statement."""
    PENDING = "pending"
    EMITTED = "emitted"


@dataclass
class ColumnInfo:
    """Database column metadata."""
    name: str
    type: str
    nullable: str = "YES"
    key: str = ""
    default: Any = None
    extra: str = ""


@dataclass(frozen=True)
class TableDescriptor:
    """A table (or view) to export.

    The order of ``columns`` is the order of ``SELECT *`` and of the rendered
    value tuples; rows are paired with columns by position, never by name.
    """
    name: str
    columns: tuple[ColumnInfo, ...] = ()
    is_view: bool = False
    data: Optional[str] = None

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    def with_data(self, data: Optional[str]) -> "TableDescriptor":
        """Return a copy carrying the exported data text."""
        return replace(self, data=data)


@dataclass
class IndexPlan:
    """Paired drop/recreate statements for a table's secondary indexes.

    Each statement is handed out at most once. The recreate statement is only
    handed out after the drop statement has been.
    """
    drop_statement: Optional[str] = None
    recreate_statement: Optional[str] = None
    drop_state: SlotState = SlotState.PENDING
    recreate_state: SlotState = SlotState.PENDING

    @classmethod
    def empty(cls) -> "IndexPlan":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.drop_statement

    def take_drop(self) -> Optional[str]:
        if self.is_empty or self.drop_state is SlotState.EMITTED:
            return None
        self.drop_state = SlotState.EMITTED
        return self.drop_statement

    def take_recreate(self) -> Optional[str]:
        if (
            self.is_empty
            or self.drop_state is not SlotState.EMITTED
            or self.recreate_state is SlotState.EMITTED
        ):
            return None
        self.recreate_state = SlotState.EMITTED
        return self.recreate_statement


@dataclass
class TableStats:
    """Statistics for a single table dump."""
    table: str
    rows_dumped: int = 0
    statements: int = 0
    skipped: bool = False


@dataclass
class DumpStats:
    """Overall dump statistics."""
    tables: list[TableStats] = field(default_factory=list)
    total_tables: int = 0
    total_rows: int = 0
    total_statements: int = 0

    def add(self, table_stats: TableStats) -> None:
        self.tables.append(table_stats)
        self.total_tables += 1
        self.total_rows += table_stats.rows_dumped
        self.total_statements += table_stats.statements


@dataclass
class DumpOptions:
    """Options controlling how row data is exported."""
    max_rows_per_insert_statement: int = 1
    use_replace: bool = False
    lock_tables: bool = False
    drop_index: bool = False
    include_view_data: bool = False
    where: dict[str, str] = field(default_factory=dict)
    verbose: bool = True
    format: bool = False
    return_from_function: bool = False

    def __post_init__(self):
        # Negative sizes make no sense; 0 means "one statement per table".
        self.max_rows_per_insert_statement = max(int(self.max_rows_per_insert_statement or 0), 0)
        self.where = dict(self.where or {})

    def where_for(self, table: str) -> Optional[str]:
        """Get the WHERE predicate override for a table, if any."""
        return self.where.get(table) or None

    @classmethod
    def from_configs(
        cls,
        defaults: dict[str, Any],
        overrides: dict[str, Any]
    ) -> "DumpOptions":
        """
        Create DumpOptions by merging configs with priority: overrides > defaults.

        Unknown keys are ignored. ``where`` maps are merged per table.
        """
        known = {f.name for f in fields(cls)}
        settings: dict[str, Any] = {}
        for source in (defaults, overrides):
            for key, value in (source or {}).items():
                if key not in known:
                    continue
                if key == 'where':
                    settings['where'] = {**settings.get('where', {}), **(value or {})}
                else:
                    settings[key] = value
        return cls(**settings)
