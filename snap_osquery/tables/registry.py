from __future__ import annotations

from typing import Iterable, Iterator

from snap_osquery.tables.api import COLUMN_TYPES, ColumnDefinition, TablePlugin


class TableRegistry:
    """
    Validated set of table plugins, keyed by table name.
    """

    def __init__(self, tables: Iterable[TablePlugin]) -> None:
        by_name: dict[str, TablePlugin] = {}
        for table in tables:
            name = getattr(table, "name", None)
            if not isinstance(name, str) or not name:
                raise ValueError(f"Table plugin is missing required attribute 'name': {table!r}")
            columns = list(table.columns())
            if not columns:
                raise ValueError(f"Table {name} must declare at least one column")
            seen: set[str] = set()
            for c in columns:
                if not isinstance(c, ColumnDefinition):
                    raise ValueError(f"Table {name} returned invalid column: {c!r}")
                if not isinstance(c.name, str) or not c.name:
                    raise ValueError(f"Table {name} returned invalid column name: {c.name!r}")
                if c.type not in COLUMN_TYPES:
                    raise ValueError(f"Table {name} column {c.name} has unknown type: {c.type!r}")
                if c.name in seen:
                    raise ValueError(f"Table {name} declares column {c.name} more than once")
                seen.add(c.name)
            if name in by_name:
                raise ValueError(f"Duplicate table name: {name}")
            by_name[name] = table
        self._by_name = by_name

    @property
    def registered_tables(self) -> list[str]:
        return sorted(self._by_name)

    def get(self, name: str) -> TablePlugin:
        table = self._by_name.get(name)
        if table is None:
            known = ", ".join(self.registered_tables) if self._by_name else "(none)"
            raise KeyError(f"Unknown table: {name} (known: {known})")
        return table

    def __iter__(self) -> Iterator[TablePlugin]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)
