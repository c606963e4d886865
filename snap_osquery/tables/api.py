from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from snap_osquery.core import Context

TEXT = "TEXT"

# Column types understood by osquery.
COLUMN_TYPES = frozenset({TEXT, "INTEGER", "BIGINT", "UNSIGNED_BIGINT", "DOUBLE", "BLOB"})


@dataclass(frozen=True)
class ColumnDefinition:
    name: str
    type: str = TEXT


def text_column(name: str) -> ColumnDefinition:
    return ColumnDefinition(name=name, type=TEXT)


class TablePlugin(Protocol):
    """
    A table plugin turns a query into rows for one named table.

    A plugin must:
    - declare its table name and column schema
    - report whether it can run in the current environment
    - produce rows as mappings of column name to text value
    """

    name: str

    def columns(self) -> Sequence[ColumnDefinition]: ...

    def is_available(self, ctx: Context) -> tuple[bool, str | None]: ...

    def generate(self, ctx: Context, query_context: dict[str, Any]) -> list[dict[str, str]]: ...
