from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from snap_osquery.core import Context
from snap_osquery.tables.api import ColumnDefinition, TablePlugin, text_column
from snap_osquery.tables.builtin_backends.snap import SNAP_COLUMNS, SnapBackend
from snap_osquery.util import expand_path, is_executable


@dataclass(frozen=True)
class SnapPackagesTable:
    name: str = "snap_packages"

    def columns(self) -> Sequence[ColumnDefinition]:
        return tuple(text_column(c) for c in SNAP_COLUMNS)

    def is_available(self, ctx: Context) -> tuple[bool, str | None]:
        snap = expand_path(ctx.options.snap_path)
        if not is_executable(snap):
            return False, f"`{snap}` not found or not executable"
        return True, None

    def generate(self, ctx: Context, query_context: dict[str, Any]) -> list[dict[str, str]]:
        # No constraint push-down: every query gets the full package list.
        backend = SnapBackend(
            runner=ctx.runner,
            logger=ctx.logger,
            snap_path=str(expand_path(ctx.options.snap_path)),
        )
        return backend.list_packages()


def builtin_tables() -> list[TablePlugin]:
    return [SnapPackagesTable()]
