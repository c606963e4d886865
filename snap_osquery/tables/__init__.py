"""
Table plugins served by the extension.

Tables are registered with osquery by the host adapter at startup.
"""

from snap_osquery.tables.api import ColumnDefinition, TablePlugin
from snap_osquery.tables.builtin import builtin_tables
from snap_osquery.tables.registry import TableRegistry

__all__ = ["ColumnDefinition", "TablePlugin", "TableRegistry", "builtin_tables"]
