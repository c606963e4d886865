"""
Implementation details for built-in table plugins.

These wrap the external tools a table reads from and are not part of the
table plugin interface.
"""

__all__ = []
