"""
osquery extension exposing installed snap packages as the `snap_packages` table.
"""

__version__ = "0.1.0"
