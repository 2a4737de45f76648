"""Exception types raised by the KasFlow core."""

from __future__ import annotations

__all__ = ["MissingDataError", "DashboardError"]


class MissingDataError(LookupError):
    """Raised when a required table is absent or has no header row."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"Table '{table_name}' is missing or empty.")
        self.table_name = table_name


class DashboardError(RuntimeError):
    """Raised when a dashboard snapshot cannot be assembled."""
