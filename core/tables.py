"""Typed access to raw tables (header row followed by data rows)."""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

import pandas as pd

from core.errors import MissingDataError

__all__ = ["RawTable", "TableDecoder", "require_table", "cell_text", "MISSING"]

RawTable = Sequence[Sequence[Any]]

MISSING = -1


def require_table(table: RawTable | None, name: str) -> RawTable:
    """Return ``table`` or raise :class:`MissingDataError` when it has no header row."""

    if table is None or len(table) == 0:
        raise MissingDataError(name)
    return table


def cell_text(value: Any) -> str:
    """Render a cell as text, mapping blanks (``None``/NaN) to ``""``."""

    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class TableDecoder:
    """Resolve column positions once and read cells by column name.

    Lookups are exact by default. With ``case_insensitive=True`` header names
    are compared trimmed and lower-cased. Unknown columns resolve to
    :data:`MISSING` and read as ``default``.
    """

    def __init__(self, table: RawTable, *, case_insensitive: bool = False) -> None:
        rows = list(table) if table else []
        self.headers: list[str] = [cell_text(header) for header in rows[0]] if rows else []
        self.rows: list[Sequence[Any]] = rows[1:]
        self.case_insensitive = case_insensitive
        self._positions: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self.rows)

    def index(self, column: str) -> int:
        if column not in self._positions:
            self._positions[column] = self._locate(column)
        return self._positions[column]

    def _locate(self, column: str) -> int:
        if self.case_insensitive:
            wanted = column.strip().lower()
            for position, header in enumerate(self.headers):
                if header.strip().lower() == wanted:
                    return position
            return MISSING
        try:
            return self.headers.index(column)
        except ValueError:
            return MISSING

    def has(self, column: str) -> bool:
        return self.index(column) != MISSING

    def cell(self, row: Sequence[Any], column: str, default: Any = None) -> Any:
        position = self.index(column)
        if position == MISSING or position >= len(row):
            return default
        return row[position]

    def text(self, row: Sequence[Any], column: str) -> str:
        return cell_text(self.cell(row, column))

    def frame(self, columns: Mapping[str, str]) -> pd.DataFrame:
        """Return the data rows as a DataFrame keyed by ``{output_name: header}``."""

        data = {
            target: [self.cell(row, source) for row in self.rows]
            for target, source in columns.items()
        }
        return pd.DataFrame(data, columns=list(columns), dtype=object)
