"""Named table sources for the ledger and its setup tables."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol

import pandas as pd

from core.logging_setup import get_logger
from core.tables import RawTable

__all__ = ["TableStore", "MemoryTableStore", "CsvDirectoryStore"]

_logger = get_logger("kasflow.store")


class TableStore(Protocol):
    def get_table(self, name: str) -> RawTable | None:
        """Return the header row plus data rows, or ``None`` when the table does not exist."""
        ...


class MemoryTableStore:
    """Tables held in memory, keyed by name."""

    def __init__(self, tables: Mapping[str, RawTable] | None = None) -> None:
        self._tables: dict[str, RawTable] = dict(tables or {})

    def get_table(self, name: str) -> RawTable | None:
        return self._tables.get(name)

    def set_table(self, name: str, table: RawTable) -> None:
        self._tables[name] = table


class CsvDirectoryStore:
    """Reads ``<directory>/<name>.csv`` as raw text cells."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.csv"

    def get_table(self, name: str) -> RawTable | None:
        path = self.path_for(name)
        if not path.exists():
            _logger.warning("Table file not found: %s", path)
            return None
        frame = pd.read_csv(path, dtype=object, keep_default_na=False)
        _logger.debug("Loaded %d rows from %s", len(frame), path)
        return [list(frame.columns)] + frame.values.tolist()
