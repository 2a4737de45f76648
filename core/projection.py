"""Projection of raw Input rows into sign-normalised transaction frames."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Final

import numpy as np
import pandas as pd

from core.amounts import normalize_series
from core.models import TRANSACTION_COLUMNS, Filters, PeriodWindow
from core.periods import coerce_datetime
from core.tables import RawTable, TableDecoder, cell_text

__all__ = [
    "INPUT_COLUMNS",
    "sign_amounts",
    "load_ledger",
    "select_transactions",
    "clamp_bound",
    "project_transactions",
]

INPUT_COLUMNS: Final[dict[str, str]] = {
    "Date": "Date",
    "Type": "Transaction Type",
    "Amount": "Amount",
    "Wallet": "Wallet",
    "Owner": "Wallet Owner",
    "Purpose": "Expense Purpose",
    "Category": "Category",
    "Subcategory": "Subcategory",
    "Note": "Note",
    "Description": "Description",
    "Source": "Source",
}

_EXACT_FILTERS: Final[tuple[tuple[str, str], ...]] = (
    ("wallet", "Wallet"),
    ("wallet_owner", "Owner"),
    ("expense_purpose", "Purpose"),
    ("category", "Category"),
    ("subcategory", "Subcategory"),
    ("note", "Note"),
)

_LOWER_BOUND = datetime(1677, 9, 22)
_UPPER_BOUND = datetime(2262, 4, 11)


def sign_amounts(values: pd.Series, types: pd.Series, subcategories: pd.Series) -> pd.Series:
    """Apply the ledger sign rule: positive is an inflow to the wallet.

    ``income`` is always positive and ``expense`` always negative. A
    ``transfer`` is negative for ``transfer-out``, positive for ``transfer-in``
    and zero otherwise. Any other type keeps the parsed value untouched.
    """

    kind = types.map(cell_text).str.lower()
    sub = subcategories.map(cell_text).str.lower()
    magnitude = values.abs()
    is_transfer = kind == "transfer"
    signed = np.select(
        [
            kind == "income",
            kind == "expense",
            is_transfer & (sub == "transfer-out"),
            is_transfer & (sub == "transfer-in"),
            is_transfer,
        ],
        [magnitude, -magnitude, -magnitude, magnitude, np.zeros(len(values))],
        default=values,
    )
    return pd.Series(signed, index=values.index, dtype=float)


def load_ledger(table: RawTable, *, tz: tzinfo | None = None) -> pd.DataFrame:
    """Project every Input row, without any date window or filter.

    ``Date`` is ``NaT`` where the cell does not parse; text columns map blanks
    to ``""``.
    """

    raw = TableDecoder(table).frame(INPUT_COLUMNS)
    ledger = pd.DataFrame(index=raw.index)
    ledger["Date"] = pd.to_datetime(raw["Date"].map(lambda value: coerce_datetime(value, tz)), errors="coerce")
    ledger["Amount"] = sign_amounts(normalize_series(raw["Amount"]), raw["Type"], raw["Subcategory"])
    for column in TRANSACTION_COLUMNS:
        if column not in ("Date", "Amount"):
            ledger[column] = raw[column].map(cell_text)
    return ledger[list(TRANSACTION_COLUMNS)]


def clamp_bound(moment: datetime) -> pd.Timestamp:
    """Clamp a window bound into the range representable by datetime64[ns]."""

    return pd.Timestamp(min(max(moment, _LOWER_BOUND), _UPPER_BOUND))


def select_transactions(
    ledger: pd.DataFrame,
    filters: Filters | None = None,
    window: PeriodWindow | None = None,
) -> pd.DataFrame:
    """Return the ledger rows inside ``window`` that satisfy every active filter.

    Source row order is preserved. Rows without a parseable date never fall
    inside a window.
    """

    mask = pd.Series(True, index=ledger.index)
    if window is not None:
        dates = ledger["Date"]
        mask &= dates.notna() & (dates >= clamp_bound(window.start)) & (dates <= clamp_bound(window.end))

    if filters is not None:
        for field_name, column in _EXACT_FILTERS:
            expected = getattr(filters, field_name)
            if expected:
                mask &= ledger[column] == expected
        if filters.description:
            needle = filters.description.lower()
            mask &= ledger["Description"].str.lower().str.contains(needle, regex=False)

    return ledger.loc[mask].reset_index(drop=True)


def project_transactions(
    table: RawTable,
    filters: Filters | None,
    window: PeriodWindow | None,
    *,
    tz: tzinfo | None = None,
) -> pd.DataFrame:
    """Project raw Input rows into typed, signed transactions for one window."""

    return select_transactions(load_ledger(table, tz=tz), filters, window)
