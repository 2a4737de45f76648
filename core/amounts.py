"""Locale-tolerant parsing of ledger amounts (Indonesian and English formats)."""

from __future__ import annotations

import math
import re
from decimal import Decimal
from numbers import Real
from typing import Any

import pandas as pd

__all__ = ["normalize_number", "normalize_series"]

_WHITESPACE = re.compile(r"\s+")
_MARKERS = re.compile(r"[()+\s]|Rp|IDR", re.IGNORECASE)
_NON_NUMERIC = re.compile(r"[^0-9,.-]")
_FLOAT_PREFIX = re.compile(r"^\d*\.?\d+|^\d+\.?")


def normalize_number(value: Any) -> float:
    """Parse ``value`` into a float, returning ``0.0`` when it is not a number.

    Examples::

        "1.250.000"   -> 1250000.0
        "1,250,000"   -> 1250000.0
        "1.234,56"    -> 1234.56
        "1,234.56"    -> 1234.56
        "Rp 2.500,75" -> 2500.75
        "- 3.000"     -> -3000.0

    When both separators appear the rightmost one is the decimal separator.
    A lone separator is decimal only when one or two digits follow it.
    """

    if value is None:
        return 0.0
    if isinstance(value, (Real, Decimal)):
        number = float(value)  # type: ignore[arg-type]
        return 0.0 if math.isnan(number) else number

    text = str(value).strip()
    if not text:
        return 0.0

    sign = -1.0 if _WHITESPACE.sub("", text).startswith("-") else 1.0
    text = _MARKERS.sub("", text).strip()
    text = _NON_NUMERIC.sub("", text).lstrip("-")

    last_comma = text.rfind(",")
    last_dot = text.rfind(".")
    decimal_sep: str | None = None
    if last_comma != -1 and last_dot != -1:
        decimal_sep = "," if last_comma > last_dot else "."
    elif last_comma != -1:
        if len(text) - last_comma - 1 <= 2:
            decimal_sep = ","
    elif last_dot != -1:
        if len(text) - last_dot - 1 <= 2:
            decimal_sep = "."

    if decimal_sep:
        thousands_sep = "." if decimal_sep == "," else ","
        text = text.replace(thousands_sep, "")
        if decimal_sep == ",":
            text = text.replace(",", ".", 1)
    else:
        text = text.replace(".", "").replace(",", "")

    match = _FLOAT_PREFIX.match(text)
    if not match:
        return 0.0
    return float(match.group(0)) * sign


def normalize_series(values: pd.Series) -> pd.Series:
    """Vectorised :func:`normalize_number` over a column of raw cells."""

    return values.map(normalize_number).astype(float)
