"""Number parsing for Indonesian and English formatted amounts."""

from __future__ import annotations

import math
from decimal import Decimal

import pandas as pd
import pytest

from core.amounts import normalize_number, normalize_series


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1.250.000", 1_250_000.0),
        ("1,250,000", 1_250_000.0),
        ("1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("Rp 2.500,75", 2500.75),
        ("IDR 15.000", 15_000.0),
        ("- 3.000", -3000.0),
        ("-1.250.000", -1_250_000.0),
        ("+500", 500.0),
        ("12,5", 12.5),
        ("1.500", 1500.0),
        ("1.5", 1.5),
    ],
)
def test_normalize_number_parses_local_formats(raw, expected):
    assert normalize_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "Rp", float("nan")])
def test_normalize_number_defaults_to_zero(raw):
    assert normalize_number(raw) == 0.0


def test_normalize_number_passes_numbers_through():
    assert normalize_number(1500) == 1500.0
    assert normalize_number(-2.5) == -2.5
    assert normalize_number(True) == 1.0


def test_normalize_number_keeps_decimal_fractions():
    assert normalize_number(Decimal("1234.567")) == pytest.approx(1234.567)
    assert normalize_number(Decimal("-1.5")) == -1.5
    assert normalize_number(Decimal("NaN")) == 0.0


def test_normalize_series_is_float_and_elementwise():
    series = pd.Series(["1.000", "2,5", None, "x"])

    result = normalize_series(series)

    assert result.dtype == float
    assert result.tolist()[:2] == [1000.0, 2.5]
    assert result.iloc[2] == 0.0 and not math.isnan(result.iloc[3])
