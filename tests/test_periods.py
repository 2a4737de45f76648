"""Period token resolution and comparison windows."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from core.periods import PERIOD_TOKENS, coerce_datetime, resolve_period, resolve_previous_period

TODAY = date(2024, 3, 20)  # a Wednesday


def _day(window):
    return window.start.date(), window.end.date()


@pytest.mark.parametrize(
    ("token", "first", "last"),
    [
        ("today", date(2024, 3, 20), date(2024, 3, 20)),
        ("yesterday", date(2024, 3, 19), date(2024, 3, 19)),
        ("this_week", date(2024, 3, 17), date(2024, 3, 23)),
        ("last_7_days", date(2024, 3, 14), date(2024, 3, 20)),
        ("last_month", date(2024, 2, 1), date(2024, 2, 29)),
        ("current_month", date(2024, 3, 1), date(2024, 3, 31)),
        ("current_year", date(2024, 1, 1), date(2024, 12, 31)),
        ("last_year", date(2023, 1, 1), date(2023, 12, 31)),
    ],
)
def test_resolve_period_tokens(token, first, last):
    window = resolve_period(token, today=TODAY)

    assert _day(window) == (first, last)
    assert window.start.time() == datetime.min.time()
    assert window.end.hour == 23 and window.end.minute == 59 and window.end.microsecond == 999000


def test_last_month_in_january_rolls_back_a_year():
    window = resolve_period("last_month", today=date(2024, 1, 15))

    assert _day(window) == (date(2023, 12, 1), date(2023, 12, 31))


def test_all_covers_every_plausible_date():
    window = resolve_period("all", today=TODAY)

    assert window.start == datetime(1900, 1, 1)
    assert window.end.date() == date(9999, 12, 31)


def test_custom_uses_supplied_bounds():
    window = resolve_period("custom", "2024-01-05", "2024-01-10", today=TODAY)

    assert window.start == datetime(2024, 1, 5)
    assert window.end == datetime(2024, 1, 10, 23, 59, 59, 999000)


@pytest.mark.parametrize("bounds", [("2024-01-05", None), (None, None), ("junk", "2024-01-10")])
def test_custom_without_both_bounds_falls_back_to_current_month(bounds):
    window = resolve_period("custom", *bounds, today=TODAY)

    assert _day(window) == (date(2024, 3, 1), date(2024, 3, 31))


def test_unknown_token_falls_back_to_current_month():
    assert _day(resolve_period("fortnight", today=TODAY)) == (date(2024, 3, 1), date(2024, 3, 31))
    assert _day(resolve_period(None, today=TODAY)) == (date(2024, 3, 1), date(2024, 3, 31))


@pytest.mark.parametrize(
    ("token", "first", "last"),
    [
        ("today", date(2024, 3, 19), date(2024, 3, 19)),
        ("this_week", date(2024, 3, 10), date(2024, 3, 16)),
        ("last_7_days", date(2024, 3, 7), date(2024, 3, 13)),
        ("current_month", date(2024, 2, 1), date(2024, 2, 29)),
        ("last_month", date(2024, 1, 1), date(2024, 1, 31)),
        ("current_year", date(2023, 1, 1), date(2023, 12, 31)),
    ],
)
def test_previous_period_ends_just_before_current(token, first, last):
    current = resolve_period(token, today=TODAY)

    previous = resolve_previous_period(token, current.start)

    assert _day(previous) == (first, last)
    assert current.start - previous.end == timedelta(milliseconds=1)


@pytest.mark.parametrize("token", ["all", "custom", "nonsense"])
def test_previous_period_is_degenerate_without_comparison(token):
    previous = resolve_previous_period(token, datetime(2024, 3, 1))

    assert previous.is_degenerate
    assert previous.start == datetime(1970, 1, 1)


def test_every_token_resolves_to_ordered_window():
    for token in PERIOD_TOKENS:
        window = resolve_period(token, "2024-01-01", "2024-01-31", today=TODAY)
        assert window.start <= window.end


def test_coerce_datetime_converts_aware_values_then_drops_offset():
    plus_seven = timezone(timedelta(hours=7))

    assert coerce_datetime("2024-03-31T20:00:00Z", plus_seven) == datetime(2024, 4, 1, 3, 0)
    assert coerce_datetime("2024-03-31 20:00", plus_seven) == datetime(2024, 3, 31, 20, 0)
    assert coerce_datetime(date(2024, 3, 1)) == datetime(2024, 3, 1)
    assert coerce_datetime("not a date") is None
    assert coerce_datetime("") is None
