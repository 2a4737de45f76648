"""Period token resolution into inclusive date windows."""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Final

import pandas as pd

from core.models import PeriodWindow

__all__ = [
    "PERIOD_TOKENS",
    "DEFAULT_PERIOD",
    "resolve_period",
    "resolve_previous_period",
    "coerce_datetime",
    "start_of_day",
    "end_of_day",
]

DEFAULT_PERIOD: Final[str] = "current_month"

PERIOD_TOKENS: Final[tuple[str, ...]] = (
    "custom",
    "all",
    "today",
    "yesterday",
    "this_week",
    "last_7_days",
    "last_month",
    "current_month",
    "current_year",
    "last_year",
)

_ALL_START = datetime(1900, 1, 1)
_ALL_END = datetime(9999, 12, 31)
_EPOCH = datetime(1970, 1, 1)
_END_OF_DAY = time(23, 59, 59, 999000)


def start_of_day(moment: date) -> datetime:
    return datetime(moment.year, moment.month, moment.day)


def end_of_day(moment: date) -> datetime:
    return datetime.combine(date(moment.year, moment.month, moment.day), _END_OF_DAY)


def coerce_datetime(value: Any, tz: tzinfo | None = None) -> datetime | None:
    """Return ``value`` as a naive datetime, or ``None`` when it cannot be parsed.

    Timezone-aware values are converted to ``tz`` (when given) before the
    offset is dropped; naive values are taken as already local.
    """

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime) and not isinstance(value, pd.Timestamp):
        if value.tzinfo is not None:
            value = value.astimezone(tz) if tz is not None else value
            return value.replace(tzinfo=None)
        return value
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    try:
        parsed = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        if tz is not None:
            parsed = parsed.tz_convert(tz)
        parsed = parsed.tz_localize(None)
    return parsed.to_pydatetime()


def _today(today: date | None) -> date:
    if today is None:
        return pd.Timestamp.today().date()
    if isinstance(today, datetime):
        return today.date()
    return today


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def resolve_period(
    token: str | None,
    custom_start: Any = None,
    custom_end: Any = None,
    *,
    today: date | None = None,
) -> PeriodWindow:
    """Map a period token onto an inclusive window ending at 23:59:59.999.

    ``custom`` uses the supplied bounds when both parse; otherwise, and for
    unknown tokens, the window falls back to the current month.
    """

    if token == "custom":
        start = coerce_datetime(custom_start)
        end = coerce_datetime(custom_end)
        if start is not None and end is not None:
            return PeriodWindow(start_of_day(start), end_of_day(end))

    current = _today(today)
    if token == "all":
        return PeriodWindow(_ALL_START, end_of_day(_ALL_END))
    if token == "today":
        first, last = current, current
    elif token == "yesterday":
        first = last = current - timedelta(days=1)
    elif token == "this_week":
        days_since_sunday = (current.weekday() + 1) % 7
        first = current - timedelta(days=days_since_sunday)
        last = first + timedelta(days=6)
    elif token == "last_7_days":
        first, last = current - timedelta(days=6), current
    elif token == "last_month":
        year, month = (current.year, current.month - 1) if current.month > 1 else (current.year - 1, 12)
        first, last = date(year, month, 1), _month_end(year, month)
    elif token == "current_year":
        first, last = date(current.year, 1, 1), date(current.year, 12, 31)
    elif token == "last_year":
        first, last = date(current.year - 1, 1, 1), date(current.year - 1, 12, 31)
    else:
        first = date(current.year, current.month, 1)
        last = _month_end(current.year, current.month)

    return PeriodWindow(start_of_day(first), end_of_day(last))


def resolve_previous_period(token: str | None, current_start: datetime) -> PeriodWindow:
    """Return the comparison window that immediately precedes ``current_start``.

    ``all``, ``custom`` and unknown tokens have no defined comparison and yield
    a zero-length window at the epoch (see :attr:`PeriodWindow.is_degenerate`).
    """

    boundary = current_start - timedelta(milliseconds=1)
    boundary_day = boundary.date()

    if token in ("today", "yesterday"):
        first = boundary_day
    elif token in ("this_week", "last_7_days"):
        first = boundary_day - timedelta(days=6)
    elif token in ("current_month", "last_month"):
        first = date(boundary_day.year, boundary_day.month, 1)
    elif token in ("current_year", "last_year"):
        first = date(boundary_day.year, 1, 1)
    else:
        return PeriodWindow(_EPOCH, _EPOCH)

    return PeriodWindow(start_of_day(first), end_of_day(boundary_day))
