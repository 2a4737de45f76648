"""Formatting helpers for KasFlow summaries and exports."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Optional

__all__ = [
    "format_display_date",
    "format_iso_date",
    "round_half_up",
    "percent_change",
    "format_delta",
    "format_rupiah",
]


def format_display_date(moment: Optional[date]) -> str:
    """Render ``moment`` as ``"5 Mar 2024"``; ``None`` renders as ``""``."""

    if moment is None:
        return ""
    return f"{moment.day} {moment:%b %Y}"


def format_iso_date(moment: Optional[date]) -> str:
    if moment is None:
        return ""
    if isinstance(moment, datetime):
        moment = moment.date()
    return moment.isoformat()


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positives, matching spreadsheet rounding."""

    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def percent_change(current: float, previous: float) -> float:
    """Change relative to ``|previous|``; with no baseline, 100 for any movement."""

    if previous:
        return (current - previous) / abs(previous) * 100
    return 100.0 if current else 0.0


def format_delta(current: float, previous: float) -> str:
    if previous <= 0:
        if current <= 0:
            return "No change vs previous period"
        return "New vs previous period"

    change = (current - previous) / previous
    sign = "+" if change >= 0 else ""
    return f"{sign}{change * 100:.1f}% vs previous period"


def format_rupiah(value: float) -> str:
    """Indonesian style amount, e.g. ``Rp 1.250.000`` or ``-Rp 3.000``."""

    sign = "-" if value < 0 else ""
    whole = f"{abs(value):,.0f}".replace(",", ".")
    return f"{sign}Rp {whole}"
