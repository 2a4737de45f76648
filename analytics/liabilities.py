"""Upcoming scheduled payments and outstanding liabilities for a window."""

from __future__ import annotations

import calendar
from datetime import date, datetime, tzinfo

import pandas as pd

from config.keywords import DEFAULT_RULES, KeywordRules
from core.amounts import normalize_number
from core.formatting import format_display_date, format_iso_date
from core.logging_setup import get_logger
from core.models import Filters, LiabilityRow, PeriodWindow, new_row_id
from core.periods import coerce_datetime, start_of_day
from core.tables import RawTable, TableDecoder

__all__ = ["scheduled_upcoming", "input_liabilities", "calculate_liabilities_upcoming"]

_logger = get_logger("kasflow.analytics.liabilities")


def _month_end(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, calendar.monthrange(moment.year, moment.month)[1])


def _entry(
    kind: str,
    name: str,
    amount: float,
    wallet: str,
    owner: str,
    due: datetime,
    display_date: str,
    today: datetime,
) -> LiabilityRow:
    return LiabilityRow(
        UniqueID=new_row_id(),
        Type=kind,
        Name=name,
        Amount=amount,
        Wallet=wallet,
        Owner=owner,
        DisplayDate=display_date,
        DueDate=format_display_date(due),
        RawDueDate=format_iso_date(due),
        isOverdue=bool(due < today),
    )


def scheduled_upcoming(
    scheduled: RawTable | None,
    window: PeriodWindow,
    owner: str | None,
    today: datetime,
    tz: tzinfo | None = None,
) -> list[LiabilityRow]:
    """Active scheduled payments whose next due date falls inside ``window``."""

    if not scheduled:
        return []
    decoder = TableDecoder(scheduled, case_insensitive=True)
    entries: list[LiabilityRow] = []
    for row in decoder.rows:
        if decoder.text(row, "Status").strip().lower() != "active":
            continue
        due = coerce_datetime(decoder.cell(row, "NextDueDate"), tz)
        if due is None or not window.contains(due):
            continue
        row_owner = decoder.text(row, "Wallet Owner")
        if owner and row_owner != owner:
            continue
        display = format_display_date(due)
        entries.append(
            _entry(
                "Upcoming",
                decoder.text(row, "Description") or decoder.text(row, "Category"),
                normalize_number(decoder.cell(row, "Amount")),
                decoder.text(row, "Wallet"),
                row_owner,
                due,
                display,
                today,
            )
        )
    return entries


def input_liabilities(
    table: RawTable | None,
    window: PeriodWindow,
    owner: str | None,
    today: datetime,
    rules: KeywordRules = DEFAULT_RULES,
    tz: tzinfo | None = None,
) -> list[LiabilityRow]:
    """Ledger rows tagged as debt, due at the end of their month.

    Rows without a usable date are kept and fall due at the window end.
    """

    if not table:
        return []
    decoder = TableDecoder(table, case_insensitive=True)
    entries: list[LiabilityRow] = []
    for row in decoder.rows:
        if not any(
            rules.has_liability_keyword(decoder.text(row, column)) for column in ("Source", "Category", "Subcategory")
        ):
            continue
        booked = coerce_datetime(decoder.cell(row, "Date"), tz)
        if booked is not None and not window.contains(booked):
            continue
        row_owner = decoder.text(row, "Wallet Owner")
        if owner and row_owner != owner:
            continue

        due = _month_end(booked) if booked is not None else start_of_day(window.end)
        entries.append(
            _entry(
                "Liabilities",
                decoder.text(row, "Description") or decoder.text(row, "Category") or "Liability",
                abs(normalize_number(decoder.cell(row, "Amount"))),
                decoder.text(row, "Wallet"),
                row_owner,
                due,
                format_display_date(booked),
                today,
            )
        )
    return entries


def calculate_liabilities_upcoming(
    scheduled: RawTable | None,
    table: RawTable | None,
    window: PeriodWindow,
    filters: Filters | None = None,
    *,
    rules: KeywordRules = DEFAULT_RULES,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> list[LiabilityRow]:
    """Merge upcoming scheduled payments with ledger liabilities.

    Only the wallet owner filter applies; other filters do not narrow this list.
    Aware dates are read in ``tz``, matching how the ledger is projected.
    """

    owner = filters.wallet_owner if filters is not None else None
    reference_day = start_of_day(today if today is not None else pd.Timestamp.today().date())
    upcoming = scheduled_upcoming(scheduled, window, owner, reference_day, tz)
    liabilities = input_liabilities(table, window, owner, reference_day, rules, tz)
    _logger.info("Liabilities: %d upcoming, %d from ledger", len(upcoming), len(liabilities))
    return upcoming + liabilities
