"""Ledger extracts rendered as compact CSV for AI prompts."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Iterable, Mapping, TypedDict

from core.amounts import normalize_number
from core.formatting import format_display_date, format_iso_date, format_rupiah
from core.periods import coerce_datetime, end_of_day, start_of_day
from core.tables import RawTable, TableDecoder

__all__ = [
    "AIQueryFilters",
    "AIRecord",
    "fetch_transactions",
    "fetch_scheduled",
    "format_records",
    "build_financial_context",
]

_SCHEDULED_STATUSES = frozenset({"active", "upcoming"})


class AIRecord(TypedDict):
    Date: datetime | None
    Payer: str
    Beneficiary: str
    Category: str
    Amount: float
    Description: str


@dataclass(frozen=True)
class AIQueryFilters:
    """Entity filters extracted from a question.

    ``beneficiaries`` are lower-cased; the date range applies only when both
    ends are present.
    """

    beneficiaries: tuple[str, ...] = ()
    category: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "AIQueryFilters":
        if not raw:
            return cls()
        people = raw.get("person_beneficiary") or ""
        beneficiaries = tuple(name.strip() for name in str(people).lower().split(",") if name.strip())
        start = coerce_datetime(raw.get("startDate") or raw.get("start_date"))
        end = coerce_datetime(raw.get("endDate") or raw.get("end_date"))
        return cls(
            beneficiaries=beneficiaries,
            category=raw.get("category") or None,
            start_date=start_of_day(start) if start is not None else None,
            end_date=end_of_day(end) if end is not None else None,
        )

    def matches(self, beneficiary: str, category: str, moment: datetime | None) -> bool:
        if self.beneficiaries and beneficiary.lower() not in self.beneficiaries:
            return False
        if self.category and category.lower() != self.category.lower():
            return False
        if self.start_date is not None and self.end_date is not None:
            if moment is None or not (self.start_date <= moment <= self.end_date):
                return False
        return True


def _fetch(
    table: RawTable | None,
    filters: AIQueryFilters,
    date_column: str,
    *,
    scheduled: bool,
    tz: tzinfo | None = None,
) -> list[AIRecord]:
    if not table:
        return []
    decoder = TableDecoder(table, case_insensitive=True)
    records: list[AIRecord] = []
    for row in decoder.rows:
        if scheduled and decoder.text(row, "Status").strip().lower() not in _SCHEDULED_STATUSES:
            continue
        beneficiary = decoder.text(row, "Expense Purpose")
        category = decoder.text(row, "Category")
        moment = coerce_datetime(decoder.cell(row, date_column), tz)
        if not filters.matches(beneficiary, category, moment):
            continue
        records.append(
            AIRecord(
                Date=moment,
                Payer=decoder.text(row, "Wallet Owner"),
                Beneficiary=beneficiary or ("N/A" if scheduled else ""),
                Category=category or "N/A",
                Amount=normalize_number(decoder.cell(row, "Amount")),
                Description=decoder.text(row, "Description") or "No Desc",
            )
        )
    return records


def fetch_transactions(
    table: RawTable | None, filters: AIQueryFilters, *, tz: tzinfo | None = None
) -> list[AIRecord]:
    """Historical Input rows matching ``filters``."""

    return _fetch(table, filters, "Date", scheduled=False, tz=tz)


def fetch_scheduled(
    table: RawTable | None, filters: AIQueryFilters, *, tz: tzinfo | None = None
) -> list[AIRecord]:
    """Active or upcoming scheduled rows matching ``filters``, dated by NextDueDate."""

    return _fetch(table, filters, "NextDueDate", scheduled=True, tz=tz)


def _amount_text(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.2f}"


def format_records(records: Iterable[AIRecord], *, scheduled: bool = False) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["NextDueDate" if scheduled else "Date", "Payer", "Beneficiary", "Category", "Description", "Amount"])
    for record in records:
        writer.writerow(
            [
                format_iso_date(record["Date"]),
                record["Payer"],
                record["Beneficiary"],
                record["Category"],
                record["Description"].replace(",", ";"),
                _amount_text(record["Amount"]),
            ]
        )
    return buffer.getvalue().rstrip("\n")


def build_financial_context(
    wallet_setup: RawTable | None, goals_setup: RawTable | None, *, tz: tzinfo | None = None
) -> str:
    """Short description of the household: wallet owners and savings goals."""

    lines = ["=== USER'S FINANCIAL CONTEXT ==="]
    if wallet_setup:
        wallets = TableDecoder(wallet_setup)
        owners = dict.fromkeys(wallets.text(row, "Wallet Owner") for row in wallets.rows)
        lines.append(f"- Wallet Owners (Payers): {', '.join(owner for owner in owners if owner)}")
    if goals_setup:
        goals = TableDecoder(goals_setup)
        lines.append("- Active Goals:")
        for row in goals.rows:
            name = goals.text(row, "Goals")
            if not name:
                continue
            deadline = coerce_datetime(goals.cell(row, "Deadline"), tz)
            lines.append(
                f"  - Name: {name}, Owner: {goals.text(row, 'Goal Owner')}, "
                f"Target: {format_rupiah(normalize_number(goals.cell(row, 'Nominal Needed')))}, "
                f"Deadline: {format_display_date(deadline) if deadline is not None else 'N/A'}"
            )
    return "\n".join(lines)
