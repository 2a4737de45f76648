"""CSV export of a dashboard snapshot plus its filtered transactions."""

from __future__ import annotations

import base64
import csv
import io
import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from core.dashboard import DashboardService, normalize_period
from core.formatting import format_iso_date, percent_change
from core.logging_setup import get_logger
from core.models import DashboardSnapshot, Filters
from core.periods import resolve_period
from core.projection import select_transactions

__all__ = ["ExportedReport", "EXPORT_BRAND", "build_export_rows", "export_dashboard_csv"]

_logger = get_logger("kasflow.export")

EXPORT_BRAND = "KasFlow"

_TRANSACTION_HEADERS = (
    "Date",
    "Type",
    "Amount",
    "Wallet",
    "Owner",
    "Purpose",
    "Category",
    "Subcategory",
    "Note",
    "Description",
    "Source",
)

_SECTIONS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("Wallet Status", "walletStatus", ("Wallet", "Type", "Owner", "Balance")),
    (
        "Goals Status",
        "goalsStatus",
        (
            "GoalName",
            "StartDate",
            "Deadline",
            "TotalNeeded",
            "Collected",
            "ProgressPercentage",
            "TargetCumulative",
            "GapAmount",
            "GapPct",
            "RemainingAmount",
            "ElapsedRatio",
            "PaceNeededPerDay",
            "ActualPacePerDay",
            "DaysLeft",
            "ProjectedFinish",
            "RiskScore",
            "Status",
        ),
    ),
    (
        "Budget Status",
        "budgetStatus",
        ("Category", "Subcategory", "BudgetAmount", "ActualExpense", "RemainingBudget", "UsagePercentage", "Status"),
    ),
    (
        "Liabilities Upcoming",
        "liabilitiesUpcoming",
        ("Type", "Name", "Amount", "Wallet", "Owner", "DisplayDate", "DueDate", "isOverdue"),
    ),
)


@dataclass(frozen=True)
class ExportedReport:
    filename: str
    mime: str
    content: str

    @property
    def base64(self) -> str:
        return base64.b64encode(self.content.encode("utf-8")).decode("ascii")


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return format_iso_date(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


class _SectionWriter:
    def __init__(self) -> None:
        self.rows: list[list[Any]] = []

    def line(self, *cells: Any) -> None:
        self.rows.append([_cell(cell) for cell in cells])

    def blank(self) -> None:
        if self.rows and self.rows[-1]:
            self.rows.append([])

    def section(self, title: str, records: Sequence[Mapping[str, Any]], headers: Sequence[str]) -> None:
        self.blank()
        self.line(f"# {title}")
        if not records:
            self.line("(no rows)")
            return
        self.line(*headers)
        for record in records:
            self.line(*(record.get(header, "") for header in headers))


def _kpi_rows(snapshot: DashboardSnapshot) -> list[dict[str, Any]]:
    kpi = snapshot["kpiSummary"]
    pairs = (
        ("Income", kpi["income"], kpi["prev_income"]),
        ("Expense", kpi["expense"], kpi["prev_expense"]),
        ("NetWorth", kpi["netWorth"], kpi["prev_netWorth"]),
        ("Saving", kpi["saving"], kpi["prev_saving"]),
    )
    return [
        {
            "Metric": metric,
            "Current": current,
            "Previous": previous,
            "Diff": current - previous,
            "DiffPct": f"{percent_change(current, previous):.2f}",
        }
        for metric, current, previous in pairs
    ]


def _transaction_records(transactions: pd.DataFrame) -> list[dict[str, Any]]:
    records = transactions.to_dict(orient="records")
    for record in records:
        moment = record.get("Date")
        record["Date"] = "" if moment is None or pd.isna(moment) else format_iso_date(moment)
    return records


def build_export_rows(
    snapshot: DashboardSnapshot,
    transactions: pd.DataFrame,
    *,
    period: str,
    filters: Filters,
    raw_transactions: pd.DataFrame | None = None,
    generated_at: datetime | None = None,
) -> list[list[Any]]:
    """Lay out the export as CSV rows: metadata, then one block per section."""

    writer = _SectionWriter()
    writer.line(f"# EXPORT {EXPORT_BRAND}")
    writer.line("Generated", (generated_at or datetime.now()).isoformat(timespec="seconds"))
    writer.line("Period", period)
    for key, value in filters.as_dict().items():
        writer.line(f"Filter:{key}", value)

    writer.section("KPI Summary", _kpi_rows(snapshot), ("Metric", "Current", "Previous", "Diff", "DiffPct"))
    for title, key, headers in _SECTIONS:
        writer.section(title, snapshot.get(key) or [], headers)  # type: ignore[arg-type]

    ratios = [
        {"RatioType": row["RatioType"], "TotalExpense": row["TotalExpense"], "Sources": row["BySource"]}
        for row in snapshot.get("ratios") or []
    ]
    writer.section("Expense Ratios", ratios, ("RatioType", "TotalExpense", "Sources"))
    writer.section("Net Flow", snapshot.get("netFlow") or [], ("PeriodLabel", "Income", "Expense", "NetFlowAmount"))
    if snapshot.get("sankeyData"):
        writer.section("Sankey Flows", snapshot["sankeyData"], ("From", "To", "Amount"))

    tree = snapshot.get("expenseTreeMap") or {}
    categories = [
        {"Category": node["name"], "Value": node["value"], "PrevValue": node.get("prev_value", 0.0)}
        for node in tree.get("byCategory", [])
    ]
    subcategories = [
        {
            "Subcategory": node["name"],
            "Category": node.get("category", ""),
            "Value": node["value"],
            "PrevValue": node.get("prev_value", 0.0),
        }
        for node in tree.get("bySubcategory", [])
    ]
    writer.section("Expense Category", categories, ("Category", "Value", "PrevValue"))
    writer.section("Expense Subcategory", subcategories, ("Subcategory", "Category", "Value", "PrevValue"))

    writer.section("Filtered Transactions", _transaction_records(transactions), _TRANSACTION_HEADERS)
    if raw_transactions is not None:
        writer.section("Raw All Transactions", _transaction_records(raw_transactions), _TRANSACTION_HEADERS)
    return writer.rows


def _render(rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerows(rows)
    return buffer.getvalue()


def export_dashboard_csv(
    service: DashboardService,
    period: str | None,
    filters: Filters | Mapping[str, Any] | None = None,
    *,
    include_raw_all: bool = False,
    today: date | None = None,
) -> ExportedReport:
    """Build the snapshot for ``period``/``filters`` and render it as one CSV document."""

    token = normalize_period(period)
    active = filters if isinstance(filters, Filters) else Filters.from_mapping(filters)
    snapshot = service.build_dashboard(token, active, today=today)
    transactions = service.filtered_transactions(token, active, today=today)

    raw = None
    if include_raw_all:
        raw = select_transactions(service.load_ledger(), None, resolve_period("all"))

    rows = build_export_rows(snapshot, transactions, period=token, filters=active, raw_transactions=raw)
    _logger.info("Exported %d CSV rows for period=%s", len(rows), token)
    return ExportedReport(
        filename=f"{EXPORT_BRAND.lower()}-transactions-{token}.csv",
        mime="text/csv",
        content=_render(rows),
    )
