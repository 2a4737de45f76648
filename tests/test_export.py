"""Sectioned CSV export of a dashboard snapshot."""

from __future__ import annotations

import base64
import csv
import io
from datetime import date, datetime

from core.export import build_export_rows, export_dashboard_csv
from core.models import Filters

TODAY = date(2024, 3, 20)


def _parse(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


def _section(rows: list[list[str]], title: str) -> list[list[str]]:
    start = rows.index([f"# {title}"]) + 1
    end = start
    while end < len(rows) and rows[end]:
        end += 1
    return rows[start:end]


def test_export_document_layout(service):
    report = export_dashboard_csv(service, "current_month", {"walletOwner": "Sari"}, today=TODAY)

    assert report.filename == "kasflow-transactions-current_month.csv"
    assert report.mime == "text/csv"
    assert base64.b64decode(report.base64).decode("utf-8") == report.content

    rows = _parse(report.content)
    assert rows[0] == ["# EXPORT KasFlow"]
    assert rows[1][0] == "Generated"
    assert rows[2] == ["Period", "current_month"]
    assert rows[3] == ["Filter:wallet_owner", "Sari"]

    titles = [row[0][2:] for row in rows if len(row) == 1 and row[0].startswith("# ") and row[0] != "# EXPORT KasFlow"]
    assert titles == [
        "KPI Summary",
        "Wallet Status",
        "Goals Status",
        "Budget Status",
        "Liabilities Upcoming",
        "Expense Ratios",
        "Net Flow",
        "Sankey Flows",
        "Expense Category",
        "Expense Subcategory",
        "Filtered Transactions",
    ]


def test_export_values_survive_csv_quoting(service):
    report = export_dashboard_csv(service, "current_month", {"walletOwner": "Sari"}, today=TODAY)
    rows = _parse(report.content)

    transactions = _section(rows, "Filtered Transactions")
    assert transactions[0][:3] == ["Date", "Type", "Amount"]
    descriptions = [row[9] for row in transactions[1:]]
    assert "Ojek, kantor" in descriptions
    assert transactions[1][0] == "2024-03-06"

    kpi = _section(rows, "KPI Summary")
    assert kpi[0] == ["Metric", "Current", "Previous", "Diff", "DiffPct"]
    assert kpi[1][0] == "Income" and kpi[1][4] == "100.00"

    sankey = _section(rows, "Sankey Flows")
    assert sankey[1] == ["Sari", "Unspecified", "500000.0"]


def test_export_includes_raw_ledger_on_request(service):
    report = export_dashboard_csv(service, "current_month", None, include_raw_all=True, today=TODAY)
    rows = _parse(report.content)

    raw = _section(rows, "Raw All Transactions")
    assert len(raw) == 1 + 10
    assert not [row for row in rows if row and row[0].startswith("Filter:")]


def test_empty_sections_say_so(service):
    snapshot = service.build_dashboard("current_month", today=TODAY)
    snapshot["goalsStatus"] = []
    snapshot["sankeyData"] = []
    transactions = service.filtered_transactions("current_month", today=TODAY)

    rows = build_export_rows(
        snapshot,
        transactions,
        period="current_month",
        filters=Filters(),
        generated_at=datetime(2024, 3, 20, 9, 30),
    )

    assert rows[1] == ["Generated", "2024-03-20T09:30:00"]
    assert _section(rows, "Goals Status") == [["(no rows)"]]
    assert ["# Sankey Flows"] not in rows
    ratios = _section(rows, "Expense Ratios")
    assert ratios[1][2].startswith("{")
