"""Projection of Input rows into signed, filtered transactions."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pandas as pd

from core.models import Filters, PeriodWindow
from core.periods import resolve_period
from core.projection import load_ledger, project_transactions, select_transactions, sign_amounts

TODAY = date(2024, 3, 20)


def test_sign_rule_by_transaction_type():
    values = pd.Series([100.0, -100.0, 100.0, 100.0, -100.0, 100.0, -7.0])
    types = pd.Series(["Income", "expense", "Transfer", "Transfer", "transfer", "Transfer", "Adjustment"])
    subs = pd.Series(["", "", "Transfer-Out", "transfer-in", "transfer-in", "moved", ""])

    signed = sign_amounts(values, types, subs)

    assert signed.tolist() == [100.0, -100.0, -100.0, 100.0, 100.0, 0.0, -7.0]


def test_load_ledger_keeps_every_row_and_marks_bad_dates(input_table):
    ledger = load_ledger(input_table)

    assert len(ledger) == len(input_table) - 1
    assert list(ledger.columns)[:3] == ["Date", "Type", "Amount"]
    assert pd.isna(ledger["Date"].iloc[-1])
    assert ledger["Amount"].iloc[1] == -1_000_000.0
    assert ledger["Note"].iloc[0] == ""


def test_window_excludes_undated_rows_and_keeps_order(input_table):
    window = resolve_period("current_month", today=TODAY)

    transactions = project_transactions(input_table, None, window)

    assert len(transactions) == 8
    assert transactions["Description"].tolist()[:2] == ["Gaji", "Belanja"]
    assert transactions["Date"].notna().all()


def test_exact_filters_and_description_substring(ledger):
    by_owner = select_transactions(ledger, Filters(wallet_owner="Sari"))
    assert set(by_owner["Owner"]) == {"Sari"}

    by_description = select_transactions(ledger, Filters(description="OJEK"))
    assert by_description["Description"].tolist() == ["Ojek, kantor"]

    combined = select_transactions(ledger, Filters(category="Food", wallet="BCA Budi"))
    assert combined["Amount"].tolist() == [-1_000_000.0, -1_500_000.0]

    # Exact match is case-sensitive.
    assert select_transactions(ledger, Filters(category="food")).empty


def test_filters_from_ui_mapping():
    filters = Filters.from_mapping({"walletOwner": "Budi", "startDate": "2024-03-01", "category": "", "bogus": "x"})

    assert filters.wallet_owner == "Budi"
    assert filters.start_date == "2024-03-01"
    assert filters.category is None
    assert filters.as_dict() == {"wallet_owner": "Budi", "start_date": "2024-03-01"}
    assert Filters.from_mapping(None).is_empty


def test_aware_dates_land_in_reporting_timezone(input_table):
    table = [
        input_table[0],
        ["2024-03-31T20:00:00Z", "Expense", "10.000", "BCA", "Budi", "", "Food", "", "", "late", ""],
    ]
    plus_seven = timezone(timedelta(hours=7))
    april = PeriodWindow(datetime(2024, 4, 1), datetime(2024, 4, 30, 23, 59, 59))

    transactions = project_transactions(table, None, april, tz=plus_seven)

    assert transactions["Date"].iloc[0] == pd.Timestamp("2024-04-01 03:00")


def test_missing_columns_read_as_blank():
    table = [["Date", "Amount", "Transaction Type"], ["2024-03-02", "5.000", "Income"]]

    ledger = load_ledger(table)

    assert ledger["Amount"].iloc[0] == 5000.0
    assert ledger["Wallet"].iloc[0] == ""
