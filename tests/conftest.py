"""Shared fixtures: a small two-person household ledger and its setup tables."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest
import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import Settings
from core.cache import MemoryCache
from core.dashboard import DashboardService
from core.projection import load_ledger
from core.store import MemoryTableStore

TODAY = date(2024, 3, 20)

INPUT_HEADER = [
    "Date",
    "Transaction Type",
    "Amount",
    "Wallet",
    "Wallet Owner",
    "Expense Purpose",
    "Category",
    "Subcategory",
    "Note",
    "Description",
    "Source",
]


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)


@pytest.fixture()
def input_table() -> list[list[str]]:
    return [
        INPUT_HEADER,
        ["2024-02-10", "Income", "10.000.000", "BCA Budi", "Budi", "", "Salary", "Monthly", "", "Gaji", "Cash & Bank"],
        ["2024-02-15", "Expense", "1.000.000", "BCA Budi", "Budi", "Family", "Food", "Groceries", "", "Belanja", "Cash & Bank"],
        ["2024-03-01", "Income", "12.000.000", "BCA Budi", "Budi", "", "Salary", "Monthly", "", "Gaji", "Cash & Bank"],
        ["2024-03-05", "Expense", "1.500.000", "BCA Budi", "Budi", "Family", "Food", "Groceries", "", "Belanja", "Cash & Bank"],
        ["2024-03-06", "Expense", "250.000", "GoPay Sari", "Sari", "Sari", "Transport", "Ride Hailing", "weekly", "Ojek, kantor", "E-Wallet"],
        ["2024-03-07", "Expense", "2.000.000", "BCA Budi", "Budi", "Budi", "Investasi", "Reksadana", "", "Top up reksadana", "Cash & Bank"],
        ["2024-03-08", "Income", "3.000.000", "Mandiri Sari", "Sari", "Sari", "Saving/Investment", "Dana Darurat", "", "Setoran", "Saving/Investment"],
        ["2024-03-09", "Transfer", "500.000", "Mandiri Sari", "Sari", "", "", "transfer-out", "", "Top up", "Cash & Bank"],
        ["2024-03-09", "Transfer", "500.000", "GoPay Sari", "Sari", "", "", "transfer-in", "", "Top up", "E-Wallet"],
        ["2024-03-10", "Expense", "1.200.000", "BCA Budi", "Budi", "Family", "Debt", "Cicilan Motor", "", "Cicilan motor", "Liabilities"],
        ["not a date", "Expense", "100.000", "BCA Budi", "Budi", "", "Misc", "", "", "Undated", "Cash & Bank"],
    ]


@pytest.fixture()
def scheduled_table() -> list[list[str]]:
    return [
        ["description", "category", "amount", "wallet", "wallet owner", "status", "nextduedate"],
        ["Cicilan motor", "Debt", "1.200.000", "BCA Budi", "Budi", "Active", "2024-03-25"],
        ["Internet", "Household", "385.000", "Mandiri Sari", "Sari", "active", "2024-03-05"],
        ["Asuransi", "Household", "750.000", "BCA Budi", "Budi", "Paused", "2024-03-28"],
        ["Netflix", "Entertainment", "186.000", "GoPay Sari", "Sari", "Active", "2024-04-02"],
    ]


@pytest.fixture()
def wallet_setup() -> list[list[str]]:
    return [
        ["Wallet", "Wallet Type", "Wallet Owner"],
        ["BCA Budi", "Cash & Bank", "Budi"],
        ["GoPay Sari", "E-Wallet", "Sari"],
        ["Mandiri Sari", "", "Sari"],
    ]


@pytest.fixture()
def category_setup() -> list[list[str]]:
    return [
        ["Category", "Subcategory", "Budget Subcategory", "Ratios"],
        ["Food", "Groceries", "2.000.000", "Needs"],
        ["Food", "Eating Out", "500.000", "Wants"],
        ["Transport", "Ride Hailing", "200.000", "Wants"],
        ["Debt", "Cicilan Motor", "", "Obligations"],
    ]


@pytest.fixture()
def goals_setup() -> list[list[str]]:
    return [
        ["Goals", "Goal Owner", "Nominal Needed", "Deadline"],
        ["Dana Darurat", "Sari", "12.000.000", "2024-12-31"],
        ["Liburan", "Budi", "5.000.000", ""],
    ]


@pytest.fixture()
def tables(input_table, scheduled_table, wallet_setup, category_setup, goals_setup) -> dict:
    return {
        "Input": input_table,
        "ScheduledTransactions": scheduled_table,
        "Wallet Setup": wallet_setup,
        "Category Setup": category_setup,
        "Goals Setup": goals_setup,
    }


@pytest.fixture()
def ledger(input_table):
    return load_ledger(input_table)


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def store(tables) -> MemoryTableStore:
    return MemoryTableStore(tables)


@pytest.fixture()
def service(store, settings) -> DashboardService:
    return DashboardService(store, MemoryCache(), settings)
