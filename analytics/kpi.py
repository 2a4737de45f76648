"""Income, expense and saving totals for a transaction window."""

from __future__ import annotations

import pandas as pd

from config.keywords import DEFAULT_RULES, KeywordRules
from core.models import KpiSummary

__all__ = [
    "disguised_saving_mask",
    "income_and_expense",
    "calculate_kpi_summary",
    "calculate_total_saving",
]


def disguised_saving_mask(transactions: pd.DataFrame, rules: KeywordRules = DEFAULT_RULES) -> pd.Series:
    """Flag expense rows whose Category or Subcategory reads as a saving.

    Such rows leave a wallet but are not consumption, so they count toward
    saving instead of expense.
    """

    if transactions.empty:
        return pd.Series(False, index=transactions.index, dtype=bool)
    is_expense = transactions["Type"].str.strip().str.lower() == "expense"
    labelled = transactions["Category"].map(rules.is_disguised_saving_label) | transactions[
        "Subcategory"
    ].map(rules.is_disguised_saving_label)
    return (is_expense & labelled.astype(bool)).astype(bool)


def income_and_expense(transactions: pd.DataFrame, rules: KeywordRules = DEFAULT_RULES) -> tuple[float, float]:
    """Return ``(income, expense)``; both are non-negative magnitudes."""

    if transactions.empty:
        return 0.0, 0.0
    amounts = transactions["Amount"]
    income = float(amounts[amounts > 0].sum())
    outflow = (amounts <= 0) & ~disguised_saving_mask(transactions, rules)
    expense = float(amounts[outflow].abs().sum())
    return income, expense


def calculate_kpi_summary(
    current: pd.DataFrame,
    previous: pd.DataFrame,
    rules: KeywordRules = DEFAULT_RULES,
) -> KpiSummary:
    """Build the KPI block for the current and comparison windows.

    Saving, net worth and liquid assets are filled in later by the dashboard
    build; they start at zero here.
    """

    income, expense = income_and_expense(current, rules)
    prev_income, prev_expense = income_and_expense(previous, rules)
    return KpiSummary(
        income=income,
        expense=expense,
        net=income - expense,
        prev_income=prev_income,
        prev_expense=prev_expense,
        prev_net=prev_income - prev_expense,
        saving=0.0,
        prev_saving=0.0,
        netWorth=0.0,
        prev_netWorth=0.0,
        liquidAssets=0.0,
        isFiltered=False,
    )


def calculate_total_saving(transactions: pd.DataFrame, rules: KeywordRules = DEFAULT_RULES) -> float:
    """Sum explicit savings (inflows tagged with a saving Source) and disguised ones."""

    if transactions.empty:
        return 0.0
    amounts = transactions["Amount"]
    source = transactions["Source"].str.strip().str.lower()
    explicit = (amounts > 0) & source.isin(rules.saving_source_keys)
    disguised = ~explicit & disguised_saving_mask(transactions, rules)
    return float(amounts[explicit].sum() + amounts[disguised].abs().sum())
