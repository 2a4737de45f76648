"""Budget usage per category and subcategory."""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from core.amounts import normalize_number
from core.models import BudgetRow, new_row_id
from core.tables import RawTable, TableDecoder

__all__ = ["CategoryBudget", "parse_budget_setup", "format_budget_row", "calculate_budget_status"]

ALL_SUBCATEGORIES = "All"


@dataclass
class CategoryBudget:
    """Budget of one category and its budgeted subcategories."""

    budget: float = 0.0
    expense: float = 0.0
    subcategories: dict[str, list[float]] = field(default_factory=dict)


def parse_budget_setup(category_setup: RawTable | None) -> dict[str, CategoryBudget]:
    """Collect positive subcategory budgets, keeping setup order."""

    tree: dict[str, CategoryBudget] = {}
    if not category_setup:
        return tree
    decoder = TableDecoder(category_setup)
    for row in decoder.rows:
        category = decoder.text(row, "Category")
        subcategory = decoder.text(row, "Subcategory")
        budget = normalize_number(decoder.cell(row, "Budget Subcategory"))
        if not category or budget <= 0:
            continue
        entry = tree.setdefault(category, CategoryBudget())
        entry.budget += budget
        # [budget, expense]
        entry.subcategories[subcategory] = [budget, 0.0]
    return tree


def format_budget_row(
    category: str,
    subcategory: str,
    budget: float,
    expense: float,
    *,
    over_threshold: float = 100.0,
    warning_threshold: float = 80.0,
) -> BudgetRow:
    usage = expense / budget * 100 if budget > 0 else 0.0
    if usage > over_threshold:
        status = "Over"
    elif usage > warning_threshold:
        status = "Warning"
    else:
        status = "On Track"
    return BudgetRow(
        UniqueID=new_row_id(),
        Category=category,
        Subcategory=subcategory,
        BudgetAmount=float(budget),
        ActualExpense=float(expense),
        RemainingBudget=float(budget - expense),
        UsagePercentage=round(usage, 1),
        Status=status,
    )


def calculate_budget_status(
    category_setup: RawTable | None,
    transactions: pd.DataFrame,
    *,
    over_threshold: float = 100.0,
    warning_threshold: float = 80.0,
) -> list[BudgetRow]:
    """Compare window expenses against the configured budgets.

    Each category yields an ``All`` row followed by one row per budgeted
    subcategory. Spending outside the budget tree is ignored.
    """

    tree = parse_budget_setup(category_setup)
    if not transactions.empty:
        expenses = transactions[transactions["Amount"] < 0]
        for category, subcategory, amount in zip(
            expenses["Category"], expenses["Subcategory"], expenses["Amount"]
        ):
            entry = tree.get(category)
            if entry is None:
                continue
            magnitude = abs(float(amount))
            entry.expense += magnitude
            if subcategory in entry.subcategories:
                entry.subcategories[subcategory][1] += magnitude

    thresholds = {"over_threshold": over_threshold, "warning_threshold": warning_threshold}
    rows: list[BudgetRow] = []
    for category, entry in tree.items():
        rows.append(format_budget_row(category, ALL_SUBCATEGORIES, entry.budget, entry.expense, **thresholds))
        for subcategory, (budget, expense) in entry.subcategories.items():
            rows.append(format_budget_row(category, subcategory, budget, expense, **thresholds))
    return rows
