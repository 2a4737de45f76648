"""Expense breakdown by category and subcategory, with the prior window alongside."""

from __future__ import annotations

import pandas as pd

from core.models import ExpenseNode, ExpenseTree

__all__ = ["expense_totals", "calculate_expense_tree"]

UNCATEGORIZED = "Uncategorized"
GENERAL = "General"


def expense_totals(transactions: pd.DataFrame) -> tuple[float, pd.Series, pd.Series]:
    """Return ``(total, by_category, by_pair)`` expense magnitudes.

    ``by_pair`` is indexed by ``(Category, Subcategory)``. Both series keep
    first-appearance order.
    """

    if transactions.empty:
        empty = pd.Series(dtype=float)
        return 0.0, empty, empty

    expenses = transactions[transactions["Amount"] < 0]
    frame = pd.DataFrame(
        {
            "Category": expenses["Category"].replace("", UNCATEGORIZED),
            "Subcategory": expenses["Subcategory"].replace("", GENERAL),
            "Magnitude": expenses["Amount"].abs(),
        }
    )
    by_category = frame.groupby("Category", sort=False)["Magnitude"].sum()
    by_pair = frame.groupby(["Category", "Subcategory"], sort=False)["Magnitude"].sum()
    return float(frame["Magnitude"].sum()), by_category, by_pair


def calculate_expense_tree(current: pd.DataFrame, previous: pd.DataFrame) -> ExpenseTree:
    """Compare category and subcategory spend against the previous window.

    Nodes exist for everything spent in the current window; a missing
    previous value is ``0``.
    """

    total, categories, pairs = expense_totals(current)
    _, prev_categories, prev_pairs = expense_totals(previous)

    by_category: list[ExpenseNode] = [
        ExpenseNode(name=str(name), value=float(value), prev_value=float(prev_categories.get(name, 0.0)))
        for name, value in categories.items()
    ]
    by_subcategory: list[ExpenseNode] = [
        ExpenseNode(
            name=str(subcategory),
            category=str(category),
            value=float(value),
            prev_value=float(prev_pairs.get((category, subcategory), 0.0)),
        )
        for (category, subcategory), value in pairs.items()
    ]
    hierarchical: list[ExpenseNode] = [
        ExpenseNode(
            name=node["name"],
            value=node["value"],
            prev_value=node["prev_value"],
            children=[child for child in by_subcategory if child["category"] == node["name"]],
        )
        for node in by_category
    ]
    return ExpenseTree(total=total, hierarchical=hierarchical, byCategory=by_category, bySubcategory=by_subcategory)
