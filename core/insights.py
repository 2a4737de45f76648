"""Headline observations derived from the expense breakdown and KPIs."""

from __future__ import annotations

from core.models import BigChange, ExpenseTree, FinancialInsights, KpiSummary, MajorSpent, MovingAverage

__all__ = ["BIG_CHANGE_THRESHOLD", "major_spent", "big_change", "moving_average", "build_financial_insights"]

# Minimum |delta| as a share of the average previous category spend.
BIG_CHANGE_THRESHOLD = 0.3


def major_spent(tree: ExpenseTree) -> MajorSpent | None:
    """Largest category of the window with its share of total expense."""

    categories = tree["byCategory"]
    if not categories:
        return None
    top = categories[0]
    for node in categories[1:]:
        if node["value"] > top["value"]:
            top = node
    total = tree["total"]
    return MajorSpent(name=top["name"], value=top["value"], pct=top["value"] / total * 100 if total > 0 else 0.0)


def big_change(tree: ExpenseTree) -> BigChange | None:
    """Category with the largest swing against its previous spend.

    Categories without previous spend are compared with the average previous
    spend of the categories that had some.
    """

    categories = tree["byCategory"]
    if not categories:
        return None
    with_history = [node["prev_value"] for node in categories if node["prev_value"] > 0]
    avg_prev = sum(node["prev_value"] for node in categories) / max(1, len(with_history))

    biggest = None
    biggest_delta = 0.0
    for node in categories:
        delta = node["value"] - (node["prev_value"] or avg_prev)
        if abs(delta) > abs(biggest_delta):
            biggest, biggest_delta = node, delta

    if biggest is None or abs(biggest_delta) <= BIG_CHANGE_THRESHOLD * (avg_prev or 1):
        return None
    prev = biggest["prev_value"]
    return BigChange(
        name=biggest["name"],
        type="increase" if biggest_delta > 0 else "decrease",
        pct=(biggest["value"] - prev) / prev * 100 if prev > 0 else None,
    )


def moving_average(kpi: KpiSummary) -> MovingAverage:
    current, previous = kpi["expense"], kpi["prev_expense"]
    change = round((current - previous) / previous * 100, 1) if previous > 0 else None
    return MovingAverage(current=current, previous=previous, changePct=change)


def build_financial_insights(tree: ExpenseTree, kpi: KpiSummary) -> FinancialInsights:
    return FinancialInsights(
        majorSpent=major_spent(tree),
        bigChange=big_change(tree),
        movingAverage=moving_average(kpi),
    )
