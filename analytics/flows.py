"""Monthly net flow, expense ratios and payer to beneficiary flows."""

from __future__ import annotations

from collections import defaultdict

import pandas as pd

from core.logging_setup import get_logger
from core.models import NetFlowRow, RatioRow, SankeyEdge, new_row_id
from core.tables import RawTable, TableDecoder

__all__ = ["calculate_net_flow", "ratio_lookup", "calculate_ratios", "calculate_sankey_edges"]

_logger = get_logger("kasflow.analytics.flows")

UNCATEGORIZED_RATIO = "Uncategorized"


def calculate_net_flow(transactions: pd.DataFrame) -> list[NetFlowRow]:
    """Income, expense and net per calendar month, newest month first.

    Dates are expected in the reporting timezone already.
    """

    if transactions.empty:
        return []
    dated = transactions[transactions["Date"].notna()]
    amounts = dated["Amount"]
    monthly = (
        pd.DataFrame(
            {
                "PeriodLabel": dated["Date"].dt.strftime("%Y-%m"),
                "Income": amounts.clip(lower=0),
                "Expense": amounts.clip(upper=0).abs(),
            }
        )
        .groupby("PeriodLabel")
        .sum()
        .sort_index(ascending=False)
    )
    return [
        NetFlowRow(
            UniqueID=new_row_id(),
            PeriodLabel=str(label),
            Income=float(row.Income),
            Expense=float(row.Expense),
            NetFlowAmount=float(row.Income - row.Expense),
        )
        for label, row in monthly.iterrows()
    ]


def ratio_lookup(category_setup: RawTable | None) -> dict[tuple[str, str], str]:
    """Map ``(Category, Subcategory)`` to its configured ratio class."""

    if not category_setup:
        return {}
    decoder = TableDecoder(category_setup)
    lookup: dict[tuple[str, str], str] = {}
    for row in decoder.rows:
        ratio = decoder.text(row, "Ratios")
        if ratio:
            lookup[(decoder.text(row, "Category"), decoder.text(row, "Subcategory"))] = ratio
    return lookup


def calculate_ratios(category_setup: RawTable | None, transactions: pd.DataFrame) -> list[RatioRow]:
    """Expense magnitude per ratio class, broken down by Source."""

    if transactions.empty:
        return []
    lookup = ratio_lookup(category_setup)
    expenses = transactions[transactions["Amount"] < 0]

    totals: dict[str, float] = {}
    by_source: dict[str, dict[str, float]] = {}
    for category, subcategory, source, amount in zip(
        expenses["Category"], expenses["Subcategory"], expenses["Source"], expenses["Amount"]
    ):
        ratio = lookup.get((category, subcategory), UNCATEGORIZED_RATIO)
        source_name = source.strip() or "Unknown"
        magnitude = abs(float(amount))
        totals[ratio] = totals.get(ratio, 0.0) + magnitude
        sources = by_source.setdefault(ratio, {})
        sources[source_name] = sources.get(source_name, 0.0) + magnitude

    return [RatioRow(RatioType=ratio, TotalExpense=total, BySource=by_source[ratio]) for ratio, total in totals.items()]


def calculate_sankey_edges(transactions: pd.DataFrame) -> list[SankeyEdge]:
    """Aggregate expense magnitude along payer to beneficiary edges.

    The payer is the wallet owner (falling back to the wallet), the
    beneficiary is the expense purpose. Zero edges and self-loops are dropped.
    """

    if transactions.empty:
        return []
    expenses = transactions[transactions["Amount"] < 0]

    edges: dict[tuple[str, str], float] = defaultdict(float)
    payers: set[str] = set()
    beneficiaries: set[str] = set()
    for owner, wallet, purpose, amount in zip(
        expenses["Owner"], expenses["Wallet"], expenses["Purpose"], expenses["Amount"]
    ):
        payer = (owner or wallet).strip() or "Unknown"
        beneficiary = purpose.strip() or "Unspecified"
        payers.add(payer)
        beneficiaries.add(beneficiary)
        edges[(payer, beneficiary)] += abs(float(amount))

    collisions = sorted(payers & beneficiaries)
    if collisions:
        _logger.info("Sankey name collisions (same label as payer and beneficiary): %s", ", ".join(collisions))

    result: list[SankeyEdge] = []
    for (payer, beneficiary), total in edges.items():
        if total == 0:
            continue
        if payer == beneficiary:
            _logger.warning("Dropping self-loop flow %s -> %s (%.2f)", payer, beneficiary, total)
            continue
        result.append(SankeyEdge(From=payer, To=beneficiary, Amount=total))
    _logger.info("Built %d flow edges from %d expense rows", len(result), len(expenses))
    return result
