"""Aggregation reducers shared by the KasFlow dashboard."""

from analytics.budget import calculate_budget_status, format_budget_row
from analytics.expenses import calculate_expense_tree
from analytics.flows import calculate_net_flow, calculate_ratios, calculate_sankey_edges
from analytics.goals import calculate_goals_status, classify_goal, goal_risk_score
from analytics.kpi import calculate_kpi_summary, calculate_total_saving, disguised_saving_mask
from analytics.liabilities import calculate_liabilities_upcoming
from analytics.wallets import (
    calculate_net_worth_snapshot,
    calculate_wallet_status,
    compute_liquid_assets,
    compute_liquid_assets_snapshot,
    infer_wallet_type,
)

__all__ = [
    "calculate_budget_status",
    "format_budget_row",
    "calculate_expense_tree",
    "calculate_net_flow",
    "calculate_ratios",
    "calculate_sankey_edges",
    "calculate_goals_status",
    "classify_goal",
    "goal_risk_score",
    "calculate_kpi_summary",
    "calculate_total_saving",
    "disguised_saving_mask",
    "calculate_liabilities_upcoming",
    "calculate_net_worth_snapshot",
    "calculate_wallet_status",
    "compute_liquid_assets",
    "compute_liquid_assets_snapshot",
    "infer_wallet_type",
]
