"""Visualization utilities for KasFlow dashboards."""

from .charts import (
    build_budget_chart,
    build_expense_treemap,
    build_net_flow_chart,
    build_sankey_chart,
)
from .theme import theme_tokens

__all__ = [
    "build_budget_chart",
    "build_expense_treemap",
    "build_net_flow_chart",
    "build_sankey_chart",
    "theme_tokens",
]
