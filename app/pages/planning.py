"""Goals, budget and upcoming payments page."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from app.layout import card
from core.formatting import format_rupiah
from core.models import DashboardSnapshot
from visualization import build_budget_chart

_GOAL_COLUMNS = [
    "GoalName",
    "Status",
    "ProgressPercentage",
    "Collected",
    "TotalNeeded",
    "GapAmount",
    "DaysLeft",
    "Deadline",
    "ProjectedFinish",
    "RiskScore",
]


def _render_goals(snapshot: DashboardSnapshot) -> None:
    goals = snapshot["goalsStatus"]
    if not goals:
        st.info("No savings goals configured.")
        return
    for goal in goals:
        st.markdown(f"**{goal['GoalName']}** · {goal['Status']} · risk {goal['RiskScore']}")
        st.progress(min(max(goal["ProgressPercentage"], 0.0), 100.0) / 100)
        st.caption(
            f"{format_rupiah(goal['Collected'])} of {format_rupiah(goal['TotalNeeded'])} · "
            f"deadline {goal['Deadline']}"
        )
    with st.expander("Goal details"):
        st.dataframe(pd.DataFrame(goals)[_GOAL_COLUMNS], hide_index=True, use_container_width=True)


def _render_liabilities(snapshot: DashboardSnapshot) -> None:
    entries = snapshot["liabilitiesUpcoming"]
    if not entries:
        st.info("Nothing due in this period.")
        return
    frame = pd.DataFrame(entries)[["Type", "Name", "Amount", "Wallet", "Owner", "DueDate", "isOverdue"]]
    st.dataframe(frame, hide_index=True, use_container_width=True)
    overdue = frame[frame["isOverdue"]]
    if not overdue.empty:
        st.warning(f"{len(overdue)} item(s) overdue, {format_rupiah(float(overdue['Amount'].sum()))} in total.")


def render_page(snapshot: DashboardSnapshot) -> None:
    """Render savings goals, budgets, ratios and liabilities."""

    st.title("Goals & Budget")
    with card("Savings goals", suffix=f"Total saving {format_rupiah(snapshot['totalSaving'])}"):
        _render_goals(snapshot)

    left, right = st.columns([3, 2], gap="medium")
    with left:
        with card("Budget usage"):
            st.plotly_chart(build_budget_chart(snapshot["budgetStatus"]), use_container_width=True)
    with right:
        with card("Expense ratios"):
            ratios = snapshot["ratios"]
            if ratios:
                st.dataframe(
                    pd.DataFrame(ratios)[["RatioType", "TotalExpense"]],
                    hide_index=True,
                    use_container_width=True,
                )
            else:
                st.info("No expenses in this period.")

    with card("Liabilities & upcoming"):
        _render_liabilities(snapshot)


__all__ = ["render_page"]
