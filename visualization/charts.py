"""Plotly chart builders for the KasFlow dashboard."""

from __future__ import annotations

from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from core.models import BudgetRow, ExpenseTree, NetFlowRow, SankeyEdge

from .theme import theme_tokens

TOKENS = theme_tokens()

__all__ = [
    "build_net_flow_chart",
    "build_budget_chart",
    "build_sankey_chart",
    "build_expense_treemap",
]

_HOVER_AMOUNT = "Rp %{y:,.0f}"


def _empty_plotly_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        annotations=[
            dict(
                text=message,
                x=0.5,
                y=0.5,
                xref="paper",
                yref="paper",
                showarrow=False,
                font=dict(color=TOKENS.neutral_grey, size=14, family=TOKENS.label_font),
            )
        ],
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        margin=dict(l=0, r=0, t=20, b=0),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def _finish_layout(fig: go.Figure, **overrides: object) -> go.Figure:
    fig.update_layout(
        margin=dict(l=0, r=0, t=20, b=0),
        font=dict(family=TOKENS.label_font, size=TOKENS.label_size, color=TOKENS.label_color),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        **overrides,
    )
    return fig


def build_net_flow_chart(rows: Sequence[NetFlowRow]) -> go.Figure:
    """Monthly income and expense bars with the net flow as a line, oldest month first."""

    if not rows:
        return _empty_plotly_figure("No transactions in this period.")

    df = pd.DataFrame(rows).sort_values("PeriodLabel")
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=df["PeriodLabel"],
            y=df["Income"],
            name="Income",
            marker_color=TOKENS.income_green,
            hovertemplate=f"%{{x}}<br>Income {_HOVER_AMOUNT}<extra></extra>",
        )
    )
    fig.add_trace(
        go.Bar(
            x=df["PeriodLabel"],
            y=df["Expense"],
            name="Expense",
            marker_color=TOKENS.expense_red,
            hovertemplate=f"%{{x}}<br>Expense {_HOVER_AMOUNT}<extra></extra>",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=df["PeriodLabel"],
            y=df["NetFlowAmount"],
            name="Net flow",
            mode="lines+markers",
            line=dict(color=TOKENS.brand_teal, width=3),
            marker=dict(size=8, color=TOKENS.brand_teal, line=dict(color=TOKENS.neutral_white, width=1.5)),
            hovertemplate=f"%{{x}}<br>Net {_HOVER_AMOUNT}<extra></extra>",
        )
    )
    return _finish_layout(
        fig,
        barmode="group",
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1.0),
        xaxis=dict(showgrid=False, type="category"),
        yaxis=dict(showgrid=True, gridcolor=TOKENS.neutral_background, zeroline=True),
    )


def build_budget_chart(rows: Sequence[BudgetRow]) -> go.Figure:
    """Horizontal usage bars for category totals, coloured by budget status."""

    totals = [row for row in rows if row["Subcategory"] == "All"]
    if not totals:
        return _empty_plotly_figure("No budgets configured.")

    df = pd.DataFrame(totals).sort_values("UsagePercentage")
    fig = go.Figure(
        go.Bar(
            x=df["UsagePercentage"],
            y=df["Category"],
            orientation="h",
            marker_color=[TOKENS.budget_color(status) for status in df["Status"]],
            customdata=df[["ActualExpense", "BudgetAmount", "Status"]],
            hovertemplate=(
                "%{y}<br>%{x:.1f}% used<br>"
                "Rp %{customdata[0]:,.0f} of Rp %{customdata[1]:,.0f}<br>%{customdata[2]}<extra></extra>"
            ),
        )
    )
    fig.add_vline(x=100, line_dash="dash", line_color=TOKENS.neutral_grey)
    return _finish_layout(
        fig,
        xaxis=dict(title="Usage %", showgrid=True, gridcolor=TOKENS.neutral_background),
        yaxis=dict(showgrid=False),
    )


def build_sankey_chart(edges: Sequence[SankeyEdge]) -> go.Figure:
    """Payer to beneficiary flows of expense money."""

    if not edges:
        return _empty_plotly_figure("No expense flows in this period.")

    labels: list[str] = []
    positions: dict[str, int] = {}
    for edge in edges:
        for name in (edge["From"], edge["To"]):
            if name not in positions:
                positions[name] = len(labels)
                labels.append(name)

    palette = TOKENS.node_palette
    fig = go.Figure(
        go.Sankey(
            node=dict(
                label=labels,
                pad=18,
                thickness=16,
                color=[palette[index % len(palette)] for index in range(len(labels))],
            ),
            link=dict(
                source=[positions[edge["From"]] for edge in edges],
                target=[positions[edge["To"]] for edge in edges],
                value=[edge["Amount"] for edge in edges],
                color=TOKENS.brand_teal_soft,
                hovertemplate="%{source.label} → %{target.label}<br>Rp %{value:,.0f}<extra></extra>",
            ),
        )
    )
    return _finish_layout(fig)


def build_expense_treemap(tree: ExpenseTree) -> go.Figure:
    """Category and subcategory spend as a treemap."""

    subcategories = tree.get("bySubcategory") or []
    if not subcategories:
        return _empty_plotly_figure("No expenses in this period.")

    df = pd.DataFrame(subcategories)
    df["prev_value"] = df.get("prev_value", 0.0)
    fig = px.treemap(
        df,
        path=[px.Constant("All expenses"), "category", "name"],
        values="value",
        color="category",
        color_discrete_sequence=list(TOKENS.node_palette),
        custom_data=["prev_value"],
    )
    fig.update_traces(
        hovertemplate="%{label}<br>Rp %{value:,.0f}<br>Previous Rp %{customdata[0]:,.0f}<extra></extra>",
        root_color="rgba(0,0,0,0)",
    )
    return _finish_layout(fig)
