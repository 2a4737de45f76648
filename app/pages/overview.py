"""Overview dashboard page layout."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from app.layout import card
from core.export import ExportedReport
from core.formatting import format_delta, format_rupiah
from core.models import DashboardSnapshot, FinancialInsights, KpiSummary
from visualization import build_expense_treemap, build_net_flow_chart, build_sankey_chart


def _render_kpis(kpi: KpiSummary) -> None:
    cols = st.columns(4)
    cols[0].metric("Income", format_rupiah(kpi["income"]), format_delta(kpi["income"], kpi["prev_income"]))
    cols[1].metric(
        "Expense",
        format_rupiah(kpi["expense"]),
        format_delta(kpi["expense"], kpi["prev_expense"]),
        delta_color="inverse",
    )
    cols[2].metric("Saving", format_rupiah(kpi["saving"]), format_delta(kpi["saving"], kpi["prev_saving"]))
    cols[3].metric("Net worth", format_rupiah(kpi["netWorth"]), format_delta(kpi["netWorth"], kpi["prev_netWorth"]))
    caption = f"Net {format_rupiah(kpi['net'])} · Liquid assets {format_rupiah(kpi['liquidAssets'])}"
    if kpi["isFiltered"]:
        caption += " · filtered by owner"
    st.caption(caption)


def _insight_lines(insights: FinancialInsights) -> list[str]:
    lines: list[str] = []
    major = insights.get("majorSpent")
    if major:
        lines.append(
            f"Largest category: <strong>{major['name']}</strong> at {format_rupiah(major['value'])} "
            f"({major['pct']:.1f}% of spend)."
        )
    change = insights.get("bigChange")
    if change:
        detail = f" ({change['pct']:+.1f}%)" if change.get("pct") is not None else ""
        lines.append(f"Biggest change: <strong>{change['name']}</strong> shows an {change['type']}{detail}.")
    average = insights.get("movingAverage")
    if average and average.get("changePct") is not None:
        lines.append(f"Spending moved {average['changePct']:+.1f}% against the previous period.")
    return lines


def _render_wallets(snapshot: DashboardSnapshot) -> None:
    wallets = snapshot["walletStatus"]
    if not wallets:
        st.info("No wallets recorded yet.")
        return
    frame = pd.DataFrame(wallets)[["Wallet", "Type", "Owner", "Balance"]]
    st.dataframe(frame, hide_index=True, use_container_width=True)
    st.caption(f"Liquid assets {format_rupiah(snapshot['liquidAssets'])}")


def render_page(snapshot: DashboardSnapshot, export: ExportedReport | None = None) -> None:
    """Render the overview dashboard page."""

    st.title("Overview")
    with card("Summary", suffix="vs previous period"):
        _render_kpis(snapshot["kpiSummary"])

    left, right = st.columns([3, 2], gap="medium")
    with left:
        with card("Net flow", suffix="Monthly"):
            st.plotly_chart(build_net_flow_chart(snapshot["netFlow"]), use_container_width=True)
    with right:
        with card("Insights"):
            lines = _insight_lines(snapshot["financialInsights"])
            if lines:
                items = "".join(f"<li>{line}</li>" for line in lines)
                st.markdown(f"<ul class='kf-insights'>{items}</ul>", unsafe_allow_html=True)
            else:
                st.info("Not enough spending to highlight yet.")

    with card("Where the money went", suffix="Payer → purpose"):
        st.plotly_chart(build_sankey_chart(snapshot["sankeyData"]), use_container_width=True)

    left, right = st.columns([3, 2], gap="medium")
    with left:
        with card("Expenses by category"):
            st.plotly_chart(build_expense_treemap(snapshot["expenseTreeMap"]), use_container_width=True)
    with right:
        with card("Wallets"):
            _render_wallets(snapshot)

    if snapshot.get("diagnostics"):
        st.warning("Some sections could not be computed: " + ", ".join(snapshot["diagnostics"]))

    if export is not None:
        st.download_button("Download CSV", export.content, file_name=export.filename, mime=export.mime)


__all__ = ["render_page"]
