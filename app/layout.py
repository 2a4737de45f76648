"""Shared layout primitives for the KasFlow Streamlit app."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable

import streamlit as st

from core.models import FilterOptions, Filters
from core.periods import DEFAULT_PERIOD, PERIOD_TOKENS


@dataclass(frozen=True)
class NavigationLink:
    slug: str
    label: str
    enabled: bool = True


NAV_LINKS: tuple[NavigationLink, ...] = (
    NavigationLink("overview", "Dashboard"),
    NavigationLink("planning", "Goals & Budget"),
    NavigationLink("ask", "Ask"),
)

PERIOD_LABELS: dict[str, str] = {
    "today": "Today",
    "yesterday": "Yesterday",
    "this_week": "This week",
    "last_7_days": "Last 7 days",
    "current_month": "This month",
    "last_month": "Last month",
    "current_year": "This year",
    "last_year": "Last year",
    "all": "All time",
    "custom": "Custom range",
}

_ANY = "All"


def inject_css() -> None:
    """Inject card and navigation styling."""

    st.markdown(
        """
        <style>
          :root {
            --gap: 16px;
            --radius: 12px;
            --card-bg: #FFFFFF;
            --border: #E2E8F0;
            --shadow: 0 1px 2px rgba(15, 23, 42, 0.05), 0 1px 3px rgba(15, 23, 42, 0.06);
          }

          body, [data-testid="stAppViewContainer"] > .main {
            background: #F5F7F6;
          }

          .block-container {
            max-width: 1240px;
            padding-top: 2.5rem;
            padding-bottom: 4rem;
          }

          .kf-nav {
            display: flex;
            align-items: center;
            justify-content: space-between;
            gap: 2rem;
            padding: 0.9rem 0;
          }

          .kf-nav__brand {
            font-size: 1.5rem;
            font-weight: 700;
            color: #0F766E;
          }

          .kf-nav__links {
            display: flex;
            gap: 1.6rem;
          }

          .kf-nav__link,
          .kf-nav__link:visited {
            font-weight: 600;
            color: #64748B;
            text-decoration: none;
          }

          .kf-nav__link.is-active {
            color: #0F766E;
            border-bottom: 3px solid #0F766E;
          }

          .kf-card-anchor {
            display: none;
          }

          [data-testid="stVerticalBlock"]:has(> .kf-card-anchor) {
            background: var(--card-bg);
            border: 1px solid var(--border);
            border-radius: var(--radius);
            box-shadow: var(--shadow);
            padding: 16px;
            margin-bottom: var(--gap);
          }

          .kf-card__head {
            display: flex;
            align-items: center;
            justify-content: space-between;
            font-weight: 600;
            color: #0F172A;
          }

          .kf-chip {
            font-size: 12px;
            padding: 2px 8px;
            border-radius: 999px;
            border: 1px solid #99F6E4;
            background: #F0FDFA;
            color: #0F766E;
          }

          .kf-insights {
            margin: 0;
            padding-left: 1.1rem;
            color: #475569;
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str, suffix: str | None = None):
    """Render content inside a bordered card with an optional chip."""

    chip_html = f'<span class="kf-chip">{suffix}</span>' if suffix else ""
    with st.container():
        st.markdown('<div class="kf-card-anchor"></div>', unsafe_allow_html=True)
        st.markdown(
            f'<div class="kf-card__head"><span>{title}</span>{chip_html}</div>',
            unsafe_allow_html=True,
        )
        yield


def render_navbar(active_page: str) -> None:
    links = []
    for link in NAV_LINKS:
        css_class = "kf-nav__link" + (" is-active" if link.slug == active_page else "")
        links.append(f'<a class="{css_class}" href="?page={link.slug}" target="_self">{link.label}</a>')
    st.markdown(
        f'<nav class="kf-nav"><div class="kf-nav__brand">KasFlow</div>'
        f'<div class="kf-nav__links">{"".join(links)}</div></nav>',
        unsafe_allow_html=True,
    )


def determine_active_page(valid_pages: Iterable[str]) -> str:
    """Resolve the active page from the ``page`` query param."""

    raw_page = st.query_params.get("page", st.session_state.get("active_page", "overview"))
    if isinstance(raw_page, list):
        raw_page = raw_page[0] if raw_page else "overview"
    page = raw_page if raw_page in set(valid_pages) else "overview"
    st.session_state["active_page"] = page
    return page


def _choice(label: str, values: list[str], key: str) -> str | None:
    chosen = st.selectbox(label, [_ANY, *values], key=key)
    return None if chosen == _ANY else chosen


def render_sidebar_filters(options: FilterOptions) -> tuple[str, Filters, bool]:
    """Render period and filter controls; return ``(period, filters, force_refresh)``."""

    with st.sidebar:
        st.markdown("### Period")
        period = st.selectbox(
            "Period",
            PERIOD_TOKENS,
            index=PERIOD_TOKENS.index(DEFAULT_PERIOD),
            format_func=lambda token: PERIOD_LABELS.get(token, token),
            key="period_selector",
        )
        start_date = end_date = None
        if period == "custom":
            start_date = st.date_input("From", key="custom_start")
            end_date = st.date_input("To", key="custom_end")

        st.markdown("### Filters")
        filters = Filters(
            wallet=_choice("Wallet", options["wallets"], "filter_wallet"),
            wallet_owner=_choice("Wallet owner", options["walletOwners"], "filter_owner"),
            expense_purpose=_choice("Expense purpose", options["expensePurposes"], "filter_purpose"),
            category=_choice("Category", options["categories"], "filter_category"),
            subcategory=_choice("Subcategory", options["subcategories"], "filter_subcategory"),
            note=_choice("Note", options["notes"], "filter_note"),
            description=st.text_input("Description contains", key="filter_description") or None,
            start_date=start_date.isoformat() if start_date else None,
            end_date=end_date.isoformat() if end_date else None,
        )
        force_refresh = st.button("Refresh data", use_container_width=True)
    return period, filters, force_refresh


__all__ = [
    "NavigationLink",
    "NAV_LINKS",
    "PERIOD_LABELS",
    "card",
    "determine_active_page",
    "inject_css",
    "render_navbar",
    "render_sidebar_filters",
]
