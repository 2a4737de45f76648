"""KasFlow dashboard with responsive card layout."""

from __future__ import annotations

import streamlit as st

from app.layout import NAV_LINKS, determine_active_page, inject_css, render_navbar, render_sidebar_filters
from app.pages import render_ask_page, render_overview_page, render_planning_page
from config import get_settings
from core import CsvDirectoryStore, DashboardError, MemoryCache, configure_logging
from core.dashboard import DashboardService, dashboard_cache_key
from core.export import ExportedReport, export_dashboard_csv
from core.models import Filters

EXPORT_CACHE_TTL = 300


@st.cache_resource(show_spinner=False)
def _dashboard_service() -> DashboardService:
    """One service (and cache) per Streamlit server process."""

    settings = get_settings()
    configure_logging(settings.log_level)
    return DashboardService(CsvDirectoryStore(settings.data_dir), MemoryCache(), settings)


@st.cache_data(show_spinner=False, ttl=EXPORT_CACHE_TTL)
def _export_report(cache_key: str, _period: str, _filters: Filters) -> ExportedReport:
    """CSV export for one snapshot, reused across reruns with the same ``cache_key``."""

    return export_dashboard_csv(_dashboard_service(), _period, _filters)


def main() -> None:
    """Application entrypoint for the KasFlow dashboard."""

    st.set_page_config(page_title="KasFlow", page_icon="💸", layout="wide")
    inject_css()

    service = _dashboard_service()
    active_page = determine_active_page(link.slug for link in NAV_LINKS if link.enabled)
    render_navbar(active_page)

    try:
        options = service.get_filter_options()
    except Exception as exc:  # noqa: BLE001 - surfaced to the user below
        st.error(f"Could not load the ledger: {exc}")
        return

    period, filters, force_refresh = render_sidebar_filters(options)

    if active_page == "ask":
        render_ask_page(service, options["walletOwners"])
        return

    try:
        with st.spinner("Crunching numbers…"):
            snapshot = service.build_dashboard(period, filters, force_refresh)
    except DashboardError as exc:
        st.error(str(exc))
        return

    if active_page == "planning":
        render_planning_page(snapshot)
    else:
        if force_refresh:
            _export_report.clear()
        render_overview_page(snapshot, _export_report(dashboard_cache_key(period, filters), period, filters))


if __name__ == "__main__":
    main()
