"""Page modules for the KasFlow Streamlit application."""

from .ask import render_page as render_ask_page
from .overview import render_page as render_overview_page
from .planning import render_page as render_planning_page

__all__ = [
    "render_ask_page",
    "render_overview_page",
    "render_planning_page",
]
