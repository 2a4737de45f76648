"""Streamlit front end for KasFlow."""

from app.main import main

__all__ = ["main"]
