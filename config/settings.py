"""Centralised configuration handling for KasFlow."""

from __future__ import annotations

from datetime import timedelta, timezone, tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import streamlit as st
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


def _streamlit_section(name: str) -> Mapping[str, Any] | None:
    """Return a mapping from Streamlit secrets for the given section."""

    try:
        if hasattr(st, "secrets") and name in st.secrets:
            section = st.secrets[name]
            if isinstance(section, Mapping):
                return section
            return dict(section)
    except Exception:  # pragma: no cover - accessing secrets may fail in tests
        return None
    return None


class Settings(BaseSettings):
    """Application settings sourced from env vars and Streamlit secrets."""

    data_dir: Path = Path("data")

    input_table: str = "Input"
    scheduled_table: str = "ScheduledTransactions"
    wallet_setup_table: str = "Wallet Setup"
    category_setup_table: str = "Category Setup"
    goals_setup_table: str = "Goals Setup"

    dashboard_cache_ttl: int = 300
    filter_options_cache_ttl: int = 3600
    setup_table_cache_ttl: int = 3600
    volatile_table_cache_ttl: int = 300
    cache_max_payload: int = 95_000

    budget_over_threshold: float = 100.0
    budget_warning_threshold: float = 80.0

    reporting_utc_offset_hours: int = 7
    goal_saving_category: str = "Saving/Investment"

    log_level: str = "INFO"

    openai_api_key: str | None = None
    openai_base_url: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL

    model_config = SettingsConfigDict(env_prefix="KASFLOW_", extra="ignore")

    @property
    def setup_tables(self) -> tuple[str, ...]:
        return (self.wallet_setup_table, self.category_setup_table, self.goals_setup_table)

    @property
    def reporting_timezone(self) -> tzinfo:
        return timezone(timedelta(hours=self.reporting_utc_offset_hours))

    def table_cache_ttl(self, table_name: str) -> int:
        if table_name in self.setup_tables:
            return self.setup_table_cache_ttl
        return self.volatile_table_cache_ttl

    @property
    def openai_client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.openai_api_key:
            kwargs["api_key"] = self.openai_api_key
        if self.openai_base_url:
            kwargs["base_url"] = self.openai_base_url
        return kwargs


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    overrides: dict[str, Any] = {}
    app_section = _streamlit_section("kasflow")
    if app_section:
        overrides.update({key: value for key, value in app_section.items() if key in Settings.model_fields})

    openai_section = _streamlit_section("openai")
    if openai_section:
        overrides.update(
            {
                "openai_api_key": openai_section.get("api_key")
                or openai_section.get("OPENAI_API_KEY"),
                "openai_base_url": openai_section.get("api_base"),
                "openai_model": openai_section.get("model", DEFAULT_OPENAI_MODEL),
            }
        )

    return Settings(**{k: v for k, v in overrides.items() if v is not None})
