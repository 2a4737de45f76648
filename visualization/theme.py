"""Shared Plotly theme tokens for KasFlow visualizations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeTokens:
    label_color: str = "#475569"
    label_font: str = "Inter"
    label_size: int = 12
    brand_teal: str = "#0F766E"
    brand_teal_soft: str = "rgba(15, 118, 110, 0.14)"
    income_green: str = "#16A34A"
    expense_red: str = "#DC2626"
    warning_amber: str = "#F59E0B"
    neutral_grey: str = "#94A3B8"
    neutral_white: str = "#FFFFFF"
    neutral_background: str = "rgba(148, 163, 184, 0.25)"
    node_palette: tuple[str, ...] = (
        "#0F766E",
        "#0EA5E9",
        "#6366F1",
        "#F97316",
        "#22C55E",
        "#A855F7",
        "#EAB308",
        "#EF4444",
    )

    def budget_color(self, status: str) -> str:
        if status == "Over":
            return self.expense_red
        if status == "Warning":
            return self.warning_amber
        return self.income_green


_TOKENS = ThemeTokens()


def theme_tokens() -> ThemeTokens:
    """Return the shared (frozen) visualization tokens."""

    return _TOKENS
