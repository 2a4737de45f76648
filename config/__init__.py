"""Application configuration utilities."""

from .keywords import DEFAULT_RULES, KeywordRules, WalletTypeRule
from .settings import DEFAULT_OPENAI_MODEL, Settings, get_settings

__all__ = [
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_RULES",
    "KeywordRules",
    "Settings",
    "WalletTypeRule",
    "get_settings",
]
