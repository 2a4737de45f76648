"""Keyword lists and ordered heuristics used by the aggregation reducers.

The lists are plain data so callers and tests can swap in their own
:class:`KeywordRules` instance instead of patching module globals.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Literal

__all__ = [
    "WalletTypeRule",
    "KeywordRules",
    "DEFAULT_RULES",
    "CASH_AND_BANK",
    "E_WALLET",
]

CASH_AND_BANK = "Cash & Bank"
E_WALLET = "E-Wallet"

DISGUISED_SAVING_TERMS: tuple[str, ...] = (
    "tabungan",
    "menabung",
    "saving",
    "savings?",
    "autosave",
    "investment",
    "investasi",
    "deposito?",
    "reksadana",
    "mutualfund",
    "saham",
    "stock",
    "equity",
    "obligasi",
    "bond",
    "pensiun",
    "retirement",
    "emergencyfund",
    "aset",
    "asset",
    "capital",
)


@dataclass(frozen=True)
class WalletTypeRule:
    """One step of the wallet type inference cascade.

    ``target`` selects what the pattern is matched against: the lower-cased
    wallet name, or each observed ``Source`` value of the wallet.
    """

    target: Literal["name", "source"]
    pattern: re.Pattern[str]
    wallet_type: str

    def matches(self, wallet_name: str, sources: Iterable[str]) -> bool:
        if self.target == "name":
            return bool(self.pattern.search(str(wallet_name).lower()))
        return any(self.pattern.search(str(source).strip().lower()) for source in sources)


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern[str]:
    return re.compile("|".join(re.escape(keyword) for keyword in keywords))


LIQUID_SOURCE_KEYWORDS: tuple[str, ...] = (
    "cash & bank",
    "cash and bank",
    "cash",
    "bank",
    "e-wallet",
    "ewallet",
    "digital wallet",
    "gopay",
    "ovo",
)

DEFAULT_WALLET_TYPE_RULES: tuple[WalletTypeRule, ...] = (
    WalletTypeRule("name", re.compile(r"bca|mandiri|bni|bri|cimb|dbs|uob|ocbc|bank|rekening"), CASH_AND_BANK),
    WalletTypeRule("name", re.compile(r"gopay|ovo|dana|shopeepay|linkaja|ewallet|e-wallet"), E_WALLET),
    WalletTypeRule("source", _keyword_pattern(LIQUID_SOURCE_KEYWORDS), CASH_AND_BANK),
    WalletTypeRule("source", _keyword_pattern(("e-wallet", "ewallet")), E_WALLET),
)


@dataclass(frozen=True)
class KeywordRules:
    """Configurable keyword data consulted by the reducers."""

    disguised_saving_terms: tuple[str, ...] = DISGUISED_SAVING_TERMS
    saving_source_keys: frozenset[str] = frozenset(
        {"saving/investment", "other asset", "investment", "otherasset"}
    )
    # Configured alongside the saving keys but not consulted by any reducer.
    disguised_saving_source_keys: frozenset[str] = frozenset(
        {"saving/investment", "other asset", "cash and bank", "cash & bank"}
    )
    liability_sources: frozenset[str] = frozenset({"liabilities", "liability"})
    liability_keywords: tuple[str, ...] = (
        "liability",
        "liabilities",
        "debt",
        "loan",
        "credit",
        "installment",
        "repayment",
        "mortgage",
        "hutang",
        "utang",
        "pinjaman",
        "cicilan",
        "kredit",
        "angsuran",
    )
    liquid_source_keywords: tuple[str, ...] = LIQUID_SOURCE_KEYWORDS
    liquid_wallet_types: tuple[str, ...] = ("cash", "bank", "e-wallet")
    liquid_wallet_name_pattern: str = r"bca|bank|gopay|ovo"
    wallet_type_rules: tuple[WalletTypeRule, ...] = field(default=DEFAULT_WALLET_TYPE_RULES)

    @property
    def disguised_saving_pattern(self) -> re.Pattern[str]:
        return _compiled_saving_pattern(self.disguised_saving_terms)

    def is_disguised_saving_label(self, value: object) -> bool:
        text = "" if value is None else str(value).strip()
        return bool(self.disguised_saving_pattern.search(text))

    def has_liability_keyword(self, value: object) -> bool:
        if value is None or value == "":
            return False
        text = str(value).lower()
        return any(keyword in text for keyword in self.liability_keywords)

    def is_liability_source(self, value: object) -> bool:
        return _norm(value) in self.liability_sources

    def is_liquid_source(self, value: object) -> bool:
        text = _norm(value)
        return any(keyword in text for keyword in self.liquid_source_keywords)

    def is_liquid_wallet_type(self, wallet_type: object) -> bool:
        text = _norm(wallet_type)
        return any(keyword in text for keyword in self.liquid_wallet_types)


@lru_cache(maxsize=16)
def _compiled_saving_pattern(terms: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile(
        r"(^|[^a-z])(" + "|".join(terms) + r")([^a-z]|$)",
        re.IGNORECASE,
    )


def _norm(value: object) -> str:
    return ("" if value is None else str(value)).strip().lower()


DEFAULT_RULES = KeywordRules()
