"""Wallet balances, liquidity and point-in-time net worth."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable

import pandas as pd

from config.keywords import DEFAULT_RULES, KeywordRules
from core.logging_setup import get_logger
from core.models import NetWorthSnapshot, WalletRow, new_row_id
from core.projection import clamp_bound
from core.tables import RawTable, TableDecoder

__all__ = [
    "infer_wallet_type",
    "wallet_metadata",
    "calculate_wallet_status",
    "compute_liquid_assets",
    "compute_liquid_assets_snapshot",
    "calculate_net_worth_snapshot",
]

_logger = get_logger("kasflow.analytics.wallets")


def infer_wallet_type(wallet_name: str, sources: Iterable[str], rules: KeywordRules = DEFAULT_RULES) -> str:
    """Guess a wallet type from its name, then from the Sources seen on it.

    The first matching rule wins; ``""`` when nothing matches.
    """

    observed = list(sources)
    for rule in rules.wallet_type_rules:
        if rule.matches(wallet_name, observed):
            return rule.wallet_type
    return ""


def wallet_metadata(wallet_setup: RawTable | None) -> dict[str, tuple[str, str]]:
    """Map wallet name to ``(type, owner)`` declared in the wallet setup table."""

    if not wallet_setup:
        return {}
    decoder = TableDecoder(wallet_setup)
    metadata: dict[str, tuple[str, str]] = {}
    for row in decoder.rows:
        name = decoder.text(row, "Wallet")
        if name:
            metadata[name] = (decoder.text(row, "Wallet Type"), decoder.text(row, "Wallet Owner"))
    return metadata


def _with_wallet(ledger: pd.DataFrame) -> pd.DataFrame:
    return ledger[ledger["Wallet"].str.strip() != ""]


def calculate_wallet_status(
    ledger: pd.DataFrame,
    wallet_setup: RawTable | None,
    rules: KeywordRules = DEFAULT_RULES,
) -> list[WalletRow]:
    """Balance of every wallet over the full ledger history.

    ``ledger`` must hold every Input row (undated rows included), not a
    period slice. Type and owner come from the setup table when declared,
    otherwise the type is inferred.
    """

    rows = _with_wallet(ledger)
    if rows.empty:
        return []

    balances = rows.groupby("Wallet", sort=False)["Amount"].sum()
    stripped = rows["Source"].str.strip()
    sources = (
        rows.assign(Source=stripped)[stripped != ""]
        .groupby("Wallet", sort=False)["Source"]
        .agg(lambda values: list(dict.fromkeys(values)))
    )
    metadata = wallet_metadata(wallet_setup)

    status: list[WalletRow] = []
    for wallet, balance in balances.items():
        wallet_sources = list(sources.get(wallet, []))
        declared_type, owner = metadata.get(str(wallet), ("", ""))
        wallet_type = declared_type or infer_wallet_type(str(wallet), wallet_sources, rules)
        status.append(
            WalletRow(
                UniqueID=new_row_id(),
                Wallet=str(wallet),
                Type=wallet_type,
                Owner=owner,
                Balance=float(balance),
                Sources=wallet_sources,
            )
        )
    return status


def compute_liquid_assets(wallets: Iterable[WalletRow], rules: KeywordRules = DEFAULT_RULES) -> float:
    """Sum balances of wallets whose type reads as cash, bank or e-wallet."""

    return float(sum(wallet["Balance"] for wallet in wallets if rules.is_liquid_wallet_type(wallet["Type"])))


def _dated_until(ledger: pd.DataFrame, cutoff: datetime) -> pd.DataFrame:
    dates = ledger["Date"]
    return ledger[dates.notna() & (dates <= clamp_bound(cutoff))]


def compute_liquid_assets_snapshot(
    ledger: pd.DataFrame,
    cutoff: datetime | None,
    rules: KeywordRules = DEFAULT_RULES,
) -> float:
    """Liquid balance as of ``cutoff``, judged from Sources and wallet names."""

    if ledger.empty or cutoff is None:
        return 0.0
    rows = _with_wallet(_dated_until(ledger, cutoff))
    if rows.empty:
        return 0.0

    name_pattern = re.compile(rules.liquid_wallet_name_pattern, re.IGNORECASE)
    liquid_wallets = {
        wallet
        for wallet, group in rows.groupby("Wallet", sort=False)
        if group["Source"].map(rules.is_liquid_source).any() or name_pattern.search(str(wallet))
    }
    return float(rows.loc[rows["Wallet"].isin(liquid_wallets), "Amount"].sum())


def calculate_net_worth_snapshot(
    ledger: pd.DataFrame,
    cutoff: datetime | None,
    owner: str | None = None,
    rules: KeywordRules = DEFAULT_RULES,
) -> NetWorthSnapshot:
    """Assets, liabilities and net worth from dated rows up to ``cutoff``.

    Assets are the summed wallet balances; liabilities are the magnitudes of
    rows whose Source is a liability account.
    """

    if ledger.empty or cutoff is None:
        return NetWorthSnapshot(assets=0.0, liabilities=0.0, netWorth=0.0)

    rows = _dated_until(ledger, cutoff)
    if owner:
        rows = rows[rows["Owner"] == owner]

    assets = float(_with_wallet(rows)["Amount"].sum())
    is_liability = rows["Source"].map(rules.is_liability_source).astype(bool)
    liabilities = float(rows.loc[is_liability, "Amount"].abs().sum())
    _logger.debug("Net worth at %s (owner=%s): %d rows", cutoff, owner or "*", len(rows))
    return NetWorthSnapshot(assets=assets, liabilities=liabilities, netWorth=assets - liabilities)
