"""Synthetic household ledger generator for KasFlow.

Produces the Input, scheduled and setup tables of a two-person Indonesian
household, written as CSV files that :class:`core.store.CsvDirectoryStore`
can read. Amounts are written in local notation (``1.250.000``) so the
numeric normalisation path is exercised end to end.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar

import numpy as np
import pandas as pd

T = TypeVar("T")

INPUT_FIELDS: Tuple[str, ...] = (
    "Date",
    "Transaction Type",
    "Amount",
    "Wallet",
    "Wallet Owner",
    "Expense Purpose",
    "Category",
    "Subcategory",
    "Note",
    "Description",
    "Source",
)

OWNERS: Tuple[str, ...] = ("Budi", "Sari")


@dataclass(frozen=True)
class WalletProfile:
    """A wallet with its declared type and owner."""

    name: str
    wallet_type: str
    owner: str
    source: str


WALLETS: Sequence[WalletProfile] = (
    WalletProfile("BCA Budi", "Cash & Bank", "Budi", "Cash & Bank"),
    WalletProfile("Mandiri Sari", "Cash & Bank", "Sari", "Cash & Bank"),
    WalletProfile("GoPay Sari", "E-Wallet", "Sari", "E-Wallet"),
    WalletProfile("Reksadana Budi", "Investment", "Budi", "Saving/Investment"),
)


@dataclass(frozen=True)
class SpendProfile:
    """A recurring kind of expense with its typical size."""

    category: str
    subcategory: str
    purpose: str
    mean: float
    spread: float
    per_month: Tuple[int, int]
    description: str


SPEND_PROFILES: Sequence[SpendProfile] = (
    SpendProfile("Food", "Groceries", "Family", 350_000, 90_000, (4, 7), "Belanja mingguan"),
    SpendProfile("Food", "Eating Out", "Family", 120_000, 45_000, (3, 8), "Makan di luar"),
    SpendProfile("Transport", "Fuel", "Budi", 150_000, 30_000, (3, 5), "Bensin"),
    SpendProfile("Transport", "Ride Hailing", "Sari", 45_000, 15_000, (4, 10), "Ojek online"),
    SpendProfile("Household", "Electricity", "Family", 650_000, 60_000, (1, 1), "Token listrik"),
    SpendProfile("Personal", "Clothing", "Sari", 300_000, 120_000, (0, 2), "Baju"),
    SpendProfile("Family", "Parents", "Orang Tua", 1_000_000, 0, (1, 1), "Kiriman bulanan"),
)

BUDGETS: Sequence[Tuple[str, str, float, str]] = (
    ("Food", "Groceries", 1_800_000, "Needs"),
    ("Food", "Eating Out", 700_000, "Wants"),
    ("Transport", "Fuel", 600_000, "Needs"),
    ("Transport", "Ride Hailing", 300_000, "Wants"),
    ("Household", "Electricity", 700_000, "Needs"),
    ("Personal", "Clothing", 400_000, "Wants"),
    ("Family", "Parents", 1_000_000, "Needs"),
    ("Saving/Investment", "Dana Darurat", 0, "Savings"),
)

GOALS: Sequence[Tuple[str, str, float, int]] = (
    ("Dana Darurat", "Budi", 30_000_000, 18),
    ("Liburan Bali", "Sari", 12_000_000, 9),
)


def format_rupiah_cell(value: float) -> str:
    """Write an amount the way it is typed into an Indonesian spreadsheet."""

    whole = f"{abs(value):,.0f}".replace(",", ".")
    return f"-{whole}" if value < 0 else whole


def generate_sample_tables(
    end_date: date | None = None,
    months: int = 6,
    *,
    seed: Optional[int] = None,
) -> Dict[str, pd.DataFrame]:
    """Build every table the dashboard reads, keyed by table name.

    ``months`` complete months are generated, plus the current month up to
    ``end_date`` (today by default).
    """

    if months <= 0:
        raise ValueError("months must be a positive integer")

    rng = np.random.default_rng(seed)
    end = end_date or date.today()
    first_month = _add_months(end.replace(day=1), -months)

    records: List[dict] = []

    def append(moment: date, kind: str, amount: float, wallet: WalletProfile, **fields: str) -> None:
        if moment > end:
            return
        records.append(
            {
                "Date": moment.isoformat(),
                "Transaction Type": kind,
                "Amount": format_rupiah_cell(round(amount, -2)),
                "Wallet": wallet.name,
                "Wallet Owner": wallet.owner,
                "Expense Purpose": fields.get("purpose", ""),
                "Category": fields.get("category", ""),
                "Subcategory": fields.get("subcategory", ""),
                "Note": fields.get("note", ""),
                "Description": fields.get("description", ""),
                "Source": fields.get("source", wallet.source),
            }
        )

    bca, mandiri, gopay, reksadana = WALLETS
    anchor = first_month
    while anchor <= end:
        year, month = anchor.year, anchor.month
        days = _month_days(year, month)

        append(_clamp_day(year, month, 25), "Income", rng.normal(15_000_000, 400_000), bca,
               category="Salary", subcategory="Monthly", description="Gaji")
        append(_clamp_day(year, month, 25), "Income", rng.normal(9_000_000, 300_000), mandiri,
               category="Salary", subcategory="Monthly", description="Gaji")

        topup_day = _clamp_day(year, month, 2)
        append(topup_day, "Transfer", 500_000, mandiri, subcategory="transfer-out", description="Top up GoPay")
        append(topup_day, "Transfer", 500_000, gopay, subcategory="transfer-in", description="Top up GoPay")

        for profile in SPEND_PROFILES:
            count = int(rng.integers(profile.per_month[0], profile.per_month[1] + 1))
            for _ in range(count):
                wallet = gopay if profile.subcategory == "Ride Hailing" else _rng_choice((bca, mandiri), rng)
                amount = max(10_000.0, rng.normal(profile.mean, profile.spread))
                append(_rng_choice(days, rng), "Expense", amount, wallet, purpose=profile.purpose,
                       category=profile.category, subcategory=profile.subcategory,
                       description=profile.description)

        append(_clamp_day(year, month, 26), "Income", 2_000_000, reksadana, purpose="Budi",
               category="Saving/Investment", subcategory="Dana Darurat", description="Setoran dana darurat")
        append(_clamp_day(year, month, 27), "Income", 1_000_000, mandiri, purpose="Sari",
               category="Saving/Investment", subcategory="Liburan Bali", description="Tabungan liburan",
               source="Saving/Investment")
        append(_clamp_day(year, month, 10), "Expense", 1_500_000, bca, purpose="Family",
               category="Debt", subcategory="Cicilan Motor", description="Cicilan motor", source="Liabilities")

        anchor = _add_months(anchor, 1)

    input_frame = pd.DataFrame.from_records(records, columns=INPUT_FIELDS)
    input_frame.sort_values("Date", inplace=True, kind="stable")
    input_frame.reset_index(drop=True, inplace=True)

    return {
        "Input": input_frame,
        "ScheduledTransactions": _scheduled_frame(end),
        "Wallet Setup": pd.DataFrame(
            [{"Wallet": w.name, "Wallet Type": w.wallet_type, "Wallet Owner": w.owner} for w in WALLETS]
        ),
        "Category Setup": pd.DataFrame(
            [
                {
                    "Category": category,
                    "Subcategory": subcategory,
                    "Budget Subcategory": format_rupiah_cell(budget) if budget else "",
                    "Ratios": ratio,
                }
                for category, subcategory, budget, ratio in BUDGETS
            ]
        ),
        "Goals Setup": pd.DataFrame(
            [
                {
                    "Goals": name,
                    "Goal Owner": owner,
                    "Nominal Needed": format_rupiah_cell(target),
                    "Deadline": _add_months(first_month, horizon).isoformat(),
                }
                for name, owner, target, horizon in GOALS
            ]
        ),
    }


def _scheduled_frame(end: date) -> pd.DataFrame:
    next_month = _add_months(end.replace(day=1), 1)
    rows = [
        ("Cicilan motor", "Debt", "1.500.000", "BCA Budi", "Budi", "Active", _clamp_day(end.year, end.month, 28)),
        ("Internet", "Household", "385.000", "Mandiri Sari", "Sari", "Active", next_month + timedelta(days=4)),
        ("Asuransi", "Household", "750.000", "BCA Budi", "Budi", "Paused", next_month + timedelta(days=9)),
    ]
    return pd.DataFrame(
        [
            {
                "Description": description,
                "Category": category,
                "Amount": amount,
                "Wallet": wallet,
                "Wallet Owner": owner,
                "Status": status,
                "NextDueDate": due.isoformat(),
            }
            for description, category, amount, wallet, owner, status, due in rows
        ]
    )


def write_sample_tables(directory: str | Path, *, seed: Optional[int] = None, **kwargs) -> Dict[str, Path]:
    """Generate the sample tables and write ``<directory>/<table>.csv`` files.

    Additional keyword arguments are forwarded to :func:`generate_sample_tables`.
    """

    target = Path(directory)
    target.mkdir(parents=True, exist_ok=True)
    written: Dict[str, Path] = {}
    for name, frame in generate_sample_tables(seed=seed, **kwargs).items():
        path = target / f"{name}.csv"
        frame.to_csv(path, index=False)
        written[name] = path
    return written


def _add_months(anchor: date, months: int) -> date:
    month = anchor.month - 1 + months
    year = anchor.year + month // 12
    month = month % 12 + 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _clamp_day(year: int, month: int, day: int) -> date:
    _, max_day = calendar.monthrange(year, month)
    return date(year, month, max(1, min(day, max_day)))


def _month_days(year: int, month: int) -> List[date]:
    _, max_day = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, max_day + 1)]


def _rng_choice(options: Sequence[T], rng: np.random.Generator) -> T:
    if not options:
        raise ValueError("Cannot choose from an empty sequence")
    return options[int(rng.integers(0, len(options)))]
