"""Shared data model definitions for the KasFlow dashboard."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any, Mapping, TypedDict

__all__ = [
    "PeriodWindow",
    "Filters",
    "KpiSummary",
    "WalletRow",
    "NetWorthSnapshot",
    "GoalRow",
    "BudgetRow",
    "NetFlowRow",
    "RatioRow",
    "LiabilityRow",
    "SankeyEdge",
    "ExpenseNode",
    "ExpenseTree",
    "MajorSpent",
    "BigChange",
    "MovingAverage",
    "FinancialInsights",
    "FilterOptions",
    "DashboardSnapshot",
    "TRANSACTION_COLUMNS",
    "new_row_id",
]

TRANSACTION_COLUMNS: tuple[str, ...] = (
    "Date",
    "Type",
    "Amount",
    "Wallet",
    "Owner",
    "Purpose",
    "Category",
    "Subcategory",
    "Note",
    "Description",
    "Source",
)


@dataclass(frozen=True)
class PeriodWindow:
    """Inclusive ``[start, end]`` range used to select transactions."""

    start: datetime
    end: datetime

    @property
    def is_degenerate(self) -> bool:
        """True when the window carries no comparable range (``all``/``custom`` previous)."""

        return self.start == self.end

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


_CAMEL_KEYS = {
    "walletOwner": "wallet_owner",
    "expensePurpose": "expense_purpose",
    "startDate": "start_date",
    "endDate": "end_date",
}


@dataclass(frozen=True)
class Filters:
    """Optional predicates over projected transactions; ``None`` means unconstrained."""

    wallet: str | None = None
    wallet_owner: str | None = None
    expense_purpose: str | None = None
    category: str | None = None
    subcategory: str | None = None
    note: str | None = None
    description: str | None = None
    start_date: str | None = None
    end_date: str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "Filters":
        """Build filters from UI-style keys, accepting camelCase or snake_case."""

        if not raw:
            return cls()
        known = {field.name for field in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in raw.items():
            name = _CAMEL_KEYS.get(key, key)
            if name in known and value not in (None, ""):
                values[name] = str(value) if not isinstance(value, str) else value
        return cls(**values)

    def as_dict(self) -> dict[str, str]:
        """Return only the active predicates, in field order."""

        return {key: value for key, value in asdict(self).items() if value}

    @property
    def is_empty(self) -> bool:
        return not self.as_dict()


class KpiSummary(TypedDict):
    income: float
    expense: float
    net: float
    prev_income: float
    prev_expense: float
    prev_net: float
    saving: float
    prev_saving: float
    netWorth: float
    prev_netWorth: float
    liquidAssets: float
    isFiltered: bool


class WalletRow(TypedDict):
    UniqueID: str
    Wallet: str
    Type: str
    Owner: str
    Balance: float
    Sources: list[str]


class NetWorthSnapshot(TypedDict):
    assets: float
    liabilities: float
    netWorth: float


class GoalRow(TypedDict):
    UniqueID: str
    GoalName: str
    Deadline: str
    StartDate: str
    ProgressPercentage: float
    RemainingAmount: float
    Collected: float
    TotalNeeded: float
    TargetCumulative: float
    GapAmount: float
    GapPct: float
    ElapsedRatio: float
    PaceNeededPerDay: float
    ActualPacePerDay: float
    DaysLeft: int | None
    ProjectedFinish: str
    RiskScore: int
    Status: str


class BudgetRow(TypedDict):
    UniqueID: str
    Category: str
    Subcategory: str
    BudgetAmount: float
    ActualExpense: float
    RemainingBudget: float
    UsagePercentage: float
    Status: str


class NetFlowRow(TypedDict):
    UniqueID: str
    PeriodLabel: str
    Income: float
    Expense: float
    NetFlowAmount: float


class RatioRow(TypedDict):
    RatioType: str
    TotalExpense: float
    BySource: dict[str, float]


class LiabilityRow(TypedDict):
    UniqueID: str
    Type: str
    Name: str
    Amount: float
    Wallet: str
    Owner: str
    DisplayDate: str
    DueDate: str
    RawDueDate: str
    isOverdue: bool


class SankeyEdge(TypedDict):
    From: str
    To: str
    Amount: float


class ExpenseNode(TypedDict, total=False):
    name: str
    value: float
    prev_value: float
    category: str
    children: list["ExpenseNode"]


class ExpenseTree(TypedDict):
    total: float
    hierarchical: list[ExpenseNode]
    byCategory: list[ExpenseNode]
    bySubcategory: list[ExpenseNode]


class MajorSpent(TypedDict):
    name: str
    value: float
    pct: float


class BigChange(TypedDict):
    name: str
    type: str
    pct: float | None


class MovingAverage(TypedDict):
    current: float
    previous: float
    changePct: float | None


class FinancialInsights(TypedDict, total=False):
    majorSpent: MajorSpent | None
    bigChange: BigChange | None
    movingAverage: MovingAverage


class FilterOptions(TypedDict):
    wallets: list[str]
    walletOwners: list[str]
    expensePurposes: list[str]
    categories: list[str]
    subcategories: list[str]
    notes: list[str]


class DashboardSnapshot(TypedDict):
    kpiSummary: KpiSummary
    goalsStatus: list[GoalRow]
    netFlow: list[NetFlowRow]
    budgetStatus: list[BudgetRow]
    liabilitiesUpcoming: list[LiabilityRow]
    ratios: list[RatioRow]
    sankeyData: list[SankeyEdge]
    totalSaving: float
    expenseTreeMap: ExpenseTree
    walletStatus: list[WalletRow]
    liquidAssets: float
    financialInsights: FinancialInsights
    diagnostics: dict[str, str]


def new_row_id() -> str:
    """Opaque identifier for one output row; unique within a snapshot."""

    return uuid.uuid4().hex
