"""Savings goal progress, pacing, status and risk."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Final

import pandas as pd

from core.amounts import normalize_number
from core.formatting import format_display_date, round_half_up
from core.models import GoalRow, new_row_id
from core.periods import coerce_datetime, start_of_day
from core.tables import RawTable, TableDecoder

__all__ = [
    "GOAL_STATUSES",
    "GoalPacing",
    "classify_goal",
    "goal_risk_score",
    "contribution_start",
    "calculate_goals_status",
]

# Progress ranking, worst to best. Deadline and inactivity states sit outside it.
GOAL_STATUSES: Final[tuple[str, ...]] = (
    "Off Track",
    "At Risk",
    "Slightly Behind",
    "On Track",
    "Ahead",
    "Completed",
    "Overfunded",
)

_DAY_SECONDS: Final[float] = 86_400.0


@dataclass(frozen=True)
class GoalPacing:
    """Derived pacing figures for one goal as of a reference day."""

    total_needed: float
    collected: float
    start: datetime
    deadline: datetime | None
    today: datetime

    @property
    def remaining(self) -> float:
        return max(0.0, self.total_needed - self.collected)

    @property
    def elapsed_seconds(self) -> float:
        return max(0.0, (self.today - self.start).total_seconds())

    @property
    def elapsed_ratio(self) -> float:
        if self.deadline is None:
            return 0.0
        span = (self.deadline - self.start).total_seconds()
        if span <= 0:
            return 0.0
        return min(1.0, max(0.0, self.elapsed_seconds / span))

    @property
    def target_cumulative(self) -> float:
        return self.total_needed * self.elapsed_ratio

    @property
    def gap(self) -> float:
        return self.collected - self.target_cumulative

    @property
    def gap_pct(self) -> float:
        return self.gap / self.total_needed if self.total_needed > 0 else 0.0

    @property
    def days_left(self) -> int | None:
        if self.deadline is None:
            return None
        return int(round_half_up((self.deadline - self.today).total_seconds() / _DAY_SECONDS))

    @property
    def elapsed_days(self) -> int:
        return max(1, int(round_half_up(self.elapsed_seconds / _DAY_SECONDS)))

    @property
    def pace_needed(self) -> float:
        days_left = self.days_left
        if days_left is not None and days_left > 0:
            return self.remaining / days_left
        return self.remaining

    @property
    def actual_pace(self) -> float:
        return self.collected / self.elapsed_days if self.collected > 0 else 0.0

    @property
    def pct_achieved(self) -> float:
        if self.total_needed > 0:
            return self.collected / self.total_needed
        return 1.0 if self.collected > 0 else 0.0

    @property
    def deadline_passed(self) -> bool:
        return self.deadline is not None and self.today > self.deadline

    @property
    def projected_finish(self) -> datetime | None:
        if self.actual_pace > 0 and self.remaining > 0:
            return self.today + timedelta(days=self.remaining / self.actual_pace)
        if self.collected >= self.total_needed:
            return self.today
        return None


def classify_goal(total_needed: float, collected: float, elapsed_ratio: float, deadline_passed: bool) -> str:
    """Pick the first status whose condition holds.

    ``gap_pct`` is the collected amount's lead over the straight-line target
    at ``elapsed_ratio``, as a fraction of ``total_needed``.
    """

    if total_needed == 0:
        return "Completed" if collected > 0 else "On Track"

    pct_achieved = collected / total_needed
    if pct_achieved >= 1.1:
        return "Overfunded"
    if pct_achieved >= 1.0:
        return "Completed"
    if deadline_passed:
        if pct_achieved >= 0.95:
            return "Completed"
        return "Overdue" if pct_achieved >= 0.8 else "Failed"
    if collected == 0 and elapsed_ratio > 0.25:
        return "No Activity"

    gap_pct = (collected - total_needed * elapsed_ratio) / total_needed
    if gap_pct >= 0.05:
        return "Ahead"
    if gap_pct > -0.05:
        return "On Track"
    if gap_pct > -0.15:
        return "Slightly Behind"
    if gap_pct > -0.3:
        return "At Risk"
    return "Off Track"


def goal_risk_score(pacing: GoalPacing) -> int:
    """0-100 blend of funding deficit, time left and pace shortfall."""

    if pacing.total_needed <= 0:
        return 0
    deficit = 1 - pacing.pct_achieved
    time_buffer = 1 - pacing.elapsed_ratio
    pace_needed = pacing.pace_needed
    pace_ratio = pace_needed / (pacing.actual_pace or pace_needed) if pace_needed > 0 else 0.0
    score = 60 * deficit + 20 * time_buffer + 20 * pace_ratio
    return int(min(100, max(0, round_half_up(score))))


def contribution_start(
    ledger: pd.DataFrame,
    goal_name: str,
    owner: str,
    *,
    saving_category: str = "Saving/Investment",
) -> datetime | None:
    """Earliest dated positive contribution to a goal over the whole history."""

    if ledger.empty:
        return None
    mask = (
        (ledger["Category"] == saving_category)
        & (ledger["Subcategory"] == goal_name)
        & (ledger["Purpose"] == owner)
        & (ledger["Amount"] > 0)
        & ledger["Date"].notna()
    )
    if not mask.any():
        return None
    return start_of_day(ledger.loc[mask, "Date"].min())


def _collected(transactions: pd.DataFrame, goal_name: str, owner: str, saving_category: str) -> float:
    if transactions.empty:
        return 0.0
    mask = (
        (transactions["Purpose"] == owner)
        & (transactions["Category"] == saving_category)
        & (transactions["Subcategory"] == goal_name)
        & (transactions["Amount"] > 0)
    )
    return float(transactions.loc[mask, "Amount"].sum())


def _today(today: date | None) -> datetime:
    if today is None:
        today = pd.Timestamp.today().date()
    return start_of_day(today)


def calculate_goals_status(
    goals_setup: RawTable | None,
    transactions: pd.DataFrame,
    ledger: pd.DataFrame,
    *,
    saving_category: str = "Saving/Investment",
    today: date | None = None,
    tz: tzinfo | None = None,
) -> list[GoalRow]:
    """Report every configured goal against its contributions.

    ``transactions`` is the filtered window and decides the collected amount.
    ``ledger`` is the unfiltered history and decides when saving started.
    """

    if not goals_setup:
        return []
    decoder = TableDecoder(goals_setup)
    reference_day = _today(today)

    rows: list[GoalRow] = []
    for row in decoder.rows:
        goal_name = decoder.text(row, "Goals")
        if not goal_name:
            continue
        owner = decoder.text(row, "Goal Owner")
        total_needed = normalize_number(decoder.cell(row, "Nominal Needed"))
        deadline = coerce_datetime(decoder.cell(row, "Deadline"), tz)
        if deadline is not None:
            deadline = start_of_day(deadline)

        start = contribution_start(ledger, goal_name, owner, saving_category=saving_category) or reference_day
        pacing = GoalPacing(
            total_needed=total_needed,
            collected=_collected(transactions, goal_name, owner, saving_category),
            start=start,
            deadline=deadline,
            today=reference_day,
        )

        if total_needed > 0:
            progress = round(pacing.pct_achieved * 100, 1)
        else:
            progress = 100.0 if pacing.collected > 0 else 0.0

        rows.append(
            GoalRow(
                UniqueID=new_row_id(),
                GoalName=goal_name,
                Deadline=format_display_date(deadline) if deadline is not None else "N/A",
                StartDate=format_display_date(start),
                ProgressPercentage=progress,
                RemainingAmount=pacing.remaining,
                Collected=pacing.collected,
                TotalNeeded=total_needed,
                TargetCumulative=round(pacing.target_cumulative, 2),
                GapAmount=round(pacing.gap, 2),
                GapPct=round(pacing.gap_pct * 100, 2),
                ElapsedRatio=round(pacing.elapsed_ratio * 100, 1),
                PaceNeededPerDay=round(pacing.pace_needed, 2),
                ActualPacePerDay=round(pacing.actual_pace, 2),
                DaysLeft=pacing.days_left,
                ProjectedFinish=format_display_date(pacing.projected_finish),
                RiskScore=goal_risk_score(pacing),
                Status=classify_goal(total_needed, pacing.collected, pacing.elapsed_ratio, pacing.deadline_passed),
            )
        )
    return rows
