"""Goal pacing and status, plus budget usage rows."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from analytics.budget import calculate_budget_status, format_budget_row, parse_budget_setup
from analytics.goals import (
    GOAL_STATUSES,
    GoalPacing,
    calculate_goals_status,
    classify_goal,
    contribution_start,
    goal_risk_score,
)
from core.periods import resolve_period
from core.projection import select_transactions

TODAY = date(2024, 3, 20)


@pytest.fixture()
def march(ledger):
    return select_transactions(ledger, None, resolve_period("current_month", today=TODAY))


@pytest.mark.parametrize(
    ("total", "collected", "elapsed", "passed", "expected"),
    [
        (0, 0, 0.5, False, "On Track"),
        (0, 10, 0.5, False, "Completed"),
        (1000, 1100, 0.1, False, "Overfunded"),
        (1000, 1000, 0.1, False, "Completed"),
        (1000, 960, 1.0, True, "Completed"),
        (1000, 850, 1.0, True, "Overdue"),
        (1000, 100, 1.0, True, "Failed"),
        (1000, 0, 0.3, False, "No Activity"),
        (1000, 0, 0.2, False, "At Risk"),
        (1000, 600, 0.5, False, "Ahead"),
        (1000, 500, 0.5, False, "On Track"),
        (1000, 400, 0.5, False, "Slightly Behind"),
        (1000, 300, 0.5, False, "At Risk"),
        (1000, 100, 0.5, False, "Off Track"),
    ],
)
def test_classify_goal_branches(total, collected, elapsed, passed, expected):
    assert classify_goal(total, collected, elapsed, passed) == expected


def test_classify_goal_never_worsens_as_collection_grows():
    ranks = [
        GOAL_STATUSES.index(classify_goal(1000, collected, 0.5, False))
        for collected in range(10, 1300, 10)
    ]

    assert ranks == sorted(ranks)


def test_risk_score_blends_deficit_time_and_pace():
    behind = GoalPacing(
        total_needed=1000,
        collected=0,
        start=datetime(2024, 1, 1),
        deadline=datetime(2024, 1, 11),
        today=datetime(2024, 1, 6),
    )
    done = GoalPacing(
        total_needed=1000,
        collected=1000,
        start=datetime(2024, 1, 1),
        deadline=datetime(2024, 1, 11),
        today=datetime(2024, 1, 6),
    )

    assert behind.elapsed_ratio == pytest.approx(0.5)
    assert behind.pace_needed == pytest.approx(200)
    assert goal_risk_score(behind) == 90
    assert goal_risk_score(done) == 10
    assert done.projected_finish == datetime(2024, 1, 6)


def test_pacing_without_deadline_has_no_elapsed_ratio():
    pacing = GoalPacing(total_needed=500, collected=0, start=datetime(2024, 1, 1), deadline=None, today=datetime(2024, 2, 1))

    assert pacing.elapsed_ratio == 0.0
    assert pacing.days_left is None
    assert pacing.deadline_passed is False
    assert pacing.projected_finish is None


def test_contribution_start_uses_positive_goal_rows_only(ledger):
    assert contribution_start(ledger, "Dana Darurat", "Sari") == datetime(2024, 3, 8)
    assert contribution_start(ledger, "Dana Darurat", "Budi") is None
    assert contribution_start(ledger, "Liburan", "Budi") is None


def test_goals_status_rows(goals_setup, march, ledger):
    rows = calculate_goals_status(goals_setup, march, ledger, today=TODAY)

    emergency, holiday = rows
    assert emergency["GoalName"] == "Dana Darurat"
    assert emergency["Collected"] == pytest.approx(3_000_000)
    assert emergency["ProgressPercentage"] == 25.0
    assert emergency["StartDate"] == "8 Mar 2024"
    assert emergency["Deadline"] == "31 Dec 2024"
    assert emergency["DaysLeft"] == 286
    assert emergency["ElapsedRatio"] == 4.0
    assert emergency["Status"] == "Ahead"
    assert 0 <= emergency["RiskScore"] <= 100

    assert holiday["Deadline"] == "N/A"
    assert holiday["DaysLeft"] is None
    assert holiday["StartDate"] == "20 Mar 2024"
    assert holiday["ProgressPercentage"] == 0.0
    assert holiday["ProjectedFinish"] == ""
    assert holiday["Status"] == "On Track"


def test_goals_status_without_setup_is_empty(march, ledger):
    assert calculate_goals_status(None, march, ledger, today=TODAY) == []


def test_parse_budget_setup_skips_unbudgeted_rows(category_setup):
    tree = parse_budget_setup(category_setup)

    assert list(tree) == ["Food", "Transport"]
    assert tree["Food"].budget == pytest.approx(2_500_000)
    assert list(tree["Food"].subcategories) == ["Groceries", "Eating Out"]


@pytest.mark.parametrize(
    ("expense", "status"),
    [(800, "On Track"), (800.01, "Warning"), (801, "Warning"), (1000, "Warning"), (1000.01, "Over"), (1001, "Over")],
)
def test_budget_thresholds_are_exclusive(expense, status):
    row = format_budget_row("Food", "All", 1000, expense)

    assert row["Status"] == status
    assert row["RemainingBudget"] == 1000 - expense


def test_budget_status_uses_unrounded_usage():
    over = format_budget_row("Food", "All", 1000, 1000.01)
    warning = format_budget_row("Food", "All", 1000, 800.01)

    assert (over["UsagePercentage"], over["Status"]) == (100.0, "Over")
    assert (warning["UsagePercentage"], warning["Status"]) == (80.0, "Warning")


def test_budget_status_rows(category_setup, march):
    rows = calculate_budget_status(category_setup, march)

    assert [(row["Category"], row["Subcategory"]) for row in rows] == [
        ("Food", "All"),
        ("Food", "Groceries"),
        ("Food", "Eating Out"),
        ("Transport", "All"),
        ("Transport", "Ride Hailing"),
    ]
    food, groceries, eating_out, transport, _ = rows
    assert food["UsagePercentage"] == 60.0
    assert groceries["ActualExpense"] == pytest.approx(1_500_000)
    assert eating_out["Status"] == "On Track"
    assert transport["Status"] == "Over"
    assert transport["UsagePercentage"] == 125.0


def test_budget_thresholds_are_configurable(category_setup, march):
    rows = calculate_budget_status(category_setup, march, over_threshold=150, warning_threshold=50)

    assert rows[0]["Status"] == "Warning"
    assert rows[3]["Status"] == "Warning"
