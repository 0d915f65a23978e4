"""Unit tests for budget variance classification."""

import pytest

from services.budget_variance import budget_report, calculate_variance, total_budget


@pytest.mark.parametrize(
    "actual,budget,status,color",
    [
        (50, 100, "on_track", "green"),
        (79.99, 100, "on_track", "green"),
        (80, 100, "warning", "yellow"),
        (99.99, 100, "warning", "yellow"),
        (100, 100, "over_budget", "red"),
        (150, 100, "over_budget", "red"),
        (10, 0, "no_budget", "gray"),
        (0, 0, "on_track", "green"),
    ],
)
def test_status_thresholds(actual, budget, status, color):
    variance = calculate_variance(actual, budget)
    assert variance.status == status
    assert variance.color == color


def test_variance_sign_convention():
    under = calculate_variance(60, 100)
    over = calculate_variance(130, 100)
    assert under.variance == 40
    assert over.variance == -30
    assert under.percent_used == pytest.approx(60)


def test_zero_budget_does_not_divide():
    variance = calculate_variance(500, 0)
    assert variance.percent_used == 0
    assert variance.variance == -500


def test_budget_report_covers_every_category():
    budget = {"labor_budget": 1000, "material_budget": 500}
    lines, overall = budget_report(budget, {"labor": 900, "material": 100, "equipment": 50})
    assert lines["labor"].status == "warning"
    assert lines["material"].status == "on_track"
    assert lines["equipment"].status == "no_budget"
    assert lines["consumable"].status == "on_track"
    assert overall.budget == 1500
    assert overall.actual == 1050
    assert total_budget(budget) == 1500


def test_budget_report_without_budget():
    lines, overall = budget_report(None, {})
    assert all(line.budget == 0 and line.actual == 0 for line in lines.values())
    assert overall.status == "on_track"
