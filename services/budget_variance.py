"""Budget versus actual spend per cost category."""

from collections.abc import Mapping
from typing import Any

from services.cost_aggregator import COST_CATEGORIES

STATUS_ON_TRACK = "on_track"
STATUS_WARNING = "warning"
STATUS_OVER_BUDGET = "over_budget"
STATUS_NO_BUDGET = "no_budget"

STATUS_COLORS = {
    STATUS_ON_TRACK: "green",
    STATUS_WARNING: "yellow",
    STATUS_OVER_BUDGET: "red",
    STATUS_NO_BUDGET: "gray",
}

WARNING_PERCENT = 80
OVER_BUDGET_PERCENT = 100


class BudgetVariance:
    """DTO describing spend against one budget ceiling."""

    def __init__(self, actual: float, budget: float, variance: float, percent_used: float, status: str):
        self.actual = actual
        self.budget = budget
        self.variance = variance
        self.percent_used = percent_used
        self.status = status

    @property
    def color(self) -> str:
        return STATUS_COLORS[self.status]


def calculate_variance(actual: float | None, budget: float | None) -> BudgetVariance:
    """
    Compare actual spend with a budget.

    ``variance`` is positive when under budget. With no budget set,
    ``percent_used`` is 0 and any spend is reported as ``no_budget``
    rather than over budget.
    """
    actual = actual or 0
    budget = budget or 0
    percent_used = actual / budget * 100 if budget > 0 else 0

    if budget == 0 and actual != 0:
        status = STATUS_NO_BUDGET
    elif percent_used >= OVER_BUDGET_PERCENT:
        status = STATUS_OVER_BUDGET
    elif percent_used >= WARNING_PERCENT:
        status = STATUS_WARNING
    else:
        status = STATUS_ON_TRACK

    return BudgetVariance(
        actual=actual,
        budget=budget,
        variance=budget - actual,
        percent_used=percent_used,
        status=status,
    )


def _budget_amount(budget_row: Any, category: str) -> float:
    name = f"{category}_budget"
    if budget_row is None:
        return 0
    if isinstance(budget_row, Mapping):
        return budget_row.get(name) or 0
    return getattr(budget_row, name, None) or 0


def total_budget(budget_row: Any) -> float:
    """Sum of every category ceiling."""
    return sum(_budget_amount(budget_row, category) for category in COST_CATEGORIES)


def budget_report(budget_row: Any, totals: Mapping[str, float]) -> tuple[dict[str, BudgetVariance], BudgetVariance]:
    """
    Variance for each cost category plus the project total.

    Args:
        budget_row: Stored budget (ORM object or mapping), or None when unset
        totals: Actual spend per category, as produced by the cost aggregator

    Returns:
        (per-category variances, overall variance)
    """
    lines = {
        category: calculate_variance(totals.get(category, 0), _budget_amount(budget_row, category))
        for category in COST_CATEGORIES
    }
    overall = calculate_variance(
        sum(totals.get(category, 0) for category in COST_CATEGORIES),
        total_budget(budget_row),
    )
    return lines, overall
