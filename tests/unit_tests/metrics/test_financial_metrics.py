"""Unit tests for project financial metrics."""

import pytest

from services.financial_metrics import (
    calculate_project_metrics,
    change_order_summary,
    format_currency,
    format_percentage,
)


def test_dashboard_scenario():
    """$100k base, $20k change order, $90k costs, $80k invoiced."""
    metrics = calculate_project_metrics(
        100_000,
        [{"additional_contract_value": 20_000}],
        [
            {"category": "material", "cost": 50_000},
            {"category": "subcontractor", "cost": 40_000},
        ],
        [{"amount": 80_000}],
    )
    assert metrics.change_order_value == 20_000
    assert metrics.total_contract_value == 120_000
    assert metrics.total_project_costs == 90_000
    assert metrics.total_invoiced_amount == 80_000
    assert metrics.amount_yet_to_bill == 40_000
    assert metrics.gross_profit == 30_000
    assert metrics.gross_profit_percentage == pytest.approx(25.0)


def test_zero_contract_value_yields_zero_percentage():
    metrics = calculate_project_metrics(0, [], [{"category": "material", "cost": 500}], [])
    assert metrics.total_contract_value == 0
    assert metrics.gross_profit == -500
    assert metrics.gross_profit_percentage == 0


def test_null_change_order_values_count_as_zero():
    metrics = calculate_project_metrics(
        1_000,
        [{"additional_contract_value": None}, {"additional_contract_value": 250}],
        [],
        [],
    )
    assert metrics.change_order_value == 250
    assert metrics.total_contract_value == 1_250


def test_identities_hold():
    metrics = calculate_project_metrics(
        75_000,
        [{"additional_contract_value": 5_000}],
        [{"category": "labor", "st_hours": 100, "st_rate": 60}],
        [{"amount": 10_000}, {"amount": 2_500}],
    )
    assert metrics.gross_profit == metrics.total_contract_value - metrics.total_project_costs
    assert metrics.amount_yet_to_bill == metrics.total_contract_value - metrics.total_invoiced_amount
    assert metrics.total_project_costs == 6_000


def test_results_are_unrounded():
    metrics = calculate_project_metrics(3, [], [{"category": "material", "cost": 1}], [])
    assert metrics.gross_profit_percentage == pytest.approx(200 / 3)


def test_change_order_summary():
    summary = change_order_summary(
        [{"additional_contract_value": 1_000}, {"additional_contract_value": 3_000}]
    )
    assert summary.count == 2
    assert summary.total_additional_value == 4_000
    assert summary.average_value == 2_000


def test_change_order_summary_empty():
    summary = change_order_summary([])
    assert (summary.count, summary.total_additional_value, summary.average_value) == (0, 0, 0)


def test_display_formatting():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(-20) == "-$20.00"
    assert format_currency(None) == "$0.00"
    assert format_percentage(25) == "25.0%"
    assert format_percentage(66.666) == "66.7%"
