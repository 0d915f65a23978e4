"""Project-level contract, cost, billing and profit figures."""

from collections.abc import Iterable, Mapping
from typing import Any

from services.cost_aggregator import aggregate_costs


class ProjectMetrics:
    """DTO of the financial figures shown on the project dashboard."""

    def __init__(
        self,
        base_contract_value: float,
        change_order_value: float,
        total_contract_value: float,
        total_project_costs: float,
        total_invoiced_amount: float,
        amount_yet_to_bill: float,
        gross_profit: float,
        gross_profit_percentage: float,
    ):
        self.base_contract_value = base_contract_value
        self.change_order_value = change_order_value
        self.total_contract_value = total_contract_value
        self.total_project_costs = total_project_costs
        self.total_invoiced_amount = total_invoiced_amount
        self.amount_yet_to_bill = amount_yet_to_bill
        self.gross_profit = gross_profit
        self.gross_profit_percentage = gross_profit_percentage


class ChangeOrderTotals:
    """DTO of count, sum and mean of change order values."""

    def __init__(self, count: int, total_additional_value: float, average_value: float):
        self.count = count
        self.total_additional_value = total_additional_value
        self.average_value = average_value


def _value(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _change_order_values(change_orders: Iterable[Any]) -> list[float]:
    return [_value(co, "additional_contract_value") or 0 for co in change_orders]


def calculate_project_metrics(
    base_contract_value: float | None,
    change_orders: Iterable[Any],
    costs: Iterable[Any],
    invoices: Iterable[Any],
) -> ProjectMetrics:
    """
    Compute the financial figures for one project.

    Costs and invoices are taken as given; callers scope them to a change
    order beforehand when needed. Results are unrounded.
    """
    base = base_contract_value or 0
    change_order_value = sum(_change_order_values(change_orders))
    total_contract_value = base + change_order_value
    total_project_costs = aggregate_costs(costs).grand_total
    total_invoiced_amount = sum(_value(inv, "amount") or 0 for inv in invoices)
    gross_profit = total_contract_value - total_project_costs

    if total_contract_value > 0:
        gross_profit_percentage = gross_profit / total_contract_value * 100
    else:
        gross_profit_percentage = 0

    return ProjectMetrics(
        base_contract_value=base,
        change_order_value=change_order_value,
        total_contract_value=total_contract_value,
        total_project_costs=total_project_costs,
        total_invoiced_amount=total_invoiced_amount,
        amount_yet_to_bill=total_contract_value - total_invoiced_amount,
        gross_profit=gross_profit,
        gross_profit_percentage=gross_profit_percentage,
    )


def change_order_summary(change_orders: Iterable[Any]) -> ChangeOrderTotals:
    """Count, total and average additional value of a project's change orders."""
    values = _change_order_values(change_orders)
    total = sum(values)
    average = total / len(values) if values else 0
    return ChangeOrderTotals(count=len(values), total_additional_value=total, average_value=average)


def format_currency(amount: float | None) -> str:
    """Display an amount as US dollars, e.g. ``$1,234.50``."""
    amount = amount or 0
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(value: float | None) -> str:
    """Display a percentage with one decimal, e.g. ``12.5%``."""
    return f"{(value or 0):.1f}%"
