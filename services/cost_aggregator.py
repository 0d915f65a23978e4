"""Per-category cost totals for a project, optionally scoped to a change order."""

from collections.abc import Iterable, Mapping
from typing import Any
from uuid import UUID

COST_CATEGORIES = (
    "material",
    "labor",
    "equipment",
    "subcontractor",
    "others",
    "cap_leases",
    "consumable",
)

# Change-order scope sentinels
SCOPE_ALL = "all"
SCOPE_BASE = "base"


class CostAggregate:
    """DTO holding totals and row counts keyed by cost category."""

    def __init__(self, totals: dict[str, float], counts: dict[str, int]):
        self.totals = totals
        self.counts = counts

    @property
    def grand_total(self) -> float:
        return sum(self.totals.values())


def _value(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _num(row: Any, name: str) -> float:
    return _value(row, name) or 0


def labor_line_total(row: Any) -> float:
    """
    Derived total of a labor row.

    straight time + overtime + double time + per diem + mobilization,
    each missing figure counted as zero.
    """
    return (
        _num(row, "st_hours") * _num(row, "st_rate")
        + _num(row, "ot_hours") * _num(row, "ot_rate")
        + _num(row, "dt_hours") * _num(row, "dt_rate")
        + _num(row, "per_diem")
        + _num(row, "mob_qty") * _num(row, "mob_rate")
    )


def line_total(row: Any) -> float:
    """Total of one cost row. Stored values are trusted, negatives included."""
    if _value(row, "category") == "labor":
        return labor_line_total(row)
    return _num(row, "cost")


def _same_id(left: Any, right: Any) -> bool:
    return str(left) == str(right)


def filter_by_change_order(rows: Iterable[Any], scope: str | UUID | None) -> list[Any]:
    """
    Restrict rows to a change-order scope.

    Args:
        rows: Cost or invoice rows carrying ``change_order_id``
        scope: ``None`` or ``"all"`` for every row, ``"base"`` for rows on the
            base contract, otherwise a change order id

    Returns:
        Matching rows
    """
    rows = list(rows)
    if scope is None or scope == SCOPE_ALL:
        return rows
    if scope == SCOPE_BASE:
        return [row for row in rows if _value(row, "change_order_id") is None]
    return [
        row
        for row in rows
        if _value(row, "change_order_id") is not None
        and _same_id(_value(row, "change_order_id"), scope)
    ]


def aggregate_costs(rows: Iterable[Any], scope: str | UUID | None = None) -> CostAggregate:
    """
    Sum line totals and count rows per category.

    Every known category is present in the result, zero when it has no rows.
    Rows in a category outside the known set are still counted under their
    own key.
    """
    totals: dict[str, float] = {category: 0 for category in COST_CATEGORIES}
    counts: dict[str, int] = {category: 0 for category in COST_CATEGORIES}

    for row in filter_by_change_order(rows, scope):
        category = _value(row, "category")
        totals[category] = totals.get(category, 0) + line_total(row)
        counts[category] = counts.get(category, 0) + 1

    return CostAggregate(totals=totals, counts=counts)
