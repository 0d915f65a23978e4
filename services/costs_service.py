"""Service layer for ProjectCost business logic.

Each cost category is guarded by its own permission area, so access checks
happen here rather than in the route dependencies.
"""

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext, ensure_permission
from models.employee import Employee
from models.project_cost import ProjectCost, ProjectCostCreate, ProjectCostUpdate
from repos import costs_repo, employees_repo, projects_repo
from services import change_orders_service
from services.cost_aggregator import (
    COST_CATEGORIES,
    CostAggregate,
    aggregate_costs,
    filter_by_change_order,
    labor_line_total,
)
from services.permissions import category_area, has_permission

LABOR = "labor"
SUBCONTRACTOR = "subcontractor"

# Rate columns of a labor row and the employee field each defaults from
_RATE_DEFAULTS = {
    "st_rate": "standard_rate",
    "ot_rate": "ot_rate",
    "dt_rate": "dt_rate",
    "mob_rate": "mob_rate",
}


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def _ensure_project(session: AsyncSession, membership_ctx: TenancyContext, project_id: UUID) -> None:
    project = await projects_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )


async def _get_employee_for_project(
    session: AsyncSession,
    membership_ctx: TenancyContext,
    project_id: UUID,
    employee_id: UUID | None,
) -> Employee:
    if employee_id is None:
        raise _bad_request("Labor entries require an employee")

    employee = await employees_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        employee_id=employee_id,
    )
    if not employee or (employee.project_id is not None and employee.project_id != project_id):
        raise _bad_request("Employee is not available on this project")
    return employee


def _apply_employee(cost: ProjectCost, employee: Employee, explicit: set[str]) -> None:
    """Copy the employee's name, and its rates wherever the caller gave none."""
    cost.employee_id = employee.id
    cost.employee_name = employee.name
    for rate_field, employee_field in _RATE_DEFAULTS.items():
        if rate_field not in explicit or getattr(cost, rate_field) is None:
            setattr(cost, rate_field, getattr(employee, employee_field))


def _validate_labor(cost: ProjectCost) -> None:
    has_hours = any((getattr(cost, name) or 0) > 0 for name in ("st_hours", "ot_hours", "dt_hours"))
    if not (has_hours or (cost.per_diem or 0) > 0 or (cost.mob_qty or 0) > 0):
        raise _bad_request("Labor entries need hours, per diem or a mobilization quantity")
    # Cached copy of the derived total; totals are always recomputed from the parts
    cost.cost = labor_line_total(cost)


def _validate_non_labor(cost: ProjectCost) -> None:
    missing = [
        name
        for name in ("vendor", "invoice_number")
        if not (getattr(cost, name) or "").strip()
    ]
    if cost.cost is None:
        missing.append("cost")
    if cost.category == SUBCONTRACTOR and not (cost.subcontractor_name or "").strip():
        missing.append("subcontractor_name")
    if missing:
        raise _bad_request(f"Missing required fields: {', '.join(missing)}")


async def get_cost(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    cost_id: UUID,
) -> ProjectCost:
    """
    Get a cost entry.

    Raises:
        HTTPException: 404 if not found in the project, 403 without read
            access to its category
    """
    cost = await costs_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
        cost_id=cost_id,
    )
    if not cost:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cost not found",
        )
    ensure_permission(membership_ctx, category_area(cost.category), "read")
    return cost


async def list_costs(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    category: str | None = None,
    change_order: str | None = None,
) -> list[ProjectCost]:
    """
    List a project's costs, latest date first.

    Args:
        session: Database session
        membership_ctx: Tenancy context
        project_id: Project to list
        category: Restrict to one category (403 without read access to it)
        change_order: ``all``, ``base`` or a change order id

    Returns:
        Cost entries; without a category filter, only categories the caller
        may read are included
    """
    await _ensure_project(session, membership_ctx, project_id)

    if category is not None:
        if category not in COST_CATEGORIES:
            raise _bad_request(f"Unknown cost category: {category}")
        ensure_permission(membership_ctx, category_area(category), "read")

    scope = await change_orders_service.resolve_scope(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order=change_order,
    )
    costs = await costs_repo.list_by_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
        category=category,
    )
    return [
        cost
        for cost in filter_by_change_order(costs, scope)
        if has_permission(membership_ctx, category_area(cost.category), "read")
    ]


async def get_cost_totals(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    change_order: str | None = None,
) -> CostAggregate:
    """Per-category totals for the project within a change-order scope."""
    await _ensure_project(session, membership_ctx, project_id)
    scope = await change_orders_service.resolve_scope(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order=change_order,
    )
    costs = await costs_repo.list_by_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )
    return aggregate_costs(costs, scope)


async def create_cost(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    payload: ProjectCostCreate,
) -> ProjectCost:
    """
    Record a cost entry.

    Labor rows take the employee's name, and its rates where none are given,
    and store their derived line total in ``cost``.

    Raises:
        HTTPException: 403 without write access to the category, 404 for an
            unknown project, 400 for missing fields or foreign references
    """
    ensure_permission(membership_ctx, category_area(payload.category), "write")
    await _ensure_project(session, membership_ctx, project_id)
    await change_orders_service.ensure_belongs_to_project(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order_id=payload.change_order_id,
    )

    fields = payload.model_dump(exclude={"in_system"})
    cost = ProjectCost(
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
        in_system=bool(payload.in_system),
        created_by=membership_ctx.user_id,
        **fields,
    )

    if cost.category == LABOR:
        employee = await _get_employee_for_project(session, membership_ctx, project_id, cost.employee_id)
        _apply_employee(cost, employee, payload.model_fields_set)
        _validate_labor(cost)
    else:
        _validate_non_labor(cost)

    cost = await costs_repo.create(session, cost)
    await session.commit()
    await session.refresh(cost)
    return cost


async def update_cost(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    cost_id: UUID,
    payload: ProjectCostUpdate,
) -> ProjectCost:
    """
    Update a cost entry. Only provided fields are changed; the category is fixed.

    Raises:
        HTTPException: 404 if not found, 403 without write access, 400 if the
            resulting entry is incomplete
    """
    cost = await get_cost(session, membership_ctx=membership_ctx, project_id=project_id, cost_id=cost_id)
    ensure_permission(membership_ctx, category_area(cost.category), "write")

    updates = payload.model_dump(exclude_unset=True)
    if "change_order_id" in updates:
        await change_orders_service.ensure_belongs_to_project(
            session,
            membership_ctx=membership_ctx,
            project_id=project_id,
            change_order_id=updates["change_order_id"],
        )

    previous_employee = cost.employee_id
    for field, value in updates.items():
        if field in ("date", "in_system") and value is None:
            continue
        setattr(cost, field, value)

    if cost.category == LABOR:
        employee = await _get_employee_for_project(session, membership_ctx, project_id, cost.employee_id)
        if cost.employee_id != previous_employee:
            _apply_employee(cost, employee, set(updates))
        else:
            cost.employee_name = employee.name
        _validate_labor(cost)
    else:
        _validate_non_labor(cost)

    await session.commit()
    await session.refresh(cost)
    return cost


async def delete_cost(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    cost_id: UUID,
) -> None:
    cost = await get_cost(session, membership_ctx=membership_ctx, project_id=project_id, cost_id=cost_id)
    ensure_permission(membership_ctx, category_area(cost.category), "write")
    await costs_repo.delete(session, cost)
    await session.commit()
