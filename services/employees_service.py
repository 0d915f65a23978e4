"""Service layer for Employee business logic."""

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.employee import Employee, EmployeeCreate, EmployeeUpdate
from repos import costs_repo, employees_repo, projects_repo


async def _ensure_project(session: AsyncSession, membership_ctx: TenancyContext, project_id: UUID | None) -> None:
    if project_id is None:
        return
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


async def get_employee(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    employee_id: UUID,
) -> Employee:
    employee = await employees_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        employee_id=employee_id,
    )
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found",
        )
    return employee


async def list_employees(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID | None = None,
) -> list[Employee]:
    """
    List employees of the tenant.

    With ``project_id`` the result is the employees scoped to that project
    plus the global ones, i.e. everyone who can be booked on it.
    """
    return await employees_repo.list_by_tenant(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )


async def create_employee(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: EmployeeCreate,
) -> Employee:
    await _ensure_project(session, membership_ctx, payload.project_id)

    employee = Employee(tenant_id=membership_ctx.tenant_id, **payload.model_dump())
    employee = await employees_repo.create(session, employee)
    await session.commit()
    await session.refresh(employee)
    return employee


async def update_employee(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    employee_id: UUID,
    payload: EmployeeUpdate,
) -> Employee:
    """
    Update an employee's name, rates or project scope.

    Existing labor entries keep the rates they were booked with.
    """
    employee = await get_employee(session, membership_ctx=membership_ctx, employee_id=employee_id)

    updates = payload.model_dump(exclude_unset=True)
    if "project_id" in updates:
        await _ensure_project(session, membership_ctx, updates["project_id"])

    for field, value in updates.items():
        if value is None and field not in ("project_id", "mob", "mob_rate"):
            continue
        setattr(employee, field, value)

    await session.commit()
    await session.refresh(employee)
    return employee


async def delete_employee(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    employee_id: UUID,
) -> None:
    """
    Delete an employee.

    Raises:
        HTTPException: 404 if not found, 409 while labor entries reference it
    """
    employee = await get_employee(session, membership_ctx=membership_ctx, employee_id=employee_id)

    in_use = await costs_repo.count_for_employee(
        session,
        tenant_id=membership_ctx.tenant_id,
        employee_id=employee.id,
    )
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Employee has {in_use} labor entries and cannot be deleted",
        )

    await employees_repo.delete(session, employee)
    await session.commit()
