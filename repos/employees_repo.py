"""Repository for Employee database operations."""

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.employee import Employee


async def get_by_id(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    employee_id: UUID,
) -> Employee | None:
    result = await session.execute(
        select(Employee).where(
            Employee.id == employee_id,
            Employee.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_by_tenant(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    project_id: UUID | None = None,
) -> list[Employee]:
    """
    List employees ordered by name.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by
        project_id: If given, only that project's employees plus the global ones

    Returns:
        List of employees
    """
    query = select(Employee).where(Employee.tenant_id == tenant_id)
    if project_id is not None:
        query = query.where(
            or_(Employee.project_id == project_id, Employee.project_id.is_(None))
        )

    result = await session.execute(query.order_by(Employee.name))
    return [employee for employee in result.scalars().all()]


async def create(session: AsyncSession, employee: Employee) -> Employee:
    session.add(employee)
    await session.flush()
    await session.refresh(employee)
    return employee


async def delete(session: AsyncSession, employee: Employee) -> None:
    await session.delete(employee)
    await session.flush()
