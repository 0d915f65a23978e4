"""Repository for ProjectCost database operations."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.project_cost import ProjectCost


async def get_by_id(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    project_id: UUID,
    cost_id: UUID,
) -> ProjectCost | None:
    """
    Get a cost entry of a project by ID.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by
        project_id: Owning project
        cost_id: Cost ID to fetch

    Returns:
        ProjectCost if found, None otherwise
    """
    result = await session.execute(
        select(ProjectCost).where(
            ProjectCost.id == cost_id,
            ProjectCost.project_id == project_id,
            ProjectCost.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def get_in_tenant(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    cost_id: UUID,
) -> ProjectCost | None:
    """Get a cost entry by ID without knowing its project."""
    result = await session.execute(
        select(ProjectCost).where(
            ProjectCost.id == cost_id,
            ProjectCost.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_by_project(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    project_id: UUID,
    category: str | None = None,
) -> list[ProjectCost]:
    """
    List a project's cost entries, latest date first.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by
        project_id: Owning project
        category: Restrict to one cost category

    Returns:
        List of cost entries
    """
    query = select(ProjectCost).where(
        ProjectCost.tenant_id == tenant_id,
        ProjectCost.project_id == project_id,
    )
    if category is not None:
        query = query.where(ProjectCost.category == category)

    result = await session.execute(
        query.order_by(ProjectCost.date.desc(), ProjectCost.created_at.desc())
    )
    return [cost for cost in result.scalars().all()]


async def count_for_employee(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    employee_id: UUID,
) -> int:
    result = await session.execute(
        select(func.count(ProjectCost.id)).where(
            ProjectCost.tenant_id == tenant_id,
            ProjectCost.employee_id == employee_id,
        )
    )
    return result.scalar_one()


async def create(session: AsyncSession, cost: ProjectCost) -> ProjectCost:
    session.add(cost)
    await session.flush()
    await session.refresh(cost)
    return cost


async def delete(session: AsyncSession, cost: ProjectCost) -> None:
    await session.delete(cost)
    await session.flush()
