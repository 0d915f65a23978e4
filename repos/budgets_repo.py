"""Repository for ProjectBudget database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.project_budget import ProjectBudget


async def get_for_project(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    project_id: UUID,
) -> ProjectBudget | None:
    """
    Get the stored budget of a project.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by
        project_id: Project the budget belongs to

    Returns:
        ProjectBudget if one has been saved, None otherwise
    """
    result = await session.execute(
        select(ProjectBudget).where(
            ProjectBudget.tenant_id == tenant_id,
            ProjectBudget.project_id == project_id,
        )
    )
    return result.scalar_one_or_none()


async def create(session: AsyncSession, budget: ProjectBudget) -> ProjectBudget:
    session.add(budget)
    await session.flush()
    await session.refresh(budget)
    return budget
