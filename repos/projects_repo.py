"""Repository for Project database operations."""

from uuid import UUID

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.attachment import Attachment
from models.change_order import ChangeOrder
from models.customer_invoice import CustomerInvoice
from models.employee import Employee
from models.project import Project
from models.project_budget import ProjectBudget
from models.project_cost import ProjectCost


async def get_by_id(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    project_id: UUID,
) -> Project | None:
    """
    Get a project by ID.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by
        project_id: Project ID to fetch

    Returns:
        Project if found, None otherwise
    """
    result = await session.execute(
        select(Project).where(
            Project.id == project_id,
            Project.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_by_tenant(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    include_inactive: bool = False,
) -> list[Project]:
    """
    List projects for a tenant, newest first.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by
        include_inactive: If False, only projects with status ``Active``

    Returns:
        List of projects
    """
    query = select(Project).where(Project.tenant_id == tenant_id)

    if not include_inactive:
        query = query.where(Project.status == "Active")

    result = await session.execute(query.order_by(Project.created_at.desc()))
    return [project for project in result.scalars().all()]


async def create(session: AsyncSession, project: Project) -> Project:
    """
    Create a new project.

    Args:
        session: Database session
        project: Project instance to create

    Returns:
        Created project
    """
    session.add(project)
    await session.flush()
    await session.refresh(project)
    return project


async def delete(session: AsyncSession, *, tenant_id: UUID, project: Project) -> None:
    """
    Delete a project together with everything recorded against it.

    Attachments of its costs and invoices, costs, invoices, change orders,
    budget and project-scoped employees go first so the delete does not rely
    on the database enforcing ON DELETE CASCADE.
    """
    cost_ids = select(ProjectCost.id).where(
        ProjectCost.tenant_id == tenant_id,
        ProjectCost.project_id == project.id,
    )
    invoice_ids = select(CustomerInvoice.id).where(
        CustomerInvoice.tenant_id == tenant_id,
        CustomerInvoice.project_id == project.id,
    )
    await session.execute(
        sa_delete(Attachment).where(
            Attachment.tenant_id == tenant_id,
            Attachment.entity_type == "cost",
            Attachment.entity_id.in_(cost_ids),
        )
    )
    await session.execute(
        sa_delete(Attachment).where(
            Attachment.tenant_id == tenant_id,
            Attachment.entity_type == "invoice",
            Attachment.entity_id.in_(invoice_ids),
        )
    )

    for model in (ProjectCost, CustomerInvoice, ChangeOrder, ProjectBudget, Employee):
        await session.execute(
            sa_delete(model).where(
                model.tenant_id == tenant_id,
                model.project_id == project.id,
            )
        )

    await session.delete(project)
    await session.flush()
