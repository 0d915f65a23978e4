"""Repository for ChangeOrder database operations."""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.change_order import ChangeOrder
from models.customer_invoice import CustomerInvoice
from models.project_cost import ProjectCost


async def get_by_id(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    project_id: UUID,
    change_order_id: UUID,
) -> ChangeOrder | None:
    """
    Get a change order of a project by ID.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by
        project_id: Owning project
        change_order_id: Change order ID to fetch

    Returns:
        ChangeOrder if found, None otherwise
    """
    result = await session.execute(
        select(ChangeOrder).where(
            ChangeOrder.id == change_order_id,
            ChangeOrder.project_id == project_id,
            ChangeOrder.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_by_project(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    project_id: UUID,
) -> list[ChangeOrder]:
    """List a project's change orders, newest first."""
    result = await session.execute(
        select(ChangeOrder)
        .where(
            ChangeOrder.tenant_id == tenant_id,
            ChangeOrder.project_id == project_id,
        )
        .order_by(ChangeOrder.created_at.desc())
    )
    return [change_order for change_order in result.scalars().all()]


async def create(session: AsyncSession, change_order: ChangeOrder) -> ChangeOrder:
    session.add(change_order)
    await session.flush()
    await session.refresh(change_order)
    return change_order


async def detach_references(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    change_order_id: UUID,
) -> None:
    """Move costs and invoices booked against a change order back to the base contract."""
    for model in (ProjectCost, CustomerInvoice):
        await session.execute(
            update(model)
            .where(
                model.tenant_id == tenant_id,
                model.change_order_id == change_order_id,
            )
            .values(change_order_id=None)
        )


async def delete(session: AsyncSession, change_order: ChangeOrder) -> None:
    await session.delete(change_order)
    await session.flush()
