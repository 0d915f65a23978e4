"""Repository for CustomerInvoice database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.customer_invoice import CustomerInvoice


async def get_by_id(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    project_id: UUID,
    invoice_id: UUID,
) -> CustomerInvoice | None:
    """
    Get an invoice of a project by ID.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by
        project_id: Owning project
        invoice_id: Invoice ID to fetch

    Returns:
        CustomerInvoice if found, None otherwise
    """
    result = await session.execute(
        select(CustomerInvoice).where(
            CustomerInvoice.id == invoice_id,
            CustomerInvoice.project_id == project_id,
            CustomerInvoice.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def get_in_tenant(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    invoice_id: UUID,
) -> CustomerInvoice | None:
    result = await session.execute(
        select(CustomerInvoice).where(
            CustomerInvoice.id == invoice_id,
            CustomerInvoice.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_by_project(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    project_id: UUID,
) -> list[CustomerInvoice]:
    """List a project's invoices, most recently billed first."""
    result = await session.execute(
        select(CustomerInvoice)
        .where(
            CustomerInvoice.tenant_id == tenant_id,
            CustomerInvoice.project_id == project_id,
        )
        .order_by(CustomerInvoice.date_billed.desc(), CustomerInvoice.created_at.desc())
    )
    return [invoice for invoice in result.scalars().all()]


async def create(session: AsyncSession, invoice: CustomerInvoice) -> CustomerInvoice:
    session.add(invoice)
    await session.flush()
    await session.refresh(invoice)
    return invoice


async def delete(session: AsyncSession, invoice: CustomerInvoice) -> None:
    await session.delete(invoice)
    await session.flush()
