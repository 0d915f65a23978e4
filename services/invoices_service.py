"""Service layer for CustomerInvoice business logic."""

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.customer_invoice import CustomerInvoice, CustomerInvoiceCreate, CustomerInvoiceUpdate
from repos import invoices_repo, projects_repo
from services import change_orders_service
from services.cost_aggregator import filter_by_change_order


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


async def get_invoice(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    invoice_id: UUID,
) -> CustomerInvoice:
    invoice = await invoices_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
        invoice_id=invoice_id,
    )
    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invoice not found",
        )
    return invoice


async def list_invoices(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    change_order: str | None = None,
) -> list[CustomerInvoice]:
    """List a project's invoices within a change-order scope, latest billed first."""
    await _ensure_project(session, membership_ctx, project_id)
    scope = await change_orders_service.resolve_scope(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order=change_order,
    )
    invoices = await invoices_repo.list_by_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )
    return filter_by_change_order(invoices, scope)


async def create_invoice(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    payload: CustomerInvoiceCreate,
) -> CustomerInvoice:
    """
    Record an amount billed to the customer.

    Raises:
        HTTPException: 404 for an unknown project, 400 if the change order
            is not part of the project
    """
    await _ensure_project(session, membership_ctx, project_id)
    await change_orders_service.ensure_belongs_to_project(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order_id=payload.change_order_id,
    )

    invoice = CustomerInvoice(
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
        **payload.model_dump(),
    )
    invoice = await invoices_repo.create(session, invoice)
    await session.commit()
    await session.refresh(invoice)
    return invoice


async def update_invoice(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    invoice_id: UUID,
    payload: CustomerInvoiceUpdate,
) -> CustomerInvoice:
    invoice = await get_invoice(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        invoice_id=invoice_id,
    )

    updates = payload.model_dump(exclude_unset=True)
    if "change_order_id" in updates:
        await change_orders_service.ensure_belongs_to_project(
            session,
            membership_ctx=membership_ctx,
            project_id=project_id,
            change_order_id=updates["change_order_id"],
        )

    for field, value in updates.items():
        if value is None and field != "change_order_id":
            continue
        setattr(invoice, field, value)

    await session.commit()
    await session.refresh(invoice)
    return invoice


async def delete_invoice(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    invoice_id: UUID,
) -> None:
    invoice = await get_invoice(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        invoice_id=invoice_id,
    )
    await invoices_repo.delete(session, invoice)
    await session.commit()
