"""Customer invoice endpoints, nested under a project."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, require_permission
from api.tenancy import TenancyContext
from models.customer_invoice import CustomerInvoiceCreate, CustomerInvoiceResponse, CustomerInvoiceUpdate
from services import invoices_service

router = APIRouter()


@router.get("/projects/{project_id}/invoices", response_model=List[CustomerInvoiceResponse])
async def list_invoices(
    project_id: UUID,
    change_order: str | None = Query(None, description="'all', 'base' or a change order id"),
    tenancy: TenancyContext = Depends(require_permission("invoices", "read")),
    db: AsyncSession = Depends(get_db),
):
    """List a project's invoices, latest billed first."""
    try:
        return await invoices_service.list_invoices(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            change_order=change_order,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch invoices: {str(e)}",
        )


@router.post(
    "/projects/{project_id}/invoices",
    response_model=CustomerInvoiceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    project_id: UUID,
    payload: CustomerInvoiceCreate,
    tenancy: TenancyContext = Depends(require_permission("invoices", "write")),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await invoices_service.create_invoice(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            payload=payload,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create invoice: {str(e)}",
        )


@router.put("/projects/{project_id}/invoices/{invoice_id}", response_model=CustomerInvoiceResponse)
async def update_invoice(
    project_id: UUID,
    invoice_id: UUID,
    payload: CustomerInvoiceUpdate,
    tenancy: TenancyContext = Depends(require_permission("invoices", "write")),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await invoices_service.update_invoice(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            invoice_id=invoice_id,
            payload=payload,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update invoice: {str(e)}",
        )


@router.delete("/projects/{project_id}/invoices/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    project_id: UUID,
    invoice_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("invoices", "write")),
    db: AsyncSession = Depends(get_db),
):
    try:
        await invoices_service.delete_invoice(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            invoice_id=invoice_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete invoice: {str(e)}",
        )
