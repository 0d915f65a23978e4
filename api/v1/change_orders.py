"""Change order endpoints, nested under a project."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, require_permission
from api.tenancy import TenancyContext
from models.change_order import ChangeOrderCreate, ChangeOrderResponse, ChangeOrderSummary, ChangeOrderUpdate
from services import change_orders_service

router = APIRouter()


@router.get("/projects/{project_id}/change-orders", response_model=List[ChangeOrderResponse])
async def list_change_orders(
    project_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("projects", "read")),
    db: AsyncSession = Depends(get_db),
):
    """List a project's change orders, newest first."""
    try:
        return await change_orders_service.list_change_orders(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch change orders: {str(e)}",
        )


@router.get("/projects/{project_id}/change-orders/summary", response_model=ChangeOrderSummary)
async def summarize_change_orders(
    project_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("projects", "read")),
    db: AsyncSession = Depends(get_db),
):
    """Count, total and average value of a project's change orders."""
    try:
        return await change_orders_service.summarize_change_orders(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to summarize change orders: {str(e)}",
        )


@router.post(
    "/projects/{project_id}/change-orders",
    response_model=ChangeOrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_change_order(
    project_id: UUID,
    payload: ChangeOrderCreate,
    tenancy: TenancyContext = Depends(require_permission("projects", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Add a change order to a project."""
    try:
        return await change_orders_service.create_change_order(
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
            detail=f"Failed to create change order: {str(e)}",
        )


@router.put("/projects/{project_id}/change-orders/{change_order_id}", response_model=ChangeOrderResponse)
async def update_change_order(
    project_id: UUID,
    change_order_id: UUID,
    payload: ChangeOrderUpdate,
    tenancy: TenancyContext = Depends(require_permission("projects", "write")),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await change_orders_service.update_change_order(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            change_order_id=change_order_id,
            payload=payload,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update change order: {str(e)}",
        )


@router.delete(
    "/projects/{project_id}/change-orders/{change_order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_change_order(
    project_id: UUID,
    change_order_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("projects", "write")),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a change order.

    Costs and invoices booked against it move back to the base contract.
    """
    try:
        await change_orders_service.delete_change_order(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            change_order_id=change_order_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete change order: {str(e)}",
        )
