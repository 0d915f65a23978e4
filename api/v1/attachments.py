"""Attachment metadata endpoints."""

from typing import List, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, get_tenancy_context
from api.tenancy import TenancyContext
from models.attachment import AttachmentCreate, AttachmentResponse
from services import attachments_service

router = APIRouter()

EntityType = Literal["cost", "invoice"]


@router.post("/attachments", response_model=AttachmentResponse, status_code=status.HTTP_201_CREATED)
async def register_attachment(
    payload: AttachmentCreate,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a file uploaded for a cost or invoice.

    Returns:
        The attachment, including the tenant-scoped storage path.
    """
    try:
        return await attachments_service.register_attachment(db, membership_ctx=tenancy, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to register attachment: {str(e)}",
        )


@router.get("/attachments", response_model=List[AttachmentResponse])
async def list_attachments(
    entity_type: EntityType = Query(...),
    entity_id: UUID = Query(...),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await attachments_service.list_attachments(
            db,
            membership_ctx=tenancy,
            entity_type=entity_type,
            entity_id=entity_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch attachments: {str(e)}",
        )


@router.get("/attachments/counts", response_model=dict[str, int])
async def attachment_counts(
    entity_type: EntityType = Query(...),
    entity_ids: List[UUID] = Query(...),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """Attachment count per entity id; a count that cannot be read is 0."""
    try:
        return await attachments_service.attachment_counts(
            db,
            membership_ctx=tenancy,
            entity_type=entity_type,
            entity_ids=entity_ids,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to count attachments: {str(e)}",
        )


@router.delete("/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attachment(
    attachment_id: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        await attachments_service.delete_attachment(db, membership_ctx=tenancy, attachment_id=attachment_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete attachment: {str(e)}",
        )
