"""Service layer for attachment metadata.

File bytes live in object storage; this module decides where (a path under
the tenant's prefix) and records what was stored.
"""

import logging
import re
import time
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from api.tenancy import TenancyContext, ensure_permission
from models.attachment import ALLOWED_FILE_TYPES, Attachment, AttachmentCreate
from repos import attachments_repo, costs_repo, invoices_repo
from services.permissions import category_area

logger = logging.getLogger(__name__)


def clean_file_name(file_name: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9.-]`` with ``_``."""
    return re.sub(r"[^a-zA-Z0-9.-]", "_", file_name)


def build_storage_path(
    tenant_id: UUID,
    entity_type: str,
    entity_id: UUID,
    file_name: str,
    timestamp_ms: int | None = None,
) -> str:
    """
    Storage path for an uploaded file.

    Returns:
        ``{tenant_id}/{entity_type}/{entity_id}/{timestamp}_{clean name}``
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{tenant_id}/{entity_type}/{entity_id}/{timestamp_ms}_{clean_file_name(file_name)}"


def ensure_tenant_path(tenant_id: UUID, path: str) -> str:
    """
    Reject a storage path outside the tenant's prefix.

    Raises:
        HTTPException: 403 if the path does not start with ``{tenant_id}/``
            or tries to climb out of it
    """
    segments = path.split("/")
    if not path.startswith(f"{tenant_id}/") or ".." in segments or "" in segments[1:]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Storage path is outside the organization's folder",
        )
    return path


async def _entity_area(
    session: AsyncSession,
    membership_ctx: TenancyContext,
    entity_type: str,
    entity_id: UUID,
) -> str | None:
    """Permission area guarding a cost or invoice, None if it does not exist."""
    if entity_type == "cost":
        cost = await costs_repo.get_in_tenant(session, tenant_id=membership_ctx.tenant_id, cost_id=entity_id)
        return category_area(cost.category) if cost else None
    if entity_type == "invoice":
        invoice = await invoices_repo.get_in_tenant(
            session,
            tenant_id=membership_ctx.tenant_id,
            invoice_id=entity_id,
        )
        return "invoices" if invoice else None
    return None


async def _require_entity(
    session: AsyncSession,
    membership_ctx: TenancyContext,
    entity_type: str,
    entity_id: UUID,
    level: str,
) -> None:
    area = await _entity_area(session, membership_ctx, entity_type, entity_id)
    if area is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity_type.capitalize()} not found",
        )
    ensure_permission(membership_ctx, area, level)


async def register_attachment(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: AttachmentCreate,
) -> Attachment:
    """
    Record an uploaded file against a cost or invoice.

    Raises:
        HTTPException: 400 for a disallowed type or oversized file, 404 if the
            entity is not in the tenant, 403 without write access to it
    """
    if payload.file_type not in ALLOWED_FILE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File type {payload.file_type} is not allowed",
        )
    if payload.file_size > config.settings.ATTACHMENT_MAX_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File exceeds the {config.settings.ATTACHMENT_MAX_BYTES} byte limit",
        )

    await _require_entity(session, membership_ctx, payload.entity_type, payload.entity_id, "write")

    path = ensure_tenant_path(
        membership_ctx.tenant_id,
        build_storage_path(
            membership_ctx.tenant_id,
            payload.entity_type,
            payload.entity_id,
            payload.file_name,
        ),
    )
    attachment = Attachment(
        tenant_id=membership_ctx.tenant_id,
        entity_type=payload.entity_type,
        entity_id=payload.entity_id,
        file_name=payload.file_name,
        file_path=path,
        file_size=payload.file_size,
        file_type=payload.file_type,
        description=payload.description,
        uploaded_by=membership_ctx.user_id,
    )
    attachment = await attachments_repo.create(session, attachment)
    await session.commit()
    await session.refresh(attachment)
    return attachment


async def list_attachments(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    entity_type: str,
    entity_id: UUID,
) -> list[Attachment]:
    await _require_entity(session, membership_ctx, entity_type, entity_id, "read")
    return await attachments_repo.list_for_entity(
        session,
        tenant_id=membership_ctx.tenant_id,
        entity_type=entity_type,
        entity_id=entity_id,
    )


async def delete_attachment(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    attachment_id: UUID,
) -> None:
    """
    Remove an attachment record.

    Write access to the owning entity is required; if the entity is gone,
    write access to projects is required instead.
    """
    attachment = await attachments_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        attachment_id=attachment_id,
    )
    if not attachment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Attachment not found",
        )
    ensure_tenant_path(membership_ctx.tenant_id, attachment.file_path)

    area = await _entity_area(session, membership_ctx, attachment.entity_type, attachment.entity_id)
    ensure_permission(membership_ctx, area or "projects", "write")

    await attachments_repo.delete(session, attachment)
    await session.commit()


async def attachment_counts(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    entity_type: str,
    entity_ids: list[UUID],
) -> dict[str, int]:
    """
    Number of attachments per entity. A failed count is reported as 0.

    Returns:
        Entity id (as string) to attachment count
    """
    counts: dict[str, int] = {}
    for entity_id in entity_ids:
        try:
            counts[str(entity_id)] = await attachments_repo.count_for_entity(
                session,
                tenant_id=membership_ctx.tenant_id,
                entity_type=entity_type,
                entity_id=entity_id,
            )
        except SQLAlchemyError:
            logger.warning("Could not count attachments for %s %s", entity_type, entity_id, exc_info=True)
            counts[str(entity_id)] = 0
    return counts
