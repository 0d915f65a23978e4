"""Repository for Attachment database operations."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.attachment import Attachment


async def get_by_id(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    attachment_id: UUID,
) -> Attachment | None:
    result = await session.execute(
        select(Attachment).where(
            Attachment.id == attachment_id,
            Attachment.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_for_entity(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    entity_type: str,
    entity_id: UUID,
) -> list[Attachment]:
    """List the attachments of one cost or invoice, newest first."""
    result = await session.execute(
        select(Attachment)
        .where(
            Attachment.tenant_id == tenant_id,
            Attachment.entity_type == entity_type,
            Attachment.entity_id == entity_id,
        )
        .order_by(Attachment.created_at.desc())
    )
    return [attachment for attachment in result.scalars().all()]


async def count_for_entity(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    entity_type: str,
    entity_id: UUID,
) -> int:
    result = await session.execute(
        select(func.count(Attachment.id)).where(
            Attachment.tenant_id == tenant_id,
            Attachment.entity_type == entity_type,
            Attachment.entity_id == entity_id,
        )
    )
    return result.scalar_one()


async def create(session: AsyncSession, attachment: Attachment) -> Attachment:
    session.add(attachment)
    await session.flush()
    await session.refresh(attachment)
    return attachment


async def delete(session: AsyncSession, attachment: Attachment) -> None:
    await session.delete(attachment)
    await session.flush()
