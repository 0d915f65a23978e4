"""Repository for Tenant database operations."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.tenant import Tenant


async def get_by_id(session: AsyncSession, *, tenant_id: UUID) -> Tenant | None:
    result = await session.execute(select(Tenant).where(Tenant.id == tenant_id))
    return result.scalar_one_or_none()


async def get_by_subdomain(session: AsyncSession, *, subdomain: str) -> Tenant | None:
    """Subdomains are compared case-insensitively."""
    result = await session.execute(
        select(Tenant).where(func.lower(Tenant.subdomain) == subdomain.lower())
    )
    return result.scalar_one_or_none()


async def create(session: AsyncSession, tenant: Tenant) -> Tenant:
    """
    Create a new tenant.

    Args:
        session: Database session
        tenant: Tenant instance to create

    Returns:
        Created tenant
    """
    session.add(tenant)
    await session.flush()
    await session.refresh(tenant)
    return tenant
