"""Repository for User database operations."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User


async def get_by_id(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    user_id: UUID,
) -> User | None:
    """
    Get a user of a tenant by ID.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by
        user_id: User ID to fetch

    Returns:
        User if found in the tenant, None otherwise
    """
    result = await session.execute(
        select(User).where(
            User.id == user_id,
            User.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def get_by_email(session: AsyncSession, *, email: str) -> User | None:
    """Look up an account by email across all tenants. Emails are globally unique."""
    result = await session.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()


async def get_in_tenant_by_email(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    email: str,
) -> User | None:
    result = await session.execute(
        select(User).where(
            User.tenant_id == tenant_id,
            func.lower(User.email) == email.lower(),
        )
    )
    return result.scalar_one_or_none()


async def list_by_tenant(session: AsyncSession, *, tenant_id: UUID) -> list[User]:
    """
    List the users of a tenant, oldest first.

    Args:
        session: Database session
        tenant_id: Tenant ID to filter by

    Returns:
        List of users
    """
    result = await session.execute(
        select(User).where(User.tenant_id == tenant_id).order_by(User.created_at)
    )
    return [user for user in result.scalars().all()]


async def create(session: AsyncSession, user: User) -> User:
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user
