"""Repository for UserInvitation database operations."""

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db import utcnow
from models.user_invitation import UserInvitation


async def get_by_id(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    invitation_id: UUID,
) -> UserInvitation | None:
    result = await session.execute(
        select(UserInvitation).where(
            UserInvitation.id == invitation_id,
            UserInvitation.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def get_pending_by_id(session: AsyncSession, *, invitation_id: UUID) -> UserInvitation | None:
    result = await session.execute(
        select(UserInvitation).where(
            UserInvitation.id == invitation_id,
            UserInvitation.status == "pending",
        )
    )
    return result.scalar_one_or_none()


async def get_pending_by_token(session: AsyncSession, *, token: str) -> UserInvitation | None:
    """
    Load a pending invitation by its token.

    Not tenant scoped: the invitee has no tenant context yet and the token
    itself is the credential.

    Args:
        session: Database session
        token: Invitation token from the link

    Returns:
        UserInvitation if a pending one carries the token, None otherwise
    """
    result = await session.execute(
        select(UserInvitation).where(
            UserInvitation.invitation_token == token,
            UserInvitation.status == "pending",
        )
    )
    return result.scalar_one_or_none()


async def get_pending_for_email(
    session: AsyncSession,
    *,
    tenant_id: UUID,
    email: str,
) -> UserInvitation | None:
    result = await session.execute(
        select(UserInvitation).where(
            UserInvitation.tenant_id == tenant_id,
            func.lower(UserInvitation.email) == email.lower(),
            UserInvitation.status == "pending",
        )
    )
    return result.scalars().first()


async def list_pending(session: AsyncSession, *, tenant_id: UUID) -> list[UserInvitation]:
    """List a tenant's pending invitations, newest first. Expired ones are included."""
    result = await session.execute(
        select(UserInvitation)
        .where(
            UserInvitation.tenant_id == tenant_id,
            UserInvitation.status == "pending",
        )
        .order_by(UserInvitation.created_at.desc())
    )
    return [invitation for invitation in result.scalars().all()]


async def create(session: AsyncSession, invitation: UserInvitation) -> UserInvitation:
    session.add(invitation)
    await session.flush()
    await session.refresh(invitation)
    return invitation


async def set_status_if_pending(
    session: AsyncSession,
    *,
    invitation_id: UUID,
    new_status: str,
) -> int:
    """
    Move a pending invitation to ``new_status``.

    The update only matches while the row is still pending, so of two
    concurrent acceptances exactly one sees a row count of 1.

    Returns:
        Number of rows changed (0 or 1)
    """
    result = await session.execute(
        update(UserInvitation)
        .where(
            UserInvitation.id == invitation_id,
            UserInvitation.status == "pending",
        )
        .values(status=new_status, updated_at=utcnow())
    )
    return result.rowcount
