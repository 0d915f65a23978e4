"""Service layer for managing the users of a tenant."""

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.user import User, UserUpdate
from repos import invitations_repo, users_repo


async def list_users(session: AsyncSession, *, membership_ctx: TenancyContext) -> list[User]:
    return await users_repo.list_by_tenant(session, tenant_id=membership_ctx.tenant_id)


async def _get_user(session: AsyncSession, membership_ctx: TenancyContext, user_id: UUID) -> User:
    user = await users_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        user_id=user_id,
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


async def update_user(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    user_id: UUID,
    payload: UserUpdate,
) -> User:
    """
    Change another user's role, permissions or active flag.

    Args:
        session: Database session
        membership_ctx: Tenancy context of the acting admin
        user_id: User to update
        payload: Fields to change (only provided fields are applied)

    Returns:
        Updated user

    Raises:
        HTTPException: 404 if the user is not in the tenant, 400 if an admin
            tries to change their own role or permissions or deactivate
            themselves
    """
    user = await _get_user(session, membership_ctx, user_id)

    if user.id == membership_ctx.user_id:
        if (
            payload.is_active is False
            or (payload.role is not None and payload.role != user.role)
            or (payload.permissions is not None and dict(payload.permissions) != (user.permissions or {}))
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot change your own role or permissions or deactivate yourself",
            )

    if payload.role is not None:
        user.role = payload.role
    if payload.permissions is not None:
        user.permissions = dict(payload.permissions)
    if payload.is_active is not None:
        user.is_active = payload.is_active

    await session.commit()
    await session.refresh(user)
    return user


async def deactivate_user(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    user_id: UUID,
) -> User:
    """Soft-delete a user. The account row stays so history keeps its author."""
    user = await _get_user(session, membership_ctx, user_id)

    if user.id == membership_ctx.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot deactivate yourself",
        )

    user.is_active = False
    await session.commit()
    await session.refresh(user)
    return user


async def check_user_exists(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    email: str,
) -> dict[str, bool]:
    """
    Report whether an email can be invited into the tenant.

    Returns:
        ``user_exists_in_tenant``, ``pending_invitation``, ``account_exists``
        and ``can_invite``
    """
    in_tenant = await users_repo.get_in_tenant_by_email(
        session,
        tenant_id=membership_ctx.tenant_id,
        email=email,
    )
    pending = await invitations_repo.get_pending_for_email(
        session,
        tenant_id=membership_ctx.tenant_id,
        email=email,
    )
    account = await users_repo.get_by_email(session, email=email)

    return {
        "user_exists_in_tenant": in_tenant is not None,
        "pending_invitation": pending is not None,
        "account_exists": account is not None,
        "can_invite": in_tenant is None and pending is None,
    }
