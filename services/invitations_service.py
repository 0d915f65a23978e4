"""Service layer for the invitation workflow.

An invitation is ``pending`` until it is accepted or cancelled; both are
terminal. ``expired`` is never stored, it is derived from ``expires_at`` when
the invitation is read. Accepting flips the status with a conditional update
so a token can be used at most once.
"""

import logging
import secrets
from datetime import timedelta
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from api.tenancy import TenancyContext
from auth.passwords import hash_password
from auth.schemas import TokenResponse
from db import utcnow
from models.user import User
from models.user_invitation import (
    CreateInvitedUserRequest,
    InvitationLookupResponse,
    JoinTenantRequest,
    UserInvitation,
    UserInvitationCreate,
)
from repos import invitations_repo, tenants_repo, users_repo
from services import notifications
from services.auth_service import issue_token

logger = logging.getLogger(__name__)


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def _expiry():
    return utcnow() + timedelta(days=config.settings.INVITATION_TTL_DAYS)


async def _inviter_name(session: AsyncSession, invited_by: UUID | None) -> str | None:
    if invited_by is None:
        return None
    result = await session.execute(select(User.name).where(User.id == invited_by))
    return result.scalar_one_or_none()


async def _dispatch(session: AsyncSession, invitation: UserInvitation) -> None:
    """
    Send the invitation link. Failures are logged; the invitation stands.

    An address that already has an account gets the join link instead of
    the sign-up link.
    """
    try:
        tenant = await tenants_repo.get_by_id(session, tenant_id=invitation.tenant_id)
        existing = await users_repo.get_by_email(session, email=invitation.email)
        await notifications.send_invitation(
            invitation,
            tenant_name=tenant.name if tenant else "",
            inviter_name=await _inviter_name(session, invitation.invited_by),
            existing_account=existing is not None,
        )
    except Exception:
        logger.warning("Failed to send invitation %s", invitation.id, exc_info=True)


async def create_invitation(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: UserInvitationCreate,
) -> UserInvitation:
    """
    Invite an email address into the tenant.

    The role and permissions are snapshotted onto the invitation and copied
    to the account on acceptance.

    Raises:
        HTTPException: 409 if the email already belongs to a user of the
            tenant or already has a pending invitation
    """
    tenant_id = membership_ctx.tenant_id

    if await users_repo.get_in_tenant_by_email(session, tenant_id=tenant_id, email=payload.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists in this organization",
        )
    if await invitations_repo.get_pending_for_email(session, tenant_id=tenant_id, email=payload.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A pending invitation already exists for this email",
        )

    invitation = UserInvitation(
        tenant_id=tenant_id,
        email=payload.email,
        role=payload.role,
        permissions=dict(payload.permissions),
        invited_by=membership_ctx.user_id,
        invitation_token=generate_token(),
        status="pending",
        expires_at=_expiry(),
    )
    invitation = await invitations_repo.create(session, invitation)
    await session.commit()
    await session.refresh(invitation)

    logger.info("Invitation %s created for %s in tenant %s", invitation.id, invitation.email, tenant_id)
    await _dispatch(session, invitation)
    return invitation


async def list_pending_invitations(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
) -> list[UserInvitation]:
    return await invitations_repo.list_pending(session, tenant_id=membership_ctx.tenant_id)


async def load_for_acceptance(session: AsyncSession, *, token: str) -> UserInvitation:
    """
    Load a pending, unexpired invitation by token.

    Raises:
        HTTPException: 404 if no pending invitation carries the token, 410 if
            it has expired
    """
    invitation = await invitations_repo.get_pending_by_token(session, token=token)
    if not invitation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invitation not found or already used",
        )
    if invitation.is_expired():
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="Invitation has expired",
        )
    return invitation


async def lookup_invitation(session: AsyncSession, *, token: str) -> InvitationLookupResponse:
    """What the invitee is shown before accepting: organization and inviter."""
    invitation = await load_for_acceptance(session, token=token)
    tenant = await tenants_repo.get_by_id(session, tenant_id=invitation.tenant_id)

    return InvitationLookupResponse(
        id=invitation.id,
        email=invitation.email,
        role=invitation.role,
        tenant_id=invitation.tenant_id,
        tenant_name=tenant.name if tenant else "",
        inviter_name=await _inviter_name(session, invitation.invited_by),
        expires_at=invitation.expires_at,
    )


async def _mark_accepted(session: AsyncSession, invitation: UserInvitation) -> None:
    """
    Flip a pending invitation to accepted inside a savepoint.

    A database error here is logged and ignored so the account work already
    done in the transaction stands. Losing the race to another acceptance is
    not ignored: the whole transaction is rolled back.

    Raises:
        HTTPException: 409 if the invitation was no longer pending
    """
    try:
        async with session.begin_nested():
            changed = await invitations_repo.set_status_if_pending(
                session,
                invitation_id=invitation.id,
                new_status="accepted",
            )
    except SQLAlchemyError:
        logger.warning("Could not mark invitation %s accepted", invitation.id, exc_info=True)
        return

    if changed == 0:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Invitation has already been used",
        )


async def create_invited_user(
    session: AsyncSession,
    *,
    payload: CreateInvitedUserRequest,
) -> TokenResponse:
    """
    Create a new account from an invitation.

    The account joins the inviting tenant with the invitation's role and
    permissions.

    Raises:
        HTTPException: 404/410 for an unusable invitation, 409 if an account
            with the email already exists or the invitation was used meanwhile
    """
    invitation = await load_for_acceptance(session, token=payload.invitation_token)

    if await users_repo.get_by_email(session, email=invitation.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )

    user = User(
        tenant_id=invitation.tenant_id,
        email=invitation.email.lower(),
        name=payload.name,
        password_hash=hash_password(payload.password),
        role=invitation.role,
        permissions=dict(invitation.permissions or {}),
        is_active=True,
    )
    try:
        user = await users_repo.create(session, user)
    except IntegrityError:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )

    await _mark_accepted(session, invitation)
    await session.commit()
    await session.refresh(user)

    logger.info("Invitation %s accepted by new user %s", invitation.id, user.id)
    return issue_token(user)


async def join_tenant(
    session: AsyncSession,
    *,
    user: User,
    payload: JoinTenantRequest,
) -> TokenResponse:
    """
    Attach an existing signed-in account to the inviting tenant.

    Raises:
        HTTPException: 403 if the invitation was issued to another email,
            409 if the account is already in this or another tenant
    """
    invitation = await load_for_acceptance(session, token=payload.invitation_token)

    if user.email.lower() != invitation.email.lower():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This invitation was issued to a different email address",
        )

    if await users_repo.get_in_tenant_by_email(session, tenant_id=invitation.tenant_id, email=user.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You are already a member of this organization",
        )
    if user.tenant_id is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Account already belongs to another organization",
        )

    user.tenant_id = invitation.tenant_id
    user.role = invitation.role
    user.permissions = dict(invitation.permissions or {})
    await session.flush()

    await _mark_accepted(session, invitation)
    await session.commit()
    await session.refresh(user)

    logger.info("Invitation %s accepted by existing user %s", invitation.id, user.id)
    return issue_token(user)


async def accept_invitation(
    session: AsyncSession,
    *,
    user: User,
    invitation_id: UUID,
) -> UserInvitation:
    """
    Mark a pending invitation addressed to the caller as accepted.

    Raises:
        HTTPException: 404 if there is no such pending invitation, 403 if it
            is addressed to another email, 410 if expired, 409 if used meanwhile
    """
    invitation = await invitations_repo.get_pending_by_id(session, invitation_id=invitation_id)
    if not invitation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invitation not found or already used",
        )
    if invitation.email.lower() != user.email.lower():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This invitation was issued to a different email address",
        )
    if invitation.is_expired():
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="Invitation has expired",
        )

    await _mark_accepted(session, invitation)
    await session.commit()
    await session.refresh(invitation)
    return invitation


async def _get_pending_in_tenant(
    session: AsyncSession,
    membership_ctx: TenancyContext,
    invitation_id: UUID,
    action: str,
) -> UserInvitation:
    invitation = await invitations_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        invitation_id=invitation_id,
    )
    if not invitation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invitation not found",
        )
    if invitation.status != "pending":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only pending invitations can be {action}",
        )
    return invitation


async def resend_invitation(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    invitation_id: UUID,
) -> UserInvitation:
    """Send a pending invitation again with the same token and a fresh expiry."""
    invitation = await _get_pending_in_tenant(session, membership_ctx, invitation_id, "resent")

    invitation.expires_at = _expiry()
    await session.commit()
    await session.refresh(invitation)

    logger.info("Invitation %s resent", invitation.id)
    await _dispatch(session, invitation)
    return invitation


async def cancel_invitation(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    invitation_id: UUID,
) -> UserInvitation:
    """
    Cancel a pending invitation. Cancelled is terminal.

    Raises:
        HTTPException: 409 if it was accepted while being cancelled
    """
    invitation = await _get_pending_in_tenant(session, membership_ctx, invitation_id, "cancelled")

    changed = await invitations_repo.set_status_if_pending(
        session,
        invitation_id=invitation.id,
        new_status="cancelled",
    )
    if changed == 0:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Invitation is no longer pending",
        )
    await session.commit()
    await session.refresh(invitation)

    logger.info("Invitation %s cancelled", invitation.id)
    return invitation
