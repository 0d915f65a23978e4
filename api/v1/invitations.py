"""Invitation endpoints.

Creating, listing, resending and cancelling are tenant admin operations.
Looking up an invitation and creating an account from it are public: the
token is the credential.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db, require_permission
from api.tenancy import TenancyContext
from auth.schemas import TokenResponse
from models.user import User
from models.user_invitation import (
    AcceptInvitationRequest,
    CreateInvitedUserRequest,
    InvitationLookupResponse,
    JoinTenantRequest,
    UserInvitationCreate,
    UserInvitationResponse,
)
from services import invitations_service

router = APIRouter()


@router.post("/invitations", response_model=UserInvitationResponse, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    payload: UserInvitationCreate,
    tenancy: TenancyContext = Depends(require_permission("users", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Invite an email address into the organization with a role and permissions."""
    try:
        return await invitations_service.create_invitation(db, membership_ctx=tenancy, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create invitation: {str(e)}",
        )


@router.get("/invitations", response_model=List[UserInvitationResponse])
async def list_invitations(
    tenancy: TenancyContext = Depends(require_permission("users", "read")),
    db: AsyncSession = Depends(get_db),
):
    """List pending invitations, including ones past their expiry."""
    try:
        return await invitations_service.list_pending_invitations(db, membership_ctx=tenancy)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch invitations: {str(e)}",
        )


@router.get("/invitations/lookup", response_model=InvitationLookupResponse)
async def lookup_invitation(
    token: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    """
    Load an invitation for the acceptance page.

    Raises:
        404 if not found or already used, 410 if expired.
    """
    try:
        return await invitations_service.lookup_invitation(db, token=token)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to load invitation: {str(e)}",
        )


@router.post("/invitations/create-user", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def create_invited_user(
    payload: CreateInvitedUserRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create a new account from an invitation and sign it in."""
    try:
        return await invitations_service.create_invited_user(db, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create user: {str(e)}",
        )


@router.post("/invitations/join", response_model=TokenResponse)
async def join_tenant(
    payload: JoinTenantRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Attach the signed-in account to the inviting organization.

    The returned token carries the new tenant and role.
    """
    try:
        return await invitations_service.join_tenant(db, user=current_user, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to join organization: {str(e)}",
        )


@router.post("/invitations/accept", response_model=UserInvitationResponse)
async def accept_invitation(
    payload: AcceptInvitationRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark an invitation addressed to the caller as accepted."""
    try:
        return await invitations_service.accept_invitation(
            db,
            user=current_user,
            invitation_id=payload.invitation_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to accept invitation: {str(e)}",
        )


@router.post("/invitations/{invitation_id}/resend", response_model=UserInvitationResponse)
async def resend_invitation(
    invitation_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("users", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Send a pending invitation again and extend its expiry."""
    try:
        return await invitations_service.resend_invitation(
            db,
            membership_ctx=tenancy,
            invitation_id=invitation_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to resend invitation: {str(e)}",
        )


@router.post("/invitations/{invitation_id}/cancel", response_model=UserInvitationResponse)
async def cancel_invitation(
    invitation_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("users", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a pending invitation."""
    try:
        return await invitations_service.cancel_invitation(
            db,
            membership_ctx=tenancy,
            invitation_id=invitation_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to cancel invitation: {str(e)}",
        )
