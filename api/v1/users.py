"""User management endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, require_permission
from api.tenancy import TenancyContext
from models.user import UserResponse, UserUpdate
from services import users_service

router = APIRouter()


class CheckUserExistsRequest(BaseModel):
    """Request schema for the invite pre-check."""

    email: EmailStr


class CheckUserExistsResponse(BaseModel):
    """Response schema for the invite pre-check."""

    user_exists_in_tenant: bool
    pending_invitation: bool
    account_exists: bool
    can_invite: bool


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    tenancy: TenancyContext = Depends(require_permission("users", "read")),
    db: AsyncSession = Depends(get_db),
):
    """
    List users in the current user's tenant.

    Returns:
        List of users in the tenant, oldest first.
    """
    try:
        return await users_service.list_users(db, membership_ctx=tenancy)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch users: {str(e)}",
        )


@router.post("/users/check-exists", response_model=CheckUserExistsResponse)
async def check_user_exists(
    payload: CheckUserExistsRequest,
    tenancy: TenancyContext = Depends(require_permission("users", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Tell whether an email is already a member, already invited, or free to invite."""
    try:
        return await users_service.check_user_exists(db, membership_ctx=tenancy, email=payload.email)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to check user: {str(e)}",
        )


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    tenancy: TenancyContext = Depends(require_permission("users", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Change a user's role, permissions or active flag."""
    try:
        return await users_service.update_user(
            db,
            membership_ctx=tenancy,
            user_id=user_id,
            payload=payload,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update user: {str(e)}",
        )


@router.post("/users/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("users", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a user of the tenant."""
    try:
        return await users_service.deactivate_user(db, membership_ctx=tenancy, user_id=user_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to deactivate user: {str(e)}",
        )
