"""Authentication endpoints."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

import config
from api.deps import get_current_user, get_db
from auth.schemas import LoginRequest, ProfileResponse, RegisterRequest, TokenResponse
from models.user import User
from services import auth_service

router = APIRouter()


@router.post("/auth/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Create an account without an organization.

    The account can then set up a new organization or accept an invitation.
    """
    try:
        return await auth_service.register(db, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to register: {str(e)}",
        )


@router.post("/auth/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Sign in with email and password."""
    try:
        return await auth_service.login(db, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to log in: {str(e)}",
        )


@router.get("/auth/me", response_model=ProfileResponse)
async def get_me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Profile of the signed-in account and its organization.

    Raises:
        504 if the profile cannot be loaded within the configured timeout.
    """
    try:
        return await asyncio.wait_for(
            auth_service.load_profile(db, user_id=current_user.id),
            timeout=config.settings.PROFILE_FETCH_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Timed out loading profile",
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch profile: {str(e)}",
        )
