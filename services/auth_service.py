"""Service layer for account registration, sign in and profile lookup."""

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import create_access_token
from auth.passwords import hash_password, verify_password
from auth.schemas import LoginRequest, ProfileResponse, RegisterRequest, TokenResponse
from db import utcnow
from models.tenant import TenantResponse
from models.user import User, UserResponse
from repos import tenants_repo, users_repo
from services.permissions import default_permissions


def issue_token(user: User) -> TokenResponse:
    """Token response for an account, carrying its current tenant and role."""
    return TokenResponse(
        access_token=create_access_token(user.id, user.tenant_id, user.role),
        user=UserResponse.model_validate(user),
    )


async def register(session: AsyncSession, *, payload: RegisterRequest) -> TokenResponse:
    """
    Create an account that does not yet belong to a tenant.

    Raises:
        HTTPException: 409 if the email is already registered
    """
    if await users_repo.get_by_email(session, email=payload.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )

    user = User(
        tenant_id=None,
        email=payload.email,
        name=payload.name,
        password_hash=hash_password(payload.password),
        role="entry",
        permissions=default_permissions(),
        is_active=True,
    )
    user = await users_repo.create(session, user)
    await session.commit()
    await session.refresh(user)

    return issue_token(user)


async def login(session: AsyncSession, *, payload: LoginRequest) -> TokenResponse:
    """
    Verify credentials and issue a token.

    Raises:
        HTTPException: 401 on unknown email or wrong password, 403 if inactive
    """
    user = await users_repo.get_by_email(session, email=payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive",
        )

    user.last_login = utcnow()
    await session.commit()
    await session.refresh(user)

    return issue_token(user)


async def load_profile(session: AsyncSession, *, user_id: UUID) -> ProfileResponse:
    """Fetch the account and its tenant."""
    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    tenant = None
    if user.tenant_id:
        tenant = await tenants_repo.get_by_id(session, tenant_id=user.tenant_id)

    return ProfileResponse(
        user=UserResponse.model_validate(user),
        tenant=TenantResponse.model_validate(tenant) if tenant else None,
    )
