"""FastAPI dependencies for authentication and database."""

from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext, ensure_permission
from auth.jwt import decode_token
from db import get_db as get_db_session
from models.user import User

# HTTP Bearer token security scheme
security = HTTPBearer()


async def get_db() -> AsyncSession:
    """
    Dependency to get database session.
    Reuses the get_db function from db.py.
    """
    async for session in get_db_session():
        yield session


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token from Authorization header
        db: Database session

    Returns:
        User: The authenticated user

    Raises:
        HTTPException: If token is invalid, expired, user not found, or the
            token's tenant/role no longer match the account
    """
    token = credentials.credentials

    try:
        # Decode JWT token
        token_payload = decode_token(token)
        user_id = UUID(token_payload.sub)
        tenant_id = UUID(token_payload.tenant_id) if token_payload.tenant_id else None
        role = token_payload.role

    except (JWTError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    # Load user from database
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive",
        )

    # A token minted before a tenant or role change is stale
    if user.tenant_id != tenant_id or user.role != role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token claims do not match user",
        )

    return user


async def get_tenancy_context(
    current_user: User = Depends(get_current_user),
) -> TenancyContext:
    """
    Dependency to get tenancy context for tenant-scoped operations.

    Returns:
        TenancyContext: tenant_id, user_id, role and permissions of the caller

    Raises:
        HTTPException: 403 if the user does not belong to a tenant yet
    """
    ctx = TenancyContext.from_user(current_user)
    if ctx is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User does not belong to a tenant",
        )
    return ctx


def require_permission(area: str, level: str = "read"):
    """
    Build a dependency that yields the tenancy context once ``area`` access
    at ``level`` is confirmed.

    Example:
        tenancy: TenancyContext = Depends(require_permission("projects", "write"))
    """

    async def dependency(
        tenancy: TenancyContext = Depends(get_tenancy_context),
    ) -> TenancyContext:
        ensure_permission(tenancy, area, level)
        return tenancy

    return dependency
