"""Tenancy context and permission checks for tenant-scoped operations."""

from uuid import UUID

from fastapi import HTTPException, status

from models.user import User
from services.permissions import has_permission


class TenancyContext:
    """Context for tenant-scoped operations."""

    def __init__(self, tenant_id: UUID, user_id: UUID, role: str, permissions: dict[str, str] | None = None):
        """
        Initialize tenancy context.

        Args:
            tenant_id: Tenant ID
            user_id: Acting user ID
            role: User's role in the tenant
            permissions: Permission level per functional area
        """
        self.tenant_id = tenant_id
        self.user_id = user_id
        self.role = role
        self.permissions = permissions or {}

    @classmethod
    def from_user(cls, user: User) -> "TenancyContext | None":
        """
        Create TenancyContext from user object.

        Returns:
            TenancyContext if the user belongs to a tenant, None otherwise
        """
        if not user.tenant_id:
            return None

        return cls(
            tenant_id=user.tenant_id,
            user_id=user.id,
            role=user.role,
            permissions=dict(user.permissions or {}),
        )


def ensure_permission(ctx: TenancyContext, area: str, level: str = "read") -> None:
    """
    Raise 403 unless the context grants ``level`` access to ``area``.

    Raises:
        HTTPException: 403 if access is not granted
    """
    if not has_permission(ctx, area, level):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Missing {level} permission for {area}",
        )
