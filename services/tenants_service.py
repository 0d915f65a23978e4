"""Service layer for tenant setup."""

import logging
import re

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from auth.jwt import create_access_token
from models.tenant import Tenant, TenantCreate, TenantResponse, TenantSetupResponse
from models.user import User, UserResponse
from repos import tenants_repo
from services.permissions import full_permissions

logger = logging.getLogger(__name__)

SUBDOMAIN_MAX_LENGTH = 50


def suggest_subdomain(name: str) -> str:
    """
    Derive a subdomain from an organization name.

    "Acme Builders, Inc." becomes "acme-builders-inc".
    """
    slug = re.sub(r"[^a-z0-9\s-]", "", name.lower())
    slug = re.sub(r"[\s-]+", "-", slug).strip("-")
    return slug[:SUBDOMAIN_MAX_LENGTH].strip("-")


async def setup_tenant(
    session: AsyncSession,
    *,
    user: User,
    payload: TenantCreate,
) -> TenantSetupResponse:
    """
    Create an organization and make the caller its master user.

    Args:
        session: Database session
        user: Signed-in account without a tenant
        payload: Organization details

    Returns:
        The tenant, the updated user and a token carrying the tenant

    Raises:
        HTTPException: 409 if the account already has a tenant or the
            subdomain is taken
    """
    if user.tenant_id is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Account already belongs to an organization",
        )

    if await tenants_repo.get_by_subdomain(session, subdomain=payload.subdomain):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Subdomain is already taken",
        )

    tenant = Tenant(
        name=payload.name,
        subdomain=payload.subdomain.lower(),
        email=payload.email,
        phone=payload.phone,
    )
    tenant = await tenants_repo.create(session, tenant)

    user.tenant_id = tenant.id
    user.role = "master"
    user.permissions = full_permissions()

    await session.commit()
    await session.refresh(tenant)
    await session.refresh(user)

    logger.info("Tenant %s (%s) created by user %s", tenant.id, tenant.subdomain, user.id)

    return TenantSetupResponse(
        tenant=TenantResponse.model_validate(tenant),
        access_token=create_access_token(user.id, tenant.id, user.role),
        user=UserResponse.model_validate(user),
    )


async def get_current_tenant(session: AsyncSession, *, membership_ctx: TenancyContext) -> Tenant:
    tenant = await tenants_repo.get_by_id(session, tenant_id=membership_ctx.tenant_id)
    if not tenant:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant not found",
        )
    return tenant
