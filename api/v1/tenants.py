"""Tenant endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db, get_tenancy_context
from api.tenancy import TenancyContext
from models.tenant import TenantCreate, TenantResponse, TenantSetupResponse
from models.user import User
from services import tenants_service

router = APIRouter()


@router.post("/tenants/setup", response_model=TenantSetupResponse, status_code=status.HTTP_201_CREATED)
async def setup_tenant(
    payload: TenantCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create an organization for a signed-in account that has none.

    The caller becomes its master user. The returned token carries the new
    tenant and replaces the previous one.
    """
    try:
        return await tenants_service.setup_tenant(db, user=current_user, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to set up organization: {str(e)}",
        )


@router.get("/tenants/suggest-subdomain")
async def suggest_subdomain(
    name: str = Query(..., min_length=1),
    current_user: User = Depends(get_current_user),
):
    """Subdomain derived from an organization name."""
    return {"subdomain": tenants_service.suggest_subdomain(name)}


@router.get("/tenants/current", response_model=TenantResponse)
async def get_current_tenant(
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's organization."""
    try:
        return await tenants_service.get_current_tenant(db, membership_ctx=tenancy)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch organization: {str(e)}",
        )
