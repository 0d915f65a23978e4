"""Project cost endpoints.

Access is checked per cost category inside the service, so these routes only
require a tenant.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, get_tenancy_context, require_permission
from api.tenancy import TenancyContext
from models.project_cost import CostTotalsResponse, ProjectCostCreate, ProjectCostResponse, ProjectCostUpdate
from services import costs_service

router = APIRouter()


@router.get("/projects/{project_id}/costs", response_model=List[ProjectCostResponse])
async def list_costs(
    project_id: UUID,
    category: str | None = Query(None),
    change_order: str | None = Query(None, description="'all', 'base' or a change order id"),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """
    List a project's costs, latest date first.

    Without ``category`` only the categories the caller may read are returned.
    """
    try:
        return await costs_service.list_costs(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            category=category,
            change_order=change_order,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch costs: {str(e)}",
        )


@router.get("/projects/{project_id}/costs/totals", response_model=CostTotalsResponse)
async def get_cost_totals(
    project_id: UUID,
    change_order: str | None = Query(None, description="'all', 'base' or a change order id"),
    tenancy: TenancyContext = Depends(require_permission("projects", "read")),
    db: AsyncSession = Depends(get_db),
):
    """Per-category totals and counts for the project."""
    try:
        return await costs_service.get_cost_totals(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            change_order=change_order,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to compute cost totals: {str(e)}",
        )


@router.get("/projects/{project_id}/costs/{cost_id}", response_model=ProjectCostResponse)
async def get_cost(
    project_id: UUID,
    cost_id: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await costs_service.get_cost(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            cost_id=cost_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch cost: {str(e)}",
        )


@router.post(
    "/projects/{project_id}/costs",
    response_model=ProjectCostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_cost(
    project_id: UUID,
    payload: ProjectCostCreate,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a cost entry.

    Labor entries are priced from hours and rates; rates default from the employee.
    """
    try:
        return await costs_service.create_cost(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            payload=payload,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create cost: {str(e)}",
        )


@router.put("/projects/{project_id}/costs/{cost_id}", response_model=ProjectCostResponse)
async def update_cost(
    project_id: UUID,
    cost_id: UUID,
    payload: ProjectCostUpdate,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await costs_service.update_cost(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            cost_id=cost_id,
            payload=payload,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update cost: {str(e)}",
        )


@router.delete("/projects/{project_id}/costs/{cost_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cost(
    project_id: UUID,
    cost_id: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        await costs_service.delete_cost(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            cost_id=cost_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete cost: {str(e)}",
        )
