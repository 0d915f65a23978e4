"""Project budget endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, require_permission
from api.tenancy import TenancyContext
from models.project_budget import (
    BudgetReportResponse,
    CategoryBudgetUpdate,
    ProjectBudgetResponse,
    ProjectBudgetUpdate,
)
from services import budgets_service

router = APIRouter()


@router.get("/projects/{project_id}/budget", response_model=ProjectBudgetResponse)
async def get_budget(
    project_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("projects", "read")),
    db: AsyncSession = Depends(get_db),
):
    """
    Get a project's budget.

    A project without a saved budget reports zero for every category.
    """
    try:
        return await budgets_service.get_budget(db, membership_ctx=tenancy, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch budget: {str(e)}",
        )


@router.get("/projects/{project_id}/budget/variance", response_model=BudgetReportResponse)
async def get_budget_variance(
    project_id: UUID,
    change_order: str | None = Query(None, description="'all', 'base' or a change order id"),
    tenancy: TenancyContext = Depends(require_permission("projects", "read")),
    db: AsyncSession = Depends(get_db),
):
    """Budget versus actual spend per category."""
    try:
        return await budgets_service.get_variance_report(
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
            detail=f"Failed to compute budget variance: {str(e)}",
        )


@router.put("/projects/{project_id}/budget", response_model=ProjectBudgetResponse)
async def update_budget(
    project_id: UUID,
    payload: ProjectBudgetUpdate,
    tenancy: TenancyContext = Depends(require_permission("projects", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Save every category ceiling at once."""
    try:
        return await budgets_service.update_budget(
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
            detail=f"Failed to save budget: {str(e)}",
        )


@router.patch("/projects/{project_id}/budget/{category}", response_model=ProjectBudgetResponse)
async def update_category_budget(
    project_id: UUID,
    category: str,
    payload: CategoryBudgetUpdate,
    tenancy: TenancyContext = Depends(require_permission("projects", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Save the ceiling of one cost category."""
    try:
        return await budgets_service.update_category_budget(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            category=category,
            amount=payload.amount,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to save budget: {str(e)}",
        )
