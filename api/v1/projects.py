"""Project endpoints with tenant isolation."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, require_permission
from api.tenancy import TenancyContext
from models.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectStatusUpdate,
    ProjectSummaryResponse,
    ProjectUpdate,
)
from services.projects_service import (
    create_project,
    delete_project,
    get_project,
    get_project_summary,
    list_projects,
    update_project,
    update_project_status,
)

router = APIRouter()


@router.get("/projects", response_model=List[ProjectResponse])
async def list_projects_endpoint(
    include_inactive: bool = Query(False),
    tenancy: TenancyContext = Depends(require_permission("projects", "read")),
    db: AsyncSession = Depends(get_db),
):
    """
    List projects in the current user's tenant.

    Returns:
        Active projects, or every project with ``include_inactive=true``.
    """
    try:
        return await list_projects(db, membership_ctx=tenancy, include_inactive=include_inactive)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch projects: {str(e)}",
        )


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project_endpoint(
    project_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("projects", "read")),
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific project by ID.

    Raises:
        404 if project not found or user doesn't have access.
    """
    try:
        return await get_project(db, membership_ctx=tenancy, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch project: {str(e)}",
        )


@router.get("/projects/{project_id}/summary", response_model=ProjectSummaryResponse)
async def get_project_summary_endpoint(
    project_id: UUID,
    change_order: str | None = Query(None, description="'all', 'base' or a change order id"),
    tenancy: TenancyContext = Depends(require_permission("projects", "read")),
    db: AsyncSession = Depends(get_db),
):
    """Financial metrics, cost totals and budget report for the dashboard."""
    try:
        return await get_project_summary(
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
            detail=f"Failed to fetch project summary: {str(e)}",
        )


@router.post("/projects", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project_endpoint(
    project_data: ProjectCreate,
    tenancy: TenancyContext = Depends(require_permission("projects", "write")),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new project.

    Note: the tenant comes from the caller's token, never from the request.
    """
    try:
        return await create_project(db, membership_ctx=tenancy, payload=project_data)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create project: {str(e)}",
        )


@router.put("/projects/{project_id}", response_model=ProjectResponse)
async def update_project_endpoint(
    project_id: UUID,
    project_data: ProjectUpdate,
    tenancy: TenancyContext = Depends(require_permission("projects", "write")),
    db: AsyncSession = Depends(get_db),
):
    """
    Update an existing project.

    Only provided fields will be updated.
    """
    try:
        return await update_project(
            db,
            membership_ctx=tenancy,
            project_id=project_id,
            payload=project_data,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update project: {str(e)}",
        )


@router.patch("/projects/{project_id}/status", response_model=ProjectResponse)
async def update_project_status_endpoint(
    project_id: UUID,
    payload: ProjectStatusUpdate,
    tenancy: TenancyContext = Depends(require_permission("projects", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Change only the project's status."""
    try:
        return await update_project_status(
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
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update project status: {str(e)}",
        )


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project_endpoint(
    project_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("projects", "write")),
    db: AsyncSession = Depends(get_db),
):
    """Delete a project and everything recorded against it."""
    try:
        await delete_project(db, membership_ctx=tenancy, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete project: {str(e)}",
        )
