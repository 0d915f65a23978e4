"""Employee endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, require_permission
from api.tenancy import TenancyContext
from models.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from services import employees_service

router = APIRouter()


@router.get("/employees", response_model=List[EmployeeResponse])
async def list_employees(
    project_id: UUID | None = Query(None),
    tenancy: TenancyContext = Depends(require_permission("labor", "read")),
    db: AsyncSession = Depends(get_db),
):
    """
    List employees.

    With ``project_id``, returns that project's employees plus the global ones.
    """
    try:
        return await employees_service.list_employees(db, membership_ctx=tenancy, project_id=project_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch employees: {str(e)}",
        )


@router.post("/employees", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    tenancy: TenancyContext = Depends(require_permission("labor", "write")),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await employees_service.create_employee(db, membership_ctx=tenancy, payload=payload)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create employee: {str(e)}",
        )


@router.put("/employees/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    payload: EmployeeUpdate,
    tenancy: TenancyContext = Depends(require_permission("labor", "write")),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await employees_service.update_employee(
            db,
            membership_ctx=tenancy,
            employee_id=employee_id,
            payload=payload,
        )
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update employee: {str(e)}",
        )


@router.delete("/employees/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: UUID,
    tenancy: TenancyContext = Depends(require_permission("labor", "write")),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete an employee.

    Raises:
        409 while labor entries still reference the employee.
    """
    try:
        await employees_service.delete_employee(db, membership_ctx=tenancy, employee_id=employee_id)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete employee: {str(e)}",
        )
