"""Service layer for Project business logic."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.project import (
    Project,
    ProjectCreate,
    ProjectMetricsResponse,
    ProjectResponse,
    ProjectStatusUpdate,
    ProjectSummaryResponse,
    ProjectUpdate,
)
from models.project_cost import CostTotalsResponse
from repos import budgets_repo, change_orders_repo, costs_repo, invoices_repo, projects_repo
from services import budgets_service, change_orders_service
from services.cost_aggregator import SCOPE_ALL, aggregate_costs, filter_by_change_order
from services.financial_metrics import calculate_project_metrics

logger = logging.getLogger(__name__)


async def list_projects(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    include_inactive: bool = False,
) -> list[Project]:
    """
    List projects for a tenant.

    Args:
        session: Database session
        membership_ctx: Tenancy context
        include_inactive: If False, only ``Active`` projects are returned

    Returns:
        List of projects
    """
    return await projects_repo.list_by_tenant(
        session,
        tenant_id=membership_ctx.tenant_id,
        include_inactive=include_inactive,
    )


async def get_project(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
) -> Project:
    """
    Get a project by ID.

    Raises:
        HTTPException: 404 if project not found in the tenant
    """
    project = await projects_repo.get_by_id(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )

    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )

    return project


async def create_project(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: ProjectCreate,
) -> Project:
    """
    Create a new project.

    Args:
        session: Database session
        membership_ctx: Tenancy context
        payload: Project creation data

    Returns:
        Created project
    """
    project = Project(
        tenant_id=membership_ctx.tenant_id,
        job_number=payload.job_number,
        job_name=payload.job_name,
        customer=payload.customer,
        project_type=payload.project_type,
        total_contract_value=payload.total_contract_value,
        status=payload.status,
    )

    created_project = await projects_repo.create(session, project)
    await session.commit()
    await session.refresh(created_project)

    return created_project


async def update_project(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    payload: ProjectUpdate,
) -> Project:
    """
    Update an existing project.

    Args:
        session: Database session
        membership_ctx: Tenancy context
        project_id: Project ID to update
        payload: Project update data (only provided fields will be updated)

    Returns:
        Updated project

    Raises:
        HTTPException: 404 if project not found
    """
    project = await get_project(session, membership_ctx=membership_ctx, project_id=project_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(project, field, value)

    await session.commit()
    await session.refresh(project)

    return project


async def update_project_status(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    payload: ProjectStatusUpdate,
) -> Project:
    project = await get_project(session, membership_ctx=membership_ctx, project_id=project_id)
    project.status = payload.status

    await session.commit()
    await session.refresh(project)
    return project


async def delete_project(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
) -> None:
    """Delete a project and its costs, change orders, invoices and budget."""
    project = await get_project(session, membership_ctx=membership_ctx, project_id=project_id)
    await projects_repo.delete(session, tenant_id=membership_ctx.tenant_id, project=project)
    await session.commit()
    logger.info("Project %s deleted from tenant %s", project_id, membership_ctx.tenant_id)


async def get_project_summary(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    change_order: str | None = None,
) -> ProjectSummaryResponse:
    """
    Financial metrics, cost totals and budget report for a project.

    Args:
        session: Database session
        membership_ctx: Tenancy context
        project_id: Project to summarize
        change_order: ``all`` (default), ``base`` or a change order id;
            applies to costs and invoices, the contract value always
            includes every change order

    Returns:
        ProjectSummaryResponse
    """
    project = await get_project(session, membership_ctx=membership_ctx, project_id=project_id)
    scope = await change_orders_service.resolve_scope(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order=change_order,
    )

    change_orders = await change_orders_repo.list_by_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )
    costs = filter_by_change_order(
        await costs_repo.list_by_project(
            session,
            tenant_id=membership_ctx.tenant_id,
            project_id=project_id,
        ),
        scope,
    )
    invoices = filter_by_change_order(
        await invoices_repo.list_by_project(
            session,
            tenant_id=membership_ctx.tenant_id,
            project_id=project_id,
        ),
        scope,
    )
    budget = await budgets_repo.get_for_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )

    metrics = calculate_project_metrics(project.total_contract_value, change_orders, costs, invoices)
    aggregate = aggregate_costs(costs)

    return ProjectSummaryResponse(
        project=ProjectResponse.model_validate(project),
        change_order_scope=str(scope) if scope is not None else SCOPE_ALL,
        metrics=ProjectMetricsResponse.model_validate(metrics),
        cost_totals=CostTotalsResponse.model_validate(aggregate),
        budget=budgets_service.build_report(budget, aggregate.totals),
    )
