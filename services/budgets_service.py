"""Service layer for project budgets and budget-versus-actual reports."""

import logging
from collections.abc import Mapping
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.project_budget import (
    BudgetLineResponse,
    BudgetReportResponse,
    ProjectBudget,
    ProjectBudgetResponse,
    ProjectBudgetUpdate,
    budget_column,
)
from repos import budgets_repo, costs_repo, projects_repo
from services import change_orders_service
from services.budget_variance import BudgetVariance, budget_report, total_budget
from services.cost_aggregator import COST_CATEGORIES, aggregate_costs

logger = logging.getLogger(__name__)


def _line(category: str, variance: BudgetVariance) -> BudgetLineResponse:
    return BudgetLineResponse(
        category=category,
        budget=variance.budget,
        actual=variance.actual,
        variance=variance.variance,
        percent_used=variance.percent_used,
        status=variance.status,
        color=variance.color,
    )


def build_report(budget: ProjectBudget | None, totals: Mapping[str, float]) -> BudgetReportResponse:
    """Budget report response for a stored budget (or none) and category totals."""
    lines, overall = budget_report(budget, totals)
    return BudgetReportResponse(
        lines=[_line(category, lines[category]) for category in COST_CATEGORIES],
        total=_line("total", overall),
    )


def _to_response(budget: ProjectBudget | None, *, tenant_id: UUID, project_id: UUID) -> ProjectBudgetResponse:
    if budget is None:
        # Nothing saved yet; every ceiling reads as zero
        return ProjectBudgetResponse(tenant_id=tenant_id, project_id=project_id)

    response = ProjectBudgetResponse.model_validate(budget)
    response.total_budget = total_budget(budget)
    return response


async def _ensure_project(session: AsyncSession, membership_ctx: TenancyContext, project_id: UUID) -> None:
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


async def get_budget(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
) -> ProjectBudgetResponse:
    """
    Get a project's budget.

    Returns:
        The stored budget, or an all-zero default that is not persisted
    """
    await _ensure_project(session, membership_ctx, project_id)
    budget = await budgets_repo.get_for_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )
    return _to_response(budget, tenant_id=membership_ctx.tenant_id, project_id=project_id)


async def _upsert(
    session: AsyncSession,
    membership_ctx: TenancyContext,
    project_id: UUID,
    amounts: dict[str, float],
) -> ProjectBudget:
    budget = await budgets_repo.get_for_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )
    if budget is None:
        budget = ProjectBudget(
            tenant_id=membership_ctx.tenant_id,
            project_id=project_id,
            **{budget_column(category): 0 for category in COST_CATEGORIES},
        )
        for column, amount in amounts.items():
            setattr(budget, column, amount)
        budget.updated_by = membership_ctx.user_id
        return await budgets_repo.create(session, budget)

    for column, amount in amounts.items():
        setattr(budget, column, amount)
    budget.updated_by = membership_ctx.user_id
    return budget


async def save_budget(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    amounts: dict[str, float],
) -> ProjectBudgetResponse:
    """
    Upsert budget ceilings keyed by (tenant, project). Last write wins.

    Args:
        session: Database session
        membership_ctx: Tenancy context
        project_id: Project the budget belongs to
        amounts: Column name to amount, e.g. ``{"labor_budget": 5000}``

    Returns:
        The stored budget
    """
    await _ensure_project(session, membership_ctx, project_id)

    try:
        budget = await _upsert(session, membership_ctx, project_id, amounts)
        await session.commit()
    except IntegrityError:
        # A concurrent first save created the row; apply ours on top of it
        await session.rollback()
        logger.info("Budget for project %s created concurrently, updating instead", project_id)
        budget = await _upsert(session, membership_ctx, project_id, amounts)
        await session.commit()

    await session.refresh(budget)
    return _to_response(budget, tenant_id=membership_ctx.tenant_id, project_id=project_id)


async def update_budget(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    payload: ProjectBudgetUpdate,
) -> ProjectBudgetResponse:
    return await save_budget(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        amounts=payload.model_dump(),
    )


async def update_category_budget(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    category: str,
    amount: float,
) -> ProjectBudgetResponse:
    """
    Set the ceiling of a single cost category.

    Raises:
        HTTPException: 400 for an unknown category
    """
    if category not in COST_CATEGORIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown cost category: {category}",
        )
    return await save_budget(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        amounts={budget_column(category): amount},
    )


async def get_variance_report(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_id: UUID,
    change_order: str | None = None,
) -> BudgetReportResponse:
    """Budget versus actual spend for every category of a project."""
    await _ensure_project(session, membership_ctx, project_id)
    scope = await change_orders_service.resolve_scope(
        session,
        membership_ctx=membership_ctx,
        project_id=project_id,
        change_order=change_order,
    )
    budget = await budgets_repo.get_for_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )
    costs = await costs_repo.list_by_project(
        session,
        tenant_id=membership_ctx.tenant_id,
        project_id=project_id,
    )
    return build_report(budget, aggregate_costs(costs, scope).totals)
