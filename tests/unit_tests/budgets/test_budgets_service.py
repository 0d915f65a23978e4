"""Service tests for project budgets."""

from datetime import date
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import HTTPException
from sqlalchemy import func, select

from models.project import ProjectCreate
from models.project_budget import ProjectBudget, ProjectBudgetUpdate
from models.project_cost import ProjectCostCreate
from services import budgets_service, costs_service, projects_service


@pytest_asyncio.fixture
async def project(db_session, master_a, tenancy):
    return await projects_service.create_project(
        db_session,
        membership_ctx=tenancy(master_a),
        payload=ProjectCreate(job_number="B-1", job_name="School", customer="District"),
    )


@pytest.mark.asyncio
async def test_unsaved_budget_reads_as_zero(db_session, master_a, tenancy, project):
    budget = await budgets_service.get_budget(db_session, membership_ctx=tenancy(master_a), project_id=project.id)

    assert budget.id is None
    assert budget.labor_budget == 0
    assert budget.total_budget == 0

    count = await db_session.scalar(select(func.count()).select_from(ProjectBudget))
    assert count == 0


@pytest.mark.asyncio
async def test_save_then_update_keeps_single_row(db_session, master_a, tenancy, project):
    ctx = tenancy(master_a)
    first = await budgets_service.update_budget(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        payload=ProjectBudgetUpdate(labor_budget=10_000, material_budget=5_000),
    )
    second = await budgets_service.update_category_budget(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        category="equipment",
        amount=2_500,
    )

    assert second.id == first.id
    assert second.labor_budget == 10_000
    assert second.equipment_budget == 2_500
    assert second.total_budget == 17_500
    assert second.updated_by == master_a.id

    count = await db_session.scalar(select(func.count()).select_from(ProjectBudget))
    assert count == 1


@pytest.mark.asyncio
async def test_unknown_category_is_rejected(db_session, master_a, tenancy, project):
    with pytest.raises(HTTPException) as exc_info:
        await budgets_service.update_category_budget(
            db_session,
            membership_ctx=tenancy(master_a),
            project_id=project.id,
            category="travel",
            amount=1,
        )
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_budget_for_unknown_project_is_404(db_session, master_a, tenancy):
    with pytest.raises(HTTPException) as exc_info:
        await budgets_service.get_budget(db_session, membership_ctx=tenancy(master_a), project_id=uuid4())
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_variance_report(db_session, master_a, tenancy, project):
    ctx = tenancy(master_a)
    await budgets_service.update_category_budget(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        category="material",
        amount=1_000,
    )
    for amount in (500, 350):
        await costs_service.create_cost(
            db_session,
            membership_ctx=ctx,
            project_id=project.id,
            payload=ProjectCostCreate(
                category="material",
                date=date(2026, 4, 1),
                vendor="Lumber Yard",
                invoice_number=f"L-{amount}",
                cost=amount,
            ),
        )
    await costs_service.create_cost(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        payload=ProjectCostCreate(category="others", date=date(2026, 4, 1), vendor="Misc", invoice_number="O-1", cost=75),
    )

    report = await budgets_service.get_variance_report(db_session, membership_ctx=ctx, project_id=project.id)
    lines = {line.category: line for line in report.lines}

    assert lines["material"].status == "warning"
    assert lines["material"].color == "yellow"
    assert lines["material"].variance == 150
    assert lines["others"].status == "no_budget"
    assert lines["labor"].status == "on_track"
    assert report.total.actual == 925
    assert report.total.budget == 1_000
