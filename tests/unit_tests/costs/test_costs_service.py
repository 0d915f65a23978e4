"""Service tests for cost entries: labor derivation, validation and permissions."""

from datetime import date
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import HTTPException

from models.change_order import ChangeOrderCreate
from models.employee import Employee
from models.project import ProjectCreate
from models.project_cost import ProjectCostCreate, ProjectCostUpdate
from services import change_orders_service, costs_service, projects_service


@pytest_asyncio.fixture
async def project(db_session, master_a, tenancy):
    return await projects_service.create_project(
        db_session,
        membership_ctx=tenancy(master_a),
        payload=ProjectCreate(job_number="J-100", job_name="Warehouse", customer="Acme"),
    )


@pytest_asyncio.fixture
async def employee(db_session, tenant_a):
    employee = Employee(
        tenant_id=tenant_a.id,
        name="Pat Welder",
        standard_rate=50,
        ot_rate=75,
        dt_rate=100,
        mob_rate=25,
    )
    db_session.add(employee)
    await db_session.commit()
    await db_session.refresh(employee)
    return employee


def _labor(employee_id, **fields):
    return ProjectCostCreate(category="labor", date=date(2026, 3, 2), employee_id=employee_id, **fields)


def _material(**fields):
    defaults = {"vendor": "Supply Co", "invoice_number": "INV-1", "cost": 120.5}
    defaults.update(fields)
    return ProjectCostCreate(category="material", date=date(2026, 3, 2), **defaults)


@pytest.mark.asyncio
async def test_labor_entry_defaults_rates_from_employee(db_session, master_a, tenancy, project, employee):
    cost = await costs_service.create_cost(
        db_session,
        membership_ctx=tenancy(master_a),
        project_id=project.id,
        payload=_labor(employee.id, st_hours=8, ot_hours=2),
    )

    assert cost.employee_name == "Pat Welder"
    assert cost.st_rate == 50
    assert cost.ot_rate == 75
    assert cost.mob_rate == 25
    assert cost.cost == 8 * 50 + 2 * 75


@pytest.mark.asyncio
async def test_explicit_rate_overrides_employee_rate(db_session, master_a, tenancy, project, employee):
    cost = await costs_service.create_cost(
        db_session,
        membership_ctx=tenancy(master_a),
        project_id=project.id,
        payload=_labor(employee.id, st_hours=10, st_rate=60, per_diem=40),
    )
    assert cost.st_rate == 60
    assert cost.cost == 640


@pytest.mark.asyncio
async def test_labor_entry_requires_work(db_session, master_a, tenancy, project, employee):
    with pytest.raises(HTTPException) as exc_info:
        await costs_service.create_cost(
            db_session,
            membership_ctx=tenancy(master_a),
            project_id=project.id,
            payload=_labor(employee.id),
        )
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_labor_entry_requires_employee(db_session, master_a, tenancy, project):
    with pytest.raises(HTTPException) as exc_info:
        await costs_service.create_cost(
            db_session,
            membership_ctx=tenancy(master_a),
            project_id=project.id,
            payload=_labor(None, st_hours=8),
        )
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_employee_scoped_to_other_project_is_rejected(db_session, master_a, tenancy, project):
    ctx = tenancy(master_a)
    other = await projects_service.create_project(
        db_session,
        membership_ctx=ctx,
        payload=ProjectCreate(job_number="J-200", job_name="Other", customer="Acme"),
    )
    scoped = Employee(tenant_id=master_a.tenant_id, project_id=other.id, name="Scoped", standard_rate=40, ot_rate=60, dt_rate=80)
    db_session.add(scoped)
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await costs_service.create_cost(
            db_session,
            membership_ctx=ctx,
            project_id=project.id,
            payload=_labor(scoped.id, st_hours=8),
        )
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_non_labor_requires_vendor_and_invoice(db_session, master_a, tenancy, project):
    with pytest.raises(HTTPException) as exc_info:
        await costs_service.create_cost(
            db_session,
            membership_ctx=tenancy(master_a),
            project_id=project.id,
            payload=_material(vendor="", invoice_number=None),
        )
    assert exc_info.value.status_code == 400
    assert "vendor" in exc_info.value.detail
    assert "invoice_number" in exc_info.value.detail


@pytest.mark.asyncio
async def test_subcontractor_requires_name(db_session, master_a, tenancy, project):
    payload = ProjectCostCreate(
        category="subcontractor",
        date=date(2026, 3, 2),
        vendor="Sub LLC",
        invoice_number="S-9",
        cost=5000,
    )
    with pytest.raises(HTTPException) as exc_info:
        await costs_service.create_cost(db_session, membership_ctx=tenancy(master_a), project_id=project.id, payload=payload)
    assert "subcontractor_name" in exc_info.value.detail


@pytest.mark.asyncio
async def test_category_write_permission_is_enforced(db_session, create_user, tenant_a, tenancy, project):
    clerk = await create_user(tenant=tenant_a, role="entry", permissions={"material": "read", "labor": "write"})

    with pytest.raises(HTTPException) as exc_info:
        await costs_service.create_cost(
            db_session,
            membership_ctx=tenancy(clerk),
            project_id=project.id,
            payload=_material(),
        )
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_list_hides_unreadable_categories(
    db_session, master_a, create_user, tenant_a, tenancy, project, employee
):
    master_ctx = tenancy(master_a)
    await costs_service.create_cost(db_session, membership_ctx=master_ctx, project_id=project.id, payload=_material())
    await costs_service.create_cost(
        db_session,
        membership_ctx=master_ctx,
        project_id=project.id,
        payload=_labor(employee.id, st_hours=4),
    )
    viewer = await create_user(tenant=tenant_a, role="view", permissions={"material": "read"})

    visible = await costs_service.list_costs(db_session, membership_ctx=tenancy(viewer), project_id=project.id)
    assert [cost.category for cost in visible] == ["material"]

    with pytest.raises(HTTPException) as exc_info:
        await costs_service.list_costs(
            db_session,
            membership_ctx=tenancy(viewer),
            project_id=project.id,
            category="labor",
        )
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_update_recomputes_labor_total(db_session, master_a, tenancy, project, employee):
    ctx = tenancy(master_a)
    cost = await costs_service.create_cost(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        payload=_labor(employee.id, st_hours=8),
    )

    updated = await costs_service.update_cost(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        cost_id=cost.id,
        payload=ProjectCostUpdate(st_hours=10),
    )
    assert updated.cost == 500


@pytest.mark.asyncio
async def test_totals_respect_change_order_scope(db_session, master_a, tenancy, project):
    ctx = tenancy(master_a)
    change_order = await change_orders_service.create_change_order(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        payload=ChangeOrderCreate(name="CO 1", additional_contract_value=1000),
    )
    await costs_service.create_cost(db_session, membership_ctx=ctx, project_id=project.id, payload=_material(cost=100))
    await costs_service.create_cost(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        payload=_material(cost=250, change_order_id=change_order.id),
    )

    everything = await costs_service.get_cost_totals(db_session, membership_ctx=ctx, project_id=project.id)
    base = await costs_service.get_cost_totals(db_session, membership_ctx=ctx, project_id=project.id, change_order="base")
    scoped = await costs_service.get_cost_totals(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        change_order=str(change_order.id),
    )

    assert everything.totals["material"] == 350
    assert base.totals["material"] == 100
    assert scoped.totals["material"] == 250

    with pytest.raises(HTTPException) as exc_info:
        await costs_service.get_cost_totals(
            db_session,
            membership_ctx=ctx,
            project_id=project.id,
            change_order=str(uuid4()),
        )
    assert exc_info.value.status_code == 404
