"""Service tests for attachment metadata and storage paths."""

from datetime import date
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from models.attachment import AttachmentCreate
from models.project import ProjectCreate
from models.project_cost import ProjectCostCreate
from repos import attachments_repo
from services import attachments_service, costs_service, projects_service


def test_clean_file_name_replaces_unsafe_characters():
    assert attachments_service.clean_file_name("Receipt #12 (final).pdf") == "Receipt__12__final_.pdf"
    assert attachments_service.clean_file_name("../etc/passwd") == ".._etc_passwd"


def test_storage_path_layout():
    tenant_id, entity_id = uuid4(), uuid4()
    path = attachments_service.build_storage_path(tenant_id, "cost", entity_id, "my scan.png", timestamp_ms=1700000000000)
    assert path == f"{tenant_id}/cost/{entity_id}/1700000000000_my_scan.png"


def test_paths_outside_tenant_prefix_are_forbidden():
    tenant_id = uuid4()
    assert attachments_service.ensure_tenant_path(tenant_id, f"{tenant_id}/cost/x/1_a.pdf")

    for path in (f"{uuid4()}/cost/x/1_a.pdf", f"{tenant_id}/../other/a.pdf", f"{tenant_id}//a.pdf", "a.pdf"):
        with pytest.raises(HTTPException) as exc_info:
            attachments_service.ensure_tenant_path(tenant_id, path)
        assert exc_info.value.status_code == 403


@pytest_asyncio.fixture
async def cost(db_session, master_a, tenancy):
    ctx = tenancy(master_a)
    project = await projects_service.create_project(
        db_session,
        membership_ctx=ctx,
        payload=ProjectCreate(job_number="A-1", job_name="Depot", customer="City"),
    )
    return await costs_service.create_cost(
        db_session,
        membership_ctx=ctx,
        project_id=project.id,
        payload=ProjectCostCreate(category="material", date=date(2026, 1, 5), vendor="Steel", invoice_number="S-1", cost=40),
    )


def _upload(entity_id, **fields):
    defaults = {"file_name": "receipt.pdf", "file_size": 2048, "file_type": "application/pdf"}
    defaults.update(fields)
    return AttachmentCreate(entity_type="cost", entity_id=entity_id, **defaults)


@pytest.mark.asyncio
async def test_register_attachment_under_tenant_prefix(db_session, master_a, tenancy, cost):
    attachment = await attachments_service.register_attachment(
        db_session,
        membership_ctx=tenancy(master_a),
        payload=_upload(cost.id),
    )

    assert attachment.file_path.startswith(f"{master_a.tenant_id}/cost/{cost.id}/")
    assert attachment.file_path.endswith("_receipt.pdf")
    assert attachment.uploaded_by == master_a.id


@pytest.mark.asyncio
async def test_rejects_disallowed_type_and_oversized_file(db_session, master_a, tenancy, cost):
    ctx = tenancy(master_a)
    for payload in (
        _upload(cost.id, file_type="application/zip"),
        _upload(cost.id, file_size=10 * 1024 * 1024 + 1),
    ):
        with pytest.raises(HTTPException) as exc_info:
            await attachments_service.register_attachment(db_session, membership_ctx=ctx, payload=payload)
        assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_other_tenant_cannot_attach_to_cost(db_session, master_b, tenancy, cost):
    with pytest.raises(HTTPException) as exc_info:
        await attachments_service.register_attachment(
            db_session,
            membership_ctx=tenancy(master_b),
            payload=_upload(cost.id),
        )
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_counts_fall_back_to_zero(db_session, master_a, tenancy, cost, monkeypatch):
    ctx = tenancy(master_a)
    await attachments_service.register_attachment(db_session, membership_ctx=ctx, payload=_upload(cost.id))
    missing = uuid4()

    counts = await attachments_service.attachment_counts(
        db_session,
        membership_ctx=ctx,
        entity_type="cost",
        entity_ids=[cost.id, missing],
    )
    assert counts == {str(cost.id): 1, str(missing): 0}

    async def failing_count(*args, **kwargs):
        raise SQLAlchemyError("timeout")

    monkeypatch.setattr(attachments_repo, "count_for_entity", failing_count)
    counts = await attachments_service.attachment_counts(
        db_session,
        membership_ctx=ctx,
        entity_type="cost",
        entity_ids=[cost.id],
    )
    assert counts == {str(cost.id): 0}
