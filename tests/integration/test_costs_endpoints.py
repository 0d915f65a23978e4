"""Integration tests for cost, employee and attachment endpoints."""

import pytest
import pytest_asyncio
from fastapi import status

API = "/api/v1"


@pytest_asyncio.fixture
async def project(client, master_a, auth_headers):
    response = await client.post(
        f"{API}/projects",
        json={"job_number": "C-1", "job_name": "Refinery", "customer": "Acme"},
        headers=auth_headers(master_a),
    )
    return response.json()


@pytest.mark.asyncio
async def test_labor_entry_through_api(client, master_a, auth_headers, project):
    headers = auth_headers(master_a)
    response = await client.post(
        f"{API}/employees",
        json={"name": "Jo Fitter", "standard_rate": 45, "ot_rate": 67.5, "dt_rate": 90, "mob_rate": 100},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    employee = response.json()

    response = await client.post(
        f"{API}/projects/{project['id']}/costs",
        json={"category": "labor", "date": "2026-08-03", "employee_id": employee["id"], "st_hours": 8, "mob_qty": 1},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    cost = response.json()
    assert cost["employee_name"] == "Jo Fitter"
    assert cost["cost"] == 8 * 45 + 100

    response = await client.get(f"{API}/projects/{project['id']}/costs/totals", headers=headers)
    assert response.json()["totals"]["labor"] == 460
    assert response.json()["counts"]["labor"] == 1

    response = await client.delete(f"{API}/employees/{employee['id']}", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    response = await client.get(f"{API}/employees", params={"project_id": project["id"]}, headers=headers)
    assert [e["name"] for e in response.json()] == ["Jo Fitter"]


@pytest.mark.asyncio
async def test_cost_validation_errors(client, master_a, auth_headers, project):
    headers = auth_headers(master_a)
    base = f"{API}/projects/{project['id']}/costs"

    response = await client.post(base, json={"category": "material", "date": "2026-08-03", "cost": 10}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = await client.post(
        base,
        json={"category": "fuel", "date": "2026-08-03", "vendor": "V", "invoice_number": "I", "cost": 10},
        headers=headers,
    )
    assert response.status_code == 422

    response = await client.get(base, params={"category": "fuel"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_per_category_permissions(client, master_a, create_user, tenant_a, auth_headers, project):
    base = f"{API}/projects/{project['id']}/costs"
    await client.post(
        base,
        json={"category": "equipment", "date": "2026-08-03", "vendor": "Rent", "invoice_number": "E-1", "cost": 300},
        headers=auth_headers(master_a),
    )
    clerk = await create_user(
        tenant=tenant_a,
        role="entry",
        permissions={"material": "write", "equipment": "none", "projects": "read"},
    )
    headers = auth_headers(clerk)

    response = await client.post(
        base,
        json={"category": "material", "date": "2026-08-04", "vendor": "Yard", "invoice_number": "M-1", "cost": 50},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED

    response = await client.post(
        base,
        json={"category": "equipment", "date": "2026-08-04", "vendor": "Rent", "invoice_number": "E-2", "cost": 50},
        headers=headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await client.get(base, headers=headers)
    assert [cost["category"] for cost in response.json()] == ["material"]

    response = await client.get(base, params={"category": "equipment"}, headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_attachment_lifecycle(client, master_a, auth_headers, project):
    headers = auth_headers(master_a)
    response = await client.post(
        f"{API}/projects/{project['id']}/costs",
        json={"category": "consumable", "date": "2026-08-05", "vendor": "Gas", "invoice_number": "G-1", "cost": 12},
        headers=headers,
    )
    cost = response.json()

    response = await client.post(
        f"{API}/attachments",
        json={
            "entity_type": "cost",
            "entity_id": cost["id"],
            "file_name": "gas receipt.jpg",
            "file_size": 5120,
            "file_type": "image/jpeg",
        },
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    attachment = response.json()
    assert attachment["file_path"].startswith(f"{master_a.tenant_id}/cost/{cost['id']}/")
    assert attachment["file_path"].endswith("_gas_receipt.jpg")

    response = await client.get(
        f"{API}/attachments",
        params={"entity_type": "cost", "entity_id": cost["id"]},
        headers=headers,
    )
    assert [a["id"] for a in response.json()] == [attachment["id"]]

    response = await client.get(
        f"{API}/attachments/counts",
        params={"entity_type": "cost", "entity_ids": [cost["id"]]},
        headers=headers,
    )
    assert response.json() == {cost["id"]: 1}

    response = await client.delete(f"{API}/attachments/{attachment['id']}", headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    response = await client.get(
        f"{API}/attachments/counts",
        params={"entity_type": "cost", "entity_ids": [cost["id"]]},
        headers=headers,
    )
    assert response.json() == {cost["id"]: 0}
