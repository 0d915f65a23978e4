"""Integration tests for project, change order, invoice and budget endpoints."""

import pytest
from fastapi import status

API = "/api/v1"


async def _post(client, path, headers, payload):
    response = await client.post(f"{API}{path}", json=payload, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


async def _project(client, headers, **fields):
    payload = {"job_number": "J-1", "job_name": "Plant", "customer": "Acme", "total_contract_value": 100_000}
    payload.update(fields)
    return await _post(client, "/projects", headers, payload)


def _material(cost, change_order_id=None):
    return {
        "category": "material",
        "date": "2026-07-01",
        "vendor": "Supply Co",
        "invoice_number": f"M-{cost}",
        "cost": cost,
        "change_order_id": change_order_id,
    }


@pytest.mark.asyncio
async def test_dashboard_figures(client, master_a, auth_headers):
    headers = auth_headers(master_a)
    project = await _project(client, headers)
    base = f"/projects/{project['id']}"

    change_order = await _post(client, f"{base}/change-orders", headers, {"name": "Mezzanine", "additional_contract_value": 20_000})
    await _post(client, f"{base}/costs", headers, _material(60_000))
    await _post(client, f"{base}/costs", headers, _material(30_000, change_order["id"]))
    await _post(client, f"{base}/invoices", headers, {"invoice_number": "B-1", "amount": 80_000, "date_billed": "2026-07-15"})

    response = await client.get(f"{API}{base}/summary", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    metrics = response.json()["metrics"]
    assert metrics["total_contract_value"] == 120_000
    assert metrics["total_project_costs"] == 90_000
    assert metrics["gross_profit"] == 30_000
    assert metrics["gross_profit_percentage"] == pytest.approx(25.0)
    assert metrics["total_invoiced_amount"] == 80_000
    assert metrics["amount_yet_to_bill"] == 40_000

    response = await client.get(f"{API}{base}/summary", params={"change_order": change_order["id"]}, headers=headers)
    scoped = response.json()
    assert scoped["change_order_scope"] == change_order["id"]
    assert scoped["metrics"]["total_project_costs"] == 30_000
    assert scoped["metrics"]["total_invoiced_amount"] == 0

    response = await client.get(f"{API}{base}/change-orders/summary", headers=headers)
    assert response.json() == {"count": 1, "total_additional_value": 20_000, "average_value": 20_000}


@pytest.mark.asyncio
async def test_invalid_change_order_scope(client, master_a, auth_headers):
    headers = auth_headers(master_a)
    project = await _project(client, headers)

    response = await client.get(f"{API}/projects/{project['id']}/summary", params={"change_order": "nope"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_deleting_change_order_moves_costs_to_base(client, master_a, auth_headers):
    headers = auth_headers(master_a)
    project = await _project(client, headers)
    base = f"/projects/{project['id']}"
    change_order = await _post(client, f"{base}/change-orders", headers, {"name": "Extra", "additional_contract_value": 5_000})
    cost = await _post(client, f"{base}/costs", headers, _material(1_500, change_order["id"]))

    response = await client.delete(f"{API}{base}/change-orders/{change_order['id']}", headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    response = await client.get(f"{API}{base}/costs/{cost['id']}", headers=headers)
    assert response.json()["change_order_id"] is None

    response = await client.get(f"{API}{base}/costs/totals", params={"change_order": "base"}, headers=headers)
    assert response.json()["totals"]["material"] == 1_500


@pytest.mark.asyncio
async def test_project_listing_and_status(client, master_a, auth_headers):
    headers = auth_headers(master_a)
    project = await _project(client, headers)
    await _project(client, headers, job_number="J-2", status="Inactive")

    response = await client.get(f"{API}/projects", headers=headers)
    assert [p["job_number"] for p in response.json()] == ["J-1"]

    response = await client.get(f"{API}/projects", params={"include_inactive": "true"}, headers=headers)
    assert len(response.json()) == 2

    response = await client.patch(f"{API}/projects/{project['id']}/status", json={"status": "Completed"}, headers=headers)
    assert response.json()["status"] == "Completed"

    response = await client.patch(f"{API}/projects/{project['id']}/status", json={"status": "Paused"}, headers=headers)
    assert response.status_code == 422

    response = await client.delete(f"{API}/projects/{project['id']}", headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    response = await client.get(f"{API}/projects/{project['id']}", headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_budget_endpoints(client, master_a, auth_headers):
    headers = auth_headers(master_a)
    project = await _project(client, headers)
    base = f"{API}/projects/{project['id']}/budget"

    response = await client.get(base, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] is None
    assert response.json()["total_budget"] == 0

    response = await client.put(base, json={"material_budget": 40_000, "labor_budget": 10_000}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["total_budget"] == 50_000

    response = await client.patch(f"{base}/cap_leases", json={"amount": 2_000}, headers=headers)
    assert response.json()["cap_leases_budget"] == 2_000
    assert response.json()["material_budget"] == 40_000

    response = await client.patch(f"{base}/fuel", json={"amount": 10}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = await client.patch(f"{base}/labor", json={"amount": -1}, headers=headers)
    assert response.status_code == 422

    await _post(client, f"/projects/{project['id']}/costs", headers, _material(45_000))
    response = await client.get(f"{base}/variance", headers=headers)
    lines = {line["category"]: line for line in response.json()["lines"]}
    assert lines["material"]["status"] == "over_budget"
    assert lines["material"]["color"] == "red"
    assert lines["material"]["variance"] == -5_000


@pytest.mark.asyncio
async def test_invoice_requires_positive_amount(client, master_a, auth_headers):
    headers = auth_headers(master_a)
    project = await _project(client, headers)

    response = await client.post(
        f"{API}/projects/{project['id']}/invoices",
        json={"invoice_number": "B-0", "amount": 0, "date_billed": "2026-07-01"},
        headers=headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_view_role_cannot_write_projects(client, create_user, tenant_a, auth_headers):
    viewer = await create_user(tenant=tenant_a, role="view", permissions={"projects": "read"})

    response = await client.post(
        f"{API}/projects",
        json={"job_number": "V-1", "job_name": "Nope", "customer": "Acme"},
        headers=auth_headers(viewer),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await client.get(f"{API}/projects", headers=auth_headers(viewer))
    assert response.status_code == status.HTTP_200_OK
