"""Integration tests for organization setup."""

import pytest
from fastapi import status

API = "/api/v1"


async def _register(client, email="owner@example.com"):
    response = await client.post(
        f"{API}/auth/register",
        json={"email": email, "password": "hunter22", "name": "Owner"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.mark.asyncio
async def test_new_account_sets_up_tenant(client):
    headers = await _register(client)

    response = await client.get(f"{API}/projects", headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await client.get(f"{API}/tenants/suggest-subdomain", params={"name": "Owner Builders LLC"}, headers=headers)
    assert response.json() == {"subdomain": "owner-builders-llc"}

    response = await client.post(
        f"{API}/tenants/setup",
        json={"name": "Owner Builders", "subdomain": "owner-builders", "email": "office@owner.example.com"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["user"]["role"] == "master"

    new_headers = {"Authorization": f"Bearer {body['access_token']}"}
    response = await client.get(f"{API}/tenants/current", headers=new_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["subdomain"] == "owner-builders"

    # The pre-setup token no longer matches the account
    response = await client.get(f"{API}/tenants/current", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_setup_rejects_invalid_and_taken_subdomains(client, tenant_a):
    headers = await _register(client)

    response = await client.post(
        f"{API}/tenants/setup",
        json={"name": "Bad", "subdomain": "-bad-", "email": "office@bad.example.com"},
        headers=headers,
    )
    assert response.status_code == 422

    response = await client.post(
        f"{API}/tenants/setup",
        json={"name": "Copy", "subdomain": "tenant-a", "email": "office@copy.example.com"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT
