"""Integration tests for the invitation endpoints."""

from datetime import timedelta

import pytest
from fastapi import status

from db import utcnow
from repos import invitations_repo

API = "/api/v1"


async def _invite(client, headers, email="crew@example.com", role="entry", permissions=None):
    response = await client.post(
        f"{API}/invitations",
        json={"email": email, "role": role, "permissions": permissions or {"labor": "write", "projects": "read"}},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


async def _token_for(db_session, tenant_id, email="crew@example.com"):
    invitation = await invitations_repo.get_pending_for_email(db_session, tenant_id=tenant_id, email=email)
    return invitation.invitation_token


@pytest.mark.asyncio
async def test_invite_lookup_and_create_account(client, db_session, master_a, auth_headers):
    headers = auth_headers(master_a)
    invitation = await _invite(client, headers)
    assert "invitation_token" not in invitation
    token = await _token_for(db_session, master_a.tenant_id)

    response = await client.get(f"{API}/invitations/lookup", params={"token": token})
    assert response.status_code == status.HTTP_200_OK
    lookup = response.json()
    assert lookup["tenant_name"] == "Tenant A"
    assert lookup["inviter_name"] == "Master A"
    assert lookup["email"] == "crew@example.com"

    response = await client.post(
        f"{API}/invitations/create-user",
        json={"invitation_token": token, "password": "hunter22", "name": "Crew Member"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["user"]["tenant_id"] == str(master_a.tenant_id)
    assert body["user"]["permissions"] == {"labor": "write", "projects": "read"}

    # The new account can use its token straight away
    new_headers = {"Authorization": f"Bearer {body['access_token']}"}
    response = await client.get(f"{API}/projects", headers=new_headers)
    assert response.status_code == status.HTTP_200_OK

    response = await client.post(
        f"{API}/invitations/create-user",
        json={"invitation_token": token, "password": "hunter22", "name": "Replay"},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = await client.get(f"{API}/invitations", headers=headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_short_password_is_rejected(client, db_session, master_a, auth_headers):
    await _invite(client, auth_headers(master_a))
    token = await _token_for(db_session, master_a.tenant_id)

    response = await client.post(
        f"{API}/invitations/create-user",
        json={"invitation_token": token, "password": "12345", "name": "Crew"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_expired_invitation_returns_gone(client, db_session, master_a, auth_headers):
    await _invite(client, auth_headers(master_a))
    invitation = await invitations_repo.get_pending_for_email(
        db_session,
        tenant_id=master_a.tenant_id,
        email="crew@example.com",
    )
    invitation.expires_at = utcnow() - timedelta(minutes=1)
    await db_session.commit()

    response = await client.get(f"{API}/invitations/lookup", params={"token": invitation.invitation_token})
    assert response.status_code == status.HTTP_410_GONE

    response = await client.post(
        f"{API}/invitations/create-user",
        json={"invitation_token": invitation.invitation_token, "password": "hunter22", "name": "Late"},
    )
    assert response.status_code == status.HTTP_410_GONE

    # Still listed for the admin, who can resend it
    response = await client.get(f"{API}/invitations", headers=auth_headers(master_a))
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_duplicate_invitation_conflicts(client, master_a, auth_headers):
    headers = auth_headers(master_a)
    await _invite(client, headers)

    response = await client.post(
        f"{API}/invitations",
        json={"email": "Crew@Example.com", "role": "view"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT

    response = await client.post(
        f"{API}/users/check-exists",
        json={"email": "crew@example.com"},
        headers=headers,
    )
    assert response.json() == {
        "user_exists_in_tenant": False,
        "pending_invitation": True,
        "account_exists": False,
        "can_invite": False,
    }


@pytest.mark.asyncio
async def test_inviting_requires_users_write(client, create_user, tenant_a, auth_headers):
    reader = await create_user(tenant=tenant_a, role="entry", permissions={"users": "read"})

    response = await client.post(
        f"{API}/invitations",
        json={"email": "crew@example.com", "role": "entry"},
        headers=auth_headers(reader),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await client.get(f"{API}/invitations", headers=auth_headers(reader))
    assert response.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
async def test_join_with_existing_account(client, db_session, master_a, auth_headers):
    await _invite(client, auth_headers(master_a), email="solo@example.com")
    token = await _token_for(db_session, master_a.tenant_id, email="solo@example.com")

    response = await client.post(
        f"{API}/auth/register",
        json={"email": "solo@example.com", "password": "hunter22", "name": "Solo"},
    )
    solo_headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    response = await client.post(f"{API}/invitations/join", json={"invitation_token": token}, headers=solo_headers)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["user"]["tenant_id"] == str(master_a.tenant_id)

    joined_headers = {"Authorization": f"Bearer {body['access_token']}"}
    response = await client.get(f"{API}/tenants/current", headers=joined_headers)
    assert response.json()["id"] == str(master_a.tenant_id)


@pytest.mark.asyncio
async def test_join_with_other_email_is_forbidden(client, db_session, master_a, create_user, auth_headers):
    await _invite(client, auth_headers(master_a))
    token = await _token_for(db_session, master_a.tenant_id)
    stranger = await create_user(email="stranger@example.com")

    response = await client.post(
        f"{API}/invitations/join",
        json={"invitation_token": token},
        headers=auth_headers(stranger),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_resend_and_cancel(client, db_session, master_a, auth_headers):
    headers = auth_headers(master_a)
    invitation = await _invite(client, headers)
    token = await _token_for(db_session, master_a.tenant_id)

    response = await client.post(f"{API}/invitations/{invitation['id']}/resend", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert await _token_for(db_session, master_a.tenant_id) == token

    response = await client.post(f"{API}/invitations/{invitation['id']}/cancel", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "cancelled"

    response = await client.post(f"{API}/invitations/{invitation['id']}/resend", headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = await client.get(f"{API}/invitations/lookup", params={"token": token})
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_accept_by_id(client, master_a, create_user, auth_headers):
    invitation = await _invite(client, auth_headers(master_a))
    invitee = await create_user(email="crew@example.com", role="entry", permissions={})
    other = await create_user(email="other@example.com", role="entry", permissions={})

    response = await client.post(
        f"{API}/invitations/accept",
        json={"invitation_id": invitation["id"]},
        headers=auth_headers(other),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await client.post(
        f"{API}/invitations/accept",
        json={"invitation_id": invitation["id"]},
        headers=auth_headers(invitee),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "accepted"

    response = await client.post(
        f"{API}/invitations/accept",
        json={"invitation_id": invitation["id"]},
        headers=auth_headers(invitee),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
