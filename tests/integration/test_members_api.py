"""Invitations, member directory and tenants over HTTP."""

from unittest.mock import AsyncMock

import pytest
from libs.auth.models import Role
from tests.factories import MemberFactory

from conftest import auth_headers_for, make_auth_user

INVITATIONS_URL = "/api/v1/invitations"
SEND_EMAIL = "services.members_service.services.invitation_service.send_email"


@pytest.fixture
def mock_send_email(monkeypatch):
    mock = AsyncMock(return_value=True)
    monkeypatch.setattr(SEND_EMAIL, mock)
    return mock


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invite_check_and_accept(client, alumni_user, mock_send_email):
    headers = auth_headers_for(alumni_user)
    payload = {"name": "Grace Grad", "email": "grace@example.com", "graduation_year": 2019}

    response = await client.post(INVITATIONS_URL, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    invitation = response.json()["data"]
    assert invitation["status"] == "sent"
    token = mock_send_email.await_args.kwargs["body"].split("token=")[1].split()[0]

    duplicate = await client.post(INVITATIONS_URL, json=payload, headers=headers)
    assert duplicate.status_code == 400

    check = await client.get(f"{INVITATIONS_URL}/check/Grace@example.com", headers=headers)
    assert check.json()["data"] == {
        "email": "grace@example.com",
        "exists": True,
        "status": "sent",
    }

    opened = await client.get(f"{INVITATIONS_URL}/token/{token}")
    assert opened.status_code == 200
    assert opened.json()["data"]["status"] == "opened"

    accepted = await client.post(f"{INVITATIONS_URL}/token/{token}/accept")
    assert accepted.json()["data"]["status"] == "accepted"

    mine = await client.get(INVITATIONS_URL, headers=headers)
    assert mine.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_students_cannot_invite(client, tenant_id, mock_send_email):
    student = make_auth_user(Role.STUDENT, tenant_id)

    response = await client.post(
        INVITATIONS_URL,
        json={"name": "Someone", "email": "someone@example.com", "graduation_year": 2020},
        headers=auth_headers_for(student),
    )

    assert response.status_code == 403
    mock_send_email.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_member_directory_is_tenant_scoped(client, db_session, admin_user, tenant_id):
    db_session.add(MemberFactory.create(tenant_id=tenant_id, first_name="Inside"))
    db_session.add(MemberFactory.create(first_name="Outside"))
    await db_session.commit()

    response = await client.get("/api/v1/members", headers=auth_headers_for(admin_user))

    assert response.status_code == 200
    assert [m["first_name"] for m in response.json()["data"]] == ["Inside"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_me(client, db_session, alumni_user, tenant_id):
    db_session.add(
        MemberFactory.create(id=alumni_user.user_id, tenant_id=tenant_id, first_name="Me")
    )
    await db_session.commit()

    response = await client.get("/api/v1/members/me", headers=auth_headers_for(alumni_user))

    assert response.json()["data"]["first_name"] == "Me"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_only_super_admin_manages_tenants(client, admin_user):
    super_admin = make_auth_user(Role.SUPER_ADMIN)

    forbidden = await client.get("/api/v1/tenants", headers=auth_headers_for(admin_user))
    assert forbidden.status_code == 403

    created = await client.post(
        "/api/v1/tenants",
        json={"name": "Riverside College", "domain": "riverside.example.com"},
        headers=auth_headers_for(super_admin),
    )
    assert created.status_code == 201, created.text

    listing = await client.get("/api/v1/tenants", headers=auth_headers_for(super_admin))
    assert [t["name"] for t in listing.json()["data"]] == ["Riverside College"]
