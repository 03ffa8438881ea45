"""Bearer token handling at the gateway."""

import pytest
from libs.auth.models import Role

from conftest import auth_headers_for, make_auth_user

REWARDS_URL = "/api/v1/rewards"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health_is_public(client):
    response = await client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_token_is_unauthorized(client):
    response = await client.get(REWARDS_URL)

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Not authorized, no token"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_token_is_unauthorized(client):
    response = await client.get(REWARDS_URL, headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_student_cannot_record_progress(client, tenant_id):
    student = make_auth_user(Role.STUDENT, tenant_id)

    response = await client.get(
        f"{REWARDS_URL}/activities/me", headers=auth_headers_for(student)
    )

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_member_without_tenant_is_forbidden(client):
    orphan = make_auth_user(Role.ALUMNI, None)

    response = await client.get(REWARDS_URL, headers=auth_headers_for(orphan))

    assert response.status_code == 403
    assert response.json()["message"] == "No tenant associated with this account"
