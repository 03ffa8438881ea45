"""Reward catalog, progress, verification and claim over HTTP."""

import uuid

import pytest
from libs.auth.models import Role

from conftest import auth_headers_for, make_auth_user

REWARDS_URL = "/api/v1/rewards"
VERIFY_URL = "/api/v1/rewards/verifications"


def _reward_payload(**overrides):
    payload = {
        "title": "Mentor a Student",
        "description": "Run three mentoring sessions",
        "category": "mentorship",
        "cost": 200,
        "tasks": [
            {
                "title": "Mentoring sessions",
                "task_type": "mentorship",
                "target_amount": 3,
                "requires_verification": True,
            }
        ],
    }
    payload.update(overrides)
    return payload


async def _create_reward(client, admin_user, **overrides):
    response = await client.post(
        REWARDS_URL, json=_reward_payload(**overrides), headers=auth_headers_for(admin_user)
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_creates_reward_in_own_tenant(client, admin_user, tenant_id):
    reward = await _create_reward(client, admin_user)

    assert reward["tenant_id"] == str(tenant_id)
    assert reward["category"] == "mentorship"
    assert len(reward["tasks"]) == 1
    assert reward["tasks"][0]["requires_verification"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_alumni_cannot_create_reward(client, alumni_user):
    response = await client.post(
        REWARDS_URL, json=_reward_payload(), headers=auth_headers_for(alumni_user)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_window_is_rejected(client, admin_user):
    response = await client.post(
        REWARDS_URL,
        json=_reward_payload(
            starts_at="2030-01-10T00:00:00Z", ends_at="2030-01-01T00:00:00Z"
        ),
        headers=auth_headers_for(admin_user),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_rewards_is_paginated(client, admin_user, alumni_user):
    for i in range(3):
        await _create_reward(client, admin_user, title=f"Reward {i}")

    response = await client.get(
        REWARDS_URL, params={"page": 1, "limit": 2}, headers=auth_headers_for(alumni_user)
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_other_tenant_cannot_see_reward(client, admin_user):
    reward = await _create_reward(client, admin_user)
    outsider_headers = auth_headers_for(make_auth_user(Role.ALUMNI, uuid.uuid4()))

    response = await client.get(f"{REWARDS_URL}/{reward['id']}", headers=outsider_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_archive_hides_reward(client, admin_user, alumni_user):
    reward = await _create_reward(client, admin_user)

    response = await client.delete(
        f"{REWARDS_URL}/{reward['id']}", headers=auth_headers_for(admin_user)
    )
    assert response.status_code == 200
    assert response.json()["data"]["archived_at"] is not None

    listing = await client.get(REWARDS_URL, headers=auth_headers_for(alumni_user))
    assert listing.json()["pagination"]["total"] == 0


# ---------------------------------------------------------------------------
# Progress, verification, claim
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_full_redemption_flow(client, admin_user, staff_user, alumni_user):
    reward = await _create_reward(client, admin_user)
    member_headers = auth_headers_for(alumni_user)
    progress_url = f"{REWARDS_URL}/{reward['id']}/progress"

    response = await client.post(progress_url, json={"amount": 2}, headers=member_headers)
    assert response.status_code == 200, response.text
    assert response.json()["data"]["status"] == "in_progress"

    response = await client.post(progress_url, json={"amount": 1}, headers=member_headers)
    activity = response.json()["data"]
    assert activity["status"] == "pending_verification"

    queue = await client.get(VERIFY_URL, headers=auth_headers_for(staff_user))
    assert queue.status_code == 200
    items = queue.json()["data"]
    assert [item["id"] for item in items] == [activity["id"]]
    assert items[0]["task_title"] == "Mentoring sessions"

    response = await client.post(
        f"{VERIFY_URL}/{activity['id']}",
        json={"action": "approve"},
        headers=auth_headers_for(staff_user),
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Task approved successfully"
    assert response.json()["data"]["points_awarded"] == 200

    response = await client.post(
        f"{REWARDS_URL}/{reward['id']}/claim", json={}, headers=member_headers
    )
    assert response.status_code == 200
    claimed = response.json()["data"]
    assert claimed["status"] == "claimed"
    assert claimed["voucher_code"]

    again = await client.post(
        f"{REWARDS_URL}/{reward['id']}/claim", json={}, headers=member_headers
    )
    assert again.status_code == 400
    assert again.json()["message"] == "Reward already claimed"

    summary = await client.get(f"{REWARDS_URL}/summary/me", headers=member_headers)
    data = summary.json()["data"]
    assert data["claimed"] == 1
    assert data["total_points"] == 200
    assert data["redeemed_points"] == 200
    assert data["available_points"] == 0
    assert data["tier"]["current_tier"] == "bronze"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_member_cannot_claim_for_someone_else(client, admin_user, alumni_user):
    reward = await _create_reward(client, admin_user)
    other = make_auth_user(Role.ALUMNI, alumni_user.tenant_id)

    response = await client.post(
        f"{REWARDS_URL}/{reward['id']}/claim",
        json={"user_id": str(other.user_id)},
        headers=auth_headers_for(alumni_user),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_zero_amount_fails_validation(client, admin_user, alumni_user):
    reward = await _create_reward(client, admin_user)

    response = await client.post(
        f"{REWARDS_URL}/{reward['id']}/progress",
        json={"amount": 0},
        headers=auth_headers_for(alumni_user),
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_alumni_cannot_verify(client, admin_user, alumni_user):
    reward = await _create_reward(client, admin_user)
    response = await client.post(
        f"{REWARDS_URL}/{reward['id']}/progress",
        json={"amount": 3},
        headers=auth_headers_for(alumni_user),
    )
    activity_id = response.json()["data"]["id"]

    response = await client.post(
        f"{VERIFY_URL}/{activity_id}",
        json={"action": "approve"},
        headers=auth_headers_for(alumni_user),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_reject_and_resubmit(client, admin_user, staff_user, alumni_user):
    reward = await _create_reward(client, admin_user)
    member_headers = auth_headers_for(alumni_user)
    response = await client.post(
        f"{REWARDS_URL}/{reward['id']}/progress", json={"amount": 3}, headers=member_headers
    )
    activity_id = response.json()["data"]["id"]

    response = await client.post(
        f"{VERIFY_URL}/{activity_id}",
        json={"action": "reject", "reason": "Missing session notes"},
        headers=auth_headers_for(staff_user),
    )
    assert response.json()["data"]["status"] == "rejected"
    assert response.json()["data"]["verification_reason"] == "Missing session notes"

    response = await client.post(
        f"{REWARDS_URL}/activities/{activity_id}/resubmit",
        json={"note": "Notes attached"},
        headers=member_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "pending_verification"

    stats = await client.get(f"{VERIFY_URL}/stats", headers=auth_headers_for(staff_user))
    assert stats.json()["data"]["pending_verification"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tier_and_leaderboard(client, admin_user, alumni_user):
    reward = await _create_reward(
        client,
        admin_user,
        cost=600,
        tasks=[{"title": "Attend reunion", "target_amount": 1}],
    )
    await client.post(
        f"{REWARDS_URL}/{reward['id']}/progress",
        json={"amount": 1},
        headers=auth_headers_for(alumni_user),
    )

    tier = await client.get(f"{REWARDS_URL}/tier/me", headers=auth_headers_for(alumni_user))
    assert tier.json()["data"]["current_tier"] == "silver"
    assert tier.json()["data"]["next_tier"] == "gold"

    board = await client.get(
        "/api/v1/leaderboard/points", headers=auth_headers_for(alumni_user)
    )
    assert board.status_code == 200
    entries = board.json()["data"]
    assert entries[0]["user_id"] == str(alumni_user.user_id)
    assert entries[0]["points"] == 600
    assert entries[0]["rank"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_only_staff_can_request_review_through_context(
    client, admin_user, staff_user, alumni_user
):
    reward = await _create_reward(
        client,
        admin_user,
        tasks=[{"title": "Share a story", "target_amount": 1, "requires_verification": False}],
    )
    progress_url = f"{REWARDS_URL}/{reward['id']}/progress"
    body = {"amount": 1, "context": {"requires_verification": True, "source": "web"}}

    member = await client.post(progress_url, json=body, headers=auth_headers_for(alumni_user))
    assert member.status_code == 200, member.text
    assert member.json()["data"]["status"] == "approved"
    assert member.json()["data"]["context"] == {"source": "web"}

    staff = await client.post(progress_url, json=body, headers=auth_headers_for(staff_user))
    assert staff.status_code == 200, staff.text
    assert staff.json()["data"]["status"] == "pending_verification"
