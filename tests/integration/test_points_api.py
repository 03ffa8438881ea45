"""Points balance, manual adjustments and redemption requests over HTTP."""

import uuid

import pytest
from libs.auth.models import Role

from conftest import auth_headers_for, make_auth_user
from tests.factories import MemberFactory

POINTS_URL = "/api/v1/rewards/points"
REDEEM_URL = "/api/v1/rewards/redeem-requests"


async def _seed_members(db_session, *users):
    for user in users:
        db_session.add(
            MemberFactory.create(id=user.user_id, tenant_id=user.tenant_id, email=user.email)
        )
    await db_session.commit()


async def _add_points(client, staff_user, member, points):
    response = await client.post(
        f"{POINTS_URL}/manual",
        json={
            "user_id": str(member.user_id),
            "points": points,
            "activity": "Spoke at alumni day",
        },
        headers=auth_headers_for(staff_user),
    )
    assert response.status_code == 201, response.text
    return response.json()


def _redeem_payload(points_used, **overrides):
    payload = {
        "reward_option": "Alumni hoodie",
        "points_used": points_used,
        "delivery_email": "hoodie@example.com",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
@pytest.mark.integration
async def test_manual_points_show_in_balance_and_history(
    client, db_session, staff_user, alumni_user
):
    await _seed_members(db_session, alumni_user)

    body = await _add_points(client, staff_user, alumni_user, 150)
    assert body["message"] == "Successfully added 150 points"
    assert body["data"]["entry_type"] == "manual"

    member_headers = auth_headers_for(alumni_user)
    balance = await client.get(f"{POINTS_URL}/me", headers=member_headers)
    assert balance.status_code == 200
    assert balance.json()["data"]["total_points"] == 150
    assert balance.json()["data"]["available_points"] == 150

    history = await client.get(f"{POINTS_URL}/me/history", headers=member_headers)
    assert history.json()["pagination"]["total"] == 1
    assert history.json()["data"][0]["description"] == "Spoke at alumni day"

    staff_view = await client.get(
        f"{POINTS_URL}/{alumni_user.user_id}", headers=auth_headers_for(staff_user)
    )
    assert staff_view.json()["data"]["total_points"] == 150


@pytest.mark.asyncio
@pytest.mark.integration
async def test_alumni_cannot_add_manual_points(client, db_session, alumni_user):
    await _seed_members(db_session, alumni_user)

    response = await client.post(
        f"{POINTS_URL}/manual",
        json={"user_id": str(alumni_user.user_id), "points": 500, "activity": "Self award"},
        headers=auth_headers_for(alumni_user),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_staff_cannot_touch_points_of_another_tenant(client, db_session, alumni_user):
    await _seed_members(db_session, alumni_user)
    outsider = make_auth_user(Role.STAFF, uuid.uuid4())

    response = await client.post(
        f"{POINTS_URL}/manual",
        json={"user_id": str(alumni_user.user_id), "points": 10, "activity": "Wrong college"},
        headers=auth_headers_for(outsider),
    )
    assert response.status_code == 404

    response = await client.get(
        f"{POINTS_URL}/{alumni_user.user_id}", headers=auth_headers_for(outsider)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_redeem_reject_refunds_points(client, db_session, staff_user, alumni_user):
    await _seed_members(db_session, alumni_user)
    await _add_points(client, staff_user, alumni_user, 150)
    member_headers = auth_headers_for(alumni_user)
    staff_headers = auth_headers_for(staff_user)

    response = await client.post(REDEEM_URL, json=_redeem_payload(100), headers=member_headers)
    assert response.status_code == 201, response.text
    assert response.json()["message"] == "Redemption request submitted successfully"
    redeem = response.json()["data"]
    assert redeem["status"] == "pending"

    balance = await client.get(f"{POINTS_URL}/me", headers=member_headers)
    assert balance.json()["data"]["available_points"] == 50

    too_much = await client.post(REDEEM_URL, json=_redeem_payload(51), headers=member_headers)
    assert too_much.status_code == 400
    assert too_much.json()["message"] == (
        "Insufficient points. You have 50 available points, but need 51"
    )

    queue = await client.get(REDEEM_URL, params={"status": "pending"}, headers=staff_headers)
    assert [r["id"] for r in queue.json()["data"]] == [redeem["id"]]

    short_reason = await client.post(
        f"{REDEEM_URL}/{redeem['id']}/reject", json={"reason": "No"}, headers=staff_headers
    )
    assert short_reason.status_code == 400

    response = await client.post(
        f"{REDEEM_URL}/{redeem['id']}/reject",
        json={"reason": "Hoodies are out of stock"},
        headers=staff_headers,
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Redemption request rejected and points refunded"
    assert response.json()["data"]["rejection_reason"] == "Hoodies are out of stock"

    balance = await client.get(f"{POINTS_URL}/me", headers=member_headers)
    assert balance.json()["data"]["available_points"] == 150

    mine = await client.get(f"{REDEEM_URL}/me", headers=member_headers)
    assert mine.json()["data"][0]["status"] == "rejected"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_redeem_approve_once(client, db_session, staff_user, alumni_user):
    await _seed_members(db_session, alumni_user)
    await _add_points(client, staff_user, alumni_user, 80)
    response = await client.post(
        REDEEM_URL, json=_redeem_payload(80), headers=auth_headers_for(alumni_user)
    )
    redeem_id = response.json()["data"]["id"]
    approve_url = f"{REDEEM_URL}/{redeem_id}/approve"

    response = await client.post(approve_url, headers=auth_headers_for(staff_user))
    assert response.status_code == 200
    assert response.json()["message"] == "Redemption request approved successfully"
    assert response.json()["data"]["reviewed_by"] == str(staff_user.user_id)

    again = await client.post(approve_url, headers=auth_headers_for(staff_user))
    assert again.status_code == 400
    assert again.json()["message"] == "Request is already approved"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_students_cannot_redeem(client, db_session, tenant_id):
    student = make_auth_user(Role.STUDENT, tenant_id)
    await _seed_members(db_session, student)

    response = await client.post(
        REDEEM_URL, json=_redeem_payload(1), headers=auth_headers_for(student)
    )

    assert response.status_code == 403
