"""Notification inbox fed by reward events."""

import uuid

import pytest
from services.communications_service.services import notification_service

from conftest import auth_headers_for

NOTIFICATIONS_URL = "/api/v1/notifications"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_inbox_and_read_flow(client, db_session, alumni_user):
    await notification_service.send(
        db_session,
        recipients=[alumni_user.user_id],
        event="badge_awarded",
        data={"badge_id": uuid.uuid4(), "badge_name": "Trailblazer"},
    )
    await notification_service.send(
        db_session,
        recipients=[alumni_user.user_id, uuid.uuid4()],
        event="reward_claimed",
        data={"reward_title": "Coffee Voucher", "voucher_code": "RV-1234"},
    )
    headers = auth_headers_for(alumni_user)

    inbox = await client.get(NOTIFICATIONS_URL, headers=headers)
    assert inbox.status_code == 200
    items = inbox.json()["data"]
    assert len(items) == 2
    messages = {n["event"]: n["message"] for n in items}
    assert messages["badge_awarded"] == "You earned the 'Trailblazer' badge."

    unread = await client.get(f"{NOTIFICATIONS_URL}/unread-count", headers=headers)
    assert unread.json()["data"]["unread"] == 2

    response = await client.post(f"{NOTIFICATIONS_URL}/{items[0]['id']}/read", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["is_read"] is True

    response = await client.post(f"{NOTIFICATIONS_URL}/read-all", headers=headers)
    assert response.json()["message"] == "1 notifications marked as read"

    unread = await client.get(f"{NOTIFICATIONS_URL}/unread-count", headers=headers)
    assert unread.json()["data"]["unread"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cannot_read_someone_elses_notification(client, db_session, alumni_user, staff_user):
    [notification] = await notification_service.send(
        db_session, recipients=[staff_user.user_id], event="reward_task_submitted"
    )

    response = await client.post(
        f"{NOTIFICATIONS_URL}/{notification.id}/read", headers=auth_headers_for(alumni_user)
    )

    assert response.status_code == 404
