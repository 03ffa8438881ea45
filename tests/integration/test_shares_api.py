"""Community post share tracking."""

import uuid

import pytest
from libs.auth.models import Role

from conftest import auth_headers_for, make_auth_user


def _shares_url(post_id):
    return f"/api/v1/posts/{post_id}/shares"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_track_share_returns_running_count(client, alumni_user):
    post_id = uuid.uuid4()
    headers = {**auth_headers_for(alumni_user), "User-Agent": "pytest-agent"}

    first = await client.post(_shares_url(post_id), json={"platform": "linkedin"}, headers=headers)
    assert first.status_code == 201, first.text
    assert first.json()["data"]["share_count"] == 1
    share = first.json()["data"]["share"]
    assert share["user_id"] == str(alumni_user.user_id)
    assert share["details"]["user_agent"] == "pytest-agent"

    second = await client.post(
        _shares_url(post_id), json={"platform": "whatsapp"}, headers=headers
    )
    assert second.json()["data"]["share_count"] == 2

    count = await client.get(f"{_shares_url(post_id)}/count", headers=headers)
    assert count.json()["data"] == {"post_id": str(post_id), "share_count": 2}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_platform_is_rejected(client, alumni_user):
    response = await client.post(
        _shares_url(uuid.uuid4()),
        json={"platform": "myspace"},
        headers=auth_headers_for(alumni_user),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_share_analytics_by_platform(client, alumni_user, tenant_id):
    post_id = uuid.uuid4()
    other = make_auth_user(Role.ALUMNI, tenant_id)
    for user, platform in ((alumni_user, "twitter"), (other, "twitter"), (other, "facebook")):
        await client.post(
            _shares_url(post_id), json={"platform": platform}, headers=auth_headers_for(user)
        )

    response = await client.get(
        f"{_shares_url(post_id)}/analytics", headers=auth_headers_for(alumni_user)
    )

    assert response.status_code == 200
    by_platform = {row["platform"]: row["count"] for row in response.json()["data"]}
    assert by_platform == {"twitter": 2, "facebook": 1}

    recent = await client.get(
        f"{_shares_url(post_id)}/recent", params={"limit": 2}, headers=auth_headers_for(other)
    )
    assert len(recent.json()["data"]) == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_trending_orders_by_share_count(client, alumni_user):
    popular, quiet = uuid.uuid4(), uuid.uuid4()
    headers = auth_headers_for(alumni_user)
    for platform in ("internal", "copy_link", "telegram"):
        await client.post(_shares_url(popular), json={"platform": platform}, headers=headers)
    await client.post(_shares_url(quiet), json={"platform": "internal"}, headers=headers)

    response = await client.get(
        "/api/v1/shares/trending", params={"timeRange": "day"}, headers=headers
    )

    assert response.status_code == 200
    posts = response.json()["data"]
    assert [p["post_id"] for p in posts] == [str(popular), str(quiet)]
    assert posts[0]["share_count"] == 3
    assert sorted(posts[0]["platforms"]) == ["copy_link", "internal", "telegram"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_shares_require_authentication(client):
    response = await client.post(_shares_url(uuid.uuid4()), json={"platform": "internal"})
    assert response.status_code == 401
