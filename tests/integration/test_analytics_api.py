"""Reward analytics reports and the department/badge leaderboards over HTTP.

Activities are seeded through the services for two colleges so every report
can be checked for its totals and for staying inside the caller's tenant.
"""

import uuid
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from libs.auth.models import Role
from services.rewards_service.models import RewardCategory, UserTaskActivity
from services.rewards_service.services import activity_service, badge_service
from sqlalchemy import update

from conftest import auth_headers_for, make_auth_user
from tests.factories import (
    BadgeFactory,
    MemberFactory,
    RewardTaskFactory,
    RewardTemplateFactory,
)

ANALYTICS_URL = "/api/v1/rewards/analytics"
LEADERBOARD_URL = "/api/v1/leaderboard"


def _last_month() -> tuple[datetime, str]:
    now = datetime.now(timezone.utc)
    year, month = (now.year - 1, 12) if now.month == 1 else (now.year, now.month - 1)
    return datetime(year, month, 15, 12, tzinfo=timezone.utc), f"{year:04d}-{month:02d}"


async def _reward(db, tenant_id, *, title, category, cost, target=1):
    task = RewardTaskFactory.create(title=f"{title} task", target_amount=target)
    template = RewardTemplateFactory.create(
        tasks=[task], tenant_id=tenant_id, title=title, category=category, cost=cost
    )
    db.add(template)
    await db.commit()
    return template


async def _progress(db, template, member, amount):
    return await activity_service.record_task_progress(
        db,
        reward_id=template.id,
        user_id=member.id,
        tenant_id=member.tenant_id,
        amount=amount,
    )


async def _claim(db, template, member):
    return await activity_service.claim_reward(
        db,
        reward_id=template.id,
        user_id=member.id,
        tenant_id=member.tenant_id,
        issuer_id=member.id,
    )


async def _award(db, badge, member):
    await badge_service.award_badge(
        db, badge_id=badge.id, user_id=member.id, tenant_id=member.tenant_id
    )


@pytest_asyncio.fixture
async def seeded(db_session, tenant_id):
    """Two colleges.

    Home college: alice (Computer Science) claimed Campus Meetup last month and
    finished Mentor Circle; bob (Mechanical) finished Campus Meetup and is half
    way through Mentor Circle; carol (Mechanical) has done nothing.
    Other college: dave (Computer Science) claimed a 1000 point reward today.
    """
    other_tenant = uuid.uuid4()
    alice = MemberFactory.create(tenant_id=tenant_id, first_name="Alice")
    bob = MemberFactory.create(tenant_id=tenant_id, first_name="Bob", department="Mechanical")
    carol = MemberFactory.create(
        tenant_id=tenant_id, first_name="Carol", department="Mechanical"
    )
    dave = MemberFactory.create(tenant_id=other_tenant, first_name="Dave")
    db_session.add_all([alice, bob, carol, dave])
    await db_session.commit()

    meetup = await _reward(
        db_session, tenant_id, title="Campus Meetup", category=RewardCategory.EVENT, cost=100
    )
    mentor = await _reward(
        db_session,
        tenant_id,
        title="Mentor Circle",
        category=RewardCategory.MENTORSHIP,
        cost=300,
        target=2,
    )
    gala = await _reward(
        db_session, other_tenant, title="Founders Gala", category=RewardCategory.EVENT, cost=1000
    )

    await _progress(db_session, meetup, alice, 1)
    claimed = await _claim(db_session, meetup, alice)
    await _progress(db_session, mentor, alice, 2)
    await _progress(db_session, meetup, bob, 1)
    await _progress(db_session, mentor, bob, 1)
    await _progress(db_session, gala, dave, 1)
    await _claim(db_session, gala, dave)

    claimed_at, month_key = _last_month()
    await db_session.execute(
        update(UserTaskActivity)
        .where(UserTaskActivity.id == claimed.id)
        .values(claimed_at=claimed_at)
    )
    await db_session.commit()

    gold = BadgeFactory.create(name="Gold Star", points=25)
    silver = BadgeFactory.create(name="Silver Star", points=10)
    helper = BadgeFactory.create(name="Helping Hand", points=50)
    db_session.add_all([gold, silver, helper])
    await db_session.commit()
    await _award(db_session, gold, alice)
    await _award(db_session, silver, alice)
    await _award(db_session, helper, bob)
    await _award(db_session, gold, dave)
    await _award(db_session, helper, dave)

    return {
        "alice": alice,
        "bob": bob,
        "dave": dave,
        "meetup": meetup,
        "mentor": mentor,
        "other_tenant": other_tenant,
        "claim_month": month_key,
    }


# ---------------------------------------------------------------------------
# Analytics reports
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_points_distribution_by_category(client, seeded, staff_user):
    response = await client.get(
        f"{ANALYTICS_URL}/points-distribution", headers=auth_headers_for(staff_user)
    )

    assert response.status_code == 200, response.text
    assert response.json()["data"] == [
        {"category": "mentorship", "points": 300, "activities": 1, "percentage": 60.0},
        {"category": "event", "points": 200, "activities": 2, "percentage": 40.0},
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_super_admin_picks_tenant_for_distribution(client, seeded):
    super_admin = make_auth_user(Role.SUPER_ADMIN)

    response = await client.get(
        f"{ANALYTICS_URL}/points-distribution",
        params={"tenant_id": str(seeded["other_tenant"])},
        headers=auth_headers_for(super_admin),
    )

    assert response.json()["data"] == [
        {"category": "event", "points": 1000, "activities": 1, "percentage": 100.0},
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_staff_cannot_switch_tenant(client, seeded, staff_user):
    response = await client.get(
        f"{ANALYTICS_URL}/points-distribution",
        params={"tenant_id": str(seeded["other_tenant"])},
        headers=auth_headers_for(staff_user),
    )

    categories = [row["category"] for row in response.json()["data"]]
    assert categories == ["mentorship", "event"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_task_completion_rates_and_top_tasks(client, seeded, staff_user):
    response = await client.get(
        f"{ANALYTICS_URL}/task-completion", headers=auth_headers_for(staff_user)
    )

    data = response.json()["data"]
    assert data["by_category"] == [
        {"category": "event", "counts": {"approved": 1, "claimed": 1}, "completion_rate": 100.0},
        {
            "category": "mentorship",
            "counts": {"approved": 1, "in_progress": 1},
            "completion_rate": 50.0,
        },
    ]
    assert [(t["title"], t["reward_title"], t["completed"]) for t in data["top_tasks"]] == [
        ("Campus Meetup task", "Campus Meetup", 2),
        ("Mentor Circle task", "Mentor Circle", 1),
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_claims_are_bucketed_by_month(client, seeded, staff_user):
    response = await client.get(
        f"{ANALYTICS_URL}/claims", params={"months": 3}, headers=auth_headers_for(staff_user)
    )

    data = response.json()["data"]
    timeline = {row["month"]: (row["claims"], row["points"]) for row in data["timeline"]}
    assert len(timeline) == 3
    assert timeline[seeded["claim_month"]] == (1, 100)
    # the other college's claim today is not counted
    assert sum(claims for claims, _ in timeline.values()) == 1
    assert data["timeline"][-2]["month"] == seeded["claim_month"]
    assert data["popular_rewards"] == [
        {"reward_id": str(seeded["meetup"].id), "title": "Campus Meetup", "claims": 1}
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_department_analytics(client, seeded, staff_user):
    response = await client.get(
        f"{ANALYTICS_URL}/departments", headers=auth_headers_for(staff_user)
    )

    assert response.json()["data"] == [
        {
            "department": "Computer Science",
            "members": 1,
            "active_members": 1,
            "participation_rate": 100.0,
            "total_points": 400,
            "completed_tasks": 2,
            "badges": 2,
        },
        {
            "department": "Mechanical",
            "members": 2,
            "active_members": 1,
            "participation_rate": 50.0,
            "total_points": 100,
            "completed_tasks": 1,
            "badges": 1,
        },
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_reward_statistics(client, seeded, staff_user):
    response = await client.get(
        f"{ANALYTICS_URL}/reward-statistics", headers=auth_headers_for(staff_user)
    )

    data = response.json()["data"]
    assert [row["title"] for row in data] == ["Campus Meetup", "Mentor Circle"]
    meetup, mentor = data
    assert (meetup["participants"], meetup["earned"], meetup["claimed"]) == (2, 2, 1)
    assert meetup["points_awarded"] == 200
    assert meetup["claim_rate"] == 50.0
    assert (mentor["participants"], mentor["in_progress"], mentor["earned"]) == (2, 1, 1)
    assert mentor["points_awarded"] == 300
    assert mentor["claim_rate"] == 0.0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_user_history_with_category_filter(client, seeded, staff_user):
    alice = seeded["alice"]
    url = f"{ANALYTICS_URL}/users/{alice.id}/history"

    response = await client.get(url, headers=auth_headers_for(staff_user))
    data = response.json()["data"]
    assert data["total_points"] == 400
    assert data["category_breakdown"] == {"event": 1, "mentorship": 1}
    assert "claimed" in [entry["action"] for entry in data["timeline"]]

    response = await client.get(
        url, params={"category": "event"}, headers=auth_headers_for(staff_user)
    )
    data = response.json()["data"]
    assert data["total_points"] == 100
    assert {entry["reward_title"] for entry in data["timeline"]} == {"Campus Meetup"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_user_history_from_another_tenant_is_empty(client, seeded):
    outsider = make_auth_user(Role.STAFF, seeded["other_tenant"])

    response = await client.get(
        f"{ANALYTICS_URL}/users/{seeded['alice'].id}/history",
        headers=auth_headers_for(outsider),
    )

    data = response.json()["data"]
    assert data["timeline"] == []
    assert data["total_points"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_alumni_cannot_read_analytics(client, seeded, alumni_user):
    response = await client.get(
        f"{ANALYTICS_URL}/departments", headers=auth_headers_for(alumni_user)
    )

    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Leaderboards
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_department_leaderboard_stays_in_tenant(client, seeded, alumni_user):
    response = await client.get(
        f"{LEADERBOARD_URL}/departments", headers=auth_headers_for(alumni_user)
    )

    assert response.json()["data"] == [
        {
            "rank": 1,
            "department": "Computer Science",
            "members": 1,
            "total_points": 400,
            "average_points": 400.0,
            "completed_tasks": 2,
        },
        {
            "rank": 2,
            "department": "Mechanical",
            "members": 1,
            "total_points": 100,
            "average_points": 100.0,
            "completed_tasks": 1,
        },
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_department_leaderboard_for_other_tenant(client, seeded):
    super_admin = make_auth_user(Role.SUPER_ADMIN)

    response = await client.get(
        f"{LEADERBOARD_URL}/departments",
        params={"tenant_id": str(seeded["other_tenant"])},
        headers=auth_headers_for(super_admin),
    )

    data = response.json()["data"]
    assert [(row["department"], row["total_points"]) for row in data] == [
        ("Computer Science", 1000)
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_badge_leaderboard(client, seeded, alumni_user):
    response = await client.get(
        f"{LEADERBOARD_URL}/badges", headers=auth_headers_for(alumni_user)
    )

    data = response.json()["data"]
    assert [
        (row["rank"], row["name"], row["badge_count"], row["badge_points"]) for row in data
    ] == [
        (1, "Alice Member", 2, 35),
        (2, "Bob Member", 1, 50),
    ]
    assert str(seeded["dave"].id) not in [row["user_id"] for row in data]
