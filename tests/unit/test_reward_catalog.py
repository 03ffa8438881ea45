"""Unit tests for catalog listing, schedule windows and archiving."""

import uuid
from datetime import timedelta

import pytest
from fastapi import HTTPException
from libs.common.datetime_utils import utc_now
from services.rewards_service.models import RewardCategory
from services.rewards_service.services import activity_service, reward_service
from tests.factories import RewardTemplateFactory


async def _seed(db, tenant_id):
    now = utc_now()
    current = RewardTemplateFactory.create(tenant_id=tenant_id, title="Current")
    upcoming = RewardTemplateFactory.create(
        tenant_id=tenant_id, title="Upcoming", starts_at=now + timedelta(days=3)
    )
    finished = RewardTemplateFactory.create(
        tenant_id=tenant_id,
        title="Finished",
        starts_at=now - timedelta(days=30),
        ends_at=now - timedelta(days=1),
    )
    inactive = RewardTemplateFactory.create(tenant_id=tenant_id, title="Inactive", is_active=False)
    db.add_all([current, upcoming, finished, inactive])
    await db.commit()
    return current, upcoming, finished, inactive


@pytest.mark.asyncio
@pytest.mark.unit
async def test_member_listing_only_shows_live_rewards(db_session):
    tenant_id = uuid.uuid4()
    await _seed(db_session, tenant_id)

    rewards, total = await reward_service.list_rewards(db_session, tenant_id=tenant_id)

    assert total == 1
    assert [r.title for r in rewards] == ["Current"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_admin_listing_can_include_everything(db_session):
    tenant_id = uuid.uuid4()
    await _seed(db_session, tenant_id)

    rewards, total = await reward_service.list_rewards(
        db_session, tenant_id=tenant_id, include_inactive=True, enforce_schedule=False
    )

    assert total == 4
    assert {r.title for r in rewards} == {"Current", "Upcoming", "Finished", "Inactive"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_listing_is_tenant_scoped(db_session):
    await _seed(db_session, uuid.uuid4())

    rewards, total = await reward_service.list_rewards(db_session, tenant_id=uuid.uuid4())

    assert total == 0
    assert rewards == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_featured_rewards_come_first(db_session):
    tenant_id = uuid.uuid4()
    db_session.add(RewardTemplateFactory.create(tenant_id=tenant_id, title="Plain"))
    db_session.add(
        RewardTemplateFactory.create(tenant_id=tenant_id, title="Spotlight", is_featured=True)
    )
    await db_session.commit()

    rewards, _ = await reward_service.list_rewards(db_session, tenant_id=tenant_id)

    assert rewards[0].title == "Spotlight"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_category_filter(db_session):
    tenant_id = uuid.uuid4()
    db_session.add(
        RewardTemplateFactory.create(tenant_id=tenant_id, category=RewardCategory.MENTORSHIP)
    )
    db_session.add(RewardTemplateFactory.create(tenant_id=tenant_id))
    await db_session.commit()

    rewards, total = await reward_service.list_rewards(
        db_session, tenant_id=tenant_id, categories=[RewardCategory.MENTORSHIP]
    )

    assert total == 1
    assert rewards[0].category == RewardCategory.MENTORSHIP


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "title,detail",
    [
        ("Upcoming", "Reward has not started yet"),
        ("Finished", "Reward has ended"),
        ("Inactive", "Reward is not active"),
    ],
)
async def test_progress_outside_window_is_rejected(db_session, title, detail):
    tenant_id = uuid.uuid4()
    seeded = {t.title: t for t in await _seed(db_session, tenant_id)}

    with pytest.raises(HTTPException) as exc_info:
        await activity_service.record_task_progress(
            db_session,
            reward_id=seeded[title].id,
            user_id=uuid.uuid4(),
            tenant_id=tenant_id,
            amount=1,
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == detail


@pytest.mark.asyncio
@pytest.mark.unit
async def test_archived_reward_is_hidden_but_kept(db_session):
    tenant_id = uuid.uuid4()
    current, *_ = await _seed(db_session, tenant_id)

    archived = await reward_service.archive_reward(db_session, current.id, tenant_id=tenant_id)
    assert archived.archived_at is not None

    _, total = await reward_service.list_rewards(db_session, tenant_id=tenant_id)
    assert total == 0

    with pytest.raises(HTTPException) as exc_info:
        await reward_service.get_reward(db_session, current.id, tenant_id=tenant_id)
    assert exc_info.value.status_code == 404

    again = await reward_service.get_reward(
        db_session, current.id, tenant_id=tenant_id, include_archived=True
    )
    assert again.id == current.id
