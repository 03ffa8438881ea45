"""Unit tests for the task progress ledger and redemption.

Tests call activity_service / verification_service directly with the
db_session fixture. No HTTP layer involved.
"""

import uuid

import pytest
from fastapi import HTTPException
from services.communications_service.models import Notification
from services.rewards_service.models import ActivityAction, ActivityStatus, UserBadge
from services.rewards_service.services import (
    activity_service,
    summary_service,
    verification_service,
)
from sqlalchemy import func, select
from tests.factories import BadgeFactory, RewardTaskFactory, RewardTemplateFactory

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _make_reward(db, *, requires_verification=True, target=10, **overrides):
    task = RewardTaskFactory.create(
        target_amount=target, requires_verification=requires_verification
    )
    template = RewardTemplateFactory.create(tasks=[task], **overrides)
    db.add(template)
    await db.commit()
    return template, task


async def _progress(db, template, user_id, amount):
    return await activity_service.record_task_progress(
        db,
        reward_id=template.id,
        user_id=user_id,
        tenant_id=template.tenant_id,
        amount=amount,
    )


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_full_lifecycle_with_verification(db_session):
    """5 of 10 -> in_progress, +5 -> pending, approve -> approved, claim -> claimed."""
    template, _ = await _make_reward(db_session, cost=150)
    user_id = uuid.uuid4()
    staff_id = uuid.uuid4()

    activity = await _progress(db_session, template, user_id, 5)
    assert activity.status == ActivityStatus.IN_PROGRESS
    assert activity.accumulated_amount == 5
    assert activity.progress_percentage == 50.0

    activity = await _progress(db_session, template, user_id, 5)
    assert activity.status == ActivityStatus.PENDING_VERIFICATION
    assert activity.submitted_at is not None

    activity = await verification_service.verify_task(
        db_session,
        activity_id=activity.id,
        action="approve",
        staff_id=staff_id,
        tenant_id=template.tenant_id,
    )
    assert activity.status == ActivityStatus.APPROVED
    assert activity.points_awarded == 150
    assert activity.verified_by == staff_id

    activity = await activity_service.claim_reward(
        db_session,
        reward_id=template.id,
        user_id=user_id,
        tenant_id=template.tenant_id,
        issuer_id=staff_id,
    )
    assert activity.status == ActivityStatus.CLAIMED
    assert activity.voucher_code.startswith("RV-")
    assert activity.issued_by == staff_id

    actions = [e.action for e in activity.events]
    assert actions.count(ActivityAction.PROGRESS) == 2
    assert ActivityAction.SUBMITTED in actions
    assert ActivityAction.APPROVED in actions
    assert actions[-1] == ActivityAction.CLAIMED


@pytest.mark.asyncio
@pytest.mark.unit
async def test_second_claim_fails_without_changing_first(db_session):
    template, _ = await _make_reward(db_session, requires_verification=False)
    user_id = uuid.uuid4()
    await _progress(db_session, template, user_id, 10)

    first = await activity_service.claim_reward(
        db_session,
        reward_id=template.id,
        user_id=user_id,
        tenant_id=template.tenant_id,
        issuer_id=user_id,
        voucher_code="FIRST",
    )

    with pytest.raises(HTTPException) as exc_info:
        await activity_service.claim_reward(
            db_session,
            reward_id=template.id,
            user_id=user_id,
            tenant_id=template.tenant_id,
            issuer_id=user_id,
            voucher_code="SECOND",
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Reward already claimed"

    again = await activity_service.get_activity(db_session, first.id)
    assert again.voucher_code == "FIRST"
    assert await summary_service.get_total_points(db_session, user_id) == template.cost


@pytest.mark.asyncio
@pytest.mark.unit
async def test_target_reached_without_verification_is_approved(db_session):
    template, _ = await _make_reward(db_session, requires_verification=False, cost=40)
    user_id = uuid.uuid4()

    activity = await _progress(db_session, template, user_id, 12)

    assert activity.status == ActivityStatus.APPROVED
    assert activity.points_awarded == 40
    assert activity.approved_at is not None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_progress_after_claim_is_rejected(db_session):
    template, _ = await _make_reward(db_session, requires_verification=False)
    user_id = uuid.uuid4()
    await _progress(db_session, template, user_id, 10)
    await activity_service.claim_reward(
        db_session,
        reward_id=template.id,
        user_id=user_id,
        tenant_id=template.tenant_id,
        issuer_id=user_id,
    )

    with pytest.raises(HTTPException) as exc_info:
        await _progress(db_session, template, user_id, 1)
    assert exc_info.value.detail == "Reward already claimed"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_claim_before_approval_is_rejected(db_session):
    template, _ = await _make_reward(db_session)
    user_id = uuid.uuid4()
    await _progress(db_session, template, user_id, 3)

    with pytest.raises(HTTPException) as exc_info:
        await activity_service.claim_reward(
            db_session,
            reward_id=template.id,
            user_id=user_id,
            tenant_id=template.tenant_id,
            issuer_id=user_id,
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Reward not ready for redemption"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_claim_without_activity_is_not_found(db_session):
    template, _ = await _make_reward(db_session)

    with pytest.raises(HTTPException) as exc_info:
        await activity_service.claim_reward(
            db_session,
            reward_id=template.id,
            user_id=uuid.uuid4(),
            tenant_id=template.tenant_id,
            issuer_id=uuid.uuid4(),
        )
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize("amount", [0, -3])
async def test_non_positive_amount_is_rejected(db_session, amount):
    template, _ = await _make_reward(db_session)

    with pytest.raises(HTTPException) as exc_info:
        await _progress(db_session, template, uuid.uuid4(), amount)
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
@pytest.mark.unit
async def test_progress_on_inactive_reward_is_rejected(db_session):
    template, _ = await _make_reward(db_session, is_active=False)

    with pytest.raises(HTTPException) as exc_info:
        await _progress(db_session, template, uuid.uuid4(), 1)
    assert exc_info.value.detail == "Reward is not active"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unknown_task_is_not_found(db_session):
    template, _ = await _make_reward(db_session)

    with pytest.raises(HTTPException) as exc_info:
        await activity_service.record_task_progress(
            db_session,
            reward_id=template.id,
            user_id=uuid.uuid4(),
            tenant_id=template.tenant_id,
            amount=1,
            task_id=uuid.uuid4(),
        )
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Task not found"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_task_points_override_template_cost(db_session):
    task = RewardTaskFactory.create(target_amount=1, points=25)
    template = RewardTemplateFactory.create(tasks=[task], cost=100)
    db_session.add(template)
    await db_session.commit()

    activity = await _progress(db_session, template, uuid.uuid4(), 1)

    assert activity.points_awarded == 25


@pytest.mark.asyncio
@pytest.mark.unit
async def test_approval_grants_reward_badge_and_notifies(db_session):
    badge = BadgeFactory.create()
    db_session.add(badge)
    await db_session.commit()
    template, _ = await _make_reward(
        db_session, requires_verification=False, target=1, badge_id=badge.id
    )
    user_id = uuid.uuid4()

    await _progress(db_session, template, user_id, 1)

    held = (
        await db_session.execute(
            select(func.count())
            .select_from(UserBadge)
            .where(UserBadge.user_id == user_id, UserBadge.badge_id == badge.id)
        )
    ).scalar()
    assert held == 1

    events = (
        await db_session.execute(
            select(Notification.event).where(Notification.recipient_id == user_id)
        )
    ).scalars().all()
    assert "reward_task_approved" in events
    assert "badge_awarded" in events


# ---------------------------------------------------------------------------
# Verification and resubmission
# ---------------------------------------------------------------------------


async def _pending_activity(db):
    template, _ = await _make_reward(db, target=1)
    user_id = uuid.uuid4()
    activity = await _progress(db, template, user_id, 1)
    assert activity.status == ActivityStatus.PENDING_VERIFICATION
    return template, activity, user_id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_reject_then_resubmit_by_owner(db_session):
    template, activity, user_id = await _pending_activity(db_session)

    rejected = await verification_service.verify_task(
        db_session,
        activity_id=activity.id,
        action="reject",
        staff_id=uuid.uuid4(),
        tenant_id=template.tenant_id,
    )
    assert rejected.status == ActivityStatus.REJECTED
    assert rejected.verification_reason == "Task rejected by staff"

    resubmitted = await verification_service.resubmit_task(
        db_session, activity_id=activity.id, user_id=user_id, note="Added proof"
    )
    assert resubmitted.status == ActivityStatus.PENDING_VERIFICATION
    assert resubmitted.verification_reason is None
    assert resubmitted.events[-1].action == ActivityAction.RESUBMITTED


@pytest.mark.asyncio
@pytest.mark.unit
async def test_resubmit_rejects_non_rejected_status(db_session):
    _, activity, user_id = await _pending_activity(db_session)

    with pytest.raises(HTTPException) as exc_info:
        await verification_service.resubmit_task(
            db_session, activity_id=activity.id, user_id=user_id
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Only rejected tasks can be resubmitted"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_resubmit_rejects_other_users(db_session):
    template, activity, _ = await _pending_activity(db_session)
    await verification_service.verify_task(
        db_session,
        activity_id=activity.id,
        action="reject",
        staff_id=uuid.uuid4(),
        tenant_id=template.tenant_id,
        reason="Blurry photo",
    )

    with pytest.raises(HTTPException) as exc_info:
        await verification_service.resubmit_task(
            db_session, activity_id=activity.id, user_id=uuid.uuid4()
        )
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
@pytest.mark.unit
async def test_verify_requires_pending_status(db_session):
    template, _ = await _make_reward(db_session, target=5)
    activity = await _progress(db_session, template, uuid.uuid4(), 1)

    with pytest.raises(HTTPException) as exc_info:
        await verification_service.verify_task(
            db_session,
            activity_id=activity.id,
            action="approve",
            staff_id=uuid.uuid4(),
            tenant_id=template.tenant_id,
        )
    assert exc_info.value.status_code == 400
    assert "current status: in_progress" in exc_info.value.detail


@pytest.mark.asyncio
@pytest.mark.unit
async def test_verify_rejects_unknown_action(db_session):
    _, activity, _ = await _pending_activity(db_session)

    with pytest.raises(HTTPException) as exc_info:
        await verification_service.verify_task(
            db_session,
            activity_id=activity.id,
            action="maybe",
            staff_id=uuid.uuid4(),
            tenant_id=None,
        )
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
@pytest.mark.unit
async def test_verification_stats_count_by_status(db_session):
    template, activity, _ = await _pending_activity(db_session)
    await _pending_activity(db_session)
    await verification_service.verify_task(
        db_session,
        activity_id=activity.id,
        action="reject",
        staff_id=uuid.uuid4(),
        tenant_id=template.tenant_id,
    )

    stats = await verification_service.get_verification_stats(db_session, tenant_id=None)

    assert stats.pending_verification == 1
    assert stats.rejected == 1
    assert stats.rejected_last_7_days == 1
