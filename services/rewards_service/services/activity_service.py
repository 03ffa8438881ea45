"""Task progress ledger and reward redemption.

Every read-modify-write on a UserTaskActivity locks the row first
(``SELECT ... FOR UPDATE``) so concurrent progress or claim calls for the
same member serialise instead of overwriting each other.
"""

import secrets
import uuid
from typing import Any, Optional

from fastapi import HTTPException, status
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.communications_service.services.notification_service import notify
from services.rewards_service.models import (
    ActivityAction,
    ActivityStatus,
    PointsEntryType,
    RewardTask,
    RewardTemplate,
    UserTaskActivity,
)
from services.rewards_service.services import badge_service
from services.rewards_service.services.points_service import record_points
from services.rewards_service.services.reward_service import ensure_claimable_window
from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def generate_voucher_code() -> str:
    return f"RV-{secrets.token_hex(4).upper()}"


def task_points(template: RewardTemplate, task: RewardTask) -> int:
    return task.points if task.points is not None else template.cost


def resolve_task(template: RewardTemplate, task_id: Optional[uuid.UUID]) -> RewardTask:
    """The requested task, or the template's first task when none is given."""
    if task_id is None:
        if not template.tasks:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Reward has no tasks"
            )
        return template.tasks[0]
    for task in template.tasks:
        if task.id == task_id:
            return task
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def get_activity(
    db: AsyncSession,
    activity_id: uuid.UUID,
    *,
    tenant_id: Optional[uuid.UUID] = None,
) -> UserTaskActivity:
    query = (
        select(UserTaskActivity)
        .where(UserTaskActivity.id == activity_id)
        .execution_options(populate_existing=True)
    )
    if tenant_id is not None:
        query = query.where(UserTaskActivity.tenant_id == tenant_id)
    activity = (await db.execute(query)).scalar_one_or_none()
    if not activity:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")
    return activity


async def lock_activity(
    db: AsyncSession,
    activity_id: uuid.UUID,
    *,
    tenant_id: Optional[uuid.UUID] = None,
) -> UserTaskActivity:
    query = select(UserTaskActivity).where(UserTaskActivity.id == activity_id).with_for_update()
    if tenant_id is not None:
        query = query.where(UserTaskActivity.tenant_id == tenant_id)
    activity = (await db.execute(query)).scalar_one_or_none()
    if not activity:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")
    return activity


async def list_user_activities(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID] = None,
    activity_status: Optional[ActivityStatus] = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[UserTaskActivity], int]:
    filters = [UserTaskActivity.user_id == user_id]
    if tenant_id is not None:
        filters.append(UserTaskActivity.tenant_id == tenant_id)
    if activity_status:
        filters.append(UserTaskActivity.status == activity_status)

    total = (
        await db.execute(select(func.count()).select_from(UserTaskActivity).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(UserTaskActivity)
        .where(*filters)
        .order_by(desc(UserTaskActivity.updated_at))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def _lock_user_activity(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    reward_id: uuid.UUID,
    task_id: uuid.UUID,
) -> Optional[UserTaskActivity]:
    result = await db.execute(
        select(UserTaskActivity)
        .where(
            UserTaskActivity.user_id == user_id,
            UserTaskActivity.reward_id == reward_id,
            UserTaskActivity.task_id == task_id,
        )
        .with_for_update()
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Approval side effects (shared with verification)
# ---------------------------------------------------------------------------


def mark_approved(
    db: AsyncSession,
    activity: UserTaskActivity,
    *,
    points: int,
    reward_title: str,
    actor_id: Optional[uuid.UUID] = None,
    note: Optional[str] = None,
) -> None:
    """Approve the activity and credit its points to the ledger. The caller commits."""
    now = utc_now()
    activity.status = ActivityStatus.APPROVED
    activity.points_awarded = points
    activity.approved_at = now
    if actor_id is not None:
        activity.verified_by = actor_id
        activity.verified_at = now
    activity.record(ActivityAction.APPROVED, note=note, actor_id=actor_id)
    if points:
        record_points(
            db,
            user_id=activity.user_id,
            tenant_id=activity.tenant_id,
            points=points,
            entry_type=PointsEntryType.TASK,
            description=f"Completed: {reward_title}",
            source="Reward task",
            reference_id=activity.id,
            created_by=actor_id,
        )


async def after_approval(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    tenant_id: uuid.UUID,
    badge_ids: list[uuid.UUID],
    reward_id: uuid.UUID,
    reward_title: str,
    points: int,
) -> None:
    """Badges and notification for a committed approval. Failures are logged only."""
    try:
        for badge_id in dict.fromkeys(badge_ids):
            await badge_service.grant_if_eligible(
                db,
                badge_id=badge_id,
                user_id=user_id,
                tenant_id=tenant_id,
                reason=f"Completed reward: {reward_title}",
                details={"reward_id": str(reward_id)},
            )
        await badge_service.evaluate_eligible_badges(db, user_id=user_id, tenant_id=tenant_id)
    except Exception:
        logger.exception("Badge evaluation failed for user %s", user_id)
        await db.rollback()

    await notify(
        db,
        recipients=[user_id],
        event="reward_task_approved",
        data={"reward_id": reward_id, "reward_title": reward_title, "points": points},
        tenant_id=tenant_id,
    )


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


async def record_task_progress(
    db: AsyncSession,
    *,
    reward_id: uuid.UUID,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    amount: float = 1,
    task_id: Optional[uuid.UUID] = None,
    context: Optional[dict[str, Any]] = None,
    force_verification: bool = False,
) -> UserTaskActivity:
    """Add ``amount`` to the member's activity for a reward task.

    Creates the activity on first progress. When an in-progress activity
    reaches its target it moves to ``pending_verification`` if the task
    requires review (or staff asked for it with ``force_verification``),
    otherwise straight to ``approved``.
    """
    if amount <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Amount must be greater than zero"
        )
    context = context or {}

    query = select(RewardTemplate).where(RewardTemplate.id == reward_id)
    if tenant_id is not None:
        query = query.where(RewardTemplate.tenant_id == tenant_id)
    template = (await db.execute(query)).scalar_one_or_none()
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reward not found")
    ensure_claimable_window(template)
    task = resolve_task(template, task_id)

    # Plain values survive a rollback of the insert race below
    task_id = task.id
    activity_tenant = template.tenant_id
    reward_title = template.title
    points = task_points(template, task)
    requires_verification = task.requires_verification or force_verification
    badge_ids = [b for b in (task.badge_id, template.badge_id) if b]

    activity = await _lock_user_activity(
        db, user_id=user_id, reward_id=reward_id, task_id=task_id
    )
    if activity is None:
        activity = UserTaskActivity(
            tenant_id=activity_tenant,
            user_id=user_id,
            reward_id=reward_id,
            task_id=task_id,
            reward=template,
            task=task,
            status=ActivityStatus.IN_PROGRESS,
            accumulated_amount=0,
            target_amount=task.target_amount,
            context=dict(context),
            events=[],
        )
        db.add(activity)
        try:
            await db.flush()
        except IntegrityError:
            # Lost the race to create the row; continue on the winner's row
            await db.rollback()
            activity = await _lock_user_activity(
                db, user_id=user_id, reward_id=reward_id, task_id=task_id
            )
            if activity is None:
                raise

    if activity.status == ActivityStatus.CLAIMED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Reward already claimed"
        )

    activity.accumulated_amount = activity.accumulated_amount + amount
    if context:
        activity.context = {**(activity.context or {}), **context}
    activity.record(ActivityAction.PROGRESS, amount=amount)

    approved = False
    submitted = False
    if (
        activity.status == ActivityStatus.IN_PROGRESS
        and activity.accumulated_amount >= activity.target_amount
    ):
        if requires_verification:
            activity.status = ActivityStatus.PENDING_VERIFICATION
            activity.submitted_at = utc_now()
            activity.record(ActivityAction.SUBMITTED)
            submitted = True
        else:
            mark_approved(db, activity, points=points, reward_title=reward_title)
            approved = True

    activity_id = activity.id
    await db.commit()

    logger.info(
        "Progress +%s on activity %s (user=%s reward=%s): %s/%s %s",
        amount,
        activity_id,
        user_id,
        reward_id,
        activity.accumulated_amount,
        activity.target_amount,
        activity.status.value,
    )

    if approved:
        await after_approval(
            db,
            user_id=user_id,
            tenant_id=activity_tenant,
            badge_ids=badge_ids,
            reward_id=reward_id,
            reward_title=reward_title,
            points=points,
        )
    elif submitted:
        await notify(
            db,
            recipients=[user_id],
            event="reward_task_submitted",
            data={"reward_id": reward_id, "reward_title": reward_title},
            tenant_id=activity_tenant,
        )

    return await get_activity(db, activity_id)


# ---------------------------------------------------------------------------
# Claim
# ---------------------------------------------------------------------------


async def claim_reward(
    db: AsyncSession,
    *,
    reward_id: uuid.UUID,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    issuer_id: uuid.UUID,
    voucher_code: Optional[str] = None,
    note: Optional[str] = None,
    task_id: Optional[uuid.UUID] = None,
) -> UserTaskActivity:
    """Redeem an approved activity.

    A second claim fails with 400 and leaves the first redemption untouched.
    """
    query = (
        select(UserTaskActivity)
        .where(
            UserTaskActivity.reward_id == reward_id,
            UserTaskActivity.user_id == user_id,
        )
        .order_by(UserTaskActivity.created_at)
        .with_for_update()
    )
    if tenant_id is not None:
        query = query.where(UserTaskActivity.tenant_id == tenant_id)
    if task_id is not None:
        query = query.where(UserTaskActivity.task_id == task_id)
    activities = list((await db.execute(query)).scalars().all())

    if not activities:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No activity found for this reward",
        )

    activity = next((a for a in activities if a.status == ActivityStatus.APPROVED), None)
    if activity is None:
        if any(a.status == ActivityStatus.CLAIMED for a in activities):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Reward already claimed"
            )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Reward not ready for redemption",
        )

    reward_title = activity.reward.title if activity.reward else ""
    activity.status = ActivityStatus.CLAIMED
    activity.claimed_at = utc_now()
    activity.voucher_code = voucher_code or generate_voucher_code()
    activity.issued_by = issuer_id
    activity.claim_note = note
    activity.record(
        ActivityAction.CLAIMED, amount=activity.points_awarded, note=note, actor_id=issuer_id
    )
    if activity.points_awarded:
        record_points(
            db,
            user_id=activity.user_id,
            tenant_id=activity.tenant_id,
            points=-activity.points_awarded,
            entry_type=PointsEntryType.CLAIM,
            description=f"Claimed: {reward_title}",
            source="Reward claim",
            notes=note,
            reference_id=activity.id,
            created_by=issuer_id,
        )

    activity_id = activity.id
    activity_tenant = activity.tenant_id
    code = activity.voucher_code
    await db.commit()

    logger.info(
        "Reward %s claimed by %s (activity=%s voucher=%s issuer=%s)",
        reward_id,
        user_id,
        activity_id,
        code,
        issuer_id,
    )

    await notify(
        db,
        recipients=[user_id],
        event="reward_claimed",
        data={"reward_id": reward_id, "reward_title": reward_title, "voucher_code": code},
        tenant_id=activity_tenant,
    )
    return await get_activity(db, activity_id)
