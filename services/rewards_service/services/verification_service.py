"""Staff verification queue for submitted reward tasks."""

import uuid
from typing import Optional

from fastapi import HTTPException, status
from libs.common.datetime_utils import days_ago, utc_now
from libs.common.logging import get_logger
from services.communications_service.services.notification_service import notify
from services.members_service.models import Member
from services.rewards_service.models import (
    ActivityAction,
    ActivityStatus,
    RewardTemplate,
    UserTaskActivity,
)
from services.rewards_service.schemas.activity import VerificationStats
from services.rewards_service.services.activity_service import (
    after_approval,
    get_activity,
    lock_activity,
    mark_approved,
    task_points,
)
from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

DEFAULT_REJECTION_REASON = "Task rejected by staff"
VERIFICATION_ACTIONS = ("approve", "reject")


async def verify_task(
    db: AsyncSession,
    *,
    activity_id: uuid.UUID,
    action: str,
    staff_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    reason: Optional[str] = None,
) -> UserTaskActivity:
    """Approve or reject an activity waiting for verification."""
    if action not in VERIFICATION_ACTIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid action. Must be 'approve' or 'reject'",
        )

    activity = await lock_activity(db, activity_id, tenant_id=tenant_id)
    if activity.status != ActivityStatus.PENDING_VERIFICATION:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Task is not pending verification (current status: {activity.status.value})",
        )

    template = activity.reward
    task = activity.task
    user_id = activity.user_id
    activity_tenant = activity.tenant_id
    reward_title = template.title
    points = task_points(template, task)
    badge_ids = [b for b in (task.badge_id, template.badge_id) if b]

    if action == "approve":
        mark_approved(
            db,
            activity,
            points=points,
            reward_title=reward_title,
            actor_id=staff_id,
            note=reason,
        )
        activity.verification_reason = reason
    else:
        reason = reason or DEFAULT_REJECTION_REASON
        activity.status = ActivityStatus.REJECTED
        activity.verified_by = staff_id
        activity.verified_at = utc_now()
        activity.verification_reason = reason
        activity.record(ActivityAction.REJECTED, note=reason, actor_id=staff_id)

    await db.commit()
    logger.info("Activity %s %sd by %s", activity_id, action, staff_id)

    if action == "approve":
        await after_approval(
            db,
            user_id=user_id,
            tenant_id=activity_tenant,
            badge_ids=badge_ids,
            reward_id=template.id,
            reward_title=reward_title,
            points=points,
        )
    else:
        await notify(
            db,
            recipients=[user_id],
            event="reward_task_rejected",
            data={"reward_id": template.id, "reward_title": reward_title, "reason": reason},
            tenant_id=activity_tenant,
        )

    return await get_activity(db, activity_id)


async def resubmit_task(
    db: AsyncSession,
    *,
    activity_id: uuid.UUID,
    user_id: uuid.UUID,
    note: Optional[str] = None,
) -> UserTaskActivity:
    """Send a rejected activity back to the queue. Only its owner may do this."""
    activity = await lock_activity(db, activity_id)
    if activity.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the member who submitted this task can resubmit it",
        )
    if activity.status != ActivityStatus.REJECTED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only rejected tasks can be resubmitted",
        )

    activity.status = ActivityStatus.PENDING_VERIFICATION
    activity.submitted_at = utc_now()
    activity.verified_by = None
    activity.verified_at = None
    activity.verification_reason = None
    activity.record(ActivityAction.RESUBMITTED, note=note, actor_id=user_id)
    await db.commit()

    logger.info("Activity %s resubmitted by %s", activity_id, user_id)
    return await get_activity(db, activity_id)


async def list_verification_queue(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    activity_status: Optional[ActivityStatus] = ActivityStatus.PENDING_VERIFICATION,
    reward_id: Optional[uuid.UUID] = None,
    user_id: Optional[uuid.UUID] = None,
    search: Optional[str] = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[tuple[UserTaskActivity, Optional[Member]]], int]:
    """Activities awaiting (or past) verification with their members, oldest first."""
    query = (
        select(UserTaskActivity, Member)
        .join(RewardTemplate, RewardTemplate.id == UserTaskActivity.reward_id)
        .outerjoin(Member, Member.id == UserTaskActivity.user_id)
    )
    count_query = (
        select(func.count())
        .select_from(UserTaskActivity)
        .join(RewardTemplate, RewardTemplate.id == UserTaskActivity.reward_id)
        .outerjoin(Member, Member.id == UserTaskActivity.user_id)
    )

    filters = []
    if tenant_id is not None:
        filters.append(UserTaskActivity.tenant_id == tenant_id)
    if activity_status:
        filters.append(UserTaskActivity.status == activity_status)
    if reward_id:
        filters.append(UserTaskActivity.reward_id == reward_id)
    if user_id:
        filters.append(UserTaskActivity.user_id == user_id)
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                Member.first_name.ilike(pattern),
                Member.last_name.ilike(pattern),
                Member.email.ilike(pattern),
                RewardTemplate.title.ilike(pattern),
            )
        )

    total = (await db.execute(count_query.where(*filters))).scalar() or 0
    order = (
        UserTaskActivity.submitted_at
        if activity_status == ActivityStatus.PENDING_VERIFICATION
        else desc(UserTaskActivity.updated_at)
    )
    result = await db.execute(query.where(*filters).order_by(order).offset(offset).limit(limit))
    return [(row[0], row[1]) for row in result.all()], total


async def get_verification_stats(
    db: AsyncSession, *, tenant_id: Optional[uuid.UUID]
) -> VerificationStats:
    tracked = (
        ActivityStatus.PENDING_VERIFICATION,
        ActivityStatus.APPROVED,
        ActivityStatus.REJECTED,
    )
    filters = [UserTaskActivity.status.in_(tracked)]
    if tenant_id is not None:
        filters.append(UserTaskActivity.tenant_id == tenant_id)

    rows = (
        await db.execute(
            select(UserTaskActivity.status, func.count())
            .where(*filters)
            .group_by(UserTaskActivity.status)
        )
    ).all()
    counts = {ActivityStatus(s): c for s, c in rows}

    since = days_ago(7)
    recent_filters = [UserTaskActivity.verified_at >= since]
    if tenant_id is not None:
        recent_filters.append(UserTaskActivity.tenant_id == tenant_id)
    approved_recent = (
        await db.execute(
            select(func.count())
            .select_from(UserTaskActivity)
            .where(
                *recent_filters,
                UserTaskActivity.status.in_([ActivityStatus.APPROVED, ActivityStatus.CLAIMED]),
            )
        )
    ).scalar() or 0
    rejected_recent = (
        await db.execute(
            select(func.count())
            .select_from(UserTaskActivity)
            .where(*recent_filters, UserTaskActivity.status == ActivityStatus.REJECTED)
        )
    ).scalar() or 0

    return VerificationStats(
        pending_verification=counts.get(ActivityStatus.PENDING_VERIFICATION, 0),
        approved=counts.get(ActivityStatus.APPROVED, 0),
        rejected=counts.get(ActivityStatus.REJECTED, 0),
        total=sum(counts.values()),
        approved_last_7_days=approved_recent,
        rejected_last_7_days=rejected_recent,
    )
