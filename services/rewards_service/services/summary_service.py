"""Tier, summary and points balance aggregation, recomputed on every call."""

import uuid
from typing import Optional

from libs.common.logging import get_logger
from services.rewards_service.models import (
    EARNED_STATUSES,
    EARNING_ENTRY_TYPES,
    ActivityStatus,
    PointsEntry,
    UserBadge,
    UserTaskActivity,
)
from services.rewards_service.schemas.points import PointsBalance
from services.rewards_service.schemas.summary import UserRewardSummary, UserTierResponse
from services.rewards_service.services.tiers import get_tier_info
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def _ledger_filters(user_id: uuid.UUID, tenant_id: Optional[uuid.UUID]) -> list:
    filters = [PointsEntry.user_id == user_id]
    if tenant_id is not None:
        filters.append(PointsEntry.tenant_id == tenant_id)
    return filters


async def get_points_balance(
    db: AsyncSession, user_id: uuid.UUID, tenant_id: Optional[uuid.UUID] = None
) -> PointsBalance:
    """Lifetime total, points spent and points still available."""
    earned = case((PointsEntry.entry_type.in_(EARNING_ENTRY_TYPES), PointsEntry.points), else_=0)
    row = (
        await db.execute(
            select(
                func.coalesce(func.sum(earned), 0),
                func.coalesce(func.sum(PointsEntry.points), 0),
            ).where(*_ledger_filters(user_id, tenant_id))
        )
    ).one()
    total, available = int(row[0]), int(row[1])
    return PointsBalance(
        user_id=user_id,
        total_points=total,
        redeemed_points=total - available,
        available_points=available,
    )


async def get_total_points(
    db: AsyncSession, user_id: uuid.UUID, tenant_id: Optional[uuid.UUID] = None
) -> int:
    query = select(func.coalesce(func.sum(PointsEntry.points), 0)).where(
        *_ledger_filters(user_id, tenant_id),
        PointsEntry.entry_type.in_(EARNING_ENTRY_TYPES),
    )
    return int((await db.execute(query)).scalar() or 0)


async def count_completed_tasks(
    db: AsyncSession, user_id: uuid.UUID, tenant_id: Optional[uuid.UUID] = None
) -> int:
    query = (
        select(func.count())
        .select_from(UserTaskActivity)
        .where(
            UserTaskActivity.user_id == user_id,
            UserTaskActivity.status.in_(EARNED_STATUSES),
        )
    )
    if tenant_id is not None:
        query = query.where(UserTaskActivity.tenant_id == tenant_id)
    return int((await db.execute(query)).scalar() or 0)


async def get_user_tier_info(
    db: AsyncSession, user_id: uuid.UUID, tenant_id: Optional[uuid.UUID] = None
) -> UserTierResponse:
    points = await get_total_points(db, user_id, tenant_id)
    return UserTierResponse(user_id=user_id, **get_tier_info(points).model_dump())


async def get_user_summary(
    db: AsyncSession, user_id: uuid.UUID, tenant_id: Optional[uuid.UUID] = None
) -> UserRewardSummary:
    """Counts per activity status plus points and tier for one member."""
    query = (
        select(UserTaskActivity.status, func.count())
        .where(UserTaskActivity.user_id == user_id)
        .group_by(UserTaskActivity.status)
    )
    if tenant_id is not None:
        query = query.where(UserTaskActivity.tenant_id == tenant_id)

    counts = {s: 0 for s in ActivityStatus}
    for activity_status, count in (await db.execute(query)).all():
        counts[ActivityStatus(activity_status)] = count
    balance = await get_points_balance(db, user_id, tenant_id)

    badge_query = select(func.count()).select_from(UserBadge).where(UserBadge.user_id == user_id)
    if tenant_id is not None:
        badge_query = badge_query.where(UserBadge.tenant_id == tenant_id)
    badges = (await db.execute(badge_query)).scalar() or 0

    return UserRewardSummary(
        user_id=user_id,
        total_activities=sum(counts.values()),
        in_progress=counts[ActivityStatus.IN_PROGRESS],
        pending_verification=counts[ActivityStatus.PENDING_VERIFICATION],
        approved=counts[ActivityStatus.APPROVED],
        rejected=counts[ActivityStatus.REJECTED],
        claimed=counts[ActivityStatus.CLAIMED],
        earned=counts[ActivityStatus.APPROVED] + counts[ActivityStatus.CLAIMED],
        total_points=balance.total_points,
        redeemed_points=balance.redeemed_points,
        available_points=balance.available_points,
        badges=badges,
        tier=get_tier_info(balance.total_points),
    )
