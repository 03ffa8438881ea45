"""Read-only leaderboards over earned points and badges."""

import uuid
from typing import Optional

from libs.common.datetime_utils import period_start
from services.members_service.models import Member
from services.members_service.services.member_service import get_members_map
from services.rewards_service.models import EARNED_STATUSES, Badge, UserBadge, UserTaskActivity
from services.rewards_service.schemas.analytics import (
    BadgeCollectorEntry,
    DepartmentLeaderboardEntry,
    LeaderboardEntry,
)
from services.rewards_service.services.tiers import calculate_tier
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

LEADERBOARD_PERIODS = ("all", "month", "year")


def _earned_filters(tenant_id: Optional[uuid.UUID], period: str = "all") -> list:
    filters = [UserTaskActivity.status.in_(EARNED_STATUSES)]
    if tenant_id is not None:
        filters.append(UserTaskActivity.tenant_id == tenant_id)
    since = period_start(period)
    if since is not None:
        filters.append(UserTaskActivity.approved_at >= since)
    return filters


async def get_points_leaderboard(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    period: str = "all",
    department: Optional[str] = None,
    limit: int = 10,
) -> list[LeaderboardEntry]:
    points = func.coalesce(func.sum(UserTaskActivity.points_awarded), 0).label("points")
    query = (
        select(UserTaskActivity.user_id, points, func.count().label("completed"))
        .where(*_earned_filters(tenant_id, period))
        .group_by(UserTaskActivity.user_id)
        .order_by(desc("points"), UserTaskActivity.user_id)
        .limit(limit)
    )
    if department:
        query = query.join(Member, Member.id == UserTaskActivity.user_id).where(
            Member.department == department
        )
    rows = (await db.execute(query)).all()
    members = await get_members_map(db, [row.user_id for row in rows])

    entries = []
    for rank, row in enumerate(rows, start=1):
        member = members.get(row.user_id)
        entries.append(
            LeaderboardEntry(
                rank=rank,
                user_id=row.user_id,
                name=member.full_name if member else None,
                department=member.department if member else None,
                points=int(row.points),
                completed_tasks=row.completed,
                tier=calculate_tier(int(row.points)),
            )
        )
    return entries


async def get_department_leaderboard(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    period: str = "all",
    limit: int = 10,
) -> list[DepartmentLeaderboardEntry]:
    total_points = func.coalesce(func.sum(UserTaskActivity.points_awarded), 0).label("total_points")
    query = (
        select(
            Member.department,
            total_points,
            func.count(func.distinct(UserTaskActivity.user_id)).label("members"),
            func.count().label("completed"),
        )
        .select_from(UserTaskActivity)
        .join(Member, Member.id == UserTaskActivity.user_id)
        .where(*_earned_filters(tenant_id, period), Member.department.is_not(None))
        .group_by(Member.department)
        .order_by(desc("total_points"))
        .limit(limit)
    )
    rows = (await db.execute(query)).all()
    return [
        DepartmentLeaderboardEntry(
            rank=rank,
            department=row.department,
            members=row.members,
            total_points=int(row.total_points),
            average_points=round(int(row.total_points) / row.members, 2) if row.members else 0.0,
            completed_tasks=row.completed,
        )
        for rank, row in enumerate(rows, start=1)
    ]


async def get_badge_leaderboard(
    db: AsyncSession, *, tenant_id: Optional[uuid.UUID], limit: int = 10
) -> list[BadgeCollectorEntry]:
    badge_count = func.count(UserBadge.id).label("badge_count")
    query = (
        select(
            UserBadge.user_id,
            badge_count,
            func.coalesce(func.sum(Badge.points), 0).label("badge_points"),
        )
        .select_from(UserBadge)
        .join(Badge, Badge.id == UserBadge.badge_id)
        .group_by(UserBadge.user_id)
        .order_by(desc("badge_count"), desc("badge_points"))
        .limit(limit)
    )
    if tenant_id is not None:
        query = query.where(UserBadge.tenant_id == tenant_id)
    rows = (await db.execute(query)).all()
    members = await get_members_map(db, [row.user_id for row in rows])

    return [
        BadgeCollectorEntry(
            rank=rank,
            user_id=row.user_id,
            name=members[row.user_id].full_name if row.user_id in members else None,
            badge_count=row.badge_count,
            badge_points=int(row.badge_points),
        )
        for rank, row in enumerate(rows, start=1)
    ]
