"""Reward analytics for admins and staff.

All reports are aggregate reads; nothing here writes.
"""

import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

from libs.common.datetime_utils import utc_now
from services.members_service.models import Member
from services.rewards_service.models import (
    EARNED_STATUSES,
    ActivityEvent,
    ActivityStatus,
    RewardCategory,
    RewardTask,
    RewardTemplate,
    UserBadge,
    UserTaskActivity,
)
from services.rewards_service.schemas.analytics import (
    CategoryPoints,
    ClaimsReport,
    DepartmentAnalytics,
    HistoryEntry,
    MonthlyClaims,
    PopularReward,
    RewardStatistics,
    TaskCompletionReport,
    TaskCompletionRow,
    TopTask,
    UserActivityHistory,
)
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def _activity_scope(
    tenant_id: Optional[uuid.UUID],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    column=UserTaskActivity.created_at,
) -> list:
    filters = []
    if tenant_id is not None:
        filters.append(UserTaskActivity.tenant_id == tenant_id)
    if start is not None:
        filters.append(column >= start)
    if end is not None:
        filters.append(column <= end)
    return filters


async def get_points_distribution(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[CategoryPoints]:
    """Earned points per reward category."""
    points = func.coalesce(func.sum(UserTaskActivity.points_awarded), 0).label("points")
    rows = (
        await db.execute(
            select(RewardTemplate.category, points, func.count().label("activities"))
            .select_from(UserTaskActivity)
            .join(RewardTemplate, RewardTemplate.id == UserTaskActivity.reward_id)
            .where(
                UserTaskActivity.status.in_(EARNED_STATUSES),
                *_activity_scope(tenant_id, start, end, UserTaskActivity.approved_at),
            )
            .group_by(RewardTemplate.category)
            .order_by(desc("points"))
        )
    ).all()

    grand_total = sum(int(row.points) for row in rows)
    return [
        CategoryPoints(
            category=row.category,
            points=int(row.points),
            activities=row.activities,
            percentage=round(int(row.points) / grand_total * 100, 2) if grand_total else 0.0,
        )
        for row in rows
    ]


async def get_task_completion(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    top: int = 5,
) -> TaskCompletionReport:
    scope = _activity_scope(tenant_id, start, end)

    rows = (
        await db.execute(
            select(RewardTemplate.category, UserTaskActivity.status, func.count())
            .select_from(UserTaskActivity)
            .join(RewardTemplate, RewardTemplate.id == UserTaskActivity.reward_id)
            .where(*scope)
            .group_by(RewardTemplate.category, UserTaskActivity.status)
        )
    ).all()

    by_category: dict[RewardCategory, dict[ActivityStatus, int]] = defaultdict(dict)
    for category, activity_status, count in rows:
        by_category[RewardCategory(category)][ActivityStatus(activity_status)] = count

    report_rows = []
    for category, counts in by_category.items():
        total = sum(counts.values())
        completed = sum(counts.get(s, 0) for s in EARNED_STATUSES)
        report_rows.append(
            TaskCompletionRow(
                category=category,
                counts=counts,
                completion_rate=round(completed / total * 100, 2) if total else 0.0,
            )
        )
    report_rows.sort(key=lambda r: r.category.value)

    completed_count = func.count().label("completed")
    top_rows = (
        await db.execute(
            select(RewardTask.id, RewardTask.title, RewardTemplate.title, completed_count)
            .select_from(UserTaskActivity)
            .join(RewardTask, RewardTask.id == UserTaskActivity.task_id)
            .join(RewardTemplate, RewardTemplate.id == UserTaskActivity.reward_id)
            .where(*scope, UserTaskActivity.status.in_(EARNED_STATUSES))
            .group_by(RewardTask.id, RewardTask.title, RewardTemplate.title)
            .order_by(desc("completed"))
            .limit(top)
        )
    ).all()

    return TaskCompletionReport(
        by_category=report_rows,
        top_tasks=[
            TopTask(task_id=task_id, title=title, reward_title=reward_title, completed=completed)
            for task_id, title, reward_title, completed in top_rows
        ],
    )


def _month_key(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def _previous_months(count: int, now: Optional[datetime] = None) -> list[str]:
    now = now or utc_now()
    year, month = now.year, now.month
    keys = []
    for _ in range(count):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


async def get_claims_report(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    months: int = 6,
    top: int = 5,
) -> ClaimsReport:
    """Monthly claim counts for the last ``months`` months plus the most claimed rewards."""
    buckets = {key: [0, 0] for key in _previous_months(months)}
    first_month = next(iter(buckets))
    since = datetime(int(first_month[:4]), int(first_month[5:]), 1, tzinfo=timezone.utc)

    filters = [UserTaskActivity.status == ActivityStatus.CLAIMED]
    filters.extend(_activity_scope(tenant_id, since, None, UserTaskActivity.claimed_at))

    claims = (
        await db.execute(
            select(UserTaskActivity.claimed_at, UserTaskActivity.points_awarded).where(*filters)
        )
    ).all()
    for claimed_at, points in claims:
        key = _month_key(claimed_at)
        if key in buckets:
            buckets[key][0] += 1
            buckets[key][1] += points or 0

    claim_count = func.count().label("claims")
    popular = (
        await db.execute(
            select(RewardTemplate.id, RewardTemplate.title, claim_count)
            .select_from(UserTaskActivity)
            .join(RewardTemplate, RewardTemplate.id == UserTaskActivity.reward_id)
            .where(*_activity_scope(tenant_id), UserTaskActivity.status == ActivityStatus.CLAIMED)
            .group_by(RewardTemplate.id, RewardTemplate.title)
            .order_by(desc("claims"))
            .limit(top)
        )
    ).all()

    return ClaimsReport(
        timeline=[
            MonthlyClaims(month=key, claims=count, points=points)
            for key, (count, points) in buckets.items()
        ],
        popular_rewards=[
            PopularReward(reward_id=reward_id, title=title, claims=count)
            for reward_id, title, count in popular
        ],
    )


async def get_department_analytics(
    db: AsyncSession, *, tenant_id: Optional[uuid.UUID]
) -> list[DepartmentAnalytics]:
    member_filters = [Member.department.is_not(None)]
    if tenant_id is not None:
        member_filters.append(Member.tenant_id == tenant_id)

    member_rows = (
        await db.execute(
            select(Member.department, func.count())
            .where(*member_filters)
            .group_by(Member.department)
        )
    ).all()

    earned = (
        await db.execute(
            select(
                Member.department,
                func.count(func.distinct(UserTaskActivity.user_id)),
                func.coalesce(func.sum(UserTaskActivity.points_awarded), 0),
                func.count(),
            )
            .select_from(UserTaskActivity)
            .join(Member, Member.id == UserTaskActivity.user_id)
            .where(*member_filters, UserTaskActivity.status.in_(EARNED_STATUSES))
            .group_by(Member.department)
        )
    ).all()
    earned_map = {dept: (active, int(points), done) for dept, active, points, done in earned}

    badges = (
        await db.execute(
            select(Member.department, func.count())
            .select_from(UserBadge)
            .join(Member, Member.id == UserBadge.user_id)
            .where(*member_filters)
            .group_by(Member.department)
        )
    ).all()
    badge_map = dict(badges)

    report = []
    for department, members in member_rows:
        active, points, done = earned_map.get(department, (0, 0, 0))
        report.append(
            DepartmentAnalytics(
                department=department,
                members=members,
                active_members=active,
                participation_rate=round(active / members * 100, 2) if members else 0.0,
                total_points=points,
                completed_tasks=done,
                badges=badge_map.get(department, 0),
            )
        )
    report.sort(key=lambda d: d.total_points, reverse=True)
    return report


async def get_user_activity_history(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    category: Optional[RewardCategory] = None,
    limit: int = 100,
) -> UserActivityHistory:
    """Chronological event timeline for one member, newest first."""
    filters = [UserTaskActivity.user_id == user_id]
    if tenant_id is not None:
        filters.append(UserTaskActivity.tenant_id == tenant_id)
    if start is not None:
        filters.append(ActivityEvent.created_at >= start)
    if end is not None:
        filters.append(ActivityEvent.created_at <= end)
    if category is not None:
        filters.append(RewardTemplate.category == category)

    rows = (
        await db.execute(
            select(
                ActivityEvent,
                UserTaskActivity.reward_id,
                RewardTemplate.title,
                RewardTemplate.category,
            )
            .select_from(ActivityEvent)
            .join(UserTaskActivity, UserTaskActivity.id == ActivityEvent.activity_id)
            .join(RewardTemplate, RewardTemplate.id == UserTaskActivity.reward_id)
            .where(*filters)
            .order_by(desc(ActivityEvent.created_at))
            .limit(limit)
        )
    ).all()

    timeline = [
        HistoryEntry(
            activity_id=event.activity_id,
            reward_id=reward_id,
            reward_title=title,
            category=reward_category,
            action=event.action,
            amount=event.amount,
            note=event.note,
            created_at=event.created_at,
        )
        for event, reward_id, title, reward_category in rows
    ]

    breakdown_rows = (
        await db.execute(
            select(
                RewardTemplate.category,
                func.count(),
                func.coalesce(func.sum(UserTaskActivity.points_awarded), 0),
            )
            .select_from(UserTaskActivity)
            .join(RewardTemplate, RewardTemplate.id == UserTaskActivity.reward_id)
            .where(
                UserTaskActivity.user_id == user_id,
                UserTaskActivity.status.in_(EARNED_STATUSES),
                *([UserTaskActivity.tenant_id == tenant_id] if tenant_id is not None else []),
                *([RewardTemplate.category == category] if category is not None else []),
            )
            .group_by(RewardTemplate.category)
        )
    ).all()

    return UserActivityHistory(
        user_id=user_id,
        timeline=timeline,
        category_breakdown={RewardCategory(c): n for c, n, _ in breakdown_rows},
        total_points=sum(int(p) for _, _, p in breakdown_rows),
    )


async def get_reward_statistics(
    db: AsyncSession, *, tenant_id: Optional[uuid.UUID], limit: int = 50
) -> list[RewardStatistics]:
    """Per-reward participation, earned and claimed counts."""
    rows = (
        await db.execute(
            select(
                RewardTemplate.id,
                RewardTemplate.title,
                RewardTemplate.category,
                UserTaskActivity.status,
                func.count(),
                func.coalesce(func.sum(UserTaskActivity.points_awarded), 0),
            )
            .select_from(UserTaskActivity)
            .join(RewardTemplate, RewardTemplate.id == UserTaskActivity.reward_id)
            .where(*_activity_scope(tenant_id))
            .group_by(
                RewardTemplate.id,
                RewardTemplate.title,
                RewardTemplate.category,
                UserTaskActivity.status,
            )
        )
    ).all()

    stats: dict[uuid.UUID, dict] = {}
    for reward_id, title, category, activity_status, count, points in rows:
        entry = stats.setdefault(
            reward_id,
            {"title": title, "category": category, "counts": defaultdict(int), "points": 0},
        )
        entry["counts"][ActivityStatus(activity_status)] += count
        if activity_status in EARNED_STATUSES:
            entry["points"] += int(points)

    report = []
    for reward_id, entry in stats.items():
        counts = entry["counts"]
        earned = counts[ActivityStatus.APPROVED] + counts[ActivityStatus.CLAIMED]
        claimed = counts[ActivityStatus.CLAIMED]
        report.append(
            RewardStatistics(
                reward_id=reward_id,
                title=entry["title"],
                category=entry["category"],
                participants=sum(counts.values()),
                in_progress=counts[ActivityStatus.IN_PROGRESS],
                pending_verification=counts[ActivityStatus.PENDING_VERIFICATION],
                earned=earned,
                claimed=claimed,
                points_awarded=entry["points"],
                claim_rate=round(claimed / earned * 100, 2) if earned else 0.0,
            )
        )
    report.sort(key=lambda r: (r.earned, r.participants), reverse=True)
    return report[:limit]
