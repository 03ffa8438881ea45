"""Reward template catalog: listing, lookup and admin CRUD."""

import uuid
from typing import Optional

from fastapi import HTTPException, status
from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.logging import get_logger
from services.rewards_service.models import (
    RewardCategory,
    RewardTask,
    RewardTemplate,
    RewardType,
    UserTaskActivity,
)
from services.rewards_service.schemas.reward import (
    RewardCreate,
    RewardTaskCreate,
    RewardUpdate,
)
from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def _build_tasks(tasks: list[RewardTaskCreate]) -> list[RewardTask]:
    return [
        RewardTask(display_order=index, **task.model_dump())
        for index, task in enumerate(tasks)
    ]


def schedule_filter(now=None):
    """SQL condition: the template's schedule window contains ``now``."""
    now = now or utc_now()
    return (
        or_(RewardTemplate.starts_at.is_(None), RewardTemplate.starts_at <= now),
        or_(RewardTemplate.ends_at.is_(None), RewardTemplate.ends_at >= now),
    )


def ensure_claimable_window(template: RewardTemplate) -> None:
    """Raise 400 when the template is inactive, archived or out of schedule."""
    if not template.is_active or template.archived_at is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Reward is not active"
        )
    now = utc_now()
    if template.starts_at and ensure_utc(template.starts_at) > now:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Reward has not started yet"
        )
    if template.ends_at and ensure_utc(template.ends_at) < now:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Reward has ended"
        )


async def list_rewards(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    categories: Optional[list[RewardCategory]] = None,
    reward_type: Optional[RewardType] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    include_inactive: bool = False,
    enforce_schedule: bool = True,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[RewardTemplate], int]:
    """List templates, featured first then newest.

    With ``enforce_schedule`` only templates whose window contains the
    current time are returned.
    """
    filters = []
    if tenant_id is not None:
        filters.append(RewardTemplate.tenant_id == tenant_id)
    if not include_inactive:
        filters.append(RewardTemplate.is_active.is_(True))
        filters.append(RewardTemplate.archived_at.is_(None))
    if enforce_schedule:
        filters.extend(schedule_filter())
    if categories:
        filters.append(RewardTemplate.category.in_(categories))
    if reward_type:
        filters.append(RewardTemplate.reward_type == reward_type)
    if featured is not None:
        filters.append(RewardTemplate.is_featured.is_(featured))
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                RewardTemplate.title.ilike(pattern),
                RewardTemplate.description.ilike(pattern),
            )
        )

    total = (
        await db.execute(select(func.count()).select_from(RewardTemplate).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(RewardTemplate)
        .where(*filters)
        .order_by(desc(RewardTemplate.is_featured), desc(RewardTemplate.created_at))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def get_reward(
    db: AsyncSession,
    reward_id: uuid.UUID,
    *,
    tenant_id: Optional[uuid.UUID],
    include_archived: bool = False,
) -> RewardTemplate:
    query = select(RewardTemplate).where(RewardTemplate.id == reward_id)
    if tenant_id is not None:
        query = query.where(RewardTemplate.tenant_id == tenant_id)
    if not include_archived:
        query = query.where(RewardTemplate.archived_at.is_(None))
    template = (await db.execute(query)).scalar_one_or_none()
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reward not found")
    return template


async def create_reward(
    db: AsyncSession,
    *,
    payload: RewardCreate,
    tenant_id: uuid.UUID,
    created_by: uuid.UUID,
) -> RewardTemplate:
    data = payload.model_dump(exclude={"tasks", "tenant_id"})
    template = RewardTemplate(
        **data,
        tenant_id=tenant_id,
        created_by=created_by,
        tasks=_build_tasks(payload.tasks),
    )
    db.add(template)
    await db.commit()
    await db.refresh(template)

    logger.info(
        "Created reward %s (%s) for tenant %s with %d tasks",
        template.id,
        template.title,
        tenant_id,
        len(template.tasks),
    )
    return template


async def update_reward(
    db: AsyncSession,
    reward_id: uuid.UUID,
    payload: RewardUpdate,
    *,
    tenant_id: Optional[uuid.UUID],
) -> RewardTemplate:
    template = await get_reward(db, reward_id, tenant_id=tenant_id)
    changes = payload.model_dump(exclude_unset=True, exclude={"tasks"})

    starts_at = changes.get("starts_at", template.starts_at)
    ends_at = changes.get("ends_at", template.ends_at)
    if starts_at and ends_at and ensure_utc(ends_at) <= ensure_utc(starts_at):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ends_at must be after starts_at",
        )

    for field, value in changes.items():
        setattr(template, field, value)

    if payload.tasks is not None:
        in_use = (
            await db.execute(
                select(func.count())
                .select_from(UserTaskActivity)
                .where(UserTaskActivity.reward_id == template.id)
            )
        ).scalar() or 0
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Tasks cannot be replaced once members have started them",
            )
        template.tasks = _build_tasks(payload.tasks)

    await db.commit()
    await db.refresh(template)
    logger.info("Updated reward %s: %s", template.id, sorted(changes))
    return template


async def archive_reward(
    db: AsyncSession, reward_id: uuid.UUID, *, tenant_id: Optional[uuid.UUID]
) -> RewardTemplate:
    """Soft delete: the template disappears from listings, activities are kept."""
    template = await get_reward(db, reward_id, tenant_id=tenant_id)
    template.is_active = False
    template.archived_at = utc_now()
    await db.commit()
    await db.refresh(template)
    logger.info("Archived reward %s", template.id)
    return template
