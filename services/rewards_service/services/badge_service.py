"""Badge catalog, one-time grants and automatic criteria evaluation."""

import uuid
from typing import Any, Optional

from fastapi import HTTPException, status
from libs.common.logging import get_logger
from services.communications_service.services.notification_service import notify
from services.rewards_service.models import (
    Badge,
    BadgeCategory,
    BadgeCriteria,
    UserBadge,
)
from services.rewards_service.schemas.badge import BadgeCreate, BadgeUpdate
from services.rewards_service.services import summary_service
from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


async def create_badge(db: AsyncSession, payload: BadgeCreate) -> Badge:
    badge = Badge(**payload.model_dump())
    db.add(badge)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Badge with this name already exists",
        )
    await db.refresh(badge)
    logger.info("Created badge %s (%s)", badge.id, badge.name)
    return badge


async def get_badge(db: AsyncSession, badge_id: uuid.UUID) -> Badge:
    result = await db.execute(
        select(Badge).where(Badge.id == badge_id).execution_options(populate_existing=True)
    )
    badge = result.scalar_one_or_none()
    if not badge:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Badge not found")
    return badge


async def list_badges(
    db: AsyncSession,
    *,
    category: Optional[BadgeCategory] = None,
    is_active: Optional[bool] = True,
    is_rare: Optional[bool] = None,
    offset: int = 0,
    limit: int = 50,
) -> tuple[list[Badge], int]:
    filters = []
    if category:
        filters.append(Badge.category == category)
    if is_active is not None:
        filters.append(Badge.is_active.is_(is_active))
    if is_rare is not None:
        filters.append(Badge.is_rare.is_(is_rare))

    total = (
        await db.execute(select(func.count()).select_from(Badge).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(Badge)
        .where(*filters)
        .order_by(Badge.category, Badge.name)
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def update_badge(db: AsyncSession, badge_id: uuid.UUID, payload: BadgeUpdate) -> Badge:
    badge = await get_badge(db, badge_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(badge, field, value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Badge with this name already exists",
        )
    await db.refresh(badge)
    return badge


async def deactivate_badge(db: AsyncSession, badge_id: uuid.UUID) -> Badge:
    """Badges are never deleted since members keep the ones they hold."""
    badge = await get_badge(db, badge_id)
    badge.is_active = False
    await db.commit()
    await db.refresh(badge)
    logger.info("Deactivated badge %s", badge.id)
    return badge


# ---------------------------------------------------------------------------
# Grants
# ---------------------------------------------------------------------------


async def award_badge(
    db: AsyncSession,
    *,
    badge_id: uuid.UUID,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    awarded_by: Optional[uuid.UUID] = None,
    reason: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> UserBadge:
    """Grant a badge once. The recipient counter moves in the same flush."""
    result = await db.execute(
        select(Badge)
        .where(Badge.id == badge_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    badge = result.scalar_one_or_none()
    if not badge:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Badge not found")
    if not badge.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Badge is not active"
        )
    if badge.max_recipients is not None and badge.current_recipients >= badge.max_recipients:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Badge has reached its maximum number of recipients",
        )

    existing = await db.execute(
        select(UserBadge.id).where(UserBadge.user_id == user_id, UserBadge.badge_id == badge_id)
    )
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User already has this badge"
        )

    user_badge = UserBadge(
        user_id=user_id,
        badge=badge,
        tenant_id=tenant_id,
        awarded_by=awarded_by,
        reason=reason,
        details=details or {},
    )
    db.add(user_badge)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User already has this badge"
        )

    await db.refresh(badge)
    user_badge_id = user_badge.id
    badge_name = badge.name
    logger.info(
        "Awarded badge %s to %s (recipients=%d)", badge_id, user_id, badge.current_recipients
    )

    await notify(
        db,
        recipients=[user_id],
        event="badge_awarded",
        data={"badge_id": badge_id, "badge_name": badge_name},
        tenant_id=tenant_id,
    )
    return await get_user_badge(db, user_badge_id)


async def grant_if_eligible(
    db: AsyncSession,
    *,
    badge_id: uuid.UUID,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    reason: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> Optional[UserBadge]:
    """Automatic grant: a badge that is held, inactive or full is skipped."""
    try:
        return await award_badge(
            db,
            badge_id=badge_id,
            user_id=user_id,
            tenant_id=tenant_id,
            reason=reason,
            details=details,
        )
    except HTTPException as exc:
        logger.debug("Skipped badge %s for %s: %s", badge_id, user_id, exc.detail)
        return None


async def revoke_badge(
    db: AsyncSession,
    *,
    badge_id: uuid.UUID,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID] = None,
) -> None:
    query = select(UserBadge).where(UserBadge.badge_id == badge_id, UserBadge.user_id == user_id)
    if tenant_id is not None:
        query = query.where(UserBadge.tenant_id == tenant_id)
    user_badge = (await db.execute(query)).scalar_one_or_none()
    if not user_badge:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User does not have this badge"
        )
    await db.delete(user_badge)
    await db.commit()
    logger.info("Revoked badge %s from %s", badge_id, user_id)


async def get_user_badge(db: AsyncSession, user_badge_id: uuid.UUID) -> UserBadge:
    result = await db.execute(
        select(UserBadge)
        .where(UserBadge.id == user_badge_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def list_user_badges(
    db: AsyncSession, user_id: uuid.UUID, tenant_id: Optional[uuid.UUID] = None
) -> list[UserBadge]:
    query = select(UserBadge).where(UserBadge.user_id == user_id)
    if tenant_id is not None:
        query = query.where(UserBadge.tenant_id == tenant_id)
    result = await db.execute(query.order_by(desc(UserBadge.awarded_at)))
    return list(result.scalars().all())


async def list_badge_recipients(
    db: AsyncSession,
    *,
    badge_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    offset: int = 0,
    limit: int = 50,
) -> tuple[list[UserBadge], int]:
    filters = [UserBadge.badge_id == badge_id]
    if tenant_id is not None:
        filters.append(UserBadge.tenant_id == tenant_id)

    total = (
        await db.execute(select(func.count()).select_from(UserBadge).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(UserBadge)
        .where(*filters)
        .order_by(desc(UserBadge.awarded_at))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def list_recent_awards(
    db: AsyncSession, *, tenant_id: Optional[uuid.UUID], limit: int = 10
) -> list[UserBadge]:
    query = select(UserBadge).order_by(desc(UserBadge.awarded_at)).limit(limit)
    if tenant_id is not None:
        query = query.where(UserBadge.tenant_id == tenant_id)
    return list((await db.execute(query)).scalars().all())


# ---------------------------------------------------------------------------
# Automatic evaluation
# ---------------------------------------------------------------------------


async def evaluate_eligible_badges(
    db: AsyncSession, *, user_id: uuid.UUID, tenant_id: Optional[uuid.UUID]
) -> list[UserBadge]:
    """Grant every active points/tasks badge whose threshold the user now meets."""
    held = select(UserBadge.badge_id).where(UserBadge.user_id == user_id)
    result = await db.execute(
        select(Badge).where(
            Badge.is_active.is_(True),
            Badge.criteria_type.in_([BadgeCriteria.POINTS, BadgeCriteria.TASKS]),
            Badge.id.not_in(held),
        )
    )
    candidates = [(b.id, b.criteria_type, b.criteria_value) for b in result.scalars().all()]
    if not candidates:
        return []

    points = await summary_service.get_total_points(db, user_id, tenant_id)
    completed = await summary_service.count_completed_tasks(db, user_id, tenant_id)

    awarded = []
    for badge_id, criteria_type, criteria_value in candidates:
        reached = points if criteria_type == BadgeCriteria.POINTS else completed
        if reached < criteria_value:
            continue
        user_badge = await grant_if_eligible(
            db,
            badge_id=badge_id,
            user_id=user_id,
            tenant_id=tenant_id,
            reason="Automatically awarded",
            details={"criteria": criteria_type.value, "value": reached},
        )
        if user_badge:
            awarded.append(user_badge)
    return awarded
