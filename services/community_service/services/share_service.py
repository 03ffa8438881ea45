"""Share tracking and share-based trending."""

import uuid
from collections import defaultdict
from typing import Any, Optional

from libs.common.datetime_utils import days_ago, ensure_utc
from libs.common.logging import get_logger
from services.community_service.models import Share, SharePlatform
from services.community_service.schemas import PlatformShares, TrendingPost
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

TRENDING_WINDOW_DAYS = {"day": 1, "week": 7, "month": 30}


async def get_share_count(
    db: AsyncSession, post_id: uuid.UUID, *, tenant_id: Optional[uuid.UUID] = None
) -> int:
    query = select(func.count()).select_from(Share).where(Share.post_id == post_id)
    if tenant_id is not None:
        query = query.where(Share.tenant_id == tenant_id)
    return (await db.execute(query)).scalar() or 0


async def track_share(
    db: AsyncSession,
    *,
    post_id: uuid.UUID,
    platform: SharePlatform,
    user_id: Optional[uuid.UUID] = None,
    tenant_id: Optional[uuid.UUID] = None,
    details: Optional[dict[str, Any]] = None,
) -> tuple[Share, int]:
    """Record a share and return it with the post's updated share count."""
    share = Share(
        post_id=post_id,
        platform=platform,
        user_id=user_id,
        tenant_id=tenant_id,
        details=details or {},
    )
    db.add(share)
    await db.commit()
    await db.refresh(share)

    count = await get_share_count(db, post_id, tenant_id=tenant_id)
    logger.info("Post %s shared on %s (total=%d)", post_id, platform.value, count)
    return share, count


async def get_share_analytics(
    db: AsyncSession, post_id: uuid.UUID, *, tenant_id: Optional[uuid.UUID] = None
) -> list[PlatformShares]:
    count = func.count().label("count")
    query = (
        select(Share.platform, count, func.max(Share.created_at).label("last_shared"))
        .where(Share.post_id == post_id)
        .group_by(Share.platform)
        .order_by(desc("count"))
    )
    if tenant_id is not None:
        query = query.where(Share.tenant_id == tenant_id)
    rows = (await db.execute(query)).all()
    return [
        PlatformShares(
            platform=row.platform, count=row.count, last_shared=ensure_utc(row.last_shared)
        )
        for row in rows
    ]


async def get_recent_shares(
    db: AsyncSession,
    post_id: uuid.UUID,
    *,
    tenant_id: Optional[uuid.UUID] = None,
    limit: int = 10,
) -> list[Share]:
    query = (
        select(Share)
        .where(Share.post_id == post_id)
        .order_by(desc(Share.created_at))
        .limit(limit)
    )
    if tenant_id is not None:
        query = query.where(Share.tenant_id == tenant_id)
    return list((await db.execute(query)).scalars().all())


async def get_trending_posts(
    db: AsyncSession,
    *,
    time_range: str = "week",
    tenant_id: Optional[uuid.UUID] = None,
    limit: int = 10,
) -> list[TrendingPost]:
    """Most shared posts inside a rolling window ending now."""
    since = days_ago(TRENDING_WINDOW_DAYS[time_range])
    filters = [Share.created_at >= since]
    if tenant_id is not None:
        filters.append(Share.tenant_id == tenant_id)

    share_count = func.count().label("share_count")
    rows = (
        await db.execute(
            select(Share.post_id, share_count, func.max(Share.created_at).label("last_shared"))
            .where(*filters)
            .group_by(Share.post_id)
            .order_by(desc("share_count"), desc("last_shared"))
            .limit(limit)
        )
    ).all()
    if not rows:
        return []

    platforms: dict[uuid.UUID, list[SharePlatform]] = defaultdict(list)
    platform_rows = await db.execute(
        select(Share.post_id, Share.platform)
        .where(*filters, Share.post_id.in_([row.post_id for row in rows]))
        .distinct()
    )
    for post_id, platform in platform_rows.all():
        platforms[post_id].append(platform)

    return [
        TrendingPost(
            post_id=row.post_id,
            share_count=row.share_count,
            platforms=sorted(platforms[row.post_id], key=lambda p: p.value),
            last_shared=ensure_utc(row.last_shared),
        )
        for row in rows
    ]
