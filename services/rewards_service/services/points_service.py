"""Points ledger: entries, history and manual adjustments by staff."""

import uuid
from typing import Optional

from libs.common.logging import get_logger
from services.communications_service.services.notification_service import notify
from services.members_service.services.member_service import get_tenant_member
from services.rewards_service.models import PointsEntry, PointsEntryType
from services.rewards_service.services import badge_service
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

MANUAL_SOURCE = "Manual Adjustment"


def record_points(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    points: int,
    entry_type: PointsEntryType,
    description: str,
    source: Optional[str] = None,
    notes: Optional[str] = None,
    reference_id: Optional[uuid.UUID] = None,
    created_by: Optional[uuid.UUID] = None,
) -> PointsEntry:
    """Add a ledger entry to the session. The caller commits."""
    entry = PointsEntry(
        user_id=user_id,
        tenant_id=tenant_id,
        points=points,
        entry_type=entry_type,
        description=description[:255],
        source=source,
        notes=notes,
        reference_id=reference_id,
        created_by=created_by,
    )
    db.add(entry)
    return entry


async def list_points_history(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID] = None,
    entry_type: Optional[PointsEntryType] = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[PointsEntry], int]:
    filters = [PointsEntry.user_id == user_id]
    if tenant_id is not None:
        filters.append(PointsEntry.tenant_id == tenant_id)
    if entry_type:
        filters.append(PointsEntry.entry_type == entry_type)

    total = (
        await db.execute(select(func.count()).select_from(PointsEntry).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(PointsEntry)
        .where(*filters)
        .order_by(desc(PointsEntry.created_at))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def add_manual_points(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    points: int,
    activity: str,
    staff_id: uuid.UUID,
    notes: Optional[str] = None,
) -> PointsEntry:
    """Credit points to a member of ``tenant_id`` and re-check points badges."""
    member = await get_tenant_member(db, user_id, tenant_id)
    member_tenant = member.tenant_id

    entry = record_points(
        db,
        user_id=member.id,
        tenant_id=member_tenant,
        points=points,
        entry_type=PointsEntryType.MANUAL,
        description=activity,
        source=MANUAL_SOURCE,
        notes=notes,
        created_by=staff_id,
    )
    await db.commit()
    await db.refresh(entry)
    logger.info("Added %d manual points to %s by %s", points, user_id, staff_id)

    await badge_service.evaluate_eligible_badges(db, user_id=user_id, tenant_id=member_tenant)
    await notify(
        db,
        recipients=[user_id],
        event="points_awarded",
        data={"points": points, "activity": activity},
        tenant_id=member_tenant,
    )
    return entry
