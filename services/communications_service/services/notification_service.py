"""Persisted in-app notifications.

Reward flows call :func:`notify` after their own state change has been
committed; a failure to notify is logged and never undoes that change.
"""

import uuid
from typing import Any, Iterable, Optional

from fastapi import HTTPException, status
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.communications_service.models import Notification
from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

EVENT_TEMPLATES: dict[str, tuple[str, str]] = {
    "reward_task_submitted": (
        "Task submitted for review",
        "Your task for '{reward_title}' is waiting for staff verification.",
    ),
    "reward_task_approved": (
        "Task approved",
        "Your task for '{reward_title}' was approved. You earned {points} points.",
    ),
    "reward_task_rejected": (
        "Task rejected",
        "Your task for '{reward_title}' was rejected: {reason}",
    ),
    "reward_claimed": (
        "Reward claimed",
        "You claimed '{reward_title}'. Voucher code: {voucher_code}",
    ),
    "badge_awarded": (
        "New badge earned",
        "You earned the '{badge_name}' badge.",
    ),
    "points_awarded": (
        "Points added",
        "You received {points} points for {activity}.",
    ),
    "redeem_request_submitted": (
        "Redemption requested",
        "Your request for '{reward_option}' ({points_used} points) is waiting for review.",
    ),
    "redeem_request_approved": (
        "Redemption approved",
        "Your request for '{reward_option}' was approved.",
    ),
    "redeem_request_rejected": (
        "Redemption rejected",
        "Your request for '{reward_option}' was rejected and {points_used} points were"
        " returned: {reason}",
    ),
}


class _SafeDict(dict):
    def __missing__(self, key: str) -> str:
        return ""


def render(event: str, data: dict[str, Any]) -> tuple[str, str]:
    title, template = EVENT_TEMPLATES.get(event, (event.replace("_", " ").capitalize(), ""))
    return title, template.format_map(_SafeDict(data))


async def send(
    db: AsyncSession,
    *,
    recipients: Iterable[uuid.UUID],
    event: str,
    data: Optional[dict[str, Any]] = None,
    tenant_id: Optional[uuid.UUID] = None,
) -> list[Notification]:
    """Persist one notification per recipient."""
    data = data or {}
    title, message = render(event, data)
    payload = {k: str(v) if isinstance(v, uuid.UUID) else v for k, v in data.items()}

    notifications = [
        Notification(
            tenant_id=tenant_id,
            recipient_id=recipient_id,
            event=event,
            title=title,
            message=message,
            data=payload,
        )
        for recipient_id in dict.fromkeys(recipients)
    ]
    db.add_all(notifications)
    await db.commit()
    return notifications


async def notify(db: AsyncSession, **kwargs: Any) -> None:
    """Best-effort wrapper around :func:`send`."""
    try:
        await send(db, **kwargs)
    except Exception:
        logger.exception("Failed to send %s notification", kwargs.get("event"))
        await db.rollback()


async def list_notifications(
    db: AsyncSession,
    *,
    recipient_id: uuid.UUID,
    unread_only: bool = False,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Notification], int]:
    filters = [Notification.recipient_id == recipient_id]
    if unread_only:
        filters.append(Notification.is_read.is_(False))

    total = (
        await db.execute(select(func.count()).select_from(Notification).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(Notification)
        .where(*filters)
        .order_by(desc(Notification.created_at))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def unread_count(db: AsyncSession, recipient_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        )
    )
    return result.scalar() or 0


async def mark_read(
    db: AsyncSession, *, notification_id: uuid.UUID, recipient_id: uuid.UUID
) -> Notification:
    notification = await db.get(Notification, notification_id)
    if not notification or notification.recipient_id != recipient_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utc_now()
        await db.commit()
        await db.refresh(notification)
    return notification


async def mark_all_read(db: AsyncSession, recipient_id: uuid.UUID) -> int:
    result = await db.execute(
        update(Notification)
        .where(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        )
        .values(is_read=True, read_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount or 0
