"""Point redemption requests: members spend available points, staff review.

Points leave the balance when the request is created and come back as a
``refund`` entry when staff reject it.
"""

import uuid
from typing import Optional

from fastapi import HTTPException, status
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.communications_service.services.notification_service import notify
from services.members_service.models import Member
from services.rewards_service.models import PointsEntryType, RedeemRequest, RedeemStatus
from services.rewards_service.schemas.points import RedeemRequestCreate
from services.rewards_service.services.points_service import record_points
from services.rewards_service.services.summary_service import get_points_balance
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

REDEMPTION_SOURCE = "Redemption"


async def create_redeem_request(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    payload: RedeemRequestCreate,
) -> RedeemRequest:
    # The member row lock serialises balance checks for the same member
    member_query = select(Member).where(Member.id == user_id).with_for_update()
    if tenant_id is not None:
        member_query = member_query.where(Member.tenant_id == tenant_id)
    member = (await db.execute(member_query)).scalar_one_or_none()
    if not member:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    member_tenant = member.tenant_id

    balance = await get_points_balance(db, user_id, member_tenant)
    if balance.available_points < payload.points_used:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Insufficient points. You have {balance.available_points} available points,"
                f" but need {payload.points_used}"
            ),
        )

    request = RedeemRequest(
        tenant_id=member_tenant,
        user_id=user_id,
        reward_option=payload.reward_option,
        points_used=payload.points_used,
        delivery_email=payload.delivery_email,
        notes=payload.notes,
        status=RedeemStatus.PENDING,
    )
    db.add(request)
    await db.flush()
    record_points(
        db,
        user_id=user_id,
        tenant_id=member_tenant,
        points=-payload.points_used,
        entry_type=PointsEntryType.REDEMPTION,
        description=f"Redeemed: {payload.reward_option}",
        source=REDEMPTION_SOURCE,
        notes=payload.notes,
        reference_id=request.id,
        created_by=user_id,
    )
    request_id = request.id
    await db.commit()
    logger.info(
        "Redeem request %s by %s for %d points", request_id, user_id, payload.points_used
    )

    await notify(
        db,
        recipients=[user_id],
        event="redeem_request_submitted",
        data={"reward_option": payload.reward_option, "points_used": payload.points_used},
        tenant_id=member_tenant,
    )
    return await get_redeem_request(db, request_id)


async def get_redeem_request(
    db: AsyncSession,
    request_id: uuid.UUID,
    *,
    tenant_id: Optional[uuid.UUID] = None,
    for_update: bool = False,
) -> RedeemRequest:
    query = (
        select(RedeemRequest)
        .where(RedeemRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    if tenant_id is not None:
        query = query.where(RedeemRequest.tenant_id == tenant_id)
    if for_update:
        query = query.with_for_update()
    request = (await db.execute(query)).scalar_one_or_none()
    if not request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Redemption request not found"
        )
    return request


async def list_redeem_requests(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    user_id: Optional[uuid.UUID] = None,
    request_status: Optional[RedeemStatus] = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[RedeemRequest], int]:
    filters = []
    if tenant_id is not None:
        filters.append(RedeemRequest.tenant_id == tenant_id)
    if user_id is not None:
        filters.append(RedeemRequest.user_id == user_id)
    if request_status:
        filters.append(RedeemRequest.status == request_status)

    total = (
        await db.execute(select(func.count()).select_from(RedeemRequest).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(RedeemRequest)
        .where(*filters)
        .order_by(desc(RedeemRequest.created_at))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


def _ensure_pending(request: RedeemRequest) -> None:
    if request.status != RedeemStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Request is already {request.status.value}",
        )


async def approve_redeem_request(
    db: AsyncSession,
    *,
    request_id: uuid.UUID,
    staff_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
) -> RedeemRequest:
    request = await get_redeem_request(db, request_id, tenant_id=tenant_id, for_update=True)
    _ensure_pending(request)

    request.status = RedeemStatus.APPROVED
    request.reviewed_by = staff_id
    request.reviewed_at = utc_now()
    user_id, request_tenant, option = request.user_id, request.tenant_id, request.reward_option
    await db.commit()
    logger.info("Redeem request %s approved by %s", request_id, staff_id)

    await notify(
        db,
        recipients=[user_id],
        event="redeem_request_approved",
        data={"reward_option": option},
        tenant_id=request_tenant,
    )
    return await get_redeem_request(db, request_id)


async def reject_redeem_request(
    db: AsyncSession,
    *,
    request_id: uuid.UUID,
    staff_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
    reason: str,
) -> RedeemRequest:
    """Reject a pending request and refund its points."""
    request = await get_redeem_request(db, request_id, tenant_id=tenant_id, for_update=True)
    _ensure_pending(request)

    reason = reason.strip()
    request.status = RedeemStatus.REJECTED
    request.reviewed_by = staff_id
    request.reviewed_at = utc_now()
    request.rejection_reason = reason
    record_points(
        db,
        user_id=request.user_id,
        tenant_id=request.tenant_id,
        points=request.points_used,
        entry_type=PointsEntryType.REFUND,
        description=f"Refund for rejected redemption: {request.reward_option}",
        source=REDEMPTION_SOURCE,
        notes=reason,
        reference_id=request.id,
        created_by=staff_id,
    )
    user_id, request_tenant = request.user_id, request.tenant_id
    data = {
        "reward_option": request.reward_option,
        "points_used": request.points_used,
        "reason": reason,
    }
    await db.commit()
    logger.info("Redeem request %s rejected by %s", request_id, staff_id)

    await notify(
        db,
        recipients=[user_id],
        event="redeem_request_rejected",
        data=data,
        tenant_id=request_tenant,
    )
    return await get_redeem_request(db, request_id)
