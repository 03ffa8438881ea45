"""Points balance, ledger history, manual adjustments and redemption requests."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from libs.auth.dependencies import (
    get_current_user,
    require_reward_participant,
    require_staff,
    tenant_scope,
)
from libs.auth.models import AuthUser
from libs.common.rate_limit import write_limit
from libs.common.responses import ApiResponse, Pagination, page_offset
from libs.db.session import get_async_db
from services.members_service.services.member_service import get_tenant_member
from services.rewards_service.models import PointsEntryType, RedeemStatus
from services.rewards_service.schemas import (
    ManualPointsRequest,
    PointsBalance,
    PointsEntryResponse,
    RedeemRejectRequest,
    RedeemRequestCreate,
    RedeemRequestResponse,
)
from services.rewards_service.services import points_service, redemption_service
from services.rewards_service.services.summary_service import get_points_balance
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/rewards", tags=["reward-points"])


# ---------------------------------------------------------------------------
# Balance and history
# ---------------------------------------------------------------------------


@router.get("/points/me", response_model=ApiResponse[PointsBalance])
async def get_my_points(
    current_user: AuthUser = Depends(require_reward_participant),
    db: AsyncSession = Depends(get_async_db),
):
    balance = await get_points_balance(db, current_user.user_id, tenant_scope(current_user))
    return ApiResponse(data=balance)


@router.get("/points/me/history", response_model=ApiResponse[list[PointsEntryResponse]])
async def get_my_points_history(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    entry_type: Optional[PointsEntryType] = None,
    current_user: AuthUser = Depends(require_reward_participant),
    db: AsyncSession = Depends(get_async_db),
):
    entries, total = await points_service.list_points_history(
        db,
        user_id=current_user.user_id,
        tenant_id=tenant_scope(current_user),
        entry_type=entry_type,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[PointsEntryResponse.model_validate(e) for e in entries],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "/points/manual",
    response_model=ApiResponse[PointsEntryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_manual_points(
    payload: ManualPointsRequest,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    entry = await points_service.add_manual_points(
        db,
        user_id=payload.user_id,
        tenant_id=tenant_scope(staff),
        points=payload.points,
        activity=payload.activity,
        notes=payload.notes,
        staff_id=staff.user_id,
    )
    return ApiResponse(
        message=f"Successfully added {payload.points} points",
        data=PointsEntryResponse.model_validate(entry),
    )


@router.get("/points/{user_id}", response_model=ApiResponse[PointsBalance])
async def get_member_points(
    user_id: uuid.UUID,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    member = await get_tenant_member(db, user_id, tenant_scope(staff))
    balance = await get_points_balance(db, member.id, member.tenant_id)
    return ApiResponse(data=balance)


@router.get("/points/{user_id}/history", response_model=ApiResponse[list[PointsEntryResponse]])
async def get_member_points_history(
    user_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    entry_type: Optional[PointsEntryType] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    member = await get_tenant_member(db, user_id, tenant_scope(staff))
    entries, total = await points_service.list_points_history(
        db,
        user_id=member.id,
        tenant_id=member.tenant_id,
        entry_type=entry_type,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[PointsEntryResponse.model_validate(e) for e in entries],
        pagination=Pagination.build(page, limit, total),
    )


# ---------------------------------------------------------------------------
# Redemption requests
# ---------------------------------------------------------------------------


@router.post(
    "/redeem-requests",
    response_model=ApiResponse[RedeemRequestResponse],
    status_code=status.HTTP_201_CREATED,
)
@write_limit
async def create_redeem_request(
    request: Request,
    payload: RedeemRequestCreate,
    current_user: AuthUser = Depends(require_reward_participant),
    db: AsyncSession = Depends(get_async_db),
):
    redeem = await redemption_service.create_redeem_request(
        db,
        user_id=current_user.user_id,
        tenant_id=tenant_scope(current_user),
        payload=payload,
    )
    return ApiResponse(
        message="Redemption request submitted successfully",
        data=RedeemRequestResponse.model_validate(redeem),
    )


@router.get("/redeem-requests/me", response_model=ApiResponse[list[RedeemRequestResponse]])
async def list_my_redeem_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    request_status: Optional[RedeemStatus] = Query(None, alias="status"),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    requests, total = await redemption_service.list_redeem_requests(
        db,
        tenant_id=current_user.tenant_id,
        user_id=current_user.user_id,
        request_status=request_status,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[RedeemRequestResponse.model_validate(r) for r in requests],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/redeem-requests", response_model=ApiResponse[list[RedeemRequestResponse]])
async def list_redeem_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    request_status: Optional[RedeemStatus] = Query(None, alias="status"),
    tenant_id: Optional[uuid.UUID] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    requests, total = await redemption_service.list_redeem_requests(
        db,
        tenant_id=tenant_scope(staff, tenant_id),
        request_status=request_status,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[RedeemRequestResponse.model_validate(r) for r in requests],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "/redeem-requests/{request_id}/approve",
    response_model=ApiResponse[RedeemRequestResponse],
)
async def approve_redeem_request(
    request_id: uuid.UUID,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    redeem = await redemption_service.approve_redeem_request(
        db, request_id=request_id, staff_id=staff.user_id, tenant_id=tenant_scope(staff)
    )
    return ApiResponse(
        message="Redemption request approved successfully",
        data=RedeemRequestResponse.model_validate(redeem),
    )


@router.post(
    "/redeem-requests/{request_id}/reject",
    response_model=ApiResponse[RedeemRequestResponse],
)
async def reject_redeem_request(
    request_id: uuid.UUID,
    payload: RedeemRejectRequest,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    redeem = await redemption_service.reject_redeem_request(
        db,
        request_id=request_id,
        staff_id=staff.user_id,
        tenant_id=tenant_scope(staff),
        reason=payload.reason,
    )
    return ApiResponse(
        message="Redemption request rejected and points refunded",
        data=RedeemRequestResponse.model_validate(redeem),
    )
