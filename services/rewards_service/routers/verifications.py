"""Staff verification queue endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_staff, tenant_scope
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse, Pagination, page_offset
from libs.db.session import get_async_db
from services.rewards_service.models import ActivityStatus
from services.rewards_service.schemas import (
    ActivityDetailResponse,
    MemberBrief,
    VerificationQueueItem,
    VerificationStats,
    VerifyRequest,
)
from services.rewards_service.services import verification_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/rewards/verifications", tags=["reward-verification"])


@router.get("", response_model=ApiResponse[list[VerificationQueueItem]])
async def list_verification_queue(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    activity_status: ActivityStatus = Query(
        ActivityStatus.PENDING_VERIFICATION, alias="status"
    ),
    reward_id: Optional[uuid.UUID] = None,
    user_id: Optional[uuid.UUID] = None,
    search: Optional[str] = None,
    tenant_id: Optional[uuid.UUID] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    rows, total = await verification_service.list_verification_queue(
        db,
        tenant_id=tenant_scope(staff, tenant_id),
        activity_status=activity_status,
        reward_id=reward_id,
        user_id=user_id,
        search=search,
        offset=page_offset(page, limit),
        limit=limit,
    )
    items = []
    for activity, member in rows:
        item = VerificationQueueItem.model_validate(activity)
        item.task_title = activity.task.title if activity.task else None
        item.user = MemberBrief.model_validate(member) if member else None
        items.append(item)
    return ApiResponse(data=items, pagination=Pagination.build(page, limit, total))


@router.get("/stats", response_model=ApiResponse[VerificationStats])
async def get_verification_stats(
    tenant_id: Optional[uuid.UUID] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    stats = await verification_service.get_verification_stats(
        db, tenant_id=tenant_scope(staff, tenant_id)
    )
    return ApiResponse(data=stats)


@router.post("/{activity_id}", response_model=ApiResponse[ActivityDetailResponse])
async def verify_activity(
    activity_id: uuid.UUID,
    payload: VerifyRequest,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    activity = await verification_service.verify_task(
        db,
        activity_id=activity_id,
        action=payload.action,
        staff_id=staff.user_id,
        tenant_id=tenant_scope(staff),
        reason=payload.reason,
    )
    return ApiResponse(
        message=f"Task {activity.status.value} successfully",
        data=ActivityDetailResponse.model_validate(activity),
    )
