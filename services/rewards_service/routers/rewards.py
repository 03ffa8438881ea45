"""Reward catalog, progress, claim and member summary endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from libs.auth.dependencies import (
    get_current_user,
    require_admin,
    require_reward_participant,
    tenant_for_write,
    tenant_scope,
)
from libs.auth.models import AuthUser
from libs.common.rate_limit import write_limit
from libs.common.responses import ApiResponse, Pagination, page_offset
from libs.db.session import get_async_db
from services.rewards_service.models import ActivityStatus, RewardCategory, RewardType
from services.rewards_service.schemas import (
    ActivityDetailResponse,
    ActivityResponse,
    ClaimRequest,
    ProgressRequest,
    ResubmitRequest,
    RewardCreate,
    RewardResponse,
    RewardUpdate,
    UserRewardSummary,
    UserTierResponse,
)
from services.rewards_service.services import (
    activity_service,
    reward_service,
    summary_service,
    verification_service,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/rewards", tags=["rewards"])


# ---------------------------------------------------------------------------
# Member views (static paths first so they never match /{reward_id})
# ---------------------------------------------------------------------------


@router.get("/activities/me", response_model=ApiResponse[list[ActivityResponse]])
async def list_my_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    activity_status: Optional[ActivityStatus] = Query(None, alias="status"),
    current_user: AuthUser = Depends(require_reward_participant),
    db: AsyncSession = Depends(get_async_db),
):
    activities, total = await activity_service.list_user_activities(
        db,
        user_id=current_user.user_id,
        tenant_id=tenant_scope(current_user),
        activity_status=activity_status,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[ActivityResponse.model_validate(a) for a in activities],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/activities/{activity_id}", response_model=ApiResponse[ActivityDetailResponse])
async def get_activity(
    activity_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    activity = await activity_service.get_activity(
        db, activity_id, tenant_id=tenant_scope(current_user)
    )
    if activity.user_id != current_user.user_id and not current_user.is_staff:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")
    return ApiResponse(data=ActivityDetailResponse.model_validate(activity))


@router.post(
    "/activities/{activity_id}/resubmit",
    response_model=ApiResponse[ActivityDetailResponse],
)
async def resubmit_activity(
    activity_id: uuid.UUID,
    payload: Optional[ResubmitRequest] = None,
    current_user: AuthUser = Depends(require_reward_participant),
    db: AsyncSession = Depends(get_async_db),
):
    activity = await verification_service.resubmit_task(
        db,
        activity_id=activity_id,
        user_id=current_user.user_id,
        note=payload.note if payload else None,
    )
    return ApiResponse(
        message="Task resubmitted for verification",
        data=ActivityDetailResponse.model_validate(activity),
    )


@router.get("/summary/me", response_model=ApiResponse[UserRewardSummary])
async def get_my_summary(
    current_user: AuthUser = Depends(require_reward_participant),
    db: AsyncSession = Depends(get_async_db),
):
    summary = await summary_service.get_user_summary(
        db, current_user.user_id, tenant_scope(current_user)
    )
    return ApiResponse(data=summary)


@router.get("/tier/me", response_model=ApiResponse[UserTierResponse])
async def get_my_tier(
    current_user: AuthUser = Depends(require_reward_participant),
    db: AsyncSession = Depends(get_async_db),
):
    tier = await summary_service.get_user_tier_info(
        db, current_user.user_id, tenant_scope(current_user)
    )
    return ApiResponse(data=tier)


@router.get("/tier/{user_id}", response_model=ApiResponse[UserTierResponse])
async def get_user_tier(
    user_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    tier = await summary_service.get_user_tier_info(db, user_id, tenant_scope(current_user))
    return ApiResponse(data=tier)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@router.get("", response_model=ApiResponse[list[RewardResponse]])
async def list_rewards(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category: Optional[list[RewardCategory]] = Query(None),
    reward_type: Optional[RewardType] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    include_inactive: bool = False,
    enforce_schedule: bool = True,
    tenant_id: Optional[uuid.UUID] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """List reward templates.

    ``include_inactive`` and ``enforce_schedule=false`` are honoured for
    admins only; everyone else sees active templates inside their window.
    """
    if not current_user.is_admin:
        include_inactive = False
        enforce_schedule = True

    rewards, total = await reward_service.list_rewards(
        db,
        tenant_id=tenant_scope(current_user, tenant_id),
        categories=category,
        reward_type=reward_type,
        featured=featured,
        search=search,
        include_inactive=include_inactive,
        enforce_schedule=enforce_schedule,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[RewardResponse.model_validate(r) for r in rewards],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "",
    response_model=ApiResponse[RewardResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_reward(
    payload: RewardCreate,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    reward = await reward_service.create_reward(
        db,
        payload=payload,
        tenant_id=tenant_for_write(admin, payload.tenant_id),
        created_by=admin.user_id,
    )
    return ApiResponse(
        message="Reward created successfully", data=RewardResponse.model_validate(reward)
    )


@router.get("/{reward_id}", response_model=ApiResponse[RewardResponse])
async def get_reward(
    reward_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    reward = await reward_service.get_reward(
        db,
        reward_id,
        tenant_id=tenant_scope(current_user),
        include_archived=current_user.is_admin,
    )
    return ApiResponse(data=RewardResponse.model_validate(reward))


@router.patch("/{reward_id}", response_model=ApiResponse[RewardResponse])
async def update_reward(
    reward_id: uuid.UUID,
    payload: RewardUpdate,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    reward = await reward_service.update_reward(
        db, reward_id, payload, tenant_id=tenant_scope(admin)
    )
    return ApiResponse(
        message="Reward updated successfully", data=RewardResponse.model_validate(reward)
    )


@router.delete("/{reward_id}", response_model=ApiResponse[RewardResponse])
async def delete_reward(
    reward_id: uuid.UUID,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    reward = await reward_service.archive_reward(db, reward_id, tenant_id=tenant_scope(admin))
    return ApiResponse(
        message="Reward archived successfully", data=RewardResponse.model_validate(reward)
    )


# ---------------------------------------------------------------------------
# Progress and redemption
# ---------------------------------------------------------------------------


@router.post("/{reward_id}/progress", response_model=ApiResponse[ActivityDetailResponse])
@write_limit
async def record_progress(
    request: Request,
    reward_id: uuid.UUID,
    payload: ProgressRequest,
    current_user: AuthUser = Depends(require_reward_participant),
    db: AsyncSession = Depends(get_async_db),
):
    context = dict(payload.context or {})
    # Only staff may send a task to review that does not require it
    force_verification = bool(context.pop("requires_verification", False))
    activity = await activity_service.record_task_progress(
        db,
        reward_id=reward_id,
        user_id=current_user.user_id,
        tenant_id=tenant_scope(current_user),
        amount=payload.amount,
        task_id=payload.task_id,
        context=context,
        force_verification=force_verification and current_user.is_staff,
    )
    return ApiResponse(
        message="Progress recorded", data=ActivityDetailResponse.model_validate(activity)
    )


@router.post("/{reward_id}/claim", response_model=ApiResponse[ActivityDetailResponse])
@write_limit
async def claim_reward(
    request: Request,
    reward_id: uuid.UUID,
    payload: ClaimRequest,
    current_user: AuthUser = Depends(require_reward_participant),
    db: AsyncSession = Depends(get_async_db),
):
    """Claim an approved reward. Staff may claim on a member's behalf via ``user_id``."""
    user_id = payload.user_id or current_user.user_id
    if user_id != current_user.user_id and not current_user.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only staff can claim rewards on behalf of another member",
        )

    activity = await activity_service.claim_reward(
        db,
        reward_id=reward_id,
        user_id=user_id,
        tenant_id=tenant_scope(current_user),
        issuer_id=current_user.user_id,
        voucher_code=payload.voucher_code,
        note=payload.note,
        task_id=payload.task_id,
    )
    return ApiResponse(
        message="Reward claimed successfully",
        data=ActivityDetailResponse.model_validate(activity),
    )
