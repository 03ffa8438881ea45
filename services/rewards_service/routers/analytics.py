"""Reward analytics endpoints (admin and staff)."""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_staff, tenant_scope
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.rewards_service.models import RewardCategory
from services.rewards_service.schemas import (
    CategoryPoints,
    ClaimsReport,
    DepartmentAnalytics,
    RewardStatistics,
    TaskCompletionReport,
    UserActivityHistory,
)
from services.rewards_service.services import analytics_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/rewards/analytics", tags=["reward-analytics"])


@router.get("/points-distribution", response_model=ApiResponse[list[CategoryPoints]])
async def points_distribution(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    tenant_id: Optional[uuid.UUID] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    data = await analytics_service.get_points_distribution(
        db, tenant_id=tenant_scope(staff, tenant_id), start=start, end=end
    )
    return ApiResponse(data=data)


@router.get("/task-completion", response_model=ApiResponse[TaskCompletionReport])
async def task_completion(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    tenant_id: Optional[uuid.UUID] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    data = await analytics_service.get_task_completion(
        db, tenant_id=tenant_scope(staff, tenant_id), start=start, end=end
    )
    return ApiResponse(data=data)


@router.get("/claims", response_model=ApiResponse[ClaimsReport])
async def claims_over_time(
    months: int = Query(6, ge=1, le=24),
    tenant_id: Optional[uuid.UUID] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    data = await analytics_service.get_claims_report(
        db, tenant_id=tenant_scope(staff, tenant_id), months=months
    )
    return ApiResponse(data=data)


@router.get("/departments", response_model=ApiResponse[list[DepartmentAnalytics]])
async def department_analytics(
    tenant_id: Optional[uuid.UUID] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    data = await analytics_service.get_department_analytics(
        db, tenant_id=tenant_scope(staff, tenant_id)
    )
    return ApiResponse(data=data)


@router.get("/reward-statistics", response_model=ApiResponse[list[RewardStatistics]])
async def reward_statistics(
    limit: int = Query(50, ge=1, le=200),
    tenant_id: Optional[uuid.UUID] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    data = await analytics_service.get_reward_statistics(
        db, tenant_id=tenant_scope(staff, tenant_id), limit=limit
    )
    return ApiResponse(data=data)


@router.get("/users/{user_id}/history", response_model=ApiResponse[UserActivityHistory])
async def user_history(
    user_id: uuid.UUID,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    category: Optional[RewardCategory] = None,
    limit: int = Query(100, ge=1, le=500),
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    data = await analytics_service.get_user_activity_history(
        db,
        user_id=user_id,
        tenant_id=tenant_scope(staff),
        start=start,
        end=end,
        category=category,
        limit=limit,
    )
    return ApiResponse(data=data)
