"""Leaderboard endpoints."""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import get_current_user, tenant_scope
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.rewards_service.schemas import (
    BadgeCollectorEntry,
    DepartmentLeaderboardEntry,
    LeaderboardEntry,
)
from services.rewards_service.services import leaderboard_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

Period = Literal["all", "month", "year"]


@router.get("/points", response_model=ApiResponse[list[LeaderboardEntry]])
async def points_leaderboard(
    period: Period = "all",
    department: Optional[str] = None,
    limit: int = Query(10, ge=1, le=100),
    tenant_id: Optional[uuid.UUID] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    entries = await leaderboard_service.get_points_leaderboard(
        db,
        tenant_id=tenant_scope(current_user, tenant_id),
        period=period,
        department=department,
        limit=limit,
    )
    return ApiResponse(data=entries)


@router.get("/departments", response_model=ApiResponse[list[DepartmentLeaderboardEntry]])
async def department_leaderboard(
    period: Period = "all",
    limit: int = Query(10, ge=1, le=100),
    tenant_id: Optional[uuid.UUID] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    entries = await leaderboard_service.get_department_leaderboard(
        db, tenant_id=tenant_scope(current_user, tenant_id), period=period, limit=limit
    )
    return ApiResponse(data=entries)


@router.get("/badges", response_model=ApiResponse[list[BadgeCollectorEntry]])
async def badge_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    tenant_id: Optional[uuid.UUID] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    entries = await leaderboard_service.get_badge_leaderboard(
        db, tenant_id=tenant_scope(current_user, tenant_id), limit=limit
    )
    return ApiResponse(data=entries)
