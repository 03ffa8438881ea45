"""Community post share tracking."""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from libs.auth.dependencies import get_current_user, tenant_scope
from libs.auth.models import AuthUser
from libs.common.rate_limit import write_limit
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.community_service.schemas import (
    PlatformShares,
    ShareCount,
    ShareCreate,
    ShareResponse,
    TrackShareResponse,
    TrendingPost,
)
from services.community_service.services import share_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["shares"])


@router.get("/shares/trending", response_model=ApiResponse[list[TrendingPost]])
async def trending_posts(
    time_range: Literal["day", "week", "month"] = Query("week", alias="timeRange"),
    limit: int = Query(10, ge=1, le=50),
    tenant_id: Optional[uuid.UUID] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    posts = await share_service.get_trending_posts(
        db,
        time_range=time_range,
        tenant_id=tenant_scope(current_user, tenant_id),
        limit=limit,
    )
    return ApiResponse(data=posts)


@router.post(
    "/posts/{post_id}/shares",
    response_model=ApiResponse[TrackShareResponse],
    status_code=status.HTTP_201_CREATED,
)
@write_limit
async def track_share(
    request: Request,
    post_id: uuid.UUID,
    payload: ShareCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    details = dict(payload.details)
    details.setdefault("user_agent", request.headers.get("user-agent"))
    details.setdefault("referrer", request.headers.get("referer"))

    share, count = await share_service.track_share(
        db,
        post_id=post_id,
        platform=payload.platform,
        user_id=current_user.user_id,
        tenant_id=current_user.tenant_id,
        details=details,
    )
    return ApiResponse(
        message="Share tracked successfully",
        data=TrackShareResponse(share=ShareResponse.model_validate(share), share_count=count),
    )


@router.get("/posts/{post_id}/shares/count", response_model=ApiResponse[ShareCount])
async def share_count(
    post_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    count = await share_service.get_share_count(
        db, post_id, tenant_id=tenant_scope(current_user)
    )
    return ApiResponse(data=ShareCount(post_id=post_id, share_count=count))


@router.get("/posts/{post_id}/shares/analytics", response_model=ApiResponse[list[PlatformShares]])
async def share_analytics(
    post_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    analytics = await share_service.get_share_analytics(
        db, post_id, tenant_id=tenant_scope(current_user)
    )
    return ApiResponse(data=analytics)


@router.get("/posts/{post_id}/shares/recent", response_model=ApiResponse[list[ShareResponse]])
async def recent_shares(
    post_id: uuid.UUID,
    limit: int = Query(10, ge=1, le=50),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    shares = await share_service.get_recent_shares(
        db, post_id, tenant_id=tenant_scope(current_user), limit=limit
    )
    return ApiResponse(data=[ShareResponse.model_validate(s) for s in shares])
