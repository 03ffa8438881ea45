"""Badge catalog and award endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user, require_admin, require_staff, tenant_scope
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse, Pagination, page_offset
from libs.db.session import get_async_db
from services.rewards_service.models import BadgeCategory
from services.rewards_service.schemas import (
    AwardBadgeRequest,
    BadgeCreate,
    BadgeResponse,
    BadgeUpdate,
    UserBadgeResponse,
)
from services.members_service.services import member_service
from services.rewards_service.services import badge_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/badges", tags=["badges"])


@router.get("", response_model=ApiResponse[list[BadgeResponse]])
async def list_badges(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    category: Optional[BadgeCategory] = None,
    is_active: Optional[bool] = True,
    is_rare: Optional[bool] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    if not current_user.is_admin:
        is_active = True
    badges, total = await badge_service.list_badges(
        db,
        category=category,
        is_active=is_active,
        is_rare=is_rare,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[BadgeResponse.model_validate(b) for b in badges],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "",
    response_model=ApiResponse[BadgeResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_badge(
    payload: BadgeCreate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    badge = await badge_service.create_badge(db, payload)
    return ApiResponse(
        message="Badge created successfully", data=BadgeResponse.model_validate(badge)
    )


@router.get("/me", response_model=ApiResponse[list[UserBadgeResponse]])
async def list_my_badges(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    badges = await badge_service.list_user_badges(db, current_user.user_id)
    return ApiResponse(data=[UserBadgeResponse.model_validate(b) for b in badges])


@router.get("/recent", response_model=ApiResponse[list[UserBadgeResponse]])
async def list_recent_awards(
    limit: int = Query(10, ge=1, le=50),
    tenant_id: Optional[uuid.UUID] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    awards = await badge_service.list_recent_awards(
        db, tenant_id=tenant_scope(current_user, tenant_id), limit=limit
    )
    return ApiResponse(data=[UserBadgeResponse.model_validate(a) for a in awards])


@router.get("/users/{user_id}", response_model=ApiResponse[list[UserBadgeResponse]])
async def list_member_badges(
    user_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    badges = await badge_service.list_user_badges(db, user_id, tenant_scope(current_user))
    return ApiResponse(data=[UserBadgeResponse.model_validate(b) for b in badges])


@router.get("/{badge_id}", response_model=ApiResponse[BadgeResponse])
async def get_badge(
    badge_id: uuid.UUID,
    _current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    badge = await badge_service.get_badge(db, badge_id)
    return ApiResponse(data=BadgeResponse.model_validate(badge))


@router.patch("/{badge_id}", response_model=ApiResponse[BadgeResponse])
async def update_badge(
    badge_id: uuid.UUID,
    payload: BadgeUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    badge = await badge_service.update_badge(db, badge_id, payload)
    return ApiResponse(
        message="Badge updated successfully", data=BadgeResponse.model_validate(badge)
    )


@router.delete("/{badge_id}", response_model=ApiResponse[BadgeResponse])
async def deactivate_badge(
    badge_id: uuid.UUID,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    badge = await badge_service.deactivate_badge(db, badge_id)
    return ApiResponse(
        message="Badge deactivated successfully", data=BadgeResponse.model_validate(badge)
    )


@router.post(
    "/{badge_id}/award",
    response_model=ApiResponse[UserBadgeResponse],
    status_code=status.HTTP_201_CREATED,
)
async def award_badge(
    badge_id: uuid.UUID,
    payload: AwardBadgeRequest,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    member = await member_service.get_tenant_member(db, payload.user_id, tenant_scope(staff))
    user_badge = await badge_service.award_badge(
        db,
        badge_id=badge_id,
        user_id=member.id,
        tenant_id=member.tenant_id,
        awarded_by=staff.user_id,
        reason=payload.reason,
        details={"source": "manual"},
    )
    return ApiResponse(
        message="Badge awarded successfully", data=UserBadgeResponse.model_validate(user_badge)
    )


@router.get("/{badge_id}/recipients", response_model=ApiResponse[list[UserBadgeResponse]])
async def list_badge_recipients(
    badge_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    tenant_id: Optional[uuid.UUID] = None,
    staff: AuthUser = Depends(require_staff),
    db: AsyncSession = Depends(get_async_db),
):
    await badge_service.get_badge(db, badge_id)
    recipients, total = await badge_service.list_badge_recipients(
        db,
        badge_id=badge_id,
        tenant_id=tenant_scope(staff, tenant_id),
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[UserBadgeResponse.model_validate(r) for r in recipients],
        pagination=Pagination.build(page, limit, total),
    )


@router.delete("/{badge_id}/recipients/{user_id}", response_model=ApiResponse[None])
async def revoke_badge(
    badge_id: uuid.UUID,
    user_id: uuid.UUID,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await badge_service.revoke_badge(
        db, badge_id=badge_id, user_id=user_id, tenant_id=tenant_scope(admin)
    )
    return ApiResponse(message="Badge revoked successfully")
