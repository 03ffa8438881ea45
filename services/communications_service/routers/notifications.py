"""Notification inbox endpoints."""

import uuid

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse, Pagination, page_offset
from libs.db.session import get_async_db
from services.communications_service.schemas import (
    NotificationResponse,
    UnreadCountResponse,
)
from services.communications_service.services import notification_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=ApiResponse[list[NotificationResponse]])
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = False,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    items, total = await notification_service.list_notifications(
        db,
        recipient_id=current_user.user_id,
        unread_only=unread_only,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[NotificationResponse.model_validate(n) for n in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/unread-count", response_model=ApiResponse[UnreadCountResponse])
async def get_unread_count(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    count = await notification_service.unread_count(db, current_user.user_id)
    return ApiResponse(data=UnreadCountResponse(unread=count))


@router.post("/read-all", response_model=ApiResponse[UnreadCountResponse])
async def mark_all_read(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    updated = await notification_service.mark_all_read(db, current_user.user_id)
    return ApiResponse(
        message=f"{updated} notifications marked as read",
        data=UnreadCountResponse(unread=0),
    )


@router.post("/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
async def mark_read(
    notification_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    notification = await notification_service.mark_read(
        db, notification_id=notification_id, recipient_id=current_user.user_id
    )
    return ApiResponse(data=NotificationResponse.model_validate(notification))
