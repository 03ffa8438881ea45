"""Member directory endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import get_current_user, require_admin, tenant_scope
from libs.auth.models import AuthUser, Role
from libs.common.responses import ApiResponse, Pagination, page_offset
from libs.db.session import get_async_db
from services.members_service.schemas import MemberResponse
from services.members_service.services import member_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/members", tags=["members"])


@router.get("/me", response_model=ApiResponse[MemberResponse])
async def get_me(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    member = await member_service.get_member(db, current_user.user_id)
    return ApiResponse(data=MemberResponse.model_validate(member))


@router.get("", response_model=ApiResponse[list[MemberResponse]])
async def list_members(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    role: Optional[Role] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    tenant_id: Optional[uuid.UUID] = None,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    members, total = await member_service.list_members(
        db,
        tenant_id=tenant_scope(admin, tenant_id),
        role=role,
        department=department,
        search=search,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[MemberResponse.model_validate(m) for m in members],
        pagination=Pagination.build(page, limit, total),
    )
