"""Donation fund endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user, require_admin, tenant_for_write, tenant_scope
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse, Pagination, page_offset
from libs.db.session import get_async_db
from services.donations_service.models import FundStatus
from services.donations_service.schemas import (
    CampaignCreate,
    FundCreate,
    FundResponse,
    FundStats,
    FundUpdate,
)
from services.donations_service.services import fund_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/funds", tags=["funds"])


@router.get("", response_model=ApiResponse[list[FundResponse]])
async def list_funds(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    fund_status: Optional[FundStatus] = Query(None, alias="status"),
    tenant_id: Optional[uuid.UUID] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    funds, total = await fund_service.list_funds(
        db,
        tenant_id=tenant_scope(current_user, tenant_id),
        fund_status=fund_status,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[FundResponse.model_validate(f) for f in funds],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "",
    response_model=ApiResponse[FundResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_fund(
    payload: FundCreate,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    fund = await fund_service.create_fund(
        db,
        payload=payload,
        tenant_id=tenant_for_write(admin, payload.tenant_id),
        created_by=admin.user_id,
    )
    return ApiResponse(message="Fund created successfully", data=FundResponse.model_validate(fund))


@router.get("/{fund_id}", response_model=ApiResponse[FundResponse])
async def get_fund(
    fund_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    fund = await fund_service.get_fund(db, fund_id, tenant_id=tenant_scope(current_user))
    return ApiResponse(data=FundResponse.model_validate(fund))


@router.patch("/{fund_id}", response_model=ApiResponse[FundResponse])
async def update_fund(
    fund_id: uuid.UUID,
    payload: FundUpdate,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    fund = await fund_service.update_fund(db, fund_id, payload, tenant_id=tenant_scope(admin))
    return ApiResponse(message="Fund updated successfully", data=FundResponse.model_validate(fund))


@router.delete("/{fund_id}", response_model=ApiResponse[FundResponse])
async def delete_fund(
    fund_id: uuid.UUID,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    fund = await fund_service.archive_fund(db, fund_id, tenant_id=tenant_scope(admin))
    return ApiResponse(message="Fund archived successfully", data=FundResponse.model_validate(fund))


@router.get("/{fund_id}/stats", response_model=ApiResponse[FundStats])
async def get_fund_stats(
    fund_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    stats = await fund_service.get_fund_stats(db, fund_id, tenant_id=tenant_scope(current_user))
    return ApiResponse(data=stats)


@router.post("/{fund_id}/recalculate", response_model=ApiResponse[FundResponse])
async def recalculate_fund(
    fund_id: uuid.UUID,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    fund = await fund_service.recalculate_total(db, fund_id, tenant_id=tenant_scope(admin))
    return ApiResponse(message="Fund total recalculated", data=FundResponse.model_validate(fund))


@router.post(
    "/{fund_id}/campaigns",
    response_model=ApiResponse[FundResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_campaign(
    fund_id: uuid.UUID,
    payload: CampaignCreate,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    fund = await fund_service.add_campaign(
        db, fund_id, payload, tenant_id=tenant_scope(admin), created_by=admin.user_id
    )
    return ApiResponse(
        message="Campaign added to fund", data=FundResponse.model_validate(fund)
    )
