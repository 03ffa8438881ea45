"""Tenant management (super admin only)."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_super_admin
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse
from libs.db.session import get_async_db
from services.members_service.schemas import TenantCreate, TenantResponse
from services.members_service.services import member_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get("", response_model=ApiResponse[list[TenantResponse]])
async def list_tenants(
    _admin: AuthUser = Depends(require_super_admin),
    db: AsyncSession = Depends(get_async_db),
):
    tenants = await member_service.list_tenants(db)
    return ApiResponse(data=[TenantResponse.model_validate(t) for t in tenants])


@router.post(
    "",
    response_model=ApiResponse[TenantResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_tenant(
    payload: TenantCreate,
    _admin: AuthUser = Depends(require_super_admin),
    db: AsyncSession = Depends(get_async_db),
):
    tenant = await member_service.create_tenant(db, payload)
    return ApiResponse(
        message="Tenant created", data=TenantResponse.model_validate(tenant)
    )
