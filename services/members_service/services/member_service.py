"""Member and tenant lookups."""

import uuid
from typing import Optional

from fastapi import HTTPException, status
from libs.auth.models import Role
from libs.common.logging import get_logger
from services.members_service.models import Member, Tenant
from services.members_service.schemas import TenantCreate
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def get_member(db: AsyncSession, member_id: uuid.UUID) -> Member:
    member = await db.get(Member, member_id)
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Member not found"
        )
    return member


async def get_tenant_member(
    db: AsyncSession, member_id: uuid.UUID, tenant_id: Optional[uuid.UUID]
) -> Member:
    """Load a member visible inside ``tenant_id`` (any tenant when ``None``)."""
    query = select(Member).where(Member.id == member_id)
    if tenant_id is not None:
        query = query.where(Member.tenant_id == tenant_id)
    member = (await db.execute(query)).scalar_one_or_none()
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Member not found"
        )
    return member


async def list_members(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    role: Optional[Role] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Member], int]:
    query = select(Member)
    count_query = select(func.count()).select_from(Member)

    filters = []
    if tenant_id is not None:
        filters.append(Member.tenant_id == tenant_id)
    if role:
        filters.append(Member.role == role)
    if department:
        filters.append(Member.department == department)
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                Member.first_name.ilike(pattern),
                Member.last_name.ilike(pattern),
                Member.email.ilike(pattern),
            )
        )
    if filters:
        query = query.where(*filters)
        count_query = count_query.where(*filters)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Member.last_name, Member.first_name).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total


async def get_members_map(
    db: AsyncSession, member_ids: list[uuid.UUID]
) -> dict[uuid.UUID, Member]:
    """Bulk-load members keyed by id (missing ids are simply absent)."""
    unique_ids = list(dict.fromkeys(member_ids))
    if not unique_ids:
        return {}
    result = await db.execute(select(Member).where(Member.id.in_(unique_ids)))
    return {m.id: m for m in result.scalars().all()}


async def create_tenant(db: AsyncSession, payload: TenantCreate) -> Tenant:
    tenant = Tenant(name=payload.name.strip(), domain=payload.domain)
    db.add(tenant)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tenant with this name already exists",
        )
    await db.refresh(tenant)
    logger.info("Created tenant %s (%s)", tenant.id, tenant.name)
    return tenant


async def list_tenants(db: AsyncSession) -> list[Tenant]:
    result = await db.execute(select(Tenant).order_by(Tenant.name))
    return list(result.scalars().all())
