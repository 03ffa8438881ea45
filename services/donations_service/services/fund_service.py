"""Fund management. Totals are always recomputed from campaigns, never incremented."""

import uuid
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException, status
from libs.common.logging import get_logger
from services.donations_service.models import (
    OPEN_CAMPAIGN_STATUSES,
    RAISING_CAMPAIGN_STATUSES,
    Campaign,
    CampaignStatus,
    Fund,
    FundStatus,
)
from services.donations_service.schemas import (
    CampaignCreate,
    FundCreate,
    FundStats,
    FundUpdate,
)
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def get_fund(
    db: AsyncSession,
    fund_id: uuid.UUID,
    *,
    tenant_id: Optional[uuid.UUID],
    for_update: bool = False,
) -> Fund:
    """Load a fund. ``tenant_id=None`` skips the tenant check (super admin)."""
    query = select(Fund).where(Fund.id == fund_id).execution_options(populate_existing=True)
    if for_update:
        query = query.with_for_update()
    fund = (await db.execute(query)).scalar_one_or_none()
    if not fund:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fund not found")
    if tenant_id is not None and fund.tenant_id != tenant_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this fund",
        )
    return fund


async def list_funds(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    fund_status: Optional[FundStatus] = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[Fund], int]:
    filters = []
    if tenant_id is not None:
        filters.append(Fund.tenant_id == tenant_id)
    if fund_status:
        filters.append(Fund.status == fund_status)

    total = (
        await db.execute(select(func.count()).select_from(Fund).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(Fund).where(*filters).order_by(desc(Fund.created_at)).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total


async def create_fund(
    db: AsyncSession, *, payload: FundCreate, tenant_id: uuid.UUID, created_by: uuid.UUID
) -> Fund:
    fund = Fund(
        tenant_id=tenant_id,
        name=payload.name.strip(),
        description=payload.description,
        status=payload.status,
        created_by=created_by,
        total_raised=Decimal("0"),
    )
    db.add(fund)
    await db.commit()
    logger.info("Created fund %s (%s) for tenant %s", fund.id, fund.name, tenant_id)
    return await get_fund(db, fund.id, tenant_id=None)


async def update_fund(
    db: AsyncSession, fund_id: uuid.UUID, payload: FundUpdate, *, tenant_id: Optional[uuid.UUID]
) -> Fund:
    fund = await get_fund(db, fund_id, tenant_id=tenant_id)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(fund, field, value.strip() if field == "name" else value)
    await db.commit()
    logger.info("Updated fund %s", fund_id)
    return await get_fund(db, fund_id, tenant_id=None)


async def archive_fund(
    db: AsyncSession, fund_id: uuid.UUID, *, tenant_id: Optional[uuid.UUID]
) -> Fund:
    """Soft delete. Funds with draft or active campaigns stay put."""
    fund = await get_fund(db, fund_id, tenant_id=tenant_id, for_update=True)
    open_campaigns = (
        await db.execute(
            select(func.count())
            .select_from(Campaign)
            .where(Campaign.fund_id == fund_id, Campaign.status.in_(OPEN_CAMPAIGN_STATUSES))
        )
    ).scalar() or 0
    if open_campaigns:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Cannot delete fund with {open_campaigns} active campaign(s). "
                "Please archive or complete campaigns first."
            ),
        )

    fund.status = FundStatus.ARCHIVED
    await db.commit()
    logger.info("Archived fund %s", fund_id)
    return await get_fund(db, fund_id, tenant_id=None)


async def recalculate_total(
    db: AsyncSession, fund_id: uuid.UUID, *, tenant_id: Optional[uuid.UUID]
) -> Fund:
    """Recompute ``total_raised`` as the sum of active and completed campaigns."""
    fund = await get_fund(db, fund_id, tenant_id=tenant_id, for_update=True)
    raised = (
        await db.execute(
            select(func.coalesce(func.sum(Campaign.current_amount), 0)).where(
                Campaign.fund_id == fund_id,
                Campaign.status.in_(RAISING_CAMPAIGN_STATUSES),
            )
        )
    ).scalar()
    fund.total_raised = Decimal(str(raised or 0))
    await db.commit()
    logger.info("Recalculated fund %s total_raised=%s", fund_id, fund.total_raised)
    return await get_fund(db, fund_id, tenant_id=None)


async def add_campaign(
    db: AsyncSession,
    fund_id: uuid.UUID,
    payload: CampaignCreate,
    *,
    tenant_id: Optional[uuid.UUID],
    created_by: uuid.UUID,
) -> Fund:
    fund = await get_fund(db, fund_id, tenant_id=tenant_id)
    if fund.status != FundStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Campaigns can only be added to active funds",
        )

    campaign = Campaign(
        tenant_id=fund.tenant_id,
        fund_id=fund.id,
        created_by=created_by,
        **payload.model_dump(),
    )
    db.add(campaign)
    await db.flush()
    logger.info("Linked campaign %s to fund %s", campaign.id, fund_id)
    return await recalculate_total(db, fund_id, tenant_id=tenant_id)


async def get_fund_stats(
    db: AsyncSession, fund_id: uuid.UUID, *, tenant_id: Optional[uuid.UUID]
) -> FundStats:
    fund = await recalculate_total(db, fund_id, tenant_id=tenant_id)
    counts = {
        CampaignStatus(s): c
        for s, c in (
            await db.execute(
                select(Campaign.status, func.count())
                .where(Campaign.fund_id == fund_id)
                .group_by(Campaign.status)
            )
        ).all()
    }
    return FundStats(
        fund_id=fund.id,
        name=fund.name,
        total_raised=fund.total_raised,
        campaign_count=sum(counts.values()),
        active_campaigns=counts.get(CampaignStatus.ACTIVE, 0),
        completed_campaigns=counts.get(CampaignStatus.COMPLETED, 0),
    )
