"""Fund and campaign request/response schemas."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.donations_service.models.enums import CampaignStatus, FundStatus


class FundCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    status: FundStatus = FundStatus.ACTIVE
    tenant_id: Optional[uuid.UUID] = None


class FundUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    status: Optional[FundStatus] = None


class CampaignCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    target_amount: Decimal = Field(..., gt=0)
    current_amount: Decimal = Field(Decimal("0"), ge=0)
    status: CampaignStatus = CampaignStatus.DRAFT


class CampaignResponse(BaseModel):
    id: uuid.UUID
    fund_id: Optional[uuid.UUID] = None
    title: str
    description: Optional[str] = None
    target_amount: Decimal
    current_amount: Decimal
    status: CampaignStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FundResponse(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str
    description: str
    created_by: uuid.UUID
    total_raised: Decimal
    status: FundStatus
    campaigns: list[CampaignResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FundStats(BaseModel):
    fund_id: uuid.UUID
    name: str
    total_raised: Decimal
    campaign_count: int
    active_campaigns: int
    completed_campaigns: int
