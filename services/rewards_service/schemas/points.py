"""Points balance, ledger history and redemption request schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from services.rewards_service.models.enums import PointsEntryType, RedeemStatus


class PointsBalance(BaseModel):
    user_id: uuid.UUID
    total_points: int = 0
    redeemed_points: int = 0
    available_points: int = 0


class PointsEntryResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    tenant_id: Optional[uuid.UUID] = None
    points: int
    entry_type: PointsEntryType
    description: str
    source: Optional[str] = None
    notes: Optional[str] = None
    reference_id: Optional[uuid.UUID] = None
    created_by: Optional[uuid.UUID] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ManualPointsRequest(BaseModel):
    user_id: uuid.UUID
    points: int = Field(..., ge=1)
    activity: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = Field(None, max_length=1000)


class RedeemRequestCreate(BaseModel):
    reward_option: str = Field(..., min_length=1, max_length=255)
    points_used: int = Field(..., ge=1)
    delivery_email: EmailStr
    notes: Optional[str] = Field(None, max_length=1000)


class RedeemRejectRequest(BaseModel):
    reason: str = Field(..., min_length=10, max_length=1000)

    model_config = ConfigDict(str_strip_whitespace=True)


class RedeemRequestResponse(BaseModel):
    id: uuid.UUID
    tenant_id: Optional[uuid.UUID] = None
    user_id: uuid.UUID
    reward_option: str
    points_used: int
    delivery_email: str
    notes: Optional[str] = None
    status: RedeemStatus
    reviewed_by: Optional[uuid.UUID] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
