"""Badge request/response schemas."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from services.rewards_service.models.enums import BadgeCategory, BadgeCriteria


class BadgeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    category: BadgeCategory
    icon: Optional[str] = None
    color: str = Field("#3B82F6", pattern=r"^#[0-9a-fA-F]{6}$")
    criteria_type: BadgeCriteria = BadgeCriteria.MANUAL
    criteria_value: int = Field(1, ge=1)
    criteria_description: Optional[str] = Field(None, max_length=500)
    points: int = Field(0, ge=0)
    is_active: bool = True
    is_rare: bool = False
    max_recipients: Optional[int] = Field(None, ge=1)


class BadgeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[BadgeCategory] = None
    icon: Optional[str] = None
    color: Optional[str] = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")
    criteria_type: Optional[BadgeCriteria] = None
    criteria_value: Optional[int] = Field(None, ge=1)
    criteria_description: Optional[str] = Field(None, max_length=500)
    points: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    is_rare: Optional[bool] = None
    max_recipients: Optional[int] = Field(None, ge=1)


class BadgeResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    category: BadgeCategory
    icon: Optional[str] = None
    color: str
    criteria_type: BadgeCriteria
    criteria_value: int
    criteria_description: Optional[str] = None
    points: int
    is_active: bool
    is_rare: bool
    max_recipients: Optional[int] = None
    current_recipients: int
    is_available: bool
    rarity_percentage: Optional[float] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AwardBadgeRequest(BaseModel):
    user_id: uuid.UUID
    reason: Optional[str] = Field(None, max_length=500)


class UserBadgeResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    badge_id: uuid.UUID
    tenant_id: Optional[uuid.UUID] = None
    awarded_by: Optional[uuid.UUID] = None
    reason: Optional[str] = None
    details: dict[str, Any] = {}
    awarded_at: datetime
    badge: Optional[BadgeResponse] = None

    model_config = ConfigDict(from_attributes=True)
