"""Reward template request/response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import ensure_utc
from pydantic import BaseModel, ConfigDict, Field, model_validator
from services.rewards_service.models.enums import (
    RewardCategory,
    RewardType,
    TaskMetric,
    TaskType,
)


class RewardTaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    task_type: TaskType = TaskType.CUSTOM
    metric: TaskMetric = TaskMetric.COUNT
    target_amount: float = Field(1, gt=0)
    points: Optional[int] = Field(None, ge=0)
    requires_verification: bool = False
    badge_id: Optional[uuid.UUID] = None


class RewardTaskResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    task_type: TaskType
    metric: TaskMetric
    target_amount: float
    points: Optional[int] = None
    requires_verification: bool
    badge_id: Optional[uuid.UUID] = None
    display_order: int

    model_config = ConfigDict(from_attributes=True)


def _check_window(starts_at: Optional[datetime], ends_at: Optional[datetime]) -> None:
    if starts_at and ends_at and ensure_utc(ends_at) <= ensure_utc(starts_at):
        raise ValueError("ends_at must be after starts_at")


class RewardCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    category: RewardCategory = RewardCategory.ENGAGEMENT
    reward_type: RewardType = RewardType.POINTS
    cost: int = Field(0, ge=0, description="Points value of the reward")
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    is_active: bool = True
    is_featured: bool = False
    badge_id: Optional[uuid.UUID] = None
    tenant_id: Optional[uuid.UUID] = None
    tasks: list[RewardTaskCreate] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_window(self) -> "RewardCreate":
        _check_window(self.starts_at, self.ends_at)
        return self


class RewardUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    category: Optional[RewardCategory] = None
    reward_type: Optional[RewardType] = None
    cost: Optional[int] = Field(None, ge=0)
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    badge_id: Optional[uuid.UUID] = None
    tasks: Optional[list[RewardTaskCreate]] = Field(None, min_length=1)

    @model_validator(mode="after")
    def validate_window(self) -> "RewardUpdate":
        _check_window(self.starts_at, self.ends_at)
        return self


class RewardResponse(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    title: str
    description: Optional[str] = None
    category: RewardCategory
    reward_type: RewardType
    cost: int
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    is_active: bool
    is_featured: bool
    badge_id: Optional[uuid.UUID] = None
    archived_at: Optional[datetime] = None
    tasks: list[RewardTaskResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RewardBrief(BaseModel):
    id: uuid.UUID
    title: str
    category: RewardCategory
    reward_type: RewardType
    cost: int

    model_config = ConfigDict(from_attributes=True)
