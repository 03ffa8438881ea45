"""Activity, progress, verification and claim schemas."""

import uuid
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from services.rewards_service.models.enums import ActivityAction, ActivityStatus
from services.rewards_service.schemas.reward import RewardBrief


class ProgressRequest(BaseModel):
    task_id: Optional[uuid.UUID] = None
    amount: float = Field(1, gt=0)
    context: dict[str, Any] = Field(default_factory=dict)


class ClaimRequest(BaseModel):
    task_id: Optional[uuid.UUID] = None
    voucher_code: Optional[str] = Field(None, max_length=64)
    note: Optional[str] = Field(None, max_length=1000)
    user_id: Optional[uuid.UUID] = Field(
        None, description="Claim on behalf of another member (staff only)"
    )


class ResubmitRequest(BaseModel):
    note: Optional[str] = Field(None, max_length=1000)


class VerifyRequest(BaseModel):
    action: Literal["approve", "reject"]
    reason: Optional[str] = Field(None, max_length=1000)


class ActivityEventResponse(BaseModel):
    action: ActivityAction
    amount: Optional[float] = None
    note: Optional[str] = None
    actor_id: Optional[uuid.UUID] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ActivityResponse(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    user_id: uuid.UUID
    reward_id: uuid.UUID
    task_id: uuid.UUID
    status: ActivityStatus
    accumulated_amount: float
    target_amount: float
    progress_percentage: float
    points_awarded: int
    context: dict[str, Any] = {}
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    verified_by: Optional[uuid.UUID] = None
    verified_at: Optional[datetime] = None
    verification_reason: Optional[str] = None
    voucher_code: Optional[str] = None
    issued_by: Optional[uuid.UUID] = None
    claim_note: Optional[str] = None
    claimed_at: Optional[datetime] = None
    reward: Optional[RewardBrief] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ActivityDetailResponse(ActivityResponse):
    events: list[ActivityEventResponse] = []


class MemberBrief(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    department: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class VerificationQueueItem(ActivityResponse):
    task_title: Optional[str] = None
    user: Optional[MemberBrief] = None


class VerificationStats(BaseModel):
    pending_verification: int = 0
    approved: int = 0
    rejected: int = 0
    total: int = 0
    approved_last_7_days: int = 0
    rejected_last_7_days: int = 0
