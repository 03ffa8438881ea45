"""Tier and summary schemas."""

import uuid
from typing import Optional

from pydantic import BaseModel


class TierInfo(BaseModel):
    current_tier: str
    tier_color: str
    total_points: int
    tier_points: int
    next_tier: Optional[str] = None
    points_to_next_tier: int
    progress_percentage: float


class UserTierResponse(TierInfo):
    user_id: uuid.UUID


class UserRewardSummary(BaseModel):
    user_id: uuid.UUID
    total_activities: int = 0
    in_progress: int = 0
    pending_verification: int = 0
    approved: int = 0
    rejected: int = 0
    claimed: int = 0
    earned: int = 0
    total_points: int = 0
    redeemed_points: int = 0
    available_points: int = 0
    badges: int = 0
    tier: TierInfo
