"""Leaderboard and analytics response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from services.rewards_service.models.enums import (
    ActivityAction,
    ActivityStatus,
    RewardCategory,
)


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: uuid.UUID
    name: Optional[str] = None
    department: Optional[str] = None
    points: int
    completed_tasks: int
    tier: str


class DepartmentLeaderboardEntry(BaseModel):
    rank: int
    department: str
    members: int
    total_points: int
    average_points: float
    completed_tasks: int


class BadgeCollectorEntry(BaseModel):
    rank: int
    user_id: uuid.UUID
    name: Optional[str] = None
    badge_count: int
    badge_points: int


class CategoryPoints(BaseModel):
    category: RewardCategory
    points: int
    activities: int
    percentage: float


class TaskCompletionRow(BaseModel):
    category: RewardCategory
    counts: dict[ActivityStatus, int]
    completion_rate: float


class TopTask(BaseModel):
    task_id: uuid.UUID
    title: str
    reward_title: str
    completed: int


class TaskCompletionReport(BaseModel):
    by_category: list[TaskCompletionRow]
    top_tasks: list[TopTask]


class MonthlyClaims(BaseModel):
    month: str
    claims: int
    points: int


class PopularReward(BaseModel):
    reward_id: uuid.UUID
    title: str
    claims: int


class ClaimsReport(BaseModel):
    timeline: list[MonthlyClaims]
    popular_rewards: list[PopularReward]


class DepartmentAnalytics(BaseModel):
    department: str
    members: int
    active_members: int
    participation_rate: float
    total_points: int
    completed_tasks: int
    badges: int


class HistoryEntry(BaseModel):
    activity_id: uuid.UUID
    reward_id: uuid.UUID
    reward_title: str
    category: RewardCategory
    action: ActivityAction
    amount: Optional[float] = None
    note: Optional[str] = None
    created_at: datetime


class UserActivityHistory(BaseModel):
    user_id: uuid.UUID
    timeline: list[HistoryEntry]
    category_breakdown: dict[RewardCategory, int]
    total_points: int


class RewardStatistics(BaseModel):
    reward_id: uuid.UUID
    title: str
    category: RewardCategory
    participants: int
    in_progress: int
    pending_verification: int
    earned: int
    claimed: int
    points_awarded: int
    claim_rate: float
