"""Rewards Service schemas package.

Re-exports every schema so routers import from one place.
"""

from services.rewards_service.schemas.activity import (  # noqa: F401
    ActivityDetailResponse,
    ActivityEventResponse,
    ActivityResponse,
    ClaimRequest,
    MemberBrief,
    ProgressRequest,
    ResubmitRequest,
    VerificationQueueItem,
    VerificationStats,
    VerifyRequest,
)
from services.rewards_service.schemas.analytics import (  # noqa: F401
    BadgeCollectorEntry,
    CategoryPoints,
    ClaimsReport,
    DepartmentAnalytics,
    DepartmentLeaderboardEntry,
    LeaderboardEntry,
    RewardStatistics,
    TaskCompletionReport,
    UserActivityHistory,
)
from services.rewards_service.schemas.badge import (  # noqa: F401
    AwardBadgeRequest,
    BadgeCreate,
    BadgeResponse,
    BadgeUpdate,
    UserBadgeResponse,
)
from services.rewards_service.schemas.points import (  # noqa: F401
    ManualPointsRequest,
    PointsBalance,
    PointsEntryResponse,
    RedeemRejectRequest,
    RedeemRequestCreate,
    RedeemRequestResponse,
)
from services.rewards_service.schemas.reward import (  # noqa: F401
    RewardBrief,
    RewardCreate,
    RewardResponse,
    RewardTaskCreate,
    RewardTaskResponse,
    RewardUpdate,
)
from services.rewards_service.schemas.summary import (  # noqa: F401
    TierInfo,
    UserRewardSummary,
    UserTierResponse,
)

__all__ = [
    # Activities
    "ActivityDetailResponse",
    "ActivityEventResponse",
    "ActivityResponse",
    "ClaimRequest",
    "MemberBrief",
    "ProgressRequest",
    "ResubmitRequest",
    "VerificationQueueItem",
    "VerificationStats",
    "VerifyRequest",
    # Analytics
    "BadgeCollectorEntry",
    "CategoryPoints",
    "ClaimsReport",
    "DepartmentAnalytics",
    "DepartmentLeaderboardEntry",
    "LeaderboardEntry",
    "RewardStatistics",
    "TaskCompletionReport",
    "UserActivityHistory",
    # Badges
    "AwardBadgeRequest",
    "BadgeCreate",
    "BadgeResponse",
    "BadgeUpdate",
    "UserBadgeResponse",
    # Points
    "ManualPointsRequest",
    "PointsBalance",
    "PointsEntryResponse",
    "RedeemRejectRequest",
    "RedeemRequestCreate",
    "RedeemRequestResponse",
    # Rewards
    "RewardBrief",
    "RewardCreate",
    "RewardResponse",
    "RewardTaskCreate",
    "RewardTaskResponse",
    "RewardUpdate",
    # Summary
    "TierInfo",
    "UserRewardSummary",
    "UserTierResponse",
]
