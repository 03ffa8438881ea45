"""Rewards Service routers."""

from services.rewards_service.routers.analytics import router as analytics_router
from services.rewards_service.routers.badges import router as badges_router
from services.rewards_service.routers.leaderboard import router as leaderboard_router
from services.rewards_service.routers.points import router as points_router
from services.rewards_service.routers.rewards import router as rewards_router
from services.rewards_service.routers.verifications import router as verifications_router

__all__ = [
    "analytics_router",
    "badges_router",
    "leaderboard_router",
    "points_router",
    "rewards_router",
    "verifications_router",
]
