"""Community Service routers."""

from services.community_service.routers.shares import router as shares_router

__all__ = ["shares_router"]
