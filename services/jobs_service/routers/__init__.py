"""Jobs Service routers."""

from services.jobs_service.routers.jobs import router as jobs_router

__all__ = ["jobs_router"]
