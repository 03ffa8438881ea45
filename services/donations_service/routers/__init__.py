"""Donations Service routers."""

from services.donations_service.routers.funds import router as funds_router

__all__ = ["funds_router"]
