"""Members Service routers."""

from services.members_service.routers.invitations import router as invitations_router
from services.members_service.routers.members import router as members_router
from services.members_service.routers.tenants import router as tenants_router

__all__ = ["invitations_router", "members_router", "tenants_router"]
