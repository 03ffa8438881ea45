"""Members Service schemas package."""

from services.members_service.schemas.invitation import (  # noqa: F401
    InvitationCheckResponse,
    InvitationCreate,
    InvitationResponse,
)
from services.members_service.schemas.member import MemberResponse  # noqa: F401
from services.members_service.schemas.tenant import (  # noqa: F401
    TenantCreate,
    TenantResponse,
)

__all__ = [
    "InvitationCheckResponse",
    "InvitationCreate",
    "InvitationResponse",
    "MemberResponse",
    "TenantCreate",
    "TenantResponse",
]
