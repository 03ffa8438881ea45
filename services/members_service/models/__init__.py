"""Members Service models package.

Re-exports every model and enum so Alembic and SQLAlchemy's mapper
registry see all tables on import.
"""

from services.members_service.models.enums import (  # noqa: F401
    LIVE_INVITATION_STATUSES,
    InvitationStatus,
)
from services.members_service.models.invitation import Invitation  # noqa: F401
from services.members_service.models.member import Member  # noqa: F401
from services.members_service.models.tenant import Tenant  # noqa: F401

__all__ = [
    # Enums
    "InvitationStatus",
    "LIVE_INVITATION_STATUSES",
    # Models
    "Tenant",
    "Member",
    "Invitation",
]
