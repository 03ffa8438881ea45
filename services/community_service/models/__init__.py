"""Community Service models package."""

from services.community_service.models.enums import SharePlatform  # noqa: F401
from services.community_service.models.share import Share  # noqa: F401

__all__ = ["Share", "SharePlatform"]
