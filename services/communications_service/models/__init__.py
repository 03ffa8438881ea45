"""Communications Service models package."""

from services.communications_service.models.notification import Notification  # noqa: F401

__all__ = ["Notification"]
