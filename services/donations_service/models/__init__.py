"""Donations Service models package."""

from services.donations_service.models.enums import (  # noqa: F401
    OPEN_CAMPAIGN_STATUSES,
    RAISING_CAMPAIGN_STATUSES,
    CampaignStatus,
    FundStatus,
)
from services.donations_service.models.fund import Campaign, Fund  # noqa: F401

__all__ = [
    "CampaignStatus",
    "FundStatus",
    "OPEN_CAMPAIGN_STATUSES",
    "RAISING_CAMPAIGN_STATUSES",
    "Campaign",
    "Fund",
]
