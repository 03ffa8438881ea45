"""Donations Service schemas package."""

from services.donations_service.schemas.fund import (  # noqa: F401
    CampaignCreate,
    CampaignResponse,
    FundCreate,
    FundResponse,
    FundStats,
    FundUpdate,
)

__all__ = [
    "CampaignCreate",
    "CampaignResponse",
    "FundCreate",
    "FundResponse",
    "FundStats",
    "FundUpdate",
]
