"""Enums for the Donations Service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class FundStatus(str, enum.Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    SUSPENDED = "suspended"


class CampaignStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Campaigns whose raised amount counts toward the fund total
RAISING_CAMPAIGN_STATUSES = (CampaignStatus.ACTIVE, CampaignStatus.COMPLETED)

# Campaigns that block archiving their fund
OPEN_CAMPAIGN_STATUSES = (CampaignStatus.DRAFT, CampaignStatus.ACTIVE)
