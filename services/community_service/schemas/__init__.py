"""Share tracking schemas."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from services.community_service.models import SharePlatform


class ShareCreate(BaseModel):
    platform: SharePlatform
    details: dict[str, Any] = Field(default_factory=dict)


class ShareResponse(BaseModel):
    id: uuid.UUID
    post_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    platform: SharePlatform
    details: dict[str, Any] = {}
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TrackShareResponse(BaseModel):
    share: ShareResponse
    share_count: int


class ShareCount(BaseModel):
    post_id: uuid.UUID
    share_count: int


class PlatformShares(BaseModel):
    platform: SharePlatform
    count: int
    last_shared: datetime


class TrendingPost(BaseModel):
    post_id: uuid.UUID
    share_count: int
    platforms: list[SharePlatform]
    last_shared: datetime


__all__ = [
    "PlatformShares",
    "ShareCount",
    "ShareCreate",
    "ShareResponse",
    "TrackShareResponse",
    "TrendingPost",
]
