"""Tenant request/response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TenantCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    domain: Optional[str] = Field(None, max_length=255)


class TenantResponse(BaseModel):
    id: uuid.UUID
    name: str
    domain: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
