"""Invitation request/response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from services.members_service.models.enums import InvitationStatus


class InvitationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    graduation_year: int = Field(..., ge=1950, le=2100)
    degree: Optional[str] = Field(None, max_length=100)
    current_role: Optional[str] = Field(None, max_length=100)
    company: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=100)
    linkedin_profile: Optional[str] = None
    tenant_id: Optional[uuid.UUID] = None

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class InvitationResponse(BaseModel):
    id: uuid.UUID
    tenant_id: Optional[uuid.UUID] = None
    name: str
    email: str
    graduation_year: int
    degree: Optional[str] = None
    current_role: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    linkedin_profile: Optional[str] = None
    status: InvitationStatus
    invited_by: uuid.UUID
    expires_at: datetime
    sent_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InvitationCheckResponse(BaseModel):
    email: str
    exists: bool
    status: Optional[InvitationStatus] = None
