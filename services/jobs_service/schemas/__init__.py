"""Job board request/response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from services.jobs_service.models.enums import ApplicationStatus, JobStatus, JobType


class JobPostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    company: str = Field(..., min_length=1, max_length=100)
    location: Optional[str] = Field(None, max_length=100)
    job_type: JobType = JobType.FULL_TIME
    remote: bool = False
    description: str = Field(..., min_length=1)


class JobPostResponse(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    posted_by: uuid.UUID
    title: str
    company: str
    location: Optional[str] = None
    job_type: JobType
    remote: bool
    description: str
    status: JobStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JobApplicationCreate(BaseModel):
    resume: Optional[str] = None
    skills: list[str] = Field(..., min_length=1)
    experience: str = Field(..., min_length=1)
    contact_name: str = Field(..., min_length=1, max_length=100)
    contact_email: EmailStr
    contact_phone: str = Field(..., min_length=1, max_length=30)
    message: Optional[str] = Field(None, max_length=2000)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    review_notes: Optional[str] = Field(None, max_length=2000)


class JobApplicationResponse(BaseModel):
    id: uuid.UUID
    job_id: uuid.UUID
    applicant_id: uuid.UUID
    resume: Optional[str] = None
    skills: list[str] = []
    experience: str
    contact_name: str
    contact_email: str
    contact_phone: str
    message: Optional[str] = None
    status: ApplicationStatus
    reviewed_by: Optional[uuid.UUID] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: datetime
    job: Optional[JobPostResponse] = None

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "ApplicationStatusUpdate",
    "JobApplicationCreate",
    "JobApplicationResponse",
    "JobPostCreate",
    "JobPostResponse",
]
