"""Jobs Service models package."""

from services.jobs_service.models.enums import (  # noqa: F401
    ApplicationStatus,
    JobStatus,
    JobType,
)
from services.jobs_service.models.job import JobApplication, JobPost  # noqa: F401

__all__ = [
    "ApplicationStatus",
    "JobStatus",
    "JobType",
    "JobApplication",
    "JobPost",
]
