"""Job posts and applications."""

import uuid
from typing import Optional

from fastapi import HTTPException, status
from libs.auth.dependencies import tenant_scope
from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.jobs_service.models import ApplicationStatus, JobApplication, JobPost, JobStatus
from services.jobs_service.schemas import (
    ApplicationStatusUpdate,
    JobApplicationCreate,
    JobPostCreate,
)
from sqlalchemy import desc, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

DUPLICATE_APPLICATION = "You have already applied for this job"


async def create_job(
    db: AsyncSession, *, payload: JobPostCreate, tenant_id: uuid.UUID, posted_by: uuid.UUID
) -> JobPost:
    job = JobPost(tenant_id=tenant_id, posted_by=posted_by, **payload.model_dump())
    db.add(job)
    await db.commit()
    await db.refresh(job)
    logger.info("Job %s posted by %s", job.id, posted_by)
    return job


async def get_job(
    db: AsyncSession, job_id: uuid.UUID, *, tenant_id: Optional[uuid.UUID] = None
) -> JobPost:
    query = select(JobPost).where(JobPost.id == job_id)
    if tenant_id is not None:
        query = query.where(JobPost.tenant_id == tenant_id)
    job = (await db.execute(query)).scalar_one_or_none()
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job post not found")
    return job


async def list_jobs(
    db: AsyncSession,
    *,
    tenant_id: Optional[uuid.UUID],
    job_status: Optional[JobStatus] = JobStatus.ACTIVE,
    search: Optional[str] = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[JobPost], int]:
    filters = []
    if tenant_id is not None:
        filters.append(JobPost.tenant_id == tenant_id)
    if job_status:
        filters.append(JobPost.status == job_status)
    if search:
        pattern = f"%{search}%"
        filters.append(or_(JobPost.title.ilike(pattern), JobPost.company.ilike(pattern)))

    total = (
        await db.execute(select(func.count()).select_from(JobPost).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(JobPost)
        .where(*filters)
        .order_by(desc(JobPost.created_at))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def close_job(db: AsyncSession, job_id: uuid.UUID, *, user: AuthUser) -> JobPost:
    job = await get_job(db, job_id, tenant_id=tenant_scope(user))
    _ensure_poster_or_admin(job, user, "You can only close your own job posts")
    job.status = JobStatus.CLOSED
    await db.commit()
    await db.refresh(job)
    logger.info("Job %s closed by %s", job_id, user.user_id)
    return job


def _ensure_poster_or_admin(job: JobPost, user: AuthUser, detail: str) -> None:
    if job.posted_by != user.user_id and not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------


async def apply_to_job(
    db: AsyncSession,
    job_id: uuid.UUID,
    payload: JobApplicationCreate,
    *,
    applicant_id: uuid.UUID,
    tenant_id: Optional[uuid.UUID],
) -> JobApplication:
    job = await get_job(db, job_id, tenant_id=tenant_id)
    if job.status != JobStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Job post is not available for applications",
        )
    if job.posted_by == applicant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot apply to your own job post",
        )

    existing = await db.execute(
        select(JobApplication.id).where(
            JobApplication.job_id == job_id, JobApplication.applicant_id == applicant_id
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_APPLICATION)

    application = JobApplication(
        job_id=job.id,
        applicant_id=applicant_id,
        tenant_id=job.tenant_id,
        **payload.model_dump(),
    )
    db.add(application)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_APPLICATION)

    await db.refresh(application)
    logger.info("Application %s submitted for job %s by %s", application.id, job_id, applicant_id)
    return application


async def list_my_applications(
    db: AsyncSession, *, applicant_id: uuid.UUID, offset: int = 0, limit: int = 20
) -> tuple[list[JobApplication], int]:
    filters = [JobApplication.applicant_id == applicant_id]
    total = (
        await db.execute(select(func.count()).select_from(JobApplication).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(JobApplication)
        .where(*filters)
        .order_by(desc(JobApplication.created_at))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def list_job_applications(
    db: AsyncSession,
    job_id: uuid.UUID,
    *,
    user: AuthUser,
    application_status: Optional[ApplicationStatus] = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[JobApplication], int]:
    job = await get_job(db, job_id, tenant_id=tenant_scope(user))
    _ensure_poster_or_admin(job, user, "You can only view applications for your own job posts")

    filters = [JobApplication.job_id == job_id]
    if application_status:
        filters.append(JobApplication.status == application_status)
    total = (
        await db.execute(select(func.count()).select_from(JobApplication).where(*filters))
    ).scalar() or 0
    result = await db.execute(
        select(JobApplication)
        .where(*filters)
        .order_by(desc(JobApplication.created_at))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def update_application_status(
    db: AsyncSession,
    application_id: uuid.UUID,
    payload: ApplicationStatusUpdate,
    *,
    user: AuthUser,
) -> JobApplication:
    application = await db.get(JobApplication, application_id)
    scope = tenant_scope(user)
    if not application or (scope is not None and application.tenant_id != scope):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    _ensure_poster_or_admin(
        application.job, user, "You can only update applications for your own job posts"
    )

    application.status = payload.status
    application.reviewed_by = user.user_id
    application.reviewed_at = utc_now()
    if payload.review_notes:
        application.review_notes = payload.review_notes
    await db.commit()
    await db.refresh(application)

    logger.info(
        "Application %s moved to %s by %s", application_id, payload.status.value, user.user_id
    )
    return application
