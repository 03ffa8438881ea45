"""Job board endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user, tenant_for_write, tenant_scope
from libs.auth.models import AuthUser
from libs.common.responses import ApiResponse, Pagination, page_offset
from libs.db.session import get_async_db
from services.jobs_service.models import ApplicationStatus, JobStatus
from services.jobs_service.schemas import (
    ApplicationStatusUpdate,
    JobApplicationCreate,
    JobApplicationResponse,
    JobPostCreate,
    JobPostResponse,
)
from services.jobs_service.services import job_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post(
    "",
    response_model=ApiResponse[JobPostResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_job(
    payload: JobPostCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    job = await job_service.create_job(
        db,
        payload=payload,
        tenant_id=tenant_for_write(current_user),
        posted_by=current_user.user_id,
    )
    return ApiResponse(message="Job posted successfully", data=JobPostResponse.model_validate(job))


@router.get("", response_model=ApiResponse[list[JobPostResponse]])
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    job_status: Optional[JobStatus] = Query(JobStatus.ACTIVE, alias="status"),
    search: Optional[str] = None,
    tenant_id: Optional[uuid.UUID] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    jobs, total = await job_service.list_jobs(
        db,
        tenant_id=tenant_scope(current_user, tenant_id),
        job_status=job_status,
        search=search,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[JobPostResponse.model_validate(j) for j in jobs],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/applications/me", response_model=ApiResponse[list[JobApplicationResponse]])
async def list_my_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    applications, total = await job_service.list_my_applications(
        db,
        applicant_id=current_user.user_id,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[JobApplicationResponse.model_validate(a) for a in applications],
        pagination=Pagination.build(page, limit, total),
    )


@router.patch(
    "/applications/{application_id}/status",
    response_model=ApiResponse[JobApplicationResponse],
)
async def update_application_status(
    application_id: uuid.UUID,
    payload: ApplicationStatusUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    application = await job_service.update_application_status(
        db, application_id, payload, user=current_user
    )
    return ApiResponse(
        message="Application status updated successfully",
        data=JobApplicationResponse.model_validate(application),
    )


@router.get("/{job_id}", response_model=ApiResponse[JobPostResponse])
async def get_job(
    job_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    job = await job_service.get_job(db, job_id, tenant_id=tenant_scope(current_user))
    return ApiResponse(data=JobPostResponse.model_validate(job))


@router.post("/{job_id}/close", response_model=ApiResponse[JobPostResponse])
async def close_job(
    job_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    job = await job_service.close_job(db, job_id, user=current_user)
    return ApiResponse(message="Job closed", data=JobPostResponse.model_validate(job))


@router.post(
    "/{job_id}/applications",
    response_model=ApiResponse[JobApplicationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_job(
    job_id: uuid.UUID,
    payload: JobApplicationCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    application = await job_service.apply_to_job(
        db,
        job_id,
        payload,
        applicant_id=current_user.user_id,
        tenant_id=tenant_scope(current_user),
    )
    return ApiResponse(
        message="Application submitted successfully",
        data=JobApplicationResponse.model_validate(application),
    )


@router.get("/{job_id}/applications", response_model=ApiResponse[list[JobApplicationResponse]])
async def list_job_applications(
    job_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    applications, total = await job_service.list_job_applications(
        db,
        job_id,
        user=current_user,
        application_status=application_status,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[JobApplicationResponse.model_validate(a) for a in applications],
        pagination=Pagination.build(page, limit, total),
    )
