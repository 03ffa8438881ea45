"""Alumni invitation endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from libs.auth.dependencies import get_current_user, require_roles
from libs.auth.models import AuthUser, Role
from libs.common.rate_limit import invite_limit
from libs.common.responses import ApiResponse, Pagination, page_offset
from libs.db.session import get_async_db
from services.members_service.models import InvitationStatus
from services.members_service.schemas import (
    InvitationCheckResponse,
    InvitationCreate,
    InvitationResponse,
)
from services.members_service.services import invitation_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/invitations", tags=["invitations"])

require_inviter = require_roles(
    Role.SUPER_ADMIN, Role.COLLEGE_ADMIN, Role.HOD, Role.STAFF, Role.ALUMNI
)


@router.post(
    "",
    response_model=ApiResponse[InvitationResponse],
    status_code=status.HTTP_201_CREATED,
)
@invite_limit
async def send_invitation(
    request: Request,
    payload: InvitationCreate,
    current_user: AuthUser = Depends(require_inviter),
    db: AsyncSession = Depends(get_async_db),
):
    invitation = await invitation_service.send_invitation(
        db, payload=payload, inviter=current_user
    )
    return ApiResponse(
        message="Invitation sent successfully",
        data=InvitationResponse.model_validate(invitation),
    )


@router.get("", response_model=ApiResponse[list[InvitationResponse]])
async def list_my_invitations(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    invitation_status: Optional[InvitationStatus] = Query(None, alias="status"),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    invitations, total = await invitation_service.list_invitations_by_inviter(
        db,
        inviter_id=current_user.user_id,
        invitation_status=invitation_status,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return ApiResponse(
        data=[InvitationResponse.model_validate(i) for i in invitations],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/check/{email}", response_model=ApiResponse[InvitationCheckResponse])
async def check_invitation(
    email: str,
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    invitation = await invitation_service.check_invitation_exists(db, email)
    return ApiResponse(
        data=InvitationCheckResponse(
            email=email.lower(),
            exists=invitation is not None,
            status=invitation.status if invitation else None,
        )
    )


# Token endpoints are public: the token itself is the credential.


@router.get("/token/{token}", response_model=ApiResponse[InvitationResponse])
async def get_invitation_by_token(token: str, db: AsyncSession = Depends(get_async_db)):
    invitation = await invitation_service.get_invitation_by_token(db, token)
    return ApiResponse(data=InvitationResponse.model_validate(invitation))


@router.post("/token/{token}/accept", response_model=ApiResponse[InvitationResponse])
async def accept_invitation(token: str, db: AsyncSession = Depends(get_async_db)):
    invitation = await invitation_service.accept_invitation(db, token)
    return ApiResponse(
        message="Invitation accepted",
        data=InvitationResponse.model_validate(invitation),
    )
