"""Invitation lifecycle: send, open, accept and expire."""

import secrets
import uuid
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException, status
from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.emails.core import send_email
from libs.common.emails.invitations import build_invitation_email
from libs.common.logging import get_logger
from services.members_service.models import (
    LIVE_INVITATION_STATUSES,
    Invitation,
    InvitationStatus,
    Member,
    Tenant,
)
from services.members_service.schemas import InvitationCreate
from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def generate_invitation_token() -> str:
    """64 hex characters."""
    return secrets.token_hex(32)


async def _find_live_invitation(db: AsyncSession, email: str) -> Optional[Invitation]:
    result = await db.execute(
        select(Invitation)
        .where(
            func.lower(Invitation.email) == email.lower(),
            Invitation.status.in_(LIVE_INVITATION_STATUSES),
            Invitation.expires_at > utc_now(),
        )
        .order_by(desc(Invitation.created_at))
        .limit(1)
    )
    return result.scalar_one_or_none()


async def send_invitation(
    db: AsyncSession,
    *,
    payload: InvitationCreate,
    inviter: AuthUser,
) -> Invitation:
    """Create an invitation and email the registration link.

    Fails with 400 when the email already belongs to a member or already has
    a live invitation, and with 500 when the email could not be sent.
    """
    settings = get_settings()
    email = payload.email.lower()

    existing_member = await db.execute(
        select(Member.id).where(func.lower(Member.email) == email)
    )
    if existing_member.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists",
        )

    if await _find_live_invitation(db, email) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invitation already sent to this email",
        )

    tenant_id = payload.tenant_id if inviter.is_super_admin else inviter.tenant_id

    invitation = Invitation(
        tenant_id=tenant_id,
        name=payload.name,
        email=email,
        graduation_year=payload.graduation_year,
        degree=payload.degree,
        current_role=payload.current_role,
        company=payload.company,
        location=payload.location,
        linkedin_profile=payload.linkedin_profile,
        token=generate_invitation_token(),
        status=InvitationStatus.PENDING,
        invited_by=inviter.user_id,
        expires_at=utc_now() + timedelta(days=settings.INVITATION_EXPIRY_DAYS),
    )
    db.add(invitation)
    await db.commit()
    await db.refresh(invitation)

    inviter_member = await db.get(Member, inviter.user_id)
    tenant = await db.get(Tenant, tenant_id) if tenant_id else None

    invite_link = f"{settings.FRONTEND_URL}/register?token={invitation.token}"
    subject, body, html_body = build_invitation_email(
        name=invitation.name,
        invite_link=invite_link,
        inviter_name=inviter_member.full_name if inviter_member else None,
        college_name=tenant.name if tenant else None,
        expiry_days=settings.INVITATION_EXPIRY_DAYS,
    )
    sent = await send_email(
        to_email=invitation.email, subject=subject, body=body, html_body=html_body
    )
    if not sent:
        logger.error("Invitation %s created but email to %s failed", invitation.id, email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send invitation email",
        )

    invitation.status = InvitationStatus.SENT
    invitation.sent_at = utc_now()
    await db.commit()
    await db.refresh(invitation)

    logger.info("Invitation %s sent to %s by %s", invitation.id, email, inviter.user_id)
    return invitation


async def _get_by_token(db: AsyncSession, token: str) -> Invitation:
    result = await db.execute(select(Invitation).where(Invitation.token == token))
    invitation = result.scalar_one_or_none()
    if not invitation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid invitation token",
        )
    return invitation


async def _ensure_usable(db: AsyncSession, invitation: Invitation) -> None:
    if invitation.status == InvitationStatus.ACCEPTED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invitation has already been used",
        )
    expired = ensure_utc(invitation.expires_at) <= utc_now()
    if invitation.status == InvitationStatus.EXPIRED or expired:
        if invitation.status != InvitationStatus.EXPIRED:
            invitation.status = InvitationStatus.EXPIRED
            await db.commit()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invitation has expired",
        )


async def get_invitation_by_token(db: AsyncSession, token: str) -> Invitation:
    """Look up an invitation from its registration link and mark it opened."""
    invitation = await _get_by_token(db, token)
    await _ensure_usable(db, invitation)

    if invitation.status == InvitationStatus.SENT:
        invitation.status = InvitationStatus.OPENED
        await db.commit()
        await db.refresh(invitation)
    return invitation


async def accept_invitation(db: AsyncSession, token: str) -> Invitation:
    invitation = await _get_by_token(db, token)
    await _ensure_usable(db, invitation)

    invitation.status = InvitationStatus.ACCEPTED
    invitation.accepted_at = utc_now()
    await db.commit()
    await db.refresh(invitation)

    logger.info("Invitation %s accepted", invitation.id)
    return invitation


async def list_invitations_by_inviter(
    db: AsyncSession,
    *,
    inviter_id: uuid.UUID,
    invitation_status: Optional[InvitationStatus] = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[Invitation], int]:
    query = select(Invitation).where(Invitation.invited_by == inviter_id)
    count_query = (
        select(func.count())
        .select_from(Invitation)
        .where(Invitation.invited_by == inviter_id)
    )
    if invitation_status:
        query = query.where(Invitation.status == invitation_status)
        count_query = count_query.where(Invitation.status == invitation_status)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(desc(Invitation.created_at)).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total


async def check_invitation_exists(db: AsyncSession, email: str) -> Optional[Invitation]:
    return await _find_live_invitation(db, email)


async def expire_stale_invitations(db: AsyncSession) -> int:
    """Mark every unaccepted invitation past its expiry as expired."""
    result = await db.execute(
        update(Invitation)
        .where(
            Invitation.status.in_(LIVE_INVITATION_STATUSES),
            Invitation.expires_at <= utc_now(),
        )
        .values(status=InvitationStatus.EXPIRED, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    expired = result.rowcount or 0
    if expired:
        logger.info("Expired %d stale invitations", expired)
    return expired
