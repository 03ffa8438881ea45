"""Points ledger and point redemption requests.

A member's balance is the sum of their ``PointsEntry`` rows: task approvals
and manual adjustments are positive, claims and redemptions negative, and a
rejected redemption is refunded with a positive ``refund`` entry.
"""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.rewards_service.models.enums import PointsEntryType, RedeemStatus, enum_values
from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class PointsEntry(Base):
    __tablename__ = "points_entries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, index=True, nullable=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    entry_type: Mapped[PointsEntryType] = mapped_column(
        SAEnum(
            PointsEntryType,
            name="points_entry_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Activity or redeem request the entry came from
    reference_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, index=True, nullable=True)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (Index("ix_points_entries_user_type", "user_id", "entry_type"),)

    def __repr__(self) -> str:
        return f"<PointsEntry {self.id} user={self.user_id} {self.entry_type.value} {self.points}>"


class RedeemRequest(Base):
    """A member spending available points on an off-catalog reward option."""

    __tablename__ = "redeem_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, index=True, nullable=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    reward_option: Mapped[str] = mapped_column(String(255), nullable=False)
    points_used: Mapped[int] = mapped_column(Integer, nullable=False)
    delivery_email: Mapped[str] = mapped_column(String, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[RedeemStatus] = mapped_column(
        SAEnum(
            RedeemStatus,
            name="redeem_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=RedeemStatus.PENDING,
        nullable=False,
    )
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    __table_args__ = (
        CheckConstraint("points_used > 0", name="ck_redeem_points_positive"),
        Index("ix_redeem_requests_tenant_status", "tenant_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<RedeemRequest {self.id} user={self.user_id} status={self.status.value}>"
