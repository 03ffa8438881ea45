"""Donation funds and the campaigns that raise money for them."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.donations_service.models.enums import CampaignStatus, FundStatus, enum_values
from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship


class Fund(Base):
    """A named pot of money. ``total_raised`` is derived from its campaigns."""

    __tablename__ = "funds"
    __table_args__ = (CheckConstraint("total_raised >= 0", name="ck_funds_total_raised"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tenants.id"), index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    total_raised: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    status: Mapped[FundStatus] = mapped_column(
        SAEnum(
            FundStatus,
            name="fund_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=FundStatus.ACTIVE,
        index=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    campaigns: Mapped[list["Campaign"]] = relationship(
        back_populates="fund",
        lazy="selectin",
        order_by="Campaign.created_at",
    )

    def __repr__(self) -> str:
        return f"<Fund {self.id} name={self.name!r} status={self.status.value}>"


class Campaign(Base):
    __tablename__ = "campaigns"
    __table_args__ = (
        CheckConstraint("target_amount > 0", name="ck_campaigns_target_amount"),
        CheckConstraint("current_amount >= 0", name="ck_campaigns_current_amount"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tenants.id"), index=True, nullable=False
    )
    fund_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("funds.id"), index=True, nullable=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    target_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    current_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    status: Mapped[CampaignStatus] = mapped_column(
        SAEnum(
            CampaignStatus,
            name="campaign_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=CampaignStatus.DRAFT,
        index=True,
        nullable=False,
    )
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    fund: Mapped[Optional[Fund]] = relationship(back_populates="campaigns")
