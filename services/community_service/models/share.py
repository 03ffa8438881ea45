"""Append-only record of a community post being shared."""

import uuid
from datetime import datetime
from typing import Any, Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.community_service.models.enums import SharePlatform, enum_values
from sqlalchemy import JSON, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class Share(Base):
    __tablename__ = "shares"
    __table_args__ = (
        Index("ix_shares_post_platform", "post_id", "platform"),
        Index("ix_shares_post_created", "post_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, index=True, nullable=True)
    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tenants.id"), index=True, nullable=True
    )
    platform: Mapped[SharePlatform] = mapped_column(
        SAEnum(
            SharePlatform,
            name="share_platform_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        index=True,
        nullable=False,
    )
    # "metadata" is reserved on declarative classes
    details: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, default=dict, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True, nullable=False
    )
