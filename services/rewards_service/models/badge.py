"""Badges and one-time badge grants.

``Badge.current_recipients`` is maintained by the UserBadge insert/delete
hooks at the bottom of this module, inside the same flush as the grant.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.rewards_service.models.enums import BadgeCategory, BadgeCriteria, enum_values
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    case,
    event,
    update,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship


class Badge(Base):
    __tablename__ = "badges"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[BadgeCategory] = mapped_column(
        SAEnum(
            BadgeCategory,
            name="badge_category_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    icon: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    color: Mapped[str] = mapped_column(String(16), default="#3B82F6", nullable=False)
    criteria_type: Mapped[BadgeCriteria] = mapped_column(
        SAEnum(
            BadgeCriteria,
            name="badge_criteria_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=BadgeCriteria.MANUAL,
        nullable=False,
    )
    criteria_value: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    criteria_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_rare: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    max_recipients: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_recipients: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    __table_args__ = (
        CheckConstraint("current_recipients >= 0", name="ck_badge_recipients_non_negative"),
        CheckConstraint("points >= 0", name="ck_badge_points_non_negative"),
    )

    @property
    def is_available(self) -> bool:
        if not self.is_active:
            return False
        if self.max_recipients is not None and self.current_recipients >= self.max_recipients:
            return False
        return True

    @property
    def rarity_percentage(self) -> Optional[float]:
        """Share of the recipient cap already awarded, None when uncapped."""
        if not self.max_recipients:
            return None
        return round(self.current_recipients / self.max_recipients * 100, 2)

    def __repr__(self) -> str:
        return f"<Badge {self.id} name={self.name!r} recipients={self.current_recipients}>"


class UserBadge(Base):
    """A badge held by a member. At most one row per (user, badge)."""

    __tablename__ = "user_badges"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    badge_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("badges.id"), index=True, nullable=False
    )
    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, index=True, nullable=True)
    awarded_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    awarded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    badge: Mapped["Badge"] = relationship(lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="uq_user_badge"),
    )

    def __repr__(self) -> str:
        return f"<UserBadge user={self.user_id} badge={self.badge_id}>"


_badges = Badge.__table__


@event.listens_for(UserBadge, "after_insert")
def _increment_recipients(mapper, connection, target: UserBadge) -> None:
    connection.execute(
        update(_badges)
        .where(_badges.c.id == target.badge_id)
        .values(current_recipients=_badges.c.current_recipients + 1)
    )


@event.listens_for(UserBadge, "after_delete")
def _decrement_recipients(mapper, connection, target: UserBadge) -> None:
    connection.execute(
        update(_badges)
        .where(_badges.c.id == target.badge_id)
        .values(
            current_recipients=case(
                (_badges.c.current_recipients > 0, _badges.c.current_recipients - 1),
                else_=0,
            )
        )
    )
