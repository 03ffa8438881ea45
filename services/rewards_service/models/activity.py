"""Per-user progress on a reward task and its action history."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.rewards_service.models.enums import (
    ActivityAction,
    ActivityStatus,
    enum_values,
)
from sqlalchemy import JSON, CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from .reward import RewardTask, RewardTemplate


class UserTaskActivity(Base):
    """One member's attempt at one task of a reward.

    Rows are never deleted; ``claimed`` is terminal.
    """

    __tablename__ = "user_task_activities"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    reward_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("reward_templates.id"), index=True, nullable=False
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("reward_tasks.id"), nullable=False
    )
    status: Mapped[ActivityStatus] = mapped_column(
        SAEnum(
            ActivityStatus,
            name="activity_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=ActivityStatus.IN_PROGRESS,
        nullable=False,
    )
    accumulated_amount: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    target_amount: Mapped[float] = mapped_column(Float, nullable=False)
    points_awarded: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    context: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    submitted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Verification
    verified_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    verification_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Redemption
    voucher_code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    issued_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    claim_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    claimed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    reward: Mapped["RewardTemplate"] = relationship(lazy="selectin")
    task: Mapped["RewardTask"] = relationship(lazy="selectin")
    events: Mapped[list["ActivityEvent"]] = relationship(
        back_populates="activity",
        order_by="ActivityEvent.created_at",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "reward_id", "task_id", name="uq_activity_user_reward_task"),
        CheckConstraint("accumulated_amount >= 0", name="ck_activity_amount_non_negative"),
        Index("ix_activities_tenant_status", "tenant_id", "status"),
    )

    @property
    def progress_percentage(self) -> float:
        if not self.target_amount:
            return 0.0
        return round(min(self.accumulated_amount / self.target_amount, 1.0) * 100, 2)

    def record(
        self,
        action: ActivityAction,
        *,
        amount: Optional[float] = None,
        note: Optional[str] = None,
        actor_id: Optional[uuid.UUID] = None,
    ) -> "ActivityEvent":
        """Append an entry to this activity's history."""
        event = ActivityEvent(action=action, amount=amount, note=note, actor_id=actor_id)
        self.events.append(event)
        return event

    def __repr__(self) -> str:
        return f"<UserTaskActivity {self.id} user={self.user_id} status={self.status.value}>"


class ActivityEvent(Base):
    """Append-only history entry of a UserTaskActivity."""

    __tablename__ = "user_task_activity_events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    activity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("user_task_activities.id"), index=True, nullable=False
    )
    action: Mapped[ActivityAction] = mapped_column(
        SAEnum(
            ActivityAction,
            name="activity_action_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    actor_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    activity: Mapped["UserTaskActivity"] = relationship(back_populates="events")
