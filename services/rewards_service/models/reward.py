"""Reward templates and the tasks that earn them."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.rewards_service.models.enums import (
    RewardCategory,
    RewardType,
    TaskMetric,
    TaskType,
    enum_values,
)
from sqlalchemy import Boolean, CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from .badge import Badge


class RewardTemplate(Base):
    """An admin-defined reward: what it is worth and when it can be earned."""

    __tablename__ = "reward_templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[RewardCategory] = mapped_column(
        SAEnum(
            RewardCategory,
            name="reward_category_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=RewardCategory.ENGAGEMENT,
        nullable=False,
    )
    reward_type: Mapped[RewardType] = mapped_column(
        SAEnum(
            RewardType,
            name="reward_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=RewardType.POINTS,
        nullable=False,
    )
    cost: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    starts_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    ends_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    badge_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("badges.id"), nullable=True
    )
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    archived_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    tasks: Mapped[list["RewardTask"]] = relationship(
        back_populates="reward",
        cascade="all, delete-orphan",
        order_by="RewardTask.display_order",
        lazy="selectin",
    )
    badge: Mapped[Optional["Badge"]] = relationship(lazy="selectin")

    __table_args__ = (
        CheckConstraint("cost >= 0", name="ck_reward_cost_non_negative"),
        Index("ix_reward_templates_tenant_active", "tenant_id", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<RewardTemplate {self.id} title={self.title!r}>"


class RewardTask(Base):
    """Criteria a member must meet (``target_amount`` of ``metric``) to earn a reward."""

    __tablename__ = "reward_tasks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    reward_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("reward_templates.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    task_type: Mapped[TaskType] = mapped_column(
        SAEnum(
            TaskType,
            name="reward_task_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=TaskType.CUSTOM,
        nullable=False,
    )
    metric: Mapped[TaskMetric] = mapped_column(
        SAEnum(
            TaskMetric,
            name="reward_task_metric_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=TaskMetric.COUNT,
        nullable=False,
    )
    target_amount: Mapped[float] = mapped_column(Float, default=1, nullable=False)
    points: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    requires_verification: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    badge_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("badges.id"), nullable=True
    )
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    reward: Mapped["RewardTemplate"] = relationship(back_populates="tasks")

    __table_args__ = (
        CheckConstraint("target_amount > 0", name="ck_reward_task_target_positive"),
    )

    def __repr__(self) -> str:
        return f"<RewardTask {self.id} target={self.target_amount}>"
