"""Rewards Service models package.

Re-exports every model and enum so Alembic and SQLAlchemy's mapper
registry see all tables on import. Add new models to both the imports and
``__all__``.
"""

from services.rewards_service.models.activity import (  # noqa: F401
    ActivityEvent,
    UserTaskActivity,
)
from services.rewards_service.models.badge import Badge, UserBadge  # noqa: F401
from services.rewards_service.models.enums import (  # noqa: F401
    EARNED_STATUSES,
    EARNING_ENTRY_TYPES,
    ActivityAction,
    ActivityStatus,
    BadgeCategory,
    BadgeCriteria,
    PointsEntryType,
    RedeemStatus,
    RewardCategory,
    RewardType,
    TaskMetric,
    TaskType,
)
from services.rewards_service.models.points import PointsEntry, RedeemRequest  # noqa: F401
from services.rewards_service.models.reward import RewardTask, RewardTemplate  # noqa: F401

__all__ = [
    # Enums
    "ActivityAction",
    "ActivityStatus",
    "BadgeCategory",
    "BadgeCriteria",
    "EARNED_STATUSES",
    "EARNING_ENTRY_TYPES",
    "PointsEntryType",
    "RedeemStatus",
    "RewardCategory",
    "RewardType",
    "TaskMetric",
    "TaskType",
    # Models
    "RewardTemplate",
    "RewardTask",
    "UserTaskActivity",
    "ActivityEvent",
    "Badge",
    "UserBadge",
    "PointsEntry",
    "RedeemRequest",
]
