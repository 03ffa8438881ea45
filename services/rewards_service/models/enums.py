"""Enums for the Rewards Service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class RewardCategory(str, enum.Enum):
    EVENT = "event"
    DONATION = "donation"
    MENTORSHIP = "mentorship"
    JOB = "job"
    REFERRAL = "referral"
    ENGAGEMENT = "engagement"
    VOLUNTEERING = "volunteering"
    OTHER = "other"


class RewardType(str, enum.Enum):
    POINTS = "points"
    BADGE = "badge"
    VOUCHER = "voucher"
    PERK = "perk"


class TaskType(str, enum.Enum):
    EVENT = "event"
    DONATION = "donation"
    MENTORSHIP = "mentorship"
    JOB = "job"
    REFERRAL = "referral"
    ENGAGEMENT = "engagement"
    CUSTOM = "custom"


class TaskMetric(str, enum.Enum):
    COUNT = "count"
    AMOUNT = "amount"
    DURATION = "duration"


class ActivityStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    PENDING_VERIFICATION = "pending_verification"
    APPROVED = "approved"
    REJECTED = "rejected"
    CLAIMED = "claimed"


# Activities whose points count towards tiers and leaderboards
EARNED_STATUSES = (ActivityStatus.APPROVED, ActivityStatus.CLAIMED)


class ActivityAction(str, enum.Enum):
    PROGRESS = "progress"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    RESUBMITTED = "resubmitted"
    CLAIMED = "claimed"


class BadgeCategory(str, enum.Enum):
    MENTORSHIP = "mentorship"
    DONATION = "donation"
    EVENT = "event"
    JOB = "job"
    ENGAGEMENT = "engagement"
    ACHIEVEMENT = "achievement"
    SPECIAL = "special"


class BadgeCriteria(str, enum.Enum):
    POINTS = "points"
    TASKS = "tasks"
    MANUAL = "manual"


class PointsEntryType(str, enum.Enum):
    TASK = "task"
    MANUAL = "manual"
    CLAIM = "claim"
    REDEMPTION = "redemption"
    REFUND = "refund"


# Entries that add to a member's lifetime total (tiers, points badges)
EARNING_ENTRY_TYPES = (PointsEntryType.TASK, PointsEntryType.MANUAL)


class RedeemStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
