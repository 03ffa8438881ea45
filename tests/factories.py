"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    member = MemberFactory.create(tenant_id=tenant.id)
    db_session.add(member)
    await db_session.commit()
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:8]}@example.com"


# ---------------------------------------------------------------------------
# Members Service
# ---------------------------------------------------------------------------


class TenantFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import Tenant

        defaults = {
            "id": _uuid(),
            "name": f"College {uuid.uuid4().hex[:6]}",
            "domain": "college.example.com",
            "is_active": True,
        }
        defaults.update(overrides)
        return Tenant(**defaults)


class MemberFactory:
    @staticmethod
    def create(**overrides):
        from libs.auth.models import Role
        from services.members_service.models import Member

        defaults = {
            "id": _uuid(),
            "email": _unique_email(),
            "first_name": "Test",
            "last_name": "Member",
            "role": Role.ALUMNI,
            "department": "Computer Science",
            "graduation_year": 2015,
            "is_active": True,
        }
        defaults.update(overrides)
        return Member(**defaults)


class InvitationFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import Invitation, InvitationStatus

        defaults = {
            "id": _uuid(),
            "name": "Invited Alumnus",
            "email": _unique_email(),
            "graduation_year": 2012,
            "token": uuid.uuid4().hex + uuid.uuid4().hex,
            "status": InvitationStatus.SENT,
            "invited_by": _uuid(),
            "expires_at": _now() + timedelta(days=7),
            "sent_at": _now(),
        }
        defaults.update(overrides)
        return Invitation(**defaults)


# ---------------------------------------------------------------------------
# Rewards Service
# ---------------------------------------------------------------------------


class RewardTaskFactory:
    @staticmethod
    def create(**overrides):
        from services.rewards_service.models import RewardTask, TaskMetric, TaskType

        defaults = {
            "id": _uuid(),
            "title": "Attend events",
            "task_type": TaskType.EVENT,
            "metric": TaskMetric.COUNT,
            "target_amount": 10,
            "requires_verification": False,
            "display_order": 0,
        }
        defaults.update(overrides)
        return RewardTask(**defaults)


class RewardTemplateFactory:
    @staticmethod
    def create(tasks=None, **overrides):
        """Template with a single count task unless ``tasks`` is given."""
        from services.rewards_service.models import RewardCategory, RewardTemplate, RewardType

        defaults = {
            "id": _uuid(),
            "tenant_id": _uuid(),
            "title": "Event Enthusiast",
            "description": "Attend ten alumni events",
            "category": RewardCategory.EVENT,
            "reward_type": RewardType.POINTS,
            "cost": 100,
            "is_active": True,
            "is_featured": False,
        }
        defaults.update(overrides)
        template = RewardTemplate(**defaults)
        template.tasks = tasks if tasks is not None else [RewardTaskFactory.create()]
        return template


class BadgeFactory:
    @staticmethod
    def create(**overrides):
        from services.rewards_service.models import Badge, BadgeCategory, BadgeCriteria

        defaults = {
            "id": _uuid(),
            "name": f"Badge {uuid.uuid4().hex[:6]}",
            "description": "Awarded for outstanding engagement",
            "category": BadgeCategory.ENGAGEMENT,
            "color": "#3B82F6",
            "criteria_type": BadgeCriteria.MANUAL,
            "criteria_value": 1,
            "points": 0,
            "is_active": True,
            "is_rare": False,
            "current_recipients": 0,
        }
        defaults.update(overrides)
        return Badge(**defaults)


# ---------------------------------------------------------------------------
# Donations / Jobs
# ---------------------------------------------------------------------------


class FundFactory:
    @staticmethod
    def create(**overrides):
        from services.donations_service.models import Fund, FundStatus

        defaults = {
            "id": _uuid(),
            "tenant_id": _uuid(),
            "name": "Scholarship Fund",
            "description": "Scholarships for first-generation students",
            "created_by": _uuid(),
            "total_raised": Decimal("0"),
            "status": FundStatus.ACTIVE,
        }
        defaults.update(overrides)
        return Fund(**defaults)


class CampaignFactory:
    @staticmethod
    def create(**overrides):
        from services.donations_service.models import Campaign, CampaignStatus

        defaults = {
            "id": _uuid(),
            "tenant_id": _uuid(),
            "title": "Spring Drive",
            "target_amount": Decimal("1000"),
            "current_amount": Decimal("0"),
            "status": CampaignStatus.ACTIVE,
            "created_by": _uuid(),
        }
        defaults.update(overrides)
        return Campaign(**defaults)


class JobPostFactory:
    @staticmethod
    def create(**overrides):
        from services.jobs_service.models import JobPost, JobStatus, JobType

        defaults = {
            "id": _uuid(),
            "tenant_id": _uuid(),
            "posted_by": _uuid(),
            "title": "Backend Engineer",
            "company": "Acme",
            "location": "Remote",
            "job_type": JobType.FULL_TIME,
            "remote": True,
            "description": "Build APIs",
            "status": JobStatus.ACTIVE,
        }
        defaults.update(overrides)
        return JobPost(**defaults)
