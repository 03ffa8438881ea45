"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


ROLE = sa.Enum(
    "super_admin", "college_admin", "hod", "staff", "alumni", "student",
    name="member_role_enum",
)
INVITATION_STATUS = sa.Enum(
    "pending", "sent", "opened", "accepted", "expired", name="invitation_status_enum"
)
REWARD_CATEGORY = sa.Enum(
    "event", "donation", "mentorship", "job", "referral", "engagement",
    "volunteering", "other",
    name="reward_category_enum",
)
REWARD_TYPE = sa.Enum("points", "badge", "voucher", "perk", name="reward_type_enum")
TASK_TYPE = sa.Enum(
    "event", "donation", "mentorship", "job", "referral", "engagement", "custom",
    name="reward_task_type_enum",
)
TASK_METRIC = sa.Enum("count", "amount", "duration", name="reward_task_metric_enum")
ACTIVITY_STATUS = sa.Enum(
    "in_progress", "pending_verification", "approved", "rejected", "claimed",
    name="activity_status_enum",
)
ACTIVITY_ACTION = sa.Enum(
    "progress", "submitted", "approved", "rejected", "resubmitted", "claimed",
    name="activity_action_enum",
)
BADGE_CATEGORY = sa.Enum(
    "mentorship", "donation", "event", "job", "engagement", "achievement", "special",
    name="badge_category_enum",
)
BADGE_CRITERIA = sa.Enum("points", "tasks", "manual", name="badge_criteria_enum")
FUND_STATUS = sa.Enum("active", "archived", "suspended", name="fund_status_enum")
CAMPAIGN_STATUS = sa.Enum(
    "draft", "active", "completed", "cancelled", name="campaign_status_enum"
)
JOB_TYPE = sa.Enum(
    "full-time", "part-time", "internship", "contract", name="job_type_enum"
)
JOB_STATUS = sa.Enum("active", "closed", name="job_status_enum")
APPLICATION_STATUS = sa.Enum(
    "Applied", "Shortlisted", "Rejected", "Hired", name="job_application_status_enum"
)
SHARE_PLATFORM = sa.Enum(
    "internal", "facebook", "twitter", "linkedin", "copy_link", "whatsapp", "telegram",
    name="share_platform_enum",
)


def upgrade() -> None:
    """Upgrade schema - Create members, rewards, badges, funds, jobs and shares tables."""

    # Members service
    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("domain", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "members",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("role", ROLE, nullable=False),
        sa.Column("department", sa.String(), nullable=True),
        sa.Column("graduation_year", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_members_tenant_id", "members", ["tenant_id"])
    op.create_index("ix_members_email", "members", ["email"], unique=True)
    op.create_index("ix_members_department", "members", ["department"])

    op.create_table(
        "invitations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("graduation_year", sa.Integer(), nullable=False),
        sa.Column("degree", sa.String(length=100), nullable=True),
        sa.Column("current_role", sa.String(length=100), nullable=True),
        sa.Column("company", sa.String(length=100), nullable=True),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("linkedin_profile", sa.String(), nullable=True),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("status", INVITATION_STATUS, nullable=False),
        sa.Column("invited_by", sa.Uuid(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_invitations_tenant_id", "invitations", ["tenant_id"])
    op.create_index("ix_invitations_email", "invitations", ["email"])
    op.create_index("ix_invitations_token", "invitations", ["token"], unique=True)
    op.create_index("ix_invitations_invited_by", "invitations", ["invited_by"])
    op.create_index("ix_invitations_expires_at", "invitations", ["expires_at"])

    # Rewards service
    op.create_table(
        "badges",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", BADGE_CATEGORY, nullable=False),
        sa.Column("icon", sa.String(), nullable=True),
        sa.Column("color", sa.String(length=16), nullable=False),
        sa.Column("criteria_type", BADGE_CRITERIA, nullable=False),
        sa.Column("criteria_value", sa.Integer(), nullable=False),
        sa.Column("criteria_description", sa.Text(), nullable=True),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_rare", sa.Boolean(), nullable=False),
        sa.Column("max_recipients", sa.Integer(), nullable=True),
        sa.Column("current_recipients", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.CheckConstraint("current_recipients >= 0", name="ck_badge_recipients_non_negative"),
        sa.CheckConstraint("points >= 0", name="ck_badge_points_non_negative"),
    )
    op.create_table(
        "reward_templates",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", REWARD_CATEGORY, nullable=False),
        sa.Column("reward_type", REWARD_TYPE, nullable=False),
        sa.Column("cost", sa.Integer(), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("badge_id", sa.Uuid(), sa.ForeignKey("badges.id"), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("cost >= 0", name="ck_reward_cost_non_negative"),
    )
    op.create_index("ix_reward_templates_tenant_id", "reward_templates", ["tenant_id"])
    op.create_index(
        "ix_reward_templates_tenant_active", "reward_templates", ["tenant_id", "is_active"]
    )
    op.create_table(
        "reward_tasks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "reward_id",
            sa.Uuid(),
            sa.ForeignKey("reward_templates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("task_type", TASK_TYPE, nullable=False),
        sa.Column("metric", TASK_METRIC, nullable=False),
        sa.Column("target_amount", sa.Float(), nullable=False),
        sa.Column("points", sa.Integer(), nullable=True),
        sa.Column("requires_verification", sa.Boolean(), nullable=False),
        sa.Column("badge_id", sa.Uuid(), sa.ForeignKey("badges.id"), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("target_amount > 0", name="ck_reward_task_target_positive"),
    )
    op.create_index("ix_reward_tasks_reward_id", "reward_tasks", ["reward_id"])

    op.create_table(
        "user_task_activities",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("reward_id", sa.Uuid(), sa.ForeignKey("reward_templates.id"), nullable=False),
        sa.Column("task_id", sa.Uuid(), sa.ForeignKey("reward_tasks.id"), nullable=False),
        sa.Column("status", ACTIVITY_STATUS, nullable=False),
        sa.Column("accumulated_amount", sa.Float(), nullable=False),
        sa.Column("target_amount", sa.Float(), nullable=False),
        sa.Column("points_awarded", sa.Integer(), nullable=False),
        sa.Column("context", sa.JSON(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verified_by", sa.Uuid(), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verification_reason", sa.Text(), nullable=True),
        sa.Column("voucher_code", sa.String(length=64), nullable=True),
        sa.Column("issued_by", sa.Uuid(), nullable=True),
        sa.Column("claim_note", sa.Text(), nullable=True),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "reward_id", "task_id", name="uq_activity_user_reward_task"
        ),
        sa.CheckConstraint("accumulated_amount >= 0", name="ck_activity_amount_non_negative"),
    )
    op.create_index("ix_user_task_activities_tenant_id", "user_task_activities", ["tenant_id"])
    op.create_index("ix_user_task_activities_user_id", "user_task_activities", ["user_id"])
    op.create_index("ix_user_task_activities_reward_id", "user_task_activities", ["reward_id"])
    op.create_index(
        "ix_activities_tenant_status", "user_task_activities", ["tenant_id", "status"]
    )
    op.create_table(
        "user_task_activity_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "activity_id", sa.Uuid(), sa.ForeignKey("user_task_activities.id"), nullable=False
        ),
        sa.Column("action", ACTIVITY_ACTION, nullable=False),
        sa.Column("amount", sa.Float(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("actor_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_user_task_activity_events_activity_id",
        "user_task_activity_events",
        ["activity_id"],
    )
    op.create_table(
        "user_badges",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("badge_id", sa.Uuid(), sa.ForeignKey("badges.id"), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=True),
        sa.Column("awarded_by", sa.Uuid(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("awarded_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "badge_id", name="uq_user_badge"),
    )
    op.create_index("ix_user_badges_user_id", "user_badges", ["user_id"])
    op.create_index("ix_user_badges_badge_id", "user_badges", ["badge_id"])
    op.create_index("ix_user_badges_tenant_id", "user_badges", ["tenant_id"])

    # Communications service
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=True),
        sa.Column("recipient_id", sa.Uuid(), nullable=False),
        sa.Column("event", sa.String(length=100), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"])
    op.create_index(
        "ix_notifications_recipient_read", "notifications", ["recipient_id", "is_read"]
    )

    # Donations service
    op.create_table(
        "funds",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.Column("total_raised", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", FUND_STATUS, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("total_raised >= 0", name="ck_funds_total_raised"),
    )
    op.create_index("ix_funds_tenant_id", "funds", ["tenant_id"])
    op.create_index("ix_funds_name", "funds", ["name"])
    op.create_index("ix_funds_created_by", "funds", ["created_by"])
    op.create_index("ix_funds_status", "funds", ["status"])
    op.create_table(
        "campaigns",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("fund_id", sa.Uuid(), sa.ForeignKey("funds.id"), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("target_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("current_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", CAMPAIGN_STATUS, nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("target_amount > 0", name="ck_campaigns_target_amount"),
        sa.CheckConstraint("current_amount >= 0", name="ck_campaigns_current_amount"),
    )
    op.create_index("ix_campaigns_tenant_id", "campaigns", ["tenant_id"])
    op.create_index("ix_campaigns_fund_id", "campaigns", ["fund_id"])
    op.create_index("ix_campaigns_status", "campaigns", ["status"])

    # Jobs service
    op.create_table(
        "job_posts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("posted_by", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("company", sa.String(length=100), nullable=False),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("job_type", JOB_TYPE, nullable=False),
        sa.Column("remote", sa.Boolean(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", JOB_STATUS, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_job_posts_tenant_id", "job_posts", ["tenant_id"])
    op.create_index("ix_job_posts_posted_by", "job_posts", ["posted_by"])
    op.create_index("ix_job_posts_status", "job_posts", ["status"])
    op.create_table(
        "job_applications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "job_id", sa.Uuid(), sa.ForeignKey("job_posts.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("applicant_id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("resume", sa.String(), nullable=True),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("experience", sa.Text(), nullable=False),
        sa.Column("contact_name", sa.String(length=100), nullable=False),
        sa.Column("contact_email", sa.String(), nullable=False),
        sa.Column("contact_phone", sa.String(length=30), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", APPLICATION_STATUS, nullable=False),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("job_id", "applicant_id", name="uq_job_applications_job_applicant"),
    )
    op.create_index("ix_job_applications_job_id", "job_applications", ["job_id"])
    op.create_index("ix_job_applications_applicant_id", "job_applications", ["applicant_id"])
    op.create_index("ix_job_applications_tenant_id", "job_applications", ["tenant_id"])
    op.create_index("ix_job_applications_status", "job_applications", ["status"])

    # Community service
    op.create_table(
        "shares",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("tenant_id", sa.Uuid(), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("platform", SHARE_PLATFORM, nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_shares_post_id", "shares", ["post_id"])
    op.create_index("ix_shares_user_id", "shares", ["user_id"])
    op.create_index("ix_shares_tenant_id", "shares", ["tenant_id"])
    op.create_index("ix_shares_platform", "shares", ["platform"])
    op.create_index("ix_shares_created_at", "shares", ["created_at"])
    op.create_index("ix_shares_post_platform", "shares", ["post_id", "platform"])
    op.create_index("ix_shares_post_created", "shares", ["post_id", "created_at"])


def downgrade() -> None:
    """Downgrade schema - Drop every table and enum type."""
    for table in (
        "shares",
        "job_applications",
        "job_posts",
        "campaigns",
        "funds",
        "notifications",
        "user_badges",
        "user_task_activity_events",
        "user_task_activities",
        "reward_tasks",
        "reward_templates",
        "badges",
        "invitations",
        "members",
        "tenants",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (
        SHARE_PLATFORM,
        APPLICATION_STATUS,
        JOB_STATUS,
        JOB_TYPE,
        CAMPAIGN_STATUS,
        FUND_STATUS,
        BADGE_CRITERIA,
        BADGE_CATEGORY,
        ACTIVITY_ACTION,
        ACTIVITY_STATUS,
        TASK_METRIC,
        TASK_TYPE,
        REWARD_TYPE,
        REWARD_CATEGORY,
        INVITATION_STATUS,
        ROLE,
    ):
        enum_type.drop(bind, checkfirst=True)
