"""points_ledger

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-25 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


POINTS_ENTRY_TYPE = sa.Enum(
    "task", "manual", "claim", "redemption", "refund", name="points_entry_type_enum"
)
REDEEM_STATUS = sa.Enum("pending", "approved", "rejected", name="redeem_status_enum")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "points_entries",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("entry_type", POINTS_ENTRY_TYPE, nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("source", sa.String(length=100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("reference_id", sa.Uuid(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_points_entries_tenant_id", "points_entries", ["tenant_id"])
    op.create_index("ix_points_entries_user_id", "points_entries", ["user_id"])
    op.create_index("ix_points_entries_reference_id", "points_entries", ["reference_id"])
    op.create_index(
        "ix_points_entries_user_type", "points_entries", ["user_id", "entry_type"]
    )

    op.create_table(
        "redeem_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("reward_option", sa.String(length=255), nullable=False),
        sa.Column("points_used", sa.Integer(), nullable=False),
        sa.Column("delivery_email", sa.String(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", REDEEM_STATUS, nullable=False),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("points_used > 0", name="ck_redeem_points_positive"),
    )
    op.create_index("ix_redeem_requests_tenant_id", "redeem_requests", ["tenant_id"])
    op.create_index("ix_redeem_requests_user_id", "redeem_requests", ["user_id"])
    op.create_index(
        "ix_redeem_requests_tenant_status", "redeem_requests", ["tenant_id", "status"]
    )

    # Existing task approvals and claims become ledger entries
    op.execute(
        """
        INSERT INTO points_entries
            (id, tenant_id, user_id, points, entry_type, description, source,
             reference_id, created_at)
        SELECT gen_random_uuid(), a.tenant_id, a.user_id, a.points_awarded, 'task'::points_entry_type_enum,
               'Completed: ' || r.title, 'Reward task', a.id,
               COALESCE(a.approved_at, a.updated_at)
        FROM user_task_activities a JOIN reward_templates r ON r.id = a.reward_id
        WHERE a.status IN ('approved', 'claimed') AND a.points_awarded > 0
        """
    )
    op.execute(
        """
        INSERT INTO points_entries
            (id, tenant_id, user_id, points, entry_type, description, source,
             reference_id, created_at)
        SELECT gen_random_uuid(), a.tenant_id, a.user_id, -a.points_awarded, 'claim'::points_entry_type_enum,
               'Claimed: ' || r.title, 'Reward claim', a.id,
               COALESCE(a.claimed_at, a.updated_at)
        FROM user_task_activities a JOIN reward_templates r ON r.id = a.reward_id
        WHERE a.status = 'claimed' AND a.points_awarded > 0
        """
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("redeem_requests")
    op.drop_table("points_entries")
    REDEEM_STATUS.drop(op.get_bind(), checkfirst=True)
    POINTS_ENTRY_TYPE.drop(op.get_bind(), checkfirst=True)
