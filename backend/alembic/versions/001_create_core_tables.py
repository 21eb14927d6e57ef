"""Create profiles, checklists, tasks, share_requests and timer_logs

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema. PostgreSQL server defaults (gen_random_uuid(),
       CURRENT_TIMESTAMP) back up the Python-side defaults of the models.
       Reference columns are indexed but carry no foreign keys: deleting a
       profile, checklist or task leaves its dependents in place.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _created_at_column() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "profiles",
        _id_column(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="profiles_name_key"),
    )
    op.create_index("idx_profiles_created_at", "profiles", [sa.text("created_at DESC")])

    op.create_table(
        "checklists",
        _id_column(),
        sa.Column("profile_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column(
            "is_shared_copy",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_checklists_profile_id", "checklists", ["profile_id"])
    op.create_index(
        "idx_checklists_profile_created",
        "checklists",
        ["profile_id", sa.text("created_at DESC")],
    )

    op.create_table(
        "tasks",
        _id_column(),
        sa.Column("checklist_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("parent_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order_num", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("start_time", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("end_time", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("allocated_time", sa.Integer(), nullable=True, comment="Minutes"),
        sa.Column(
            "is_completed",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tasks_parent_id", "tasks", ["parent_id"])
    op.create_index("idx_tasks_checklist_order", "tasks", ["checklist_id", "order_num"])
    op.create_index("idx_tasks_checklist_created", "tasks", ["checklist_id", "created_at"])

    op.create_table(
        "share_requests",
        _id_column(),
        sa.Column("checklist_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sender_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("receiver_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="share_requests_status_check",
        ),
    )
    op.create_index(
        "idx_share_requests_receiver_status",
        "share_requests",
        ["receiver_id", "status"],
    )

    op.create_table(
        "timer_logs",
        _id_column(),
        sa.Column("checklist_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("elapsed_seconds", sa.Integer(), nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_timer_logs_checklist_created",
        "timer_logs",
        ["checklist_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    """Drop every table. Destructive: all data is lost."""
    op.drop_index("idx_timer_logs_checklist_created", table_name="timer_logs")
    op.drop_table("timer_logs")
    op.drop_index("idx_share_requests_receiver_status", table_name="share_requests")
    op.drop_table("share_requests")
    op.drop_index("idx_tasks_checklist_created", table_name="tasks")
    op.drop_index("idx_tasks_checklist_order", table_name="tasks")
    op.drop_index("ix_tasks_parent_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("idx_checklists_profile_created", table_name="checklists")
    op.drop_index("ix_checklists_profile_id", table_name="checklists")
    op.drop_table("checklists")
    op.drop_index("idx_profiles_created_at", table_name="profiles")
    op.drop_table("profiles")
