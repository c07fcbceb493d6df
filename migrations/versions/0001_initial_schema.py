"""initial schema: goals, goal_progress, streaks

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- ENUM types ---
    reminder_frequency_enum = sa.Enum(
        "daily", "weekly", "never", name="reminder_frequency_enum"
    )
    reminder_frequency_enum.create(op.get_bind(), checkfirst=True)

    # --- goals ---
    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("goal_type", sa.String(64), nullable=False),
        sa.Column("goal_description", sa.Text(), nullable=True),
        sa.Column("target_amount", sa.Numeric(18, 4), nullable=False),
        sa.Column("current_amount", sa.Numeric(18, 4), nullable=False, server_default="0"),
        sa.Column("target_unit", sa.String(32), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("duration_days", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reminder_frequency", sa.Enum(
            "daily", "weekly", "never",
            name="reminder_frequency_enum", create_type=False,
        ), nullable=False, server_default="daily"),
        sa.Column("last_reminder_sent", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_goals_id", "goals", ["id"])
    op.create_index("ix_goals_user_id", "goals", ["user_id"])
    op.create_index("ix_goals_end_date", "goals", ["end_date"])
    op.create_index("ix_goals_is_active", "goals", ["is_active"])

    # --- goal_progress ---
    op.create_table(
        "goal_progress",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("goal_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("progress_amount", sa.Numeric(18, 4), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("recorded_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["goal_id"], ["goals.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("goal_id", "recorded_date", name="uq_goal_progress_goal_date"),
    )
    op.create_index("ix_goal_progress_id", "goal_progress", ["id"])
    op.create_index("ix_goal_progress_goal_id", "goal_progress", ["goal_id"])
    op.create_index("ix_goal_progress_user_id", "goal_progress", ["user_id"])

    # --- streaks ---
    op.create_table(
        "streaks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("streak_type", sa.String(64), nullable=False),
        sa.Column("current_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("best_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_updated", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "streak_type", name="uq_streak_user_type"),
        sa.CheckConstraint("best_count >= current_count", name="ck_streak_best_ge_current"),
    )
    op.create_index("ix_streaks_id", "streaks", ["id"])
    op.create_index("ix_streaks_user_id", "streaks", ["user_id"])


def downgrade() -> None:
    op.drop_table("streaks")
    op.drop_table("goal_progress")
    op.drop_table("goals")
    sa.Enum(name="reminder_frequency_enum").drop(op.get_bind(), checkfirst=True)
