"""
ProgressEntry — one day's contribution toward a goal.

At most one row per (goal_id, recorded_date); the unique constraint makes
the daily write an overwrite target. Amounts are day deltas, never running
totals.
"""
from datetime import datetime, date
from decimal import Decimal

from sqlalchemy import Integer, String, Text, DateTime, Date, Numeric, ForeignKey, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from goalstreak.db.base import Base


class ProgressEntry(Base):
    __tablename__ = "goal_progress"
    __table_args__ = (
        UniqueConstraint("goal_id", "recorded_date", name="uq_goal_progress_goal_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    goal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    progress_amount: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
