"""
Goal — a user-defined target tracked against its progress ledger.

`current_amount` is a derived cache: the Goal Aggregator rewrites it from
the sum of `goal_progress` rows on every recompute. `is_active` flips to
False exactly once, when the goal is completed; `completed_at` records that
transition and is never cleared.
"""
from datetime import datetime, date
from decimal import Decimal
import enum

from sqlalchemy import Integer, String, Text, Boolean, DateTime, Date, Numeric, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from goalstreak.db.base import Base


class ReminderFrequency(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    never = "never"


class Goal(Base):
    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    goal_type: Mapped[str] = mapped_column(String(64), nullable=False)
    goal_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_amount: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    current_amount: Mapped[Decimal] = mapped_column(
        Numeric(18, 4), nullable=False, default=Decimal("0"),
        comment="Sum of goal_progress rows; recomputed, never incremented",
    )
    target_unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    duration_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reminder_frequency: Mapped[str] = mapped_column(
        Enum(ReminderFrequency, name="reminder_frequency_enum"),
        nullable=False,
        default=ReminderFrequency.daily,
    )
    last_reminder_sent: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
