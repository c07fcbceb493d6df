from datetime import datetime, time as time_of_day
from sqlalchemy import Integer, String, Text, Boolean, DateTime, Time, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from goalstreak.db.base import Base


class Reminder(Base):
    """Goal reminder produced by a reminder run. Delivery is handled elsewhere."""

    __tablename__ = "reminders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    goal_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("goals.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    reminder_type: Mapped[str] = mapped_column(String(32), nullable=False, default="goal_progress")
    urgency: Mapped[str] = mapped_column(String(16), nullable=False, default="normal")
    time: Mapped[time_of_day] = mapped_column(Time, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
