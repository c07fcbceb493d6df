from datetime import datetime, date
from sqlalchemy import Integer, String, DateTime, Date, func, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from goalstreak.db.base import Base


class Streak(Base):
    """Consecutive-day counter, one row per (user_id, streak_type)."""

    __tablename__ = "streaks"
    __table_args__ = (
        UniqueConstraint("user_id", "streak_type", name="uq_streak_user_type"),
        CheckConstraint("best_count >= current_count", name="ck_streak_best_ge_current"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    streak_type: Mapped[str] = mapped_column(String(64), nullable=False)
    current_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    best_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_updated: Mapped[date | None] = mapped_column(
        Date, nullable=True, comment="Calendar day of the last counted action"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
