"""
Streak Engine — consecutive-day counters keyed on calendar-day transitions.

Transitions (evaluated against streaks.last_updated, using the clock's "today")
-------------------------------------------------------------------------------
  no row                    → create: current = 1, best = 1, personal best
  last_updated >= today     → no-op: counts unchanged, nothing written
  last_updated == yesterday → continue: current = previous + 1
  last_updated <  yesterday → reset: current = 1
  last_updated is NULL      → reset: current = 1

After a write: best = max(previous best, current),
is_personal_best = current > previous best (ties are not a new best),
was_reset = the reset branch was taken from a non-zero count.

Idempotency
-----------
The row is updated at most once per calendar day: a repeated call on the
same day hits the no-op branch. Concurrent first inserts collide on
uq_streak_user_type; the loser re-reads the winner's row, which is then
already stamped with today and resolves as a no-op.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from goalstreak.core.clock import Clock
from goalstreak.core.errors import InvalidArgumentError, StorageFailureError
from goalstreak.core.logger import setup_logger
from goalstreak.models.streak import Streak

logger = setup_logger(__name__)


class StreakType:
    DAILY_CHECKIN = "daily_checkin"


class Transition:
    CREATED   = "created"
    NOOP      = "noop"
    CONTINUED = "continued"
    RESET     = "reset"


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class StreakResult:
    streak_type: str
    current_streak: int
    best_streak: int
    is_personal_best: bool
    was_reset: bool
    transition: str
    last_updated: Optional[date]

    @property
    def already_updated(self) -> bool:
        return self.transition == Transition.NOOP

    @property
    def message(self) -> str:
        days = f"{self.current_streak} day{'s' if self.current_streak != 1 else ''}"
        if self.transition == Transition.NOOP:
            return f"Already checked in today. Current streak: {days}."
        if self.transition == Transition.CREATED:
            return "First check-in! Your streak starts today: 1 day."
        if self.was_reset:
            return (
                "Streak reset after a missed day, starting fresh at 1 day. "
                f"Your best is still {self.best_streak}."
            )
        if self.transition == Transition.RESET:
            return "Streak started: 1 day."
        if self.is_personal_best:
            return f"New personal best! {days} in a row."
        return f"Streak continued: {days} in a row."


# ---------------------------------------------------------------------------
# Pure transition logic
# ---------------------------------------------------------------------------

def next_count(
    previous_count: int,
    last_updated: Optional[date],
    today: date,
    yesterday: date,
) -> tuple[int, str]:
    """Return (new current count, transition) for an existing row."""
    if last_updated is not None and last_updated >= today:
        return previous_count, Transition.NOOP
    if last_updated == yesterday:
        return previous_count + 1, Transition.CONTINUED
    return 1, Transition.RESET


def _get_row(db: Session, user_id: str, streak_type: str) -> Optional[Streak]:
    return (
        db.query(Streak)
        .filter(Streak.user_id == user_id, Streak.streak_type == streak_type)
        .first()
    )


def _apply(row: Streak, today: date, yesterday: date) -> StreakResult:
    previous_count = row.current_count or 0
    previous_best = row.best_count or 0

    count, transition = next_count(previous_count, row.last_updated, today, yesterday)
    if transition == Transition.NOOP:
        return StreakResult(
            streak_type=row.streak_type,
            current_streak=previous_count,
            best_streak=previous_best,
            is_personal_best=False,
            was_reset=False,
            transition=transition,
            last_updated=row.last_updated,
        )

    best = max(previous_best, count)
    row.current_count = count
    row.best_count = best
    row.last_updated = today
    return StreakResult(
        streak_type=row.streak_type,
        current_streak=count,
        best_streak=best,
        is_personal_best=count > previous_best,
        was_reset=transition == Transition.RESET and previous_count > 0,
        transition=transition,
        last_updated=today,
    )


def _create(db: Session, user_id: str, streak_type: str, today: date) -> Optional[StreakResult]:
    """Insert the first row. Returns None when another writer inserted first."""
    savepoint = db.begin_nested()
    try:
        db.add(Streak(
            user_id=user_id,
            streak_type=streak_type,
            current_count=1,
            best_count=1,
            last_updated=today,
        ))
        db.flush()
        savepoint.commit()
    except IntegrityError:
        savepoint.rollback()
        return None
    return StreakResult(
        streak_type=streak_type,
        current_streak=1,
        best_streak=1,
        is_personal_best=True,
        was_reset=False,
        transition=Transition.CREATED,
        last_updated=today,
    )


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def advance(
    db: Session,
    clock: Clock,
    user_id: str,
    streak_type: str = StreakType.DAILY_CHECKIN,
) -> StreakResult:
    """
    Advance (or reset) the user's streak for today.
    Safe to call unconditionally: repeated calls on the same day are no-ops.
    """
    if not user_id:
        raise InvalidArgumentError("user_id", "user_id is required.")
    if not streak_type:
        raise InvalidArgumentError("streak_type", "streak_type is required.")

    today = clock.today()
    yesterday = clock.yesterday()

    try:
        row = _get_row(db, user_id, streak_type)
        result = None
        if row is None:
            result = _create(db, user_id, streak_type, today)
            if result is None:
                row = _get_row(db, user_id, streak_type)
        if result is None:
            result = _apply(row, today, yesterday)
        if result.transition != Transition.NOOP:
            db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to update %s streak for user %s: %s", streak_type, user_id, exc)
        raise StorageFailureError(operation="update_streak") from exc

    if result.was_reset:
        logger.info("Streak reset for user %s (%s). Today: %s", user_id, streak_type, today)
    logger.info(
        "Streak %s for user %s (%s): %s days (personal best: %s)",
        result.transition, user_id, streak_type, result.current_streak, result.is_personal_best,
    )
    return result


def get_streaks(db: Session, user_id: str) -> list[Streak]:
    """Return every streak row for the user, ordered by streak_type."""
    return (
        db.query(Streak)
        .filter(Streak.user_id == user_id)
        .order_by(Streak.streak_type)
        .all()
    )
