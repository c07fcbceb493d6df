"""
Goal reminders — periodic nudges for active goals with a deadline.

Gate (reminder_needed), in order
--------------------------------
  1. Overdue goals (days_remaining < 0) are skipped; they get deadline
     notifications instead.
  2. reminder_frequency == "never" → skip.
  3. Last reminder sent < 1 day ago ("daily") or < 7 days ago ("weekly") → skip.
  4. Due within 3 days → remind.
  5. More than 20 points behind expected pace → remind.
  6. "daily" and due within 7 days → remind.
  7. Otherwise only on Sunday or Monday.

Idempotency
-----------
Each reminder stamps goals.last_reminder_sent, so re-running on the same day
produces nothing new for goals already reminded. db.commit() is called once
at the end of a run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from goalstreak.core.clock import Clock
from goalstreak.core.config import settings
from goalstreak.core.errors import StorageFailureError
from goalstreak.core.logger import setup_logger
from goalstreak.models.goal import Goal, ReminderFrequency
from goalstreak.models.reminder import Reminder
from goalstreak.services.deadline_notifier import (
    BEHIND_MARGIN,
    URGENT_DAYS,
    days_remaining,
    expected_progress,
    progress_percentage,
)

logger = setup_logger(__name__)

_MIN_DAYS_BETWEEN = {
    ReminderFrequency.daily.value: 1,
    ReminderFrequency.weekly.value: 7,
}
_DAILY_WINDOW_DAYS = 7
_WEEKLY_REMINDER_WEEKDAYS = (6, 0)   # Sunday, Monday


class Urgency:
    HIGH   = "high"
    MEDIUM = "medium"
    NORMAL = "normal"
    LOW    = "low"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class ReminderContent:
    title: str
    message: str
    urgency: str


@dataclass
class SentReminder:
    user_id: str
    goal_id: int
    goal_type: str
    title: str
    message: str
    urgency: str


@dataclass
class ReminderRunResult:
    total_goals_checked: int
    reminders: list[SentReminder] = field(default_factory=list)

    @property
    def reminders_created(self) -> int:
        return len(self.reminders)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ev(v) -> str:
    """Return bare string value from a str-enum or plain str."""
    return v.value if hasattr(v, "value") else str(v)


def _aware(dt: datetime, tz) -> datetime:
    # SQLite hands back naive datetimes; they were written in the clock's zone.
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=tz)


def _reminder_time() -> time:
    return time.fromisoformat(settings.REMINDER_TIME)


def reminder_needed(goal: Goal, today: date, now: datetime) -> bool:
    days_left = days_remaining(goal.end_date, today)
    if days_left < 0:
        return False

    frequency = _ev(goal.reminder_frequency or ReminderFrequency.daily)
    if frequency == ReminderFrequency.never.value:
        return False

    if goal.last_reminder_sent is not None:
        elapsed = now - _aware(goal.last_reminder_sent, now.tzinfo)
        if elapsed.days < _MIN_DAYS_BETWEEN.get(frequency, 1):
            return False

    if days_left <= URGENT_DAYS:
        return True

    pct = progress_percentage(goal.current_amount, goal.target_amount)
    expected = expected_progress(goal.duration_days, days_left)
    if expected is not None and pct < expected - BEHIND_MARGIN:
        return True

    if frequency == ReminderFrequency.daily.value and days_left <= _DAILY_WINDOW_DAYS:
        return True

    return today.weekday() in _WEEKLY_REMINDER_WEEKDAYS


def build_reminder_content(goal: Goal, today: date) -> ReminderContent:
    days_left = days_remaining(goal.end_date, today)
    pct = progress_percentage(goal.current_amount, goal.target_amount)
    name = goal.goal_description or goal.goal_type.replace("_", " ")

    if days_left <= 0:
        return ReminderContent(
            title="⏰ Goal Deadline Today!",
            message=(
                f'Your goal "{name}" is due today! You\'re at {pct:.1f}% completion. '
                "Every bit of progress counts!"
            ),
            urgency=Urgency.HIGH,
        )
    if days_left == 1:
        return ReminderContent(
            title="🚨 Final Day for Your Goal",
            message=(
                f'Tomorrow is the deadline for "{name}". '
                f"You're at {pct:.1f}% - make today count!"
            ),
            urgency=Urgency.HIGH,
        )
    if days_left <= URGENT_DAYS:
        return ReminderContent(
            title=f"⏳ {days_left} Days Left",
            message=(
                f'Only {days_left} days remaining for "{name}". '
                f"Current progress: {pct:.1f}%. You've got this!"
            ),
            urgency=Urgency.MEDIUM,
        )
    if pct < 25 and days_left <= _DAILY_WINDOW_DAYS:
        return ReminderContent(
            title="📈 Let's Build Momentum",
            message=(
                f'Your goal "{name}" needs some attention. {days_left} days left, '
                f"{pct:.1f}% complete. Small steps lead to big wins!"
            ),
            urgency=Urgency.MEDIUM,
        )
    if pct >= 75:
        return ReminderContent(
            title="🎯 Almost There!",
            message=(
                f'Amazing progress on "{name}"! You\'re {pct:.1f}% complete with '
                f"{days_left} days to go. The finish line is in sight!"
            ),
            urgency=Urgency.LOW,
        )
    return ReminderContent(
        title="💪 Keep Going Strong",
        message=(
            f'You\'re making steady progress on "{name}" - {pct:.1f}% complete. '
            f"{days_left} days remaining. Consistency is key!"
        ),
        urgency=Urgency.NORMAL,
    )


# ---------------------------------------------------------------------------
# Public — reminder run
# ---------------------------------------------------------------------------

def send_goal_reminders(
    db: Session,
    clock: Clock,
    user_id: Optional[str] = None,
) -> ReminderRunResult:
    """Create a Reminder for every active, dated goal that passes the gate."""
    today = clock.today()
    now = clock.now()

    q = db.query(Goal).filter(Goal.is_active.is_(True), Goal.end_date.isnot(None))
    if user_id:
        q = q.filter(Goal.user_id == user_id)
    goals = q.order_by(Goal.id).all()

    result = ReminderRunResult(total_goals_checked=len(goals))
    at = _reminder_time()

    try:
        for goal in goals:
            if not reminder_needed(goal, today, now):
                continue
            content = build_reminder_content(goal, today)
            db.add(Reminder(
                user_id=goal.user_id,
                goal_id=goal.id,
                title=content.title,
                message=content.message,
                reminder_type="goal_progress",
                urgency=content.urgency,
                time=at,
                is_active=True,
                is_ai_generated=False,
            ))
            goal.last_reminder_sent = now
            result.reminders.append(SentReminder(
                user_id=goal.user_id,
                goal_id=goal.id,
                goal_type=goal.goal_type,
                title=content.title,
                message=content.message,
                urgency=content.urgency,
            ))
        if result.reminders:
            db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Goal reminder run failed: %s", exc)
        raise StorageFailureError(operation="send_goal_reminders") from exc

    logger.info(
        "Created %s goal reminders (%s goals checked%s)",
        result.reminders_created,
        result.total_goals_checked,
        f" for user {user_id}" if user_id else "",
    )
    return result


# ---------------------------------------------------------------------------
# Public — query helpers
# ---------------------------------------------------------------------------

def get_reminders(
    db: Session,
    user_id: str,
    limit: int = 50,
    offset: int = 0,
) -> tuple[int, list[Reminder]]:
    """Return (total, page) of a user's reminders ordered newest first."""
    q = db.query(Reminder).filter(Reminder.user_id == user_id)
    total = q.count()
    items = (
        q.order_by(Reminder.created_at.desc(), Reminder.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return total, items
