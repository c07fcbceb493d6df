"""
Deadline Notifier — classify goal health against its timeline.

Definitions
-----------
  days_remaining      = end_date - today, in whole calendar days
  progress_percentage = 100 * current_amount / target_amount   (target 0 → 100)
  expected_progress   = 100 * (duration_days - days_remaining) / duration_days
                        (None when duration_days is unset or <= 0)

Classification (first match wins)
---------------------------------
  1. OVERDUE : days_remaining <= 0
  2. URGENT  : days_remaining <= 3
  3. BEHIND  : progress_percentage < expected_progress - 20
  4. AHEAD   : progress_percentage > expected_progress + 10
  5. none    : no notification for this goal

`classify_deadline` is the only place these thresholds live; the reminder
run and the dashboard reuse the helpers below.

Read-only: nothing in this module writes to the session.

Public API
----------
classify_deadline(days_remaining, progress_percentage, expected_progress) -> str | None
check_deadlines(db, clock, user_id)      -> DeadlineReport
get_dashboard_data(db, clock, user_id)   -> DashboardData
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from goalstreak.core.clock import Clock
from goalstreak.core.errors import InvalidArgumentError
from goalstreak.models.goal import Goal


class NotificationType:
    OVERDUE = "overdue"
    URGENT  = "urgent"
    BEHIND  = "behind"
    AHEAD   = "ahead"


# Thresholds
URGENT_DAYS     = 3
BEHIND_MARGIN   = 20.0   # percentage points below expected pace
AHEAD_MARGIN    = 10.0   # percentage points above expected pace


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class Notification:
    goal_id: int
    goal_type: str
    type: str
    message: str
    days_remaining: int
    progress_percentage: float


@dataclass
class DeadlineReport:
    notifications: list[Notification]
    total_goals: int


@dataclass
class DashboardGoal:
    id: int
    goal_type: str
    description: Optional[str]
    progress: Decimal
    target: Decimal
    progress_percentage: float   # capped at 100
    days_remaining: Optional[int]
    is_overdue: bool
    unit: Optional[str]


@dataclass
class DashboardData:
    goals: list[DashboardGoal] = field(default_factory=list)

    @property
    def total_active_goals(self) -> int:
        return len(self.goals)

    @property
    def completed_goals(self) -> int:
        return sum(1 for g in self.goals if g.progress_percentage >= 100)

    @property
    def overdue_goals(self) -> int:
        return sum(1 for g in self.goals if g.is_overdue)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def days_remaining(end_date: date, today: date) -> int:
    return (end_date - today).days


def progress_percentage(current_amount: Decimal, target_amount: Decimal) -> float:
    current = Decimal(current_amount or 0)
    target = Decimal(target_amount or 0)
    if target == 0:
        return 100.0
    return float(current * 100 / target)


def expected_progress(duration_days: Optional[int], remaining: int) -> Optional[float]:
    if not duration_days or duration_days <= 0:
        return None
    return 100.0 * (duration_days - remaining) / duration_days


def classify_deadline(
    days_left: int,
    percentage: float,
    expected: Optional[float],
) -> Optional[str]:
    """Return the notification type for a goal, or None when it is on track."""
    if days_left <= 0:
        return NotificationType.OVERDUE
    if days_left <= URGENT_DAYS:
        return NotificationType.URGENT
    if expected is None:
        return None
    if percentage < expected - BEHIND_MARGIN:
        return NotificationType.BEHIND
    if percentage > expected + AHEAD_MARGIN:
        return NotificationType.AHEAD
    return None


def goal_label(goal: Goal) -> str:
    return goal.goal_type.replace("_", " ")


def _days(n: int) -> str:
    return f"{n} day{'s' if n != 1 else ''}"


def build_message(
    kind: str,
    label: str,
    days_left: int,
    percentage: float,
    expected: Optional[float],
) -> str:
    if kind == NotificationType.OVERDUE:
        return f"Your {label} goal is overdue! You achieved {percentage:.1f}% of your target."
    if kind == NotificationType.URGENT:
        return (
            f"Only {_days(days_left)} left for your {label} goal! "
            f"You're at {percentage:.1f}% completion."
        )
    if kind == NotificationType.BEHIND:
        return (
            f"You're behind on your {label} goal. Expected: {expected:.1f}%, "
            f"Actual: {percentage:.1f}% with {_days(days_left)} remaining."
        )
    return (
        f"Great job! You're ahead on your {label} goal! {percentage:.1f}% complete "
        f"with {_days(days_left)} remaining."
    )


def evaluate_goal(goal: Goal, today: date) -> Optional[Notification]:
    """Classify a single goal with an end date. Returns None when on track."""
    days_left = days_remaining(goal.end_date, today)
    pct = progress_percentage(goal.current_amount, goal.target_amount)
    expected = expected_progress(goal.duration_days, days_left)

    kind = classify_deadline(days_left, pct, expected)
    if kind is None:
        return None
    return Notification(
        goal_id=goal.id,
        goal_type=goal.goal_type,
        type=kind,
        message=build_message(kind, goal_label(goal), days_left, pct, expected),
        days_remaining=days_left,
        progress_percentage=round(pct, 1),
    )


# ---------------------------------------------------------------------------
# Public — queries
# ---------------------------------------------------------------------------

def _active_goals(db: Session, user_id: str, with_deadline: bool = False) -> list[Goal]:
    q = db.query(Goal).filter(Goal.user_id == user_id, Goal.is_active.is_(True))
    if with_deadline:
        q = q.filter(Goal.end_date.isnot(None))
    return q.order_by(Goal.id).all()


def check_deadlines(db: Session, clock: Clock, user_id: str) -> DeadlineReport:
    """Notifications for every active goal of the user that has an end date."""
    if not user_id:
        raise InvalidArgumentError("user_id", "user_id is required.")
    today = clock.today()
    goals = _active_goals(db, user_id, with_deadline=True)

    notifications = []
    for goal in goals:
        notification = evaluate_goal(goal, today)
        if notification is not None:
            notifications.append(notification)

    return DeadlineReport(notifications=notifications, total_goals=len(goals))


def get_dashboard_data(db: Session, clock: Clock, user_id: str) -> DashboardData:
    """Per-goal progress summary for all active goals of the user."""
    if not user_id:
        raise InvalidArgumentError("user_id", "user_id is required.")
    today = clock.today()

    data = DashboardData()
    for goal in _active_goals(db, user_id):
        days_left = days_remaining(goal.end_date, today) if goal.end_date else None
        pct = progress_percentage(goal.current_amount, goal.target_amount)
        data.goals.append(DashboardGoal(
            id=goal.id,
            goal_type=goal.goal_type,
            description=goal.goal_description,
            progress=Decimal(goal.current_amount or 0),
            target=Decimal(goal.target_amount),
            progress_percentage=round(min(pct, 100.0), 1),
            days_remaining=days_left,
            is_overdue=days_left is not None and days_left < 0,
            unit=goal.target_unit,
        ))
    return data
