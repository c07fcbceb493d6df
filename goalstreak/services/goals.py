"""
Goal registry: create and look up goals owned by a user.

Public API
----------
create_goal(db, clock, draft)              -> Goal
list_goals(db, user_id, active)            -> list[Goal]
get_goal(db, user_id, goal_id)             -> Goal   (GoalNotFoundError if not owned)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from goalstreak.core.clock import Clock
from goalstreak.core.errors import GoalNotFoundError, InvalidArgumentError, StorageFailureError
from goalstreak.core.logger import setup_logger
from goalstreak.models.goal import Goal, ReminderFrequency
from goalstreak.services.progress_ledger import check_amount_range

logger = setup_logger(__name__)


@dataclass
class GoalDraft:
    """Lightweight DTO so the service layer stays schema-agnostic."""
    user_id: str
    goal_type: str
    target_amount: Any
    target_unit: Optional[str] = None
    goal_description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = None
    reminder_frequency: str = ReminderFrequency.daily.value


def _target(value: Any) -> Decimal:
    try:
        target = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidArgumentError("target_amount", "target_amount must be a number.")
    if not target.is_finite() or target < 0:
        raise InvalidArgumentError(
            "target_amount", "target_amount must be a finite, non-negative number."
        )
    return check_amount_range("target_amount", target)


def _resolve_timeline(
    start: date,
    end: Optional[date],
    duration: Optional[int],
) -> tuple[Optional[date], Optional[int]]:
    """Fill in end_date or duration_days from the other when only one is given."""
    if duration is not None and duration <= 0:
        raise InvalidArgumentError("duration_days", "duration_days must be positive.")
    if end is not None and end < start:
        raise InvalidArgumentError("end_date", "end_date must not be before start_date.")
    if end is None and duration is not None:
        end = start + timedelta(days=duration)
    elif end is not None and duration is None:
        duration = (end - start).days or None
    return end, duration


def create_goal(db: Session, clock: Clock, draft: GoalDraft) -> Goal:
    if not draft.user_id:
        raise InvalidArgumentError("user_id", "user_id is required.")
    if not draft.goal_type:
        raise InvalidArgumentError("goal_type", "goal_type is required.")

    target = _target(draft.target_amount)
    start = draft.start_date or clock.today()
    end, duration = _resolve_timeline(start, draft.end_date, draft.duration_days)

    goal = Goal(
        user_id=draft.user_id,
        goal_type=draft.goal_type,
        goal_description=draft.goal_description,
        target_amount=target,
        current_amount=Decimal("0"),
        target_unit=draft.target_unit,
        start_date=start,
        end_date=end,
        duration_days=duration,
        is_active=True,
        reminder_frequency=ReminderFrequency(draft.reminder_frequency),
    )
    try:
        db.add(goal)
        db.commit()
        db.refresh(goal)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create goal for user %s: %s", draft.user_id, exc)
        raise StorageFailureError(operation="create_goal") from exc

    logger.info("Created %s goal %s for user %s", goal.goal_type, goal.id, goal.user_id)
    return goal


def list_goals(db: Session, user_id: str, active: Optional[bool] = None) -> list[Goal]:
    q = db.query(Goal).filter(Goal.user_id == user_id)
    if active is not None:
        q = q.filter(Goal.is_active.is_(active))
    return q.order_by(Goal.created_at.desc(), Goal.id.desc()).all()


def get_goal(db: Session, user_id: str, goal_id: int) -> Goal:
    goal = (
        db.query(Goal)
        .filter(Goal.id == goal_id, Goal.user_id == user_id)
        .first()
    )
    if goal is None:
        raise GoalNotFoundError(goal_id=goal_id, user_id=user_id)
    return goal
