"""
Progress Ledger — record a goal's daily contribution.

Public API
----------
record_progress(db, clock, user_id, goal_id, amount, notes, recorded_date) -> ProgressResult

Behaviour
---------
- One row per (goal_id, recorded_date). Re-submitting on the same day
  overwrites the amount and notes (upsert), so retries are idempotent and a
  different amount corrects the day instead of adding to it.
- The entry write and the Goal Aggregator recompute share one transaction;
  db.commit() is called once, after both. A storage error rolls back both.
- The goal row is locked (SELECT ... FOR UPDATE) before the upsert, so
  writers on the same goal run one after another and every recompute sees
  the entries committed before it.
- Two writers racing on the same (goal, day) insert: the loser's savepoint
  is rolled back and its value is applied as an update (last writer wins).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from goalstreak.core.clock import Clock
from goalstreak.core.config import settings
from goalstreak.core.errors import GoalNotFoundError, InvalidArgumentError, StorageFailureError
from goalstreak.core.logger import setup_logger
from goalstreak.models.goal import Goal
from goalstreak.models.progress_entry import ProgressEntry
from goalstreak.services.goal_aggregator import AggregateResult, recompute

logger = setup_logger(__name__)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class ProgressResult:
    entry_id: int
    recorded_date: date
    aggregate: AggregateResult
    message: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Numeric(18, 4) columns: 14 integer digits, 4 decimal places.
AMOUNT_LIMIT = Decimal("1e14")
AMOUNT_QUANTUM = Decimal("0.0001")


def format_amount(value: Decimal) -> str:
    """Render a Decimal without trailing zeros: 8.0000 → '8', 2.50 → '2.5'."""
    return format(Decimal(value).normalize(), "f")


def check_amount_range(field: str, value: Decimal) -> Decimal:
    """Reject amounts the Numeric(18, 4) columns cannot store exactly."""
    if abs(value) >= AMOUNT_LIMIT:
        raise InvalidArgumentError(field, f"{field} must be smaller than {AMOUNT_LIMIT:,.0f}.")
    if value != value.quantize(AMOUNT_QUANTUM):
        raise InvalidArgumentError(field, f"{field} allows at most 4 decimal places.")
    return value


def coerce_amount(amount: Any) -> Decimal:
    """Validate a raw amount and return it as a finite Decimal."""
    if isinstance(amount, bool):
        raise InvalidArgumentError("progress_amount", "progress_amount must be a number.")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidArgumentError("progress_amount", "progress_amount must be a number.")
    if not value.is_finite():
        raise InvalidArgumentError("progress_amount", "progress_amount must be a finite number.")
    if value < 0 and not settings.ALLOW_NEGATIVE_PROGRESS:
        raise InvalidArgumentError("progress_amount", "progress_amount must not be negative.")
    return check_amount_range("progress_amount", value)


def _locked_goal_query(db: Session, user_id: str, goal_id: int):
    # Row lock serialises writers per goal, so the recompute after the upsert
    # sees every other writer's committed entry.
    return (
        db.query(Goal)
        .filter(Goal.id == goal_id, Goal.user_id == user_id)
        .with_for_update()
        .populate_existing()
    )


def _owned_goal(db: Session, user_id: str, goal_id: int) -> Goal:
    goal = _locked_goal_query(db, user_id, goal_id).first()
    if goal is None:
        raise GoalNotFoundError(goal_id=goal_id, user_id=user_id)
    return goal


def _find_entry(db: Session, goal_id: int, day: date) -> Optional[ProgressEntry]:
    return (
        db.query(ProgressEntry)
        .filter(
            ProgressEntry.goal_id == goal_id,
            ProgressEntry.recorded_date == day,
        )
        .first()
    )


def _upsert_entry(
    db: Session,
    goal: Goal,
    day: date,
    amount: Decimal,
    notes: Optional[str],
) -> ProgressEntry:
    """Overwrite the (goal, day) row, inserting it if missing. Flush only."""
    existing = _find_entry(db, goal.id, day)
    if existing is None:
        entry = ProgressEntry(
            goal_id=goal.id,
            user_id=goal.user_id,
            progress_amount=amount,
            notes=notes,
            recorded_date=day,
        )
        savepoint = db.begin_nested()
        try:
            db.add(entry)
            db.flush()
            savepoint.commit()
            return entry
        except IntegrityError:
            # Another writer inserted the same (goal, day) first.
            savepoint.rollback()
            existing = _find_entry(db, goal.id, day)
            if existing is None:
                raise

    existing.progress_amount = amount
    existing.notes = notes
    db.flush()
    return existing


def _build_message(goal: Goal, aggregate: AggregateResult) -> str:
    if aggregate.is_completed:
        return f"🎉 Congratulations! You've completed your {goal.goal_type} goal!"
    unit = f" {goal.target_unit}" if goal.target_unit else ""
    return (
        f"Progress updated! Total: {format_amount(aggregate.total_progress)}"
        f"/{format_amount(aggregate.target_amount)}{unit}"
    )


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def record_progress(
    db: Session,
    clock: Clock,
    user_id: str,
    goal_id: int,
    amount: Any,
    notes: Optional[str] = None,
    recorded_date: Optional[date] = None,
) -> ProgressResult:
    """Upsert today's (or recorded_date's) entry, recompute the goal, commit once."""
    if not user_id:
        raise InvalidArgumentError("user_id", "user_id is required.")
    if goal_id is None:
        raise InvalidArgumentError("goal_id", "goal_id is required.")
    value = coerce_amount(amount)
    day = recorded_date or clock.today()

    try:
        goal = _owned_goal(db, user_id, goal_id)
        entry = _upsert_entry(db, goal, day, value, notes or None)
        aggregate = recompute(db, goal.id, now=clock.now())
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            "Failed to record progress for goal %s (user %s, day %s): %s",
            goal_id, user_id, day, exc,
        )
        raise StorageFailureError(operation="record_progress") from exc

    logger.info(
        "Recorded %s for goal %s on %s; total %s/%s",
        value, goal_id, day, aggregate.total_progress, aggregate.target_amount,
    )
    return ProgressResult(
        entry_id=entry.id,
        recorded_date=day,
        aggregate=aggregate,
        message=_build_message(goal, aggregate),
    )
