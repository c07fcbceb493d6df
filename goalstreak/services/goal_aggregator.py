"""
Goal Aggregator — recompute a goal's totals from its progress ledger.

Rules
-----
  1. current_amount = exact sum of every goal_progress row for the goal.
     Always a full recompute; the cached value on the goal is never read.
  2. total >= target_amount on an active goal → is_active = False,
     completed_at = now. This happens exactly once per goal.
  3. An inactive goal keeps having its current_amount refreshed but is never
     re-activated and never reports just_completed again.

Policy: target_amount == 0 is complete as soon as the ledger total is
non-negative (see DESIGN.md, zero-target decision).

Flush only. The caller owns commit and rollback.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from goalstreak.core.errors import NotFoundError
from goalstreak.core.logger import setup_logger
from goalstreak.models.goal import Goal
from goalstreak.models.progress_entry import ProgressEntry

logger = setup_logger(__name__)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class AggregateResult:
    goal_id: int
    total_progress: Decimal
    target_amount: Decimal
    is_completed: bool      # total >= target
    just_completed: bool    # this recompute performed the active → inactive transition
    is_active: bool


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def ledger_total(db: Session, goal_id: int) -> Decimal:
    """Exact Decimal sum of every ledger row for the goal."""
    amounts = (
        db.query(ProgressEntry.progress_amount)
        .filter(ProgressEntry.goal_id == goal_id)
        .all()
    )
    return sum((Decimal(row.progress_amount) for row in amounts), Decimal("0"))


def is_target_reached(total: Decimal, target: Decimal) -> bool:
    return total >= target


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def recompute(
    db: Session,
    goal_id: int,
    now: Optional[datetime] = None,
) -> AggregateResult:
    """
    Rewrite the goal's current_amount from the ledger and apply the one-time
    completion transition. Raises NotFoundError when the goal does not exist.
    """
    goal: Optional[Goal] = db.get(Goal, goal_id)
    if goal is None:
        raise NotFoundError(f"Goal {goal_id} not found.", details={"goal_id": goal_id})

    total = ledger_total(db, goal_id)
    target = Decimal(goal.target_amount)
    goal.current_amount = total

    reached = is_target_reached(total, target)
    just_completed = False
    if reached and goal.is_active:
        goal.is_active = False
        goal.completed_at = now or datetime.now(tz=timezone.utc)
        just_completed = True
        logger.info(
            "Goal %s completed for user %s: %s/%s", goal.id, goal.user_id, total, target
        )

    db.flush()

    return AggregateResult(
        goal_id=goal.id,
        total_progress=total,
        target_amount=target,
        is_completed=reached,
        just_completed=just_completed,
        is_active=goal.is_active,
    )
