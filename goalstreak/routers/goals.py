"""
Goals router.

POST /goals              — create a goal
GET  /goals              — list a user's goals
GET  /goals/{goal_id}    — fetch one goal (ownership-checked)
POST /goals/progress     — record today's progress (updateProgress)
POST /goals/deadlines    — deadline notifications (checkDeadlines)
POST /goals/dashboard    — per-goal progress summary (getDashboardData)
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from goalstreak.core.clock import Clock, get_clock
from goalstreak.db.base import get_db
from goalstreak.models.goal import Goal
from goalstreak.schemas.common import UserRequest
from goalstreak.schemas.goal import GoalCreateRequest, GoalListResponse, GoalResponse
from goalstreak.schemas.progress import (
    CheckDeadlinesResponse,
    DashboardGoalOut,
    DashboardResponse,
    NotificationOut,
    UpdateProgressRequest,
    UpdateProgressResponse,
)
from goalstreak.services.deadline_notifier import check_deadlines, get_dashboard_data
from goalstreak.services.goals import GoalDraft, create_goal, get_goal, list_goals
from goalstreak.services.progress_ledger import record_progress

router = APIRouter(prefix="/goals", tags=["goals"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _ev(v) -> str:
    """Extract bare string value from a str-enum or plain str."""
    return v.value if hasattr(v, "value") else str(v)


def _goal_to_response(goal: Goal) -> GoalResponse:
    return GoalResponse(
        id=goal.id,
        user_id=goal.user_id,
        goal_type=goal.goal_type,
        goal_description=goal.goal_description,
        target_amount=float(goal.target_amount),
        current_amount=float(goal.current_amount or 0),
        target_unit=goal.target_unit,
        start_date=str(goal.start_date) if goal.start_date else None,
        end_date=str(goal.end_date) if goal.end_date else None,
        duration_days=goal.duration_days,
        is_active=goal.is_active,
        completed_at=goal.completed_at.isoformat() if goal.completed_at else None,
        reminder_frequency=_ev(goal.reminder_frequency),
        last_reminder_sent=(
            goal.last_reminder_sent.isoformat() if goal.last_reminder_sent else None
        ),
    )


# ---------------------------------------------------------------------------
# Goal registry
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a goal",
    responses={
        400: {"description": "Invalid target or timeline."},
        422: {"description": "Validation error."},
    },
)
def create_goal_endpoint(
    payload: GoalCreateRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Create an active goal. When only `durationDays` is given the end date is
    derived from the start date; when only `endDate` is given the duration is
    derived from the dates.
    """
    goal = create_goal(db, clock, GoalDraft(
        user_id=payload.user_id,
        goal_type=payload.goal_type,
        target_amount=payload.target_amount,
        target_unit=payload.target_unit,
        goal_description=payload.goal_description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        duration_days=payload.duration_days,
        reminder_frequency=_ev(payload.reminder_frequency),
    ))
    return _goal_to_response(goal)


@router.get(
    "",
    response_model=GoalListResponse,
    summary="List a user's goals (newest first)",
)
def list_goals_endpoint(
    user_id: str = Query(..., min_length=1, description="Owning user identifier."),
    active: Optional[bool] = Query(default=None, description="Filter on is_active. Omit for all."),
    db: Session = Depends(get_db),
):
    goals = list_goals(db, user_id=user_id, active=active)
    return GoalListResponse(total=len(goals), items=[_goal_to_response(g) for g in goals])


@router.get(
    "/{goal_id}",
    response_model=GoalResponse,
    summary="Fetch a single goal",
    responses={404: {"description": "Goal does not exist or is not owned by the user."}},
)
def get_goal_endpoint(
    goal_id: int,
    user_id: str = Query(..., min_length=1, description="Owning user identifier."),
    db: Session = Depends(get_db),
):
    return _goal_to_response(get_goal(db, user_id=user_id, goal_id=goal_id))


# ---------------------------------------------------------------------------
# POST /goals/progress  (updateProgress)
# ---------------------------------------------------------------------------

@router.post(
    "/progress",
    response_model=UpdateProgressResponse,
    summary="Record a day's progress toward a goal",
    responses={
        400: {"description": "progressAmount is not a finite, allowed number."},
        404: {"description": "Goal does not exist or is not owned by the user."},
        500: {"description": "Storage failure; safe to retry."},
    },
)
def update_progress(
    payload: UpdateProgressRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Upsert the progress entry for (goalId, day), recompute the goal's total
    from every entry, and mark the goal completed when the total reaches the
    target.

    Re-sending on the same day **overwrites** that day's amount, so retries
    never double count.
    """
    result = record_progress(
        db,
        clock,
        user_id=payload.user_id,
        goal_id=payload.goal_id,
        amount=payload.progress_amount,
        notes=payload.notes,
        recorded_date=payload.recorded_date,
    )
    return UpdateProgressResponse(
        success=True,
        total_progress=float(result.aggregate.total_progress),
        is_completed=result.aggregate.is_completed,
        message=result.message,
    )


# ---------------------------------------------------------------------------
# POST /goals/deadlines  (checkDeadlines)
# ---------------------------------------------------------------------------

@router.post(
    "/deadlines",
    response_model=CheckDeadlinesResponse,
    summary="Deadline notifications for a user's active goals",
)
def check_deadlines_endpoint(
    payload: UserRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Classify each active goal with an end date:

    | Type | Trigger |
    |---|---|
    | `overdue` | days remaining ≤ 0 |
    | `urgent`  | days remaining ≤ 3 |
    | `behind`  | progress < expected pace − 20 points |
    | `ahead`   | progress > expected pace + 10 points |

    Read-only; goals on track produce no notification.
    """
    report = check_deadlines(db, clock, payload.user_id)
    return CheckDeadlinesResponse(
        notifications=[
            NotificationOut(
                goal_id=n.goal_id,
                goal_type=n.goal_type,
                type=n.type,
                message=n.message,
                days_remaining=n.days_remaining,
                progress_percentage=n.progress_percentage,
            )
            for n in report.notifications
        ],
        total_goals=report.total_goals,
    )


# ---------------------------------------------------------------------------
# POST /goals/dashboard  (getDashboardData)
# ---------------------------------------------------------------------------

@router.post(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Progress summary for a user's active goals",
)
def dashboard_endpoint(
    payload: UserRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    data = get_dashboard_data(db, clock, payload.user_id)
    return DashboardResponse(
        goals=[
            DashboardGoalOut(
                id=g.id,
                goal_type=g.goal_type,
                description=g.description,
                progress=float(g.progress),
                target=float(g.target),
                progress_percentage=g.progress_percentage,
                days_remaining=g.days_remaining,
                is_overdue=g.is_overdue,
                unit=g.unit,
            )
            for g in data.goals
        ],
        total_active_goals=data.total_active_goals,
        completed_goals=data.completed_goals,
        overdue_goals=data.overdue_goals,
    )
