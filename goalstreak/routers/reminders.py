"""
Reminders router.

POST /reminders/goals  — run the goal reminder pass (optionally for one user)
GET  /reminders        — list a user's reminders (paginated, newest first)
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from goalstreak.core.clock import Clock, get_clock
from goalstreak.db.base import get_db
from goalstreak.models.reminder import Reminder
from goalstreak.schemas.reminder import (
    ReminderListResponse,
    ReminderOut,
    SendRemindersRequest,
    SendRemindersResponse,
    SentReminderOut,
)
from goalstreak.services.goal_reminders import get_reminders, send_goal_reminders

router = APIRouter(prefix="/reminders", tags=["reminders"])

_PREVIEW_SIZE = 5


def _reminder_to_response(r: Reminder) -> ReminderOut:
    return ReminderOut(
        id=r.id,
        user_id=r.user_id,
        goal_id=r.goal_id,
        title=r.title,
        message=r.message,
        reminder_type=r.reminder_type,
        urgency=r.urgency,
        time=r.time.strftime("%H:%M") if r.time else "",
        is_active=r.is_active,
        created_at=r.created_at.isoformat() if r.created_at else "",
    )


@router.post(
    "/goals",
    response_model=SendRemindersResponse,
    summary="Generate goal reminders",
)
def send_reminders(
    payload: SendRemindersRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Create reminders for active goals with a deadline, honouring each goal's
    `reminder_frequency`. Intended for a scheduler; re-running on the same day
    does not duplicate reminders for goals already reminded.
    """
    result = send_goal_reminders(db, clock, user_id=payload.user_id)
    return SendRemindersResponse(
        success=True,
        reminders_created=result.reminders_created,
        reminders=[
            SentReminderOut(
                user_id=r.user_id,
                goal_id=r.goal_id,
                goal_type=r.goal_type,
                title=r.title,
                message=r.message,
                urgency=r.urgency,
            )
            for r in result.reminders[:_PREVIEW_SIZE]
        ],
        total_goals_checked=result.total_goals_checked,
    )


@router.get(
    "",
    response_model=ReminderListResponse,
    summary="List a user's reminders (newest first)",
)
def list_reminders(
    user_id: str = Query(..., min_length=1, description="Owning user identifier."),
    limit: int = Query(default=50, ge=1, le=200, description="Page size."),
    offset: int = Query(default=0, ge=0, description="Skip N items."),
    db: Session = Depends(get_db),
):
    total, items = get_reminders(db, user_id=user_id, limit=limit, offset=offset)
    return ReminderListResponse(
        total=total,
        items=[_reminder_to_response(r) for r in items],
    )
