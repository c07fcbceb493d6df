"""
Streaks router.

POST /streaks/update  — advance today's streak (update-streak)
GET  /streaks         — list a user's streak counters
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from goalstreak.core.clock import Clock, get_clock
from goalstreak.db.base import get_db
from goalstreak.schemas.streak import (
    StreakListResponse,
    StreakOut,
    UpdateStreakRequest,
    UpdateStreakResponse,
)
from goalstreak.services.streak_engine import advance, get_streaks

router = APIRouter(prefix="/streaks", tags=["streaks"])


@router.post(
    "/update",
    response_model=UpdateStreakResponse,
    summary="Advance a streak for today",
    responses={500: {"description": "Storage failure; safe to retry."}},
)
def update_streak(
    payload: UpdateStreakRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Called from the check-in flow on every completed check-in.

    - Same day as the last update → no change (`alreadyUpdatedToday`).
    - Day after the last update → streak + 1.
    - Any longer gap → streak restarts at 1 (`wasStreakReset` when it was > 0).

    `isPersonalBest` is set only when the previous best is strictly exceeded.
    """
    result = advance(db, clock, user_id=payload.user_id, streak_type=payload.streak_type)
    return UpdateStreakResponse(
        current_streak=result.current_streak,
        best_streak=result.best_streak,
        is_personal_best=result.is_personal_best,
        was_streak_reset=result.was_reset,
        already_updated_today=result.already_updated,
        message=result.message,
    )


@router.get(
    "",
    response_model=StreakListResponse,
    summary="List a user's streak counters",
)
def list_streaks(
    user_id: str = Query(..., min_length=1, description="Owning user identifier."),
    db: Session = Depends(get_db),
):
    return StreakListResponse(
        items=[
            StreakOut(
                streak_type=s.streak_type,
                current_count=s.current_count,
                best_count=s.best_count,
                last_updated=str(s.last_updated) if s.last_updated else None,
            )
            for s in get_streaks(db, user_id)
        ]
    )
