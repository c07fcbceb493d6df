"""
Streak schemas.

POST /streaks/update → UpdateStreakRequest → UpdateStreakResponse
GET  /streaks        → StreakListResponse
"""
from typing import Annotated, Optional
from pydantic import Field

from goalstreak.schemas.common import CamelModel, UserId


class UpdateStreakRequest(CamelModel):
    user_id: UserId
    streak_type: Annotated[str, Field(
        min_length=1,
        max_length=64,
        description="Streak counter to advance.",
        examples=["daily_checkin"],
    )] = "daily_checkin"


class UpdateStreakResponse(CamelModel):
    current_streak: int
    best_streak: int
    is_personal_best: bool = Field(description="True only when the previous best was strictly exceeded.")
    was_streak_reset: bool = Field(description="True when a missed day reset a non-zero streak.")
    already_updated_today: bool
    message: str


class StreakOut(CamelModel):
    streak_type: str
    current_count: int
    best_count: int
    last_updated: Optional[str] = None


class StreakListResponse(CamelModel):
    items: list[StreakOut]
