"""
Goal registry schemas.

POST /goals        → GoalCreateRequest → GoalResponse
GET  /goals        → GoalListResponse
GET  /goals/{id}   → GoalResponse
"""
from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import Field

from goalstreak.schemas.common import CamelModel, UserId


class ReminderFrequencyIn(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    never = "never"


class GoalCreateRequest(CamelModel):
    user_id: UserId
    goal_type: Annotated[str, Field(
        min_length=1,
        max_length=64,
        description="Enumerated or free-form goal kind.",
        examples=["gym_consistency", "smoking_cessation"],
    )]
    target_amount: Decimal = Field(ge=0, description="Amount to reach.", examples=[10])
    target_unit: Optional[str] = Field(default=None, max_length=32, examples=["sessions"])
    goal_description: Optional[str] = Field(default=None, max_length=2_000)
    start_date: Optional[date] = Field(
        default=None, description="Defaults to today in the server's calendar time zone."
    )
    end_date: Optional[date] = None
    duration_days: Optional[int] = Field(default=None, gt=0)
    reminder_frequency: ReminderFrequencyIn = ReminderFrequencyIn.daily


class GoalResponse(CamelModel):
    id: int
    user_id: str
    goal_type: str
    goal_description: Optional[str] = None
    target_amount: float
    current_amount: float
    target_unit: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    duration_days: Optional[int] = None
    is_active: bool
    completed_at: Optional[str] = None
    reminder_frequency: str
    last_reminder_sent: Optional[str] = None


class GoalListResponse(CamelModel):
    total: int
    items: list[GoalResponse]
