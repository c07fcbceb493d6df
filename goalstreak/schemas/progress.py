"""
Goal progress schemas.

POST /goals/progress     → UpdateProgressRequest → UpdateProgressResponse
POST /goals/deadlines    → UserRequest           → CheckDeadlinesResponse
POST /goals/dashboard    → UserRequest           → DashboardResponse
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from goalstreak.schemas.common import CamelModel, UserId


class UpdateProgressRequest(CamelModel):
    user_id: UserId
    goal_id: int = Field(description="Goal owned by user_id.")
    progress_amount: Decimal = Field(
        description="Amount contributed on the recorded day. Overwrites any earlier value for that day.",
        examples=[3],
    )
    notes: Optional[str] = Field(default=None, max_length=2_000)
    recorded_date: Optional[date] = Field(
        default=None,
        description="Calendar day of the contribution. Defaults to today.",
        examples=["2026-02-20"],
    )


class UpdateProgressResponse(CamelModel):
    success: bool
    total_progress: float
    is_completed: bool
    message: str


class NotificationOut(CamelModel):
    goal_id: int
    goal_type: str
    type: str = Field(description='"overdue" | "urgent" | "behind" | "ahead"')
    message: str
    days_remaining: int
    progress_percentage: float


class CheckDeadlinesResponse(CamelModel):
    notifications: list[NotificationOut]
    total_goals: int = Field(description="Active goals with an end date that were evaluated.")


class DashboardGoalOut(CamelModel):
    id: int
    goal_type: str
    description: Optional[str] = None
    progress: float
    target: float
    progress_percentage: float = Field(description="Capped at 100.")
    days_remaining: Optional[int] = None
    is_overdue: bool
    unit: Optional[str] = None


class DashboardResponse(CamelModel):
    goals: list[DashboardGoalOut]
    total_active_goals: int
    completed_goals: int
    overdue_goals: int
