"""
Goal reminder schemas.

POST /reminders/goals → SendRemindersRequest → SendRemindersResponse
GET  /reminders       → ReminderListResponse
"""
from typing import Optional
from pydantic import Field

from goalstreak.schemas.common import CamelModel, UserId


class SendRemindersRequest(CamelModel):
    user_id: Optional[UserId] = Field(
        default=None, description="Only check this user's goals. Omit for all users."
    )


class SentReminderOut(CamelModel):
    user_id: str
    goal_id: int
    goal_type: str
    title: str
    message: str
    urgency: str


class SendRemindersResponse(CamelModel):
    success: bool
    reminders_created: int
    reminders: list[SentReminderOut] = Field(description="First five reminders created.")
    total_goals_checked: int


class ReminderOut(CamelModel):
    id: int
    user_id: str
    goal_id: Optional[int] = None
    title: str
    message: str
    reminder_type: str
    urgency: str
    time: str
    is_active: bool
    created_at: str


class ReminderListResponse(CamelModel):
    total: int
    items: list[ReminderOut]
