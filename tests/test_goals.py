"""
Tests for the goal registry and the calendar clock.
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from goalstreak.core.clock import Clock, FixedClock
from goalstreak.core.errors import GoalNotFoundError, InvalidArgumentError
from goalstreak.models.goal import ReminderFrequency
from goalstreak.services.goals import GoalDraft, create_goal, get_goal, list_goals


class TestCreateGoal:
    def test_defaults(self, db, clock, user_id):
        goal = create_goal(db, clock, GoalDraft(user_id=user_id, goal_type="meditation", target_amount=20))
        assert goal.start_date == clock.today()
        assert goal.end_date is None
        assert goal.duration_days is None
        assert Decimal(goal.current_amount) == Decimal("0")
        assert goal.is_active is True
        assert goal.reminder_frequency == ReminderFrequency.daily

    def test_duration_derives_end_date(self, db, clock, user_id):
        goal = create_goal(db, clock, GoalDraft(
            user_id=user_id, goal_type="meditation", target_amount=20, duration_days=14,
        ))
        assert goal.end_date == clock.today() + timedelta(days=14)

    def test_end_date_derives_duration(self, db, clock, user_id):
        goal = create_goal(db, clock, GoalDraft(
            user_id=user_id, goal_type="meditation", target_amount=20,
            start_date=date(2026, 3, 1), end_date=date(2026, 3, 8),
        ))
        assert goal.duration_days == 7

    def test_explicit_end_and_duration_are_kept(self, db, clock, user_id):
        goal = create_goal(db, clock, GoalDraft(
            user_id=user_id, goal_type="meditation", target_amount=20,
            end_date=clock.today() + timedelta(days=10), duration_days=30,
        ))
        assert goal.duration_days == 30
        assert goal.end_date == clock.today() + timedelta(days=10)

    @pytest.mark.parametrize("overrides,field", [
        ({"target_amount": -1}, "target_amount"),
        ({"target_amount": "ten"}, "target_amount"),
        ({"target_amount": float("inf")}, "target_amount"),
        ({"target_amount": "1e20"}, "target_amount"),
        ({"target_amount": "1.00001"}, "target_amount"),
        ({"duration_days": 0}, "duration_days"),
        ({"end_date": date(2026, 3, 1)}, "end_date"),
        ({"goal_type": ""}, "goal_type"),
    ])
    def test_invalid_drafts(self, db, clock, user_id, overrides, field):
        fields = {"user_id": user_id, "goal_type": "meditation", "target_amount": 20}
        fields.update(overrides)
        with pytest.raises(InvalidArgumentError) as exc_info:
            create_goal(db, clock, GoalDraft(**fields))
        assert exc_info.value.details["field"] == field


class TestLookup:
    def test_get_goal_is_scoped_to_owner(self, db, user_id, make_goal):
        goal = make_goal()
        assert get_goal(db, user_id, goal.id).id == goal.id
        with pytest.raises(GoalNotFoundError):
            get_goal(db, "someone-else", goal.id)

    def test_list_goals_filters_on_active(self, db, user_id, make_goal):
        active = make_goal()
        done = make_goal(is_active=False)
        assert {g.id for g in list_goals(db, user_id)} == {active.id, done.id}
        assert [g.id for g in list_goals(db, user_id, active=True)] == [active.id]
        assert [g.id for g in list_goals(db, user_id, active=False)] == [done.id]


class TestClock:
    def test_fixed_clock_moves_by_whole_days(self):
        clock = FixedClock(date(2026, 2, 28))
        assert clock.yesterday() == date(2026, 2, 27)
        assert clock.advance() == date(2026, 3, 1)
        assert clock.advance(3) == date(2026, 3, 4)
        assert clock.now().date() == date(2026, 3, 4)

    def test_clock_uses_configured_zone(self):
        clock = Clock("Pacific/Auckland")
        assert clock.now().tzinfo is not None
        assert clock.today() == clock.now().date()
        assert clock.yesterday() == clock.today() - timedelta(days=1)
