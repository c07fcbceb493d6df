"""
Tests for the Streak Engine.

Covered scenarios:
  A) first advance         — row created, 1/1, personal best
  B) continuation          — yesterday → N + 1, no reset
  C) reset                 — gap of 2+ days → 1, was_reset when prior > 0
  D) same-day no-op        — repeated calls return identical results, no write
  E) personal best strict  — tying the previous best is not a new best
  F) worked example        — day 1, day 2, skip, day 4

Additional:
  - best_count >= current_count after every write
  - NULL last_updated resets without flagging was_reset for a zero count
  - future last_updated (time zone change) is a no-op
  - streak types are independent
"""
from __future__ import annotations

from datetime import timedelta

import pytest

from goalstreak.core.errors import InvalidArgumentError
from goalstreak.models.streak import Streak
from goalstreak.services.streak_engine import (
    StreakType,
    Transition,
    advance,
    get_streaks,
    next_count,
)


def _seed(db, user_id: str, current: int, best: int, last_updated, streak_type=StreakType.DAILY_CHECKIN):
    row = Streak(
        user_id=user_id,
        streak_type=streak_type,
        current_count=current,
        best_count=best,
        last_updated=last_updated,
    )
    db.add(row)
    db.commit()
    return row


def _row(db, user_id: str, streak_type=StreakType.DAILY_CHECKIN) -> Streak:
    db.expire_all()
    return (
        db.query(Streak)
        .filter(Streak.user_id == user_id, Streak.streak_type == streak_type)
        .one()
    )


# ---------------------------------------------------------------------------
# Pure transition function
# ---------------------------------------------------------------------------

class TestNextCount:

    def test_same_day_is_noop(self, clock):
        assert next_count(4, clock.today(), clock.today(), clock.yesterday()) == (4, Transition.NOOP)

    def test_yesterday_continues(self, clock):
        assert next_count(4, clock.yesterday(), clock.today(), clock.yesterday()) == (5, Transition.CONTINUED)

    def test_two_days_ago_resets(self, clock):
        two_ago = clock.today() - timedelta(days=2)
        assert next_count(4, two_ago, clock.today(), clock.yesterday()) == (1, Transition.RESET)

    def test_missing_last_updated_resets(self, clock):
        assert next_count(0, None, clock.today(), clock.yesterday()) == (1, Transition.RESET)

    def test_future_last_updated_is_noop(self, clock):
        tomorrow = clock.today() + timedelta(days=1)
        assert next_count(3, tomorrow, clock.today(), clock.yesterday()) == (3, Transition.NOOP)


# ---------------------------------------------------------------------------
# advance() against the database
# ---------------------------------------------------------------------------

class TestFirstAdvance:

    def test_creates_row_with_personal_best(self, db, clock, user_id):
        result = advance(db, clock, user_id, StreakType.DAILY_CHECKIN)
        assert result.current_streak == 1
        assert result.best_streak == 1
        assert result.is_personal_best is True
        assert result.was_reset is False
        assert result.transition == Transition.CREATED

        row = _row(db, user_id)
        assert row.current_count == 1
        assert row.best_count == 1
        assert row.last_updated == clock.today()

    def test_first_message_is_not_a_reset_message(self, db, clock, user_id):
        result = advance(db, clock, user_id)
        assert "First check-in" in result.message
        assert "reset" not in result.message.lower()


class TestContinuation:

    def test_yesterday_increments(self, db, clock, user_id):
        _seed(db, user_id, current=6, best=9, last_updated=clock.yesterday())
        result = advance(db, clock, user_id)
        assert result.current_streak == 7
        assert result.best_streak == 9
        assert result.was_reset is False
        assert result.is_personal_best is False
        assert _row(db, user_id).last_updated == clock.today()

    def test_new_best_when_strictly_exceeding(self, db, clock, user_id):
        _seed(db, user_id, current=9, best=9, last_updated=clock.yesterday())
        result = advance(db, clock, user_id)
        assert result.current_streak == 10
        assert result.best_streak == 10
        assert result.is_personal_best is True
        assert "personal best" in result.message.lower()

    def test_tying_previous_best_is_not_flagged(self, db, clock, user_id):
        _seed(db, user_id, current=4, best=5, last_updated=clock.yesterday())
        result = advance(db, clock, user_id)
        assert result.current_streak == 5
        assert result.best_streak == 5
        assert result.is_personal_best is False


class TestReset:

    @pytest.mark.parametrize("gap", [2, 3, 30])
    def test_gap_resets_to_one(self, db, clock, user_id, gap):
        _seed(db, user_id, current=5, best=8, last_updated=clock.today() - timedelta(days=gap))
        result = advance(db, clock, user_id)
        assert result.current_streak == 1
        assert result.best_streak == 8
        assert result.was_reset is True
        assert result.is_personal_best is False
        assert "reset" in result.message.lower()

        row = _row(db, user_id)
        assert row.current_count == 1
        assert row.best_count == 8
        assert row.last_updated == clock.today()

    def test_null_last_updated_with_zero_count_is_not_a_reset(self, db, clock, user_id):
        _seed(db, user_id, current=0, best=0, last_updated=None)
        result = advance(db, clock, user_id)
        assert result.current_streak == 1
        assert result.was_reset is False
        assert result.is_personal_best is True

    def test_null_last_updated_with_count_flags_reset(self, db, clock, user_id):
        _seed(db, user_id, current=3, best=3, last_updated=None)
        result = advance(db, clock, user_id)
        assert result.current_streak == 1
        assert result.was_reset is True


class TestSameDayNoop:

    def test_repeated_calls_are_identical(self, db, clock, user_id):
        _seed(db, user_id, current=2, best=2, last_updated=clock.yesterday())
        first = advance(db, clock, user_id)
        second = advance(db, clock, user_id)
        third = advance(db, clock, user_id)
        assert first.current_streak == 3
        assert second.current_streak == third.current_streak == 3
        assert second.best_streak == third.best_streak == 3
        assert second.is_personal_best is False
        assert second.was_reset is False
        assert second.already_updated is True
        assert _row(db, user_id).current_count == 3

    def test_noop_when_already_updated_today(self, db, clock, user_id):
        _seed(db, user_id, current=4, best=7, last_updated=clock.today())
        a = advance(db, clock, user_id)
        b = advance(db, clock, user_id)
        assert (a.current_streak, a.best_streak, a.is_personal_best, a.was_reset) == (4, 7, False, False)
        assert (b.current_streak, b.best_streak, b.is_personal_best, b.was_reset) == (4, 7, False, False)
        assert "Already checked in" in a.message


class TestWorkedExample:

    def test_day1_day2_skip_day4(self, db, clock, user_id):
        day1 = advance(db, clock, user_id, "daily_checkin")
        assert (day1.current_streak, day1.best_streak, day1.is_personal_best) == (1, 1, True)

        clock.advance()
        day2 = advance(db, clock, user_id, "daily_checkin")
        assert (day2.current_streak, day2.best_streak, day2.is_personal_best) == (2, 2, True)

        clock.advance(2)   # skip day 3
        day4 = advance(db, clock, user_id, "daily_checkin")
        assert day4.current_streak == 1
        assert day4.best_streak == 2
        assert day4.is_personal_best is False
        assert day4.was_reset is True

    def test_best_never_below_current(self, db, clock, user_id):
        for step in [1, 1, 1, 3, 1, 1, 1, 1, 5, 1]:
            clock.advance(step)
            advance(db, clock, user_id)
            row = _row(db, user_id)
            assert row.best_count >= row.current_count


class TestStreakTypes:

    def test_types_are_independent(self, db, clock, user_id):
        advance(db, clock, user_id, "daily_checkin")
        clock.advance()
        advance(db, clock, user_id, "daily_checkin")
        workout = advance(db, clock, user_id, "workout")
        assert workout.current_streak == 1
        assert _row(db, user_id, "daily_checkin").current_count == 2

    def test_get_streaks_lists_all_types(self, db, clock, user_id):
        advance(db, clock, user_id, "workout")
        advance(db, clock, user_id, "daily_checkin")
        assert [s.streak_type for s in get_streaks(db, user_id)] == ["daily_checkin", "workout"]

    def test_blank_streak_type_rejected(self, db, clock, user_id):
        with pytest.raises(InvalidArgumentError):
            advance(db, clock, user_id, "")
