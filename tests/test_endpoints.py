"""
Integration tests for API endpoints using a file-backed SQLite DB.

Bodies use camelCase keys on the wire; the FixedClock from conftest is
shared with the app, so `clock.advance()` moves the server's "today".
"""
from datetime import timedelta
from decimal import Decimal


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["db"] == "ok"


class TestGoals:
    def test_create_goal_with_duration(self, client, user_id):
        r = client.post("/goals", json={
            "userId": user_id,
            "goalType": "gym_consistency",
            "targetAmount": 10,
            "targetUnit": "sessions",
            "durationDays": 30,
        })
        assert r.status_code == 201
        body = r.json()
        assert body["id"] > 0
        assert body["userId"] == user_id
        assert body["startDate"] == "2026-03-10"
        assert body["endDate"] == "2026-04-09"
        assert body["durationDays"] == 30
        assert body["currentAmount"] == 0.0
        assert body["isActive"] is True
        assert body["reminderFrequency"] == "daily"

    def test_create_goal_with_end_date_derives_duration(self, client, user_id):
        r = client.post("/goals", json={
            "userId": user_id,
            "goalType": "reading",
            "targetAmount": 12,
            "startDate": "2026-03-01",
            "endDate": "2026-03-31",
            "reminderFrequency": "weekly",
        })
        assert r.status_code == 201
        assert r.json()["durationDays"] == 30
        assert r.json()["reminderFrequency"] == "weekly"

    def test_end_before_start_is_rejected(self, client, user_id):
        r = client.post("/goals", json={
            "userId": user_id,
            "goalType": "reading",
            "targetAmount": 12,
            "startDate": "2026-03-10",
            "endDate": "2026-03-01",
        })
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_ARGUMENT"
        assert r.json()["details"]["field"] == "end_date"

    def test_negative_target_is_a_validation_error(self, client, user_id):
        r = client.post("/goals", json={"userId": user_id, "goalType": "x", "targetAmount": -1})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_list_and_filter(self, client, user_id, make_goal):
        make_goal()
        make_goal(is_active=False)
        r = client.get("/goals", params={"user_id": user_id})
        assert r.status_code == 200
        assert r.json()["total"] == 2

        r = client.get("/goals", params={"user_id": user_id, "active": "true"})
        assert r.json()["total"] == 1
        assert r.json()["items"][0]["isActive"] is True

    def test_get_goal_checks_ownership(self, client, user_id, make_goal):
        goal = make_goal()
        assert client.get(f"/goals/{goal.id}", params={"user_id": user_id}).status_code == 200

        r = client.get(f"/goals/{goal.id}", params={"user_id": "someone-else"})
        assert r.status_code == 404
        assert r.json()["code"] == "GOAL_NOT_FOUND"


class TestUpdateProgress:
    def test_worked_example(self, client, clock, user_id, make_goal):
        goal = make_goal(target_amount=Decimal("10"), target_unit="sessions")
        body = {"userId": user_id, "goalId": goal.id}

        client.post("/goals/progress", json={**body, "progressAmount": 3})
        clock.advance()
        client.post("/goals/progress", json={**body, "progressAmount": 4})
        r = client.post("/goals/progress", json={**body, "progressAmount": 5})
        assert r.status_code == 200
        assert r.json() == {
            "success": True,
            "totalProgress": 8.0,
            "isCompleted": False,
            "message": "Progress updated! Total: 8/10 sessions",
        }

        clock.advance()
        r = client.post("/goals/progress", json={**body, "progressAmount": 3})
        assert r.json()["totalProgress"] == 11.0
        assert r.json()["isCompleted"] is True

        r = client.get(f"/goals/{goal.id}", params={"user_id": user_id})
        assert r.json()["isActive"] is False
        assert r.json()["completedAt"] is not None

    def test_retry_does_not_double_count(self, client, user_id, make_goal):
        goal = make_goal()
        payload = {"userId": user_id, "goalId": goal.id, "progressAmount": 2, "notes": "retry"}
        first = client.post("/goals/progress", json=payload).json()
        second = client.post("/goals/progress", json=payload).json()
        assert first["totalProgress"] == second["totalProgress"] == 2.0

    def test_backdated_entry(self, client, clock, user_id, make_goal):
        goal = make_goal()
        r = client.post("/goals/progress", json={
            "userId": user_id,
            "goalId": goal.id,
            "progressAmount": 1.5,
            "recordedDate": str(clock.yesterday()),
        })
        assert r.status_code == 200
        assert r.json()["totalProgress"] == 1.5

    def test_negative_amount_is_invalid_argument(self, client, user_id, make_goal):
        goal = make_goal()
        r = client.post("/goals/progress", json={
            "userId": user_id, "goalId": goal.id, "progressAmount": -2,
        })
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_ARGUMENT"
        assert r.json()["details"]["field"] == "progress_amount"

    def test_oversized_amount_is_invalid_argument(self, client, user_id, make_goal):
        goal = make_goal(target_amount=Decimal("10"))
        r = client.post("/goals/progress", json={
            "userId": user_id, "goalId": goal.id, "progressAmount": 1e30,
        })
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_ARGUMENT"
        assert r.json()["details"]["field"] == "progress_amount"

    def test_non_numeric_amount_is_validation_error(self, client, user_id, make_goal):
        goal = make_goal()
        r = client.post("/goals/progress", json={
            "userId": user_id, "goalId": goal.id, "progressAmount": "lots",
        })
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_goal(self, client, user_id):
        r = client.post("/goals/progress", json={
            "userId": user_id, "goalId": 99_999_999, "progressAmount": 1,
        })
        assert r.status_code == 404
        assert r.json()["code"] == "GOAL_NOT_FOUND"


class TestDeadlinesAndDashboard:
    def test_check_deadlines(self, client, clock, user_id, make_goal):
        make_goal(
            end_date=clock.today() - timedelta(days=1),
            duration_days=30,
            current_amount=Decimal("4"),
        )
        r = client.post("/goals/deadlines", json={"userId": user_id})
        assert r.status_code == 200
        body = r.json()
        assert body["totalGoals"] == 1
        [note] = body["notifications"]
        assert note["type"] == "overdue"
        assert note["daysRemaining"] == -1
        assert note["progressPercentage"] == 40.0
        assert note["goalType"] == "gym_consistency"

    def test_dashboard(self, client, clock, user_id, make_goal):
        client.post("/goals", json={
            "userId": user_id,
            "goalType": "hydration",
            "goalDescription": "Drink water",
            "targetAmount": 0,
            "targetUnit": "glasses",
        })
        make_goal(end_date=clock.today() - timedelta(days=2))
        r = client.post("/goals/dashboard", json={"userId": user_id})
        assert r.status_code == 200
        body = r.json()
        assert body["totalActiveGoals"] == 2
        assert body["completedGoals"] == 1
        assert body["overdueGoals"] == 1
        first = body["goals"][0]
        assert first["description"] == "Drink water"
        assert first["progressPercentage"] == 100.0
        assert first["progress"] == 0.0
        assert first["unit"] == "glasses"
        assert first["daysRemaining"] is None

    def test_missing_user_id(self, client):
        r = client.post("/goals/deadlines", json={})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


class TestStreaks:
    def test_update_sequence(self, client, clock, user_id):
        r = client.post("/streaks/update", json={"userId": user_id})
        assert r.status_code == 200
        assert r.json()["currentStreak"] == 1
        assert r.json()["isPersonalBest"] is True

        again = client.post("/streaks/update", json={"userId": user_id}).json()
        assert again["alreadyUpdatedToday"] is True
        assert again["currentStreak"] == 1
        assert again["isPersonalBest"] is False

        clock.advance()
        day2 = client.post("/streaks/update", json={"userId": user_id}).json()
        assert (day2["currentStreak"], day2["bestStreak"]) == (2, 2)

        clock.advance(2)
        day4 = client.post("/streaks/update", json={"userId": user_id}).json()
        assert day4["currentStreak"] == 1
        assert day4["bestStreak"] == 2
        assert day4["wasStreakReset"] is True
        assert day4["isPersonalBest"] is False

    def test_list_streaks(self, client, user_id):
        client.post("/streaks/update", json={"userId": user_id, "streakType": "workout"})
        r = client.get("/streaks", params={"user_id": user_id})
        assert r.status_code == 200
        [item] = r.json()["items"]
        assert item["streakType"] == "workout"
        assert item["currentCount"] == 1
        assert item["lastUpdated"] == "2026-03-10"

    def test_blank_user_id_rejected(self, client):
        r = client.post("/streaks/update", json={"userId": "   "})
        assert r.status_code == 422


class TestReminders:
    def test_send_and_list(self, client, clock, user_id, make_goal):
        goal = make_goal(end_date=clock.today() + timedelta(days=1), duration_days=30)
        r = client.post("/reminders/goals", json={"userId": user_id})
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["remindersCreated"] == 1
        assert body["totalGoalsChecked"] == 1
        assert body["reminders"][0]["goalId"] == goal.id
        assert body["reminders"][0]["urgency"] == "high"

        r = client.get("/reminders", params={"user_id": user_id})
        assert r.status_code == 200
        assert r.json()["total"] == 1
        item = r.json()["items"][0]
        assert item["time"] == "09:00"
        assert item["reminderType"] == "goal_progress"

    def test_rerun_same_day(self, client, clock, user_id, make_goal):
        make_goal(end_date=clock.today() + timedelta(days=1))
        client.post("/reminders/goals", json={"userId": user_id})
        r = client.post("/reminders/goals", json={"userId": user_id})
        assert r.json()["remindersCreated"] == 0

    def test_list_limit_bounds(self, client, user_id):
        r = client.get("/reminders", params={"user_id": user_id, "limit": 0})
        assert r.status_code == 422
