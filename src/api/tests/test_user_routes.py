"""Tests for the /user API routes."""

import unittest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import patch

from fastapi import HTTPException
from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_order_data, get_user_repo
from api.models import UserResponse
from api.security import get_current_user_required
from adapter.fake.order_data import FakeOrderDataAdapter
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import NotFoundError, StoreUnavailableError
from domain.model.user import ActivityEntry, User, UserStats
from services import user_service

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
USER_ID = "user123"


class UserRoutesTestCase(unittest.TestCase):
    """Authenticated client with fake repositories for user123."""

    def setUp(self):
        self.client = TestClient(app)
        self.repo = FakeUserRepository()
        self.orders = FakeOrderDataAdapter()
        self.user = User(
            id=USER_ID,
            email="user@example.com",
            password_hash="$2b$12$hashedpassword",
            created_at=NOW,
            updated_at=NOW,
            last_login_date=NOW,
        )
        self.repo.store[USER_ID] = self.user

        app.dependency_overrides[get_current_user_required] = lambda: UserResponse.from_domain(self.user)
        app.dependency_overrides[get_user_repo] = lambda: self.repo
        app.dependency_overrides[get_order_data] = lambda: self.orders

    def tearDown(self):
        app.dependency_overrides.clear()


class TestAuthentication(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_endpoints_require_authentication(self):
        def mock_auth_fail():
            raise HTTPException(status_code=401, detail="Not authenticated")

        app.dependency_overrides[get_current_user_required] = mock_auth_fail
        app.dependency_overrides[get_user_repo] = FakeUserRepository
        app.dependency_overrides[get_order_data] = FakeOrderDataAdapter

        self.assertEqual(self.client.get("/user/stats").status_code, 401)
        self.assertEqual(self.client.post("/user/update-preferences", json={"theme": "dark"}).status_code, 401)
        self.assertEqual(self.client.get(f"/user/activity/{USER_ID}").status_code, 401)


class TestGetUserStats(UserRoutesTestCase):
    """Tests for GET /user/stats."""

    def test_returns_service_result_unwrapped(self):
        stats = UserStats(total_orders=10, recent_activity=[], account_balance=Decimal("100.50"))

        with patch.object(user_service, "get_user_stats", return_value=stats) as mock_stats:
            response = self.client.get("/user/stats")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"totalOrders": 10, "recentActivity": [], "accountBalance": 100.5})
        mock_stats.assert_called_once_with(self.repo, self.orders, USER_ID)

    def test_stats_from_repositories(self):
        self.orders.orders[USER_ID] = 3
        self.orders.balances[USER_ID] = Decimal("42.00")
        self.repo.append_activity(USER_ID, ActivityEntry("e1", "login", NOW))

        response = self.client.get("/user/stats")

        data = response.json()
        self.assertEqual(data["totalOrders"], 3)
        self.assertEqual(data["accountBalance"], 42.0)
        self.assertEqual(data["recentActivity"][0]["id"], "e1")
        self.assertEqual(data["recentActivity"][0]["action"], "login")
        self.assertNotIn("details", data["recentActivity"][0])

    def test_error_message_hides_cause(self):
        with patch.object(user_service, "get_user_stats", side_effect=Exception("Database error")):
            response = self.client.get("/user/stats")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": "Failed to fetch user statistics"})
        self.assertNotIn("Database error", response.text)

    def test_store_unavailable_is_500_with_fixed_message(self):
        with patch.object(user_service, "get_user_stats", side_effect=StoreUnavailableError("no primary")):
            response = self.client.get("/user/stats")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "Failed to fetch user statistics")


class TestUpdatePreferences(UserRoutesTestCase):
    """Tests for POST /user/update-preferences."""

    def test_update_preferences(self):
        response = self.client.post(
            f"/user/update-preferences?userId={USER_ID}",
            json={"theme": "dark", "notifications": True},
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["user"]["id"], USER_ID)
        self.assertEqual(data["user"]["preferences"], {"theme": "dark", "notifications": True})
        self.assertEqual(self.repo.get_by_id(USER_ID).preferences, {"theme": "dark", "notifications": True})

    def test_response_never_includes_password_hash(self):
        response = self.client.post("/user/update-preferences", json={"theme": "dark"})

        user = response.json()["user"]
        self.assertNotIn("passwordHash", user)
        self.assertNotIn("password_hash", user)
        self.assertIn("isVerified", user)
        self.assertIn("lastLoginDate", user)

    def test_user_id_defaults_to_current_user(self):
        with patch.object(user_service, "update_preferences", return_value=self.user) as mock_update:
            self.client.post("/user/update-preferences", json={"theme": "dark", "notifications": True})

        mock_update.assert_called_once_with(self.repo, USER_ID, {"theme": "dark", "notifications": True})

    def test_error_message_hides_cause(self):
        with patch.object(user_service, "update_preferences", side_effect=Exception("Update failed")):
            response = self.client.post("/user/update-preferences", json={"theme": "dark"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": "Failed to update user preferences"})

    def test_unknown_user_is_404(self):
        with patch.object(user_service, "update_preferences", side_effect=NotFoundError("User x not found")):
            response = self.client.post("/user/update-preferences", json={"theme": "dark"})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"detail": "Failed to update user preferences"})

    def test_invalid_preferences_is_400(self):
        response = self.client.post("/user/update-preferences", json={"fontSize": 14})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "Failed to update user preferences"})
        self.assertEqual(self.repo.get_by_id(USER_ID).preferences, {})

    def test_non_object_body_is_400(self):
        response = self.client.post("/user/update-preferences", json=["theme"])

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "Failed to update user preferences"})

    def test_malformed_json_is_400(self):
        response = self.client.post(
            "/user/update-preferences",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "Failed to update user preferences"})

    def test_other_users_preferences_are_forbidden(self):
        response = self.client.post("/user/update-preferences?userId=someone-else", json={"theme": "dark"})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"detail": "Failed to update user preferences"})


class TestGetUserActivity(UserRoutesTestCase):
    """Tests for GET /user/activity/{user_id}."""

    def test_returns_service_order(self):
        activity = [
            ActivityEntry("e1", "login", NOW),
            ActivityEntry("e2", "purchase", NOW),
        ]

        with patch.object(user_service, "get_user_activity", return_value=activity) as mock_activity:
            response = self.client.get(f"/user/activity/{USER_ID}")

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["success"])
        self.assertEqual([e["action"] for e in data["activity"]], ["login", "purchase"])
        mock_activity.assert_called_once_with(self.repo, USER_ID)

    def test_empty_log(self):
        response = self.client.get(f"/user/activity/{USER_ID}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "activity": []})

    def test_error_message_hides_cause(self):
        with patch.object(user_service, "get_user_activity", side_effect=Exception("Fetch failed")):
            response = self.client.get(f"/user/activity/{USER_ID}")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": "Failed to fetch user activity"})

    def test_other_users_activity_is_forbidden(self):
        response = self.client.get("/user/activity/someone-else")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"detail": "Failed to fetch user activity"})


class TestRecordActivity(UserRoutesTestCase):
    """Tests for POST /user/activity/{user_id}."""

    def test_appends_entry(self):
        response = self.client.post(
            f"/user/activity/{USER_ID}",
            json={"action": "purchase", "details": {"orderId": "o-1"}},
        )

        self.assertEqual(response.status_code, 201)
        entry = response.json()["entry"]
        self.assertEqual(entry["action"], "purchase")
        self.assertEqual(entry["details"], {"orderId": "o-1"})
        self.assertEqual(len(self.repo.get_by_id(USER_ID).activity_log), 1)

    def test_blank_action_is_400(self):
        response = self.client.post(f"/user/activity/{USER_ID}", json={"action": " "})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "Failed to record user activity"})

    def test_over_long_action_is_400(self):
        response = self.client.post(f"/user/activity/{USER_ID}", json={"action": "x" * 101})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "Failed to record user activity"})
        self.assertEqual(self.repo.get_by_id(USER_ID).activity_log, [])

    def test_missing_action_is_400(self):
        response = self.client.post(f"/user/activity/{USER_ID}", json={"details": {}})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "Failed to record user activity"})


class TestStoreUnavailable(unittest.TestCase):
    """Every endpoint answers with its fixed message while MongoDB is unreachable."""

    def setUp(self):
        self.client = TestClient(app)
        user = User(
            id=USER_ID, email="user@example.com", password_hash="hash",
            created_at=NOW, updated_at=NOW, last_login_date=NOW,
        )
        app.dependency_overrides[get_current_user_required] = lambda: UserResponse.from_domain(user)
        patcher = patch("api.dependencies.get_mongodb_client", return_value=None)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _assert_fixed_failure(self, response, message):
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": message})

    def test_stats(self):
        self._assert_fixed_failure(self.client.get("/user/stats"), "Failed to fetch user statistics")

    def test_update_preferences(self):
        response = self.client.post("/user/update-preferences", json={"theme": "dark"})
        self._assert_fixed_failure(response, "Failed to update user preferences")

    def test_get_activity(self):
        self._assert_fixed_failure(self.client.get(f"/user/activity/{USER_ID}"), "Failed to fetch user activity")

    def test_record_activity(self):
        response = self.client.post(f"/user/activity/{USER_ID}", json={"action": "login"})
        self._assert_fixed_failure(response, "Failed to record user activity")


if __name__ == "__main__":
    unittest.main()
