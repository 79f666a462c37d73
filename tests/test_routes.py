"""Endpoint tests through the FastAPI TestClient."""
from unittest.mock import patch

import stripe

from conftest import TEST_USER_ID


class TestCatalogEndpoints:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_list_workouts(self, client):
        data = client.get("/workouts").json()
        assert list(data) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Daily"]

    def test_workout_for_day(self, client):
        response = client.get("/workouts/monday")
        assert response.status_code == 200
        assert response.json()["name"] == "Chest & Triceps"

    def test_unknown_day_is_404(self, client):
        response = client.get("/workouts/saturday")
        assert response.status_code == 404
        assert response.json()["detail"] == "No workout found for this day"

    def test_today_on_a_rest_day(self, client):
        data = client.get("/workouts/today", params={"today": "2026-10-24"}).json()
        assert data["day"] == "Saturday"
        assert data["workout"] is None
        assert data["daily"]["name"] == "Before-Bed Routine"

    def test_week(self, client):
        data = client.get("/week", params={"today": "2026-10-21"}).json()
        assert len(data) == 7
        assert data[0]["date"] == "2026-10-19"
        assert data[0]["date_key"] == "Monday, October 19, 2026"
        assert [d["is_today"] for d in data].count(True) == 1
        assert data[2]["is_today"]


class TestLogEndpoints:

    def test_save_then_read_log(self, client):
        response = client.put("/logs/2026-10-21", json={
            "entries": [
                {"exercise_id": "Leg Press", "completed": True, "weights": ["100", "110", ""]},
                {"exercise_id": "Lunges", "completed": False, "weights": []},
            ],
        })
        assert response.status_code == 200
        record = response.json()
        assert record["date"] == "Wednesday, October 21, 2026"
        assert record["workout_day_id"] == "Wednesday"
        assert record["user_id"] == TEST_USER_ID
        assert record["completed_at"] is None

        data = client.get("/logs/2026-10-21").json()
        assert data["log"] == {
            "Leg Press": {"completed": True, "weights": ["100", "110", "0"]},
            "Lunges": {"completed": False, "weights": []},
        }

    def test_repeated_exercise_keeps_last_entry(self, client):
        response = client.put("/logs/2026-10-21", json={"entries": [
            {"exercise_id": "Lunges", "completed": False, "weights": ["20"]},
            {"exercise_id": "Lunges", "completed": True, "weights": ["25"]},
        ]})
        assert response.status_code == 200
        assert response.json()["completed_at"] is not None

        log = client.get("/logs/2026-10-21").json()["log"]
        assert log == {"Lunges": {"completed": True, "weights": ["25"]}}

    def test_unlogged_day_is_empty(self, client):
        data = client.get("/logs/2026-10-22").json()
        assert data == {"date": "Thursday, October 22, 2026", "log": {}}

    def test_invalid_date(self, client):
        assert client.get("/logs/not-a-date").status_code == 422

    def test_store_failure_returns_error_body(self, client, fake_supabase):
        fake_supabase.fail("workout_logs", "upsert")
        response = client.put("/logs/2026-10-21", json={"entries": []})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to save workout log"}

    def test_requires_authentication(self, unauthenticated_client):
        assert unauthenticated_client.get("/logs/2026-10-21").status_code == 401

    def test_weekly_progress(self, client):
        client.put("/logs/2026-10-19", json={"entries": [
            {"exercise_id": "Plank", "completed": True},
            {"exercise_id": "Shrugs", "completed": False},
        ]})

        data = client.get("/progress/weekly", params={"today": "2026-10-21"}).json()

        assert data["total_completed"] == 1
        assert data["weekly_target"] == 21
        assert data["target_ratio"] == 1 / 21
        assert [d["completed_count"] for d in data["days"]] == [1, 0, 0, 0, 0, 0, 0]
        assert data["days"][5]["route"] is None


class TestProfileEndpoints:

    def test_patch_writes_only_given_fields(self, client, fake_supabase):
        response = client.patch("/profile", json={"bio": "Leg day fan", "age": 31, "is_admin": True})
        assert response.status_code == 200

        row = fake_supabase.tables["user_profiles"][0]
        assert row["id"] == TEST_USER_ID
        assert row["bio"] == "Leg day fan"
        assert row["age"] == 31
        assert "is_admin" not in row
        assert "full_name" not in row

    def test_empty_patch_is_rejected(self, client):
        response = client.patch("/profile", json={})
        assert response.status_code == 400

    def test_get_missing_profile(self, client):
        assert client.get("/profile").status_code == 404

    def test_progress_entry(self, client, fake_supabase):
        response = client.post("/progress-entries", json={"weight_kg": 81.5})
        assert response.status_code == 200
        row = fake_supabase.tables["progress_tracking"][0]
        assert row["weight_kg"] == 81.5
        assert row["user_id"] == TEST_USER_ID
        assert "date" in row


class TestPaymentEndpoints:

    def test_create_checkout_session(self, client):
        response = client.post("/create-checkout-session", json={
            "amount": 4.99, "postId": "post-1", "userId": TEST_USER_ID, "userEmail": "a@b.co",
        })
        assert response.status_code == 200
        assert response.json() == {"sessionId": "cs_test_123"}

    def test_create_checkout_session_missing_fields(self, client):
        response = client.post("/create-checkout-session", json={"amount": 4.99})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required parameters"}

    def test_create_checkout_session_stripe_down(self, client, mock_stripe):
        mock_stripe.checkout.sessions.create.side_effect = stripe.StripeError("boom")
        response = client.post("/create-checkout-session", json={
            "amount": 4.99, "postId": "post-1", "userId": TEST_USER_ID,
        })
        assert response.status_code == 502
        assert response.json() == {"error": "Failed to create checkout session"}

    def test_pending_then_verify_twice(self, client, fake_supabase):
        assert client.post("/payments/pending", json={"postId": "post-1", "amount": 4.99}).status_code == 201

        body = {"sessionId": "cs_test_123", "postId": "post-1", "userId": TEST_USER_ID}
        assert client.post("/verify-payment", json=body).json() == {"status": "succeeded"}
        assert client.post("/verify-payment", json=body).json() == {"status": "succeeded"}

        assert fake_supabase.tables["premium_payments"][0]["status"] == "succeeded"
        assert client.get("/payments/purchased").json() == {"post_ids": ["post-1"]}

    def test_verify_missing_fields(self, client):
        response = client.post("/verify-payment", json={"postId": "post-1"})
        assert response.status_code == 400

    def test_cancel_pending(self, client, fake_supabase):
        client.post("/payments/pending", json={"postId": "post-1", "amount": 4.99})
        assert client.delete("/payments/pending/post-1").json() == {"deleted": True}
        assert fake_supabase.tables["premium_payments"] == []

    def test_webhook_completed(self, client, fake_supabase):
        client.post("/payments/pending", json={"postId": "post-1", "amount": 4.99})
        event = {
            "type": "checkout.session.completed",
            "data": {"object": {
                "id": "cs_test_123",
                "payment_intent": "pi_1",
                "metadata": {"post_id": "post-1", "user_id": TEST_USER_ID},
            }},
        }
        with patch("stripe.Webhook.construct_event", return_value=event):
            response = client.post("/webhooks/stripe", content=b"{}", headers={"stripe-signature": "t=1,v1=x"})

        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert fake_supabase.tables["premium_payments"][0]["status"] == "succeeded"

    def test_webhook_without_signature(self, client):
        response = client.post("/webhooks/stripe", content=b"{}")
        assert response.status_code == 400
        assert response.json() == {"error": "No signature provided"}

    def test_payments_unconfigured(self, test_settings, fake_supabase):
        from fastapi.testclient import TestClient
        from workout_tracker_api.main import create_app

        test_settings.STRIPE_SECRET_KEY = None
        client = TestClient(create_app(test_settings, supabase_client=fake_supabase))
        response = client.post("/verify-payment", json={"sessionId": "cs", "postId": "p", "userId": "u"})
        assert response.status_code == 502
        assert response.json() == {"error": "Payments not configured"}
