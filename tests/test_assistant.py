# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import date, datetime, timedelta, timezone

import httpx
from fastapi.testclient import TestClient

from caloric.api import app
from caloric.assistant.api import get_assistant_client
from caloric.assistant.context import build_user_context
from caloric.auth.security import get_store_settings, get_store_transport
from caloric.food_log.models import FoodEntry
from caloric.llm import ChatCompletionClient
from caloric.profiles.models import Profile

from .fakes import GOOD_TOKEN, STORE_SETTINGS, USER_ID, FakeModelAPI, FakeStore, completion_settings

AUTH = {"Authorization": f"Bearer {GOOD_TOKEN}"}


class TestUserContext(unittest.TestCase):
    def test_profile_today_and_averages(self) -> None:
        profile = Profile(
            id=USER_ID,
            weight=80,
            height=180,
            age=30,
            gender="male",
            activity_level="moderate",
            goal="cut",
            maintenance_calories=2873,
            target_calories=2373,
        )
        entries = [
            FoodEntry(id="1", name="Oatmeal", calories=300, protein=10, logged_at="2025-07-07T08:00:00+00:00"),
            FoodEntry(id="2", name="Steak", calories=900, protein=60, logged_at="2025-07-05T19:00:00+00:00"),
            FoodEntry(id="3", name="Pasta", calories=700, protein=20, logged_at="2025-06-15T19:00:00+00:00"),
        ]
        text = build_user_context(profile, entries, date(2025, 7, 7))

        self.assertIn("- Weight: 80 kg", text)
        self.assertIn("- Goal: cut", text)
        self.assertIn("- Target Calories: 2373", text)
        self.assertIn("TODAY'S INTAKE (2025-07-07):", text)
        self.assertIn("- Calories: 300/2373 (13%)", text)
        self.assertIn("- Foods logged today: Oatmeal (300 cal)", text)
        self.assertIn("WEEKLY AVERAGES (Last 7 days, 2 days with data):", text)
        self.assertIn("- Average Calories: 600/day", text)
        self.assertIn("MONTHLY AVERAGES (Last 30 days, 3 days with data):", text)
        self.assertIn("- Average Calories: 633/day", text)
        self.assertIn("- Steak: 900 cal, 60g protein (2025-07-05)", text)
        self.assertNotIn("- Pasta:", text)

    def test_without_profile_or_entries(self) -> None:
        text = build_user_context(None, [], date(2025, 7, 7))
        self.assertIn("- No profile yet", text)
        self.assertIn("- Calories: 0/N/A (0%)", text)
        self.assertIn("- Foods logged today: None", text)
        self.assertTrue(text.endswith("RECENT FOODS (this week):\n- None"))


class TestChatEndpoint(unittest.TestCase):
    def setUp(self) -> None:
        self.store = FakeStore()
        self.model = FakeModelAPI("Aim for about 150g of protein per day.")
        self.api_key: str | None = "sk-test"
        app.dependency_overrides[get_store_settings] = lambda: STORE_SETTINGS
        app.dependency_overrides[get_store_transport] = lambda: self.store.transport
        app.dependency_overrides[get_assistant_client] = lambda: ChatCompletionClient(
            completion_settings(self.api_key, model="gpt-3.5-turbo"), transport=self.model.transport
        )
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()

    def test_answer_uses_logged_data(self) -> None:
        self.store.profiles[USER_ID] = {"id": USER_ID, "target_calories": 2000}
        today = datetime.now(timezone.utc).replace(microsecond=0)
        self.store.add_entry(name="Granola", calories=450, logged_at=today.isoformat())
        self.store.add_entry(
            name="Burrito", calories=800, logged_at=(today - timedelta(days=2)).isoformat()
        )

        resp = self.client.post(
            "/api/assistant/chat",
            headers=AUTH,
            json={
                "message": "How much protein should I eat?",
                "history": [
                    {"role": "user", "content": "Hi"},
                    {"role": "assistant", "content": "Hello! How can I help?"},
                ],
            },
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"status": "ok", "answer": "Aim for about 150g of protein per day.", "model": "gpt-3.5-turbo"},
        )

        payload = self.model.payload()
        self.assertNotIn("response_format", payload)
        messages = payload["messages"]
        self.assertEqual([m["role"] for m in messages], ["system", "user", "assistant", "user"])
        self.assertIn("Granola (450 cal)", messages[0]["content"])
        self.assertIn("- Burrito: 800 cal", messages[0]["content"])
        self.assertEqual(messages[-1]["content"], "How much protein should I eat?")

    def test_model_failure_is_degraded_not_error(self) -> None:
        self.model = FakeModelAPI(lambda r: httpx.Response(503, json={"error": {"message": "overloaded"}}))
        resp = self.client.post("/api/assistant/chat", headers=AUTH, json={"message": "Tips?"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "degraded")
        self.assertIn("overloaded", body["answer"])
        self.assertIsNone(body["model"])

    def test_missing_key_is_500(self) -> None:
        self.api_key = None
        resp = self.client.post("/api/assistant/chat", headers=AUTH, json={"message": "Tips?"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "OpenAI API key not configured"})
        self.assertEqual(self.model.requests, [])

    def test_blank_message_is_400(self) -> None:
        resp = self.client.post("/api/assistant/chat", headers=AUTH, json={"message": "   "})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Message is required"})

    def test_requires_session(self) -> None:
        resp = self.client.post("/api/assistant/chat", json={"message": "Tips?"})
        self.assertEqual(resp.status_code, 401)


if __name__ == "__main__":
    unittest.main()
