# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from caloric.api import app
from caloric.errors import PreconditionError
from caloric.profiles.targets import (
    activity_multiplier,
    compute_targets,
    harris_benedict,
    macro_energy_percentages,
    mifflin_st_jeor,
)


class TestCalorieTargets(unittest.TestCase):
    def test_harris_benedict_male_bulk(self) -> None:
        self.assertAlmostEqual(harris_benedict(80, 180, 30, "male"), 1853.632, places=3)
        targets = compute_targets(
            weight_kg=80, height_cm=180, age=30, gender="male", activity_level="moderate", goal="bulk"
        )
        self.assertEqual(targets.maintenance_calories, 2873)
        self.assertEqual(targets.target_calories, 3373)

    def test_harris_benedict_female_cut(self) -> None:
        targets = compute_targets(
            weight_kg=60, height_cm=165, age=25, gender="female", activity_level="sedentary", goal="cut"
        )
        self.assertEqual(targets.maintenance_calories, 1686)
        self.assertEqual(targets.target_calories, 1186)

    def test_mifflin_st_jeor(self) -> None:
        self.assertEqual(mifflin_st_jeor(80, 180, 30, "male"), 1780)
        self.assertEqual(mifflin_st_jeor(80, 180, 30, "female"), 1614)
        targets = compute_targets(
            weight_kg=80, height_cm=180, age=30, gender="male", formula="mifflin_st_jeor"
        )
        self.assertEqual(targets.maintenance_calories, 2759)
        self.assertEqual(targets.target_calories, 2759)

    def test_activity_aliases(self) -> None:
        self.assertEqual(activity_multiplier("very-active"), 1.9)
        self.assertEqual(activity_multiplier("very_active"), 1.9)
        with self.assertRaises(PreconditionError):
            activity_multiplier("couch")

    def test_invalid_body_metrics(self) -> None:
        with self.assertRaises(PreconditionError):
            compute_targets(weight_kg=0, height_cm=180, age=30, gender="male")
        with self.assertRaises(PreconditionError):
            compute_targets(weight_kg=80, height_cm=180, age=30, gender="other")
        with self.assertRaises(PreconditionError):
            compute_targets(weight_kg=80, height_cm=180, age=30, gender="male", goal="shred")

    def test_macro_energy_percentages(self) -> None:
        self.assertEqual(
            macro_energy_percentages(2000, 150, 200, 66.7),
            {"protein": 30.0, "carbs": 40.0, "fat": 30.0},
        )
        self.assertEqual(
            macro_energy_percentages(0, 0, 0, 0),
            {"protein": 0.0, "carbs": 0.0, "fat": 0.0},
        )


class TestTargetsEndpoint(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()

    def test_preview(self) -> None:
        resp = self.client.post(
            "/api/profile/targets",
            json={
                "weight": 80,
                "height": 180,
                "age": 30,
                "gender": "male",
                "activity_level": "very_active",
                "goal": "maintain",
            },
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["formula"], "harris_benedict")
        self.assertEqual(body["maintenance_calories"], 3522)
        self.assertEqual(body["target_calories"], 3522)

    def test_preview_rejects_bad_metrics(self) -> None:
        resp = self.client.post(
            "/api/profile/targets",
            json={"weight": -1, "height": 180, "age": 30, "gender": "male"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("weight", resp.json()["error"])


if __name__ == "__main__":
    unittest.main()
