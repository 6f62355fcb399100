# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from caloric.errors import MalformedResponseError
from caloric.estimation.parsing import (
    coerce_float,
    iter_json_object_candidates,
    normalize_item,
    parse_model_output_json,
    parse_nutrition_reply,
)


class TestReplyExtraction(unittest.TestCase):
    def test_banana_embedded_in_prose_is_extracted_unchanged(self) -> None:
        raw = (
            "Sure! Here is the estimate you asked for: "
            '{"results":[{"name":"Banana","calories":105,"protein":1.3,"carbs":27,"fat":0.4,'
            '"serving_size":"1 medium (118g)"}]} Let me know if you need anything else.'
        )

        items = parse_nutrition_reply(raw)
        self.assertEqual(len(items), 1)
        self.assertEqual(
            items[0].model_dump(),
            {
                "name": "Banana",
                "calories": 105,
                "protein": 1.3,
                "carbs": 27,
                "fat": 0.4,
                "serving_size": "1 medium (118g)",
            },
        )
        # Parsing is deterministic for a fixed reply.
        self.assertEqual(parse_nutrition_reply(raw), items)

    def test_code_fence_is_stripped(self) -> None:
        raw = '```json\n{"results": [{"name": "Apple", "calories": 95}]}\n```'
        items = parse_nutrition_reply(raw)
        self.assertEqual([i.name for i in items], ["Apple"])

    def test_braces_inside_strings_do_not_split_the_object(self) -> None:
        raw = 'Result: {"results": [{"name": "pasta {al dente} \\"special\\"", "calories": 220}]}'
        candidates = iter_json_object_candidates(raw)
        self.assertEqual(len(candidates), 1)
        items = parse_nutrition_reply(raw)
        self.assertEqual(items[0].name, 'pasta {al dente} "special"')
        self.assertEqual(items[0].serving_size, "1 serving")

    def test_prefers_object_with_results(self) -> None:
        raw = 'Note {"confidence": "low"} then {"results": [{"name": "Rice", "calories": 200}]}'
        parsed = parse_model_output_json(raw)
        self.assertIn("results", parsed)

    def test_trailing_commas_are_tolerated(self) -> None:
        raw = '{"results": [{"name": "Egg", "calories": 78, "protein": 6.3,},],}'
        items = parse_nutrition_reply(raw)
        self.assertEqual(items[0].protein, 6.3)

    def test_no_json_object_raises(self) -> None:
        with self.assertRaises(MalformedResponseError):
            parse_nutrition_reply("I cannot help with that.")

    def test_missing_results_list_raises(self) -> None:
        with self.assertRaises(MalformedResponseError):
            parse_nutrition_reply('{"items": [{"name": "Toast", "calories": 80}]}')
        with self.assertRaises(MalformedResponseError):
            parse_nutrition_reply('{"results": {"name": "Toast", "calories": 80}}')

    def test_unbalanced_object_raises(self) -> None:
        with self.assertRaises(MalformedResponseError):
            parse_nutrition_reply('{"results": [{"name": "Toast", "calories": 80}]')

    def test_stray_brace_before_the_object(self) -> None:
        raw = 'Sure { here is the estimate: {"results": [{"name": "Rice", "calories": 200}]}'
        items = parse_nutrition_reply(raw)
        self.assertEqual([i.name for i in items], ["Rice"])

    def test_unclosed_object_after_a_valid_one(self) -> None:
        raw = '{"results": [{"name": "Egg", "calories": 78}]} and then {"oops": '
        self.assertEqual(iter_json_object_candidates(raw), ['{"results": [{"name": "Egg", "calories": 78}]}'])


class TestItemNormalization(unittest.TestCase):
    def test_items_without_calories_or_name_are_dropped(self) -> None:
        raw = (
            '{"results": ['
            '{"name": "Water", "calories": 0},'
            '{"name": "Mystery"},'
            '{"name": "Soup", "calories": "n/a"},'
            '{"calories": 120},'
            '{"name": "   ", "calories": 120},'
            '"not an object",'
            '{"name": "Oatmeal", "calories": 150}'
            "]}"
        )
        items = parse_nutrition_reply(raw)
        self.assertEqual([i.name for i in items], ["Oatmeal"])

    def test_all_items_dropped_yields_empty_list(self) -> None:
        self.assertEqual(parse_nutrition_reply('{"results": [{"name": "Mystery"}]}'), [])

    def test_numeric_fields_are_coerced_non_negative(self) -> None:
        item = normalize_item(
            {
                "name": "Rice",
                "calories": "260 kcal",
                "protein": "5g",
                "carbs": None,
                "fat": -2,
                "serving_size": "",
            }
        )
        assert item is not None
        self.assertEqual(item.calories, 260.0)
        self.assertEqual(item.protein, 5.0)
        self.assertEqual(item.carbs, 0.0)
        self.assertEqual(item.fat, 0.0)
        self.assertEqual(item.serving_size, "1 serving")

    def test_boolean_is_not_a_number(self) -> None:
        self.assertIsNone(normalize_item({"name": "Toast", "calories": True}))
        item = normalize_item({"name": "Toast", "calories": 80, "protein": True})
        assert item is not None
        self.assertEqual(item.protein, 0.0)

    def test_negative_calories_are_dropped(self) -> None:
        self.assertIsNone(normalize_item({"name": "Toast", "calories": -80}))

    def test_huge_integer_is_not_a_number(self) -> None:
        huge = "1" + "0" * 400
        self.assertIsNone(coerce_float(int(huge)))
        self.assertEqual(parse_nutrition_reply('{"results": [{"name": "x", "calories": ' + huge + "}]}"), [])
        item = normalize_item({"name": "Toast", "calories": 80, "protein": int(huge)})
        assert item is not None
        self.assertEqual(item.protein, 0.0)

    def test_overflowing_numeric_string_is_dropped(self) -> None:
        self.assertIsNone(coerce_float("9" * 400))
        self.assertIsNone(normalize_item({"name": "x", "calories": "9" * 400}))


if __name__ == "__main__":
    unittest.main()
