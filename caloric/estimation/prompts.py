# -*- coding: utf-8 -*-
"""Estimation — prompt construction for the text and photo variants."""

from __future__ import annotations

import base64
import json
from typing import Any, Dict, List

_TEXT_EXAMPLE = {
    "results": [
        {
            "name": "Banana - medium",
            "calories": 105,
            "protein": 1.3,
            "carbs": 27,
            "fat": 0.4,
            "serving_size": "1 medium (118g)",
        }
    ]
}

_IMAGE_EXAMPLE = {
    "results": [
        {
            "name": "grilled chicken breast",
            "calories": 165,
            "protein": 31,
            "carbs": 0,
            "fat": 3.6,
            "serving_size": "100g",
        }
    ]
}

_FIELDS = (
    "- name: string (descriptive food name)\n"
    "- calories: number\n"
    "- protein: number (grams)\n"
    "- carbs: number (grams)\n"
    "- fat: number (grams)\n"
    '- serving_size: string (e.g. "100g", "1 cup", "1 medium")\n'
)

TEXT_SYSTEM_PROMPT = (
    "You are a nutrition expert. Given a food item or meal description, provide accurate "
    "nutrition estimates. Respond with ONLY a valid JSON object with a \"results\" array "
    "containing 1-3 variations of the food item with different serving sizes. "
    "Do NOT wrap the JSON in markdown or code fences. Each item must have exactly these fields:\n"
    f"{_FIELDS}\n"
    "Example response:\n"
    f"{json.dumps(_TEXT_EXAMPLE, indent=2)}"
)

IMAGE_INSTRUCTIONS = (
    "Analyze this meal image and estimate the nutritional content. For each identifiable "
    "food item in the image, provide the food name, estimated serving size, calories, "
    "protein, carbohydrates and fat.\n\n"
    "Return ONLY a JSON object with a \"results\" array containing the food items. "
    "Each item must have these fields:\n"
    f"{_FIELDS}\n"
    "Example response:\n"
    f"{json.dumps(_IMAGE_EXAMPLE, indent=2)}\n\n"
    "Be as accurate as possible with portion sizes and nutritional estimates based on "
    "what you can see in the image."
)


def build_text_messages(food_query: str) -> List[Dict[str, Any]]:
    return [
        {"role": "system", "content": TEXT_SYSTEM_PROMPT},
        {"role": "user", "content": f"Estimate nutrition for: {food_query}"},
    ]


def image_data_url(mime_type: str, image_bytes: bytes) -> str:
    b64 = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{b64}"


def build_image_messages(image_bytes: bytes, mime_type: str, *, detail: str = "high") -> List[Dict[str, Any]]:
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": IMAGE_INSTRUCTIONS},
                {
                    "type": "image_url",
                    "image_url": {
                        "url": image_data_url(mime_type, image_bytes),
                        "detail": detail,
                    },
                },
            ],
        }
    ]
