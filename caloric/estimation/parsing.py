# -*- coding: utf-8 -*-
"""Estimation — extract and validate nutrition items from raw model text."""

from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, List, Optional

from ..errors import MalformedResponseError
from .models import NutritionItem

DEFAULT_SERVING_SIZE = "1 serving"

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", flags=re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")
_NUM_RE = re.compile(r"-?\d+(?:\.\d+)?")


def _strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    cleaned = _FENCE_OPEN_RE.sub("", cleaned)
    return _FENCE_CLOSE_RE.sub("", cleaned)


def _remove_trailing_commas(text: str) -> str:
    """Remove trailing commas before `}` / `]` while preserving string literals."""
    out: list[str] = []
    in_str = False
    escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_str:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            i += 1
            continue

        if ch == "\"":
            in_str = True
            out.append(ch)
            i += 1
            continue

        if ch == ",":
            j = i + 1
            while j < len(text) and text[j] in " \t\r\n":
                j += 1
            if j < len(text) and text[j] in "}]":
                i += 1
                continue

        out.append(ch)
        i += 1
    return "".join(out)


def iter_json_object_candidates(text: str) -> list[str]:
    """Extract top-level balanced {...} candidates from arbitrary text.

    Braces inside string literals (including escaped quotes) do not count, so
    a food name such as "pasta {al dente}" does not split the object. An
    opening brace that is never closed is skipped and the rest is rescanned.
    """
    cleaned = _strip_code_fence(text)

    candidates: list[str] = []
    pos = 0
    while pos < len(cleaned):
        in_str = False
        escaped = False
        depth = 0
        start_idx: int | None = None

        for i in range(pos, len(cleaned)):
            ch = cleaned[i]
            if in_str:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == "\"":
                    in_str = False
                continue

            if ch == "\"":
                # Quotes in the surrounding prose are not string delimiters.
                if depth > 0:
                    in_str = True
                continue

            if ch == "{":
                if depth == 0:
                    start_idx = i
                depth += 1
                continue

            if ch == "}":
                if depth > 0:
                    depth -= 1
                    if depth == 0 and start_idx is not None:
                        candidates.append(cleaned[start_idx : i + 1])
                        start_idx = None
                continue

        if start_idx is None:
            break
        pos = start_idx + 1

    return candidates


def _sanitize_json_like(text: str) -> str:
    # Curly quotes, trailing commas and non-finite floats are common in model output.
    cleaned = text
    cleaned = cleaned.replace("“", "\"").replace("”", "\"")
    cleaned = cleaned.replace("‘", "'").replace("’", "'")
    cleaned = _remove_trailing_commas(cleaned)
    cleaned = re.sub(r"\bNaN\b", "null", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"-?\bInfinity\b", "null", cleaned, flags=re.IGNORECASE)
    return cleaned


def parse_model_output_json(content: str) -> Dict[str, Any]:
    """Return the first JSON object in `content`, preferring one carrying `results`."""
    first: Dict[str, Any] | None = None
    last_error: Exception | None = None

    for candidate in iter_json_object_candidates(content or ""):
        for attempt in (candidate, _sanitize_json_like(candidate)):
            try:
                parsed = json.loads(attempt)
            except ValueError as exc:
                last_error = exc
                continue
            if isinstance(parsed, dict):
                if "results" in parsed:
                    return parsed
                if first is None:
                    first = parsed
                break

    if first is not None:
        return first
    if last_error is not None:
        raise MalformedResponseError(f"Failed to parse model JSON: {last_error}")
    raise MalformedResponseError("Model output does not contain a JSON object")


def coerce_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            f = float(value)
        except OverflowError:
            return None
        return f if math.isfinite(f) else None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        m = _NUM_RE.search(s.replace(",", ""))
        if not m:
            return None
        f = float(m.group(0))
        return f if math.isfinite(f) else None
    return None


def _first_present(obj: Dict[str, Any], keys: List[str]) -> Any:
    for k in keys:
        if k in obj:
            return obj.get(k)
    return None


def _clean_str(value: Any) -> str:
    if value is None or isinstance(value, (bool, dict, list)):
        return ""
    return str(value).strip()


def normalize_item(raw: Any) -> Optional[NutritionItem]:
    """Coerce one model entry into a `NutritionItem`, or None when it is unusable."""
    if not isinstance(raw, dict):
        return None

    name = _clean_str(_first_present(raw, ["name", "food", "item"]))
    if not name:
        return None

    calories = coerce_float(_first_present(raw, ["calories", "kcal", "calories_kcal", "energy"]))
    if calories is None or calories <= 0:
        return None

    def macro(keys: List[str]) -> float:
        val = coerce_float(_first_present(raw, keys))
        return max(0.0, val) if val is not None else 0.0

    serving = _clean_str(_first_present(raw, ["serving_size", "servingSize", "serving", "portion"]))

    return NutritionItem(
        name=name,
        calories=calories,
        protein=macro(["protein", "protein_g"]),
        carbs=macro(["carbs", "carbohydrates", "carbs_g"]),
        fat=macro(["fat", "fat_g"]),
        serving_size=serving or DEFAULT_SERVING_SIZE,
    )


def extract_items(parsed: Dict[str, Any]) -> List[NutritionItem]:
    results = parsed.get("results")
    if not isinstance(results, list):
        raise MalformedResponseError("Model JSON has no 'results' list")
    items: List[NutritionItem] = []
    for raw in results:
        item = normalize_item(raw)
        if item is not None:
            items.append(item)
    return items


def parse_nutrition_reply(content: str) -> List[NutritionItem]:
    """Raw model text -> validated items (possibly empty)."""
    return extract_items(parse_model_output_json(content))
