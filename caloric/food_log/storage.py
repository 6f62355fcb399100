# -*- coding: utf-8 -*-
"""Food log — rows of the append-only `food_entries` table."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..errors import StoreError
from ..store import StoreClient
from .models import FoodEntry, FoodEntryCreate

TABLE = "food_entries"

DEFAULT_SERVING_SIZE = "1 serving"


def day_bounds(day: date) -> tuple[str, str]:
    start = datetime(day.year, day.month, day.day)
    end = start + timedelta(days=1)
    return start.isoformat(timespec="seconds"), end.isoformat(timespec="seconds")


def list_entries(store: StoreClient, user_id: str, *, start: date, end: date) -> List[FoodEntry]:
    """Entries logged on days `start`..`end` inclusive, newest first."""
    lo, _ = day_bounds(start)
    _, hi = day_bounds(end)
    params = [
        ("select", "*"),
        ("user_id", f"eq.{user_id}"),
        ("logged_at", f"gte.{lo}"),
        ("logged_at", f"lt.{hi}"),
        ("order", "logged_at.desc"),
    ]
    rows = store.select(TABLE, params)
    return [FoodEntry.model_validate(r) for r in rows]


def resolve_logged_at(request: FoodEntryCreate, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    if request.logged_at is not None:
        return request.logged_at
    if request.date is not None:
        return datetime.combine(request.date, now.timetz())
    return now


def build_entry_row(user_id: str, request: FoodEntryCreate, now: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        "user_id": user_id,
        "name": request.name,
        "calories": request.calories,
        "protein": request.protein,
        "carbs": request.carbs,
        "fat": request.fat,
        "serving_size": (request.serving_size or "").strip() or DEFAULT_SERVING_SIZE,
        "meal_type": request.meal_type.value,
        "logged_at": resolve_logged_at(request, now).isoformat(),
    }


def add_entry(store: StoreClient, user_id: str, request: FoodEntryCreate) -> FoodEntry:
    saved = store.insert(TABLE, build_entry_row(user_id, request))
    return FoodEntry.model_validate(saved)


def delete_entry(store: StoreClient, user_id: str, entry_id: str) -> None:
    deleted = store.delete(TABLE, {"id": f"eq.{entry_id}", "user_id": f"eq.{user_id}"})
    if not deleted:
        raise StoreError("Entry not found", status_code=404)
