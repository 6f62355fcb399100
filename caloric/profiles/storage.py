# -*- coding: utf-8 -*-
"""Profiles — rows of the `profiles` table (one per user)."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..store import StoreClient
from .models import Profile

TABLE = "profiles"


def get_profile(store: StoreClient, user_id: str) -> Optional[Profile]:
    rows = store.select(TABLE, {"select": "*", "id": f"eq.{user_id}", "limit": "1"})
    if not rows:
        return None
    return Profile.model_validate(rows[0])


def upsert_profile(store: StoreClient, user_id: str, values: Dict[str, Any]) -> Profile:
    row = dict(values)
    row["id"] = user_id
    saved = store.insert(TABLE, row, upsert=True)
    return Profile.model_validate(saved)
