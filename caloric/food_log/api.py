# -*- coding: utf-8 -*-
"""Food log — API endpoints."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import Session, get_current_session, get_store
from ..errors import CaloricError
from ..profiles.storage import get_profile
from ..store import StoreClient
from .models import DayProgress, FoodEntriesResponse, FoodEntry, FoodEntryCreate, Period, PeriodProgress
from .storage import add_entry, delete_entry, list_entries
from .summary import day_progress, period_progress, period_start

router = APIRouter(tags=["Food log"])


def _today() -> date:
    return datetime.now(timezone.utc).date()


@router.get("/api/entries", response_model=FoodEntriesResponse, summary="Entries of one day")
def read_entries(
    day: Optional[date] = Query(default=None, alias="date", description="YYYY-MM-DD, defaults to today"),
    session: Session = Depends(get_current_session),
    store: StoreClient = Depends(get_store),
):
    day = day or _today()
    try:
        entries = list_entries(store, session.user_id, start=day, end=day)
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return FoodEntriesResponse(date=day.isoformat(), count=len(entries), entries=entries)


@router.post("/api/entries", response_model=FoodEntry, summary="Log a food entry")
def create_entry(
    request: FoodEntryCreate,
    session: Session = Depends(get_current_session),
    store: StoreClient = Depends(get_store),
):
    try:
        return add_entry(store, session.user_id, request)
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.delete("/api/entries/{entry_id}", summary="Remove a food entry")
def remove_entry(
    entry_id: str,
    session: Session = Depends(get_current_session),
    store: StoreClient = Depends(get_store),
):
    try:
        delete_entry(store, session.user_id, entry_id)
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return {"ok": True, "id": entry_id}


@router.get(
    "/api/progress",
    response_model=Union[DayProgress, PeriodProgress],
    summary="Calorie and macro progress for a day, the last 7 days or the last 30 days",
)
def read_progress(
    period: Period = Query(default=Period.day),
    day: Optional[date] = Query(default=None, alias="date", description="Last day of the period (YYYY-MM-DD)"),
    session: Session = Depends(get_current_session),
    store: StoreClient = Depends(get_store),
):
    end = day or _today()
    try:
        profile = get_profile(store, session.user_id)
        entries = list_entries(store, session.user_id, start=period_start(period, end), end=end)
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    target = profile.target_calories if profile else None
    if period is Period.day:
        return day_progress(entries, end, target)
    return period_progress(entries, period, end, target)
