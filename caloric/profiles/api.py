# -*- coding: utf-8 -*-
"""Profiles — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import Session, get_current_session, get_store
from ..errors import CaloricError
from ..store import StoreClient
from .models import BodyMetrics, BmrFormula, Profile, TargetsRequest, TargetsResponse
from .storage import get_profile, upsert_profile
from .targets import compute_targets

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.post("/targets", response_model=TargetsResponse, summary="Preview calorie targets (no storage)")
def preview_targets(request: TargetsRequest):
    try:
        targets = compute_targets(
            weight_kg=request.weight,
            height_cm=request.height,
            age=request.age,
            gender=request.gender.value,
            activity_level=request.activity_level.value,
            goal=request.goal.value,
            formula=request.formula.value,
        )
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return TargetsResponse(
        bmr=targets.bmr,
        maintenance_calories=targets.maintenance_calories,
        target_calories=targets.target_calories,
        formula=request.formula,
    )


@router.get("", response_model=Profile, summary="Current user's profile")
def read_profile(
    session: Session = Depends(get_current_session),
    store: StoreClient = Depends(get_store),
):
    try:
        profile = get_profile(store, session.user_id)
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("", response_model=Profile, summary="Create or update the profile and its calorie targets")
def save_profile(
    request: BodyMetrics,
    session: Session = Depends(get_current_session),
    store: StoreClient = Depends(get_store),
):
    try:
        targets = compute_targets(
            weight_kg=request.weight,
            height_cm=request.height,
            age=request.age,
            gender=request.gender.value,
            activity_level=request.activity_level.value,
            goal=request.goal.value,
            formula=BmrFormula.harris_benedict.value,
        )
        values = request.model_dump(mode="json")
        values["maintenance_calories"] = targets.maintenance_calories
        values["target_calories"] = targets.target_calories
        return upsert_profile(store, session.user_id, values)
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
