# -*- coding: utf-8 -*-
"""Estimation — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..config import resolve_gateway_settings
from ..errors import CaloricError
from .gateway import NutritionGateway, query_from_request
from .models import EstimateRequest, EstimateResponse, PromptKind

router = APIRouter(prefix="/api/nutrition", tags=["Nutrition estimation"])


def get_gateway() -> NutritionGateway:
    return NutritionGateway(resolve_gateway_settings())


def _run(request: EstimateRequest, gateway: NutritionGateway) -> EstimateResponse:
    try:
        query = query_from_request(request, max_image_bytes=gateway.cfg.max_image_bytes)
        estimate = gateway.estimate_detailed(query)
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    warning = None
    if estimate.is_fallback:
        warning = "AI estimate unavailable; showing a generic placeholder."
    return EstimateResponse(results=estimate.items, warning=warning)


@router.post(
    "/estimate",
    response_model=EstimateResponse,
    response_model_exclude_none=True,
    summary="Estimate nutrition from a food description or a meal photo",
)
def estimate(request: EstimateRequest, gateway: NutritionGateway = Depends(get_gateway)):
    return _run(request, gateway)


@router.post(
    "/search",
    response_model=EstimateResponse,
    response_model_exclude_none=True,
    summary="Estimate nutrition from a food description",
)
def search(request: EstimateRequest, gateway: NutritionGateway = Depends(get_gateway)):
    return _run(request.model_copy(update={"prompt_kind": PromptKind.text}), gateway)


@router.post(
    "/scan",
    response_model=EstimateResponse,
    response_model_exclude_none=True,
    summary="Estimate nutrition from a meal photo (no storage)",
)
def scan(request: EstimateRequest, gateway: NutritionGateway = Depends(get_gateway)):
    return _run(request.model_copy(update={"prompt_kind": PromptKind.image}), gateway)
