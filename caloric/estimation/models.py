# -*- coding: utf-8 -*-
"""Estimation — Pydantic models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PromptKind(str, Enum):
    text = "text"
    image = "image"


@dataclass(frozen=True)
class NutritionQuery:
    """Exactly one of `text` or `image` is set."""

    text: Optional[str] = None
    image: Optional[bytes] = None
    mime_type: str = "image/jpeg"

    @property
    def kind(self) -> PromptKind:
        return PromptKind.image if self.image is not None else PromptKind.text


class NutritionItem(BaseModel):
    name: str = Field(..., min_length=1, description="Food name, e.g. 'grilled chicken breast'")
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0, description="grams")
    carbs: float = Field(0.0, ge=0, description="grams")
    fat: float = Field(0.0, ge=0, description="grams")
    serving_size: str = Field("1 serving", min_length=1)


class EstimateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt_kind: Optional[PromptKind] = None
    food_query: Optional[str] = Field(None, alias="foodQuery", max_length=500)
    image: Optional[str] = Field(None, description="data:image/<fmt>;base64,<...> or raw base64")
    mime_type: Optional[str] = Field(
        None,
        alias="mimeType",
        pattern=r"^image/[A-Za-z0-9.+-]+$",
        description="Accepted but ignored; the type is sniffed from the image bytes",
    )


class EstimateResponse(BaseModel):
    results: List[NutritionItem]
    warning: Optional[str] = Field(None, description="Set when the placeholder result was substituted")


@dataclass
class Estimate:
    items: List[NutritionItem]
    fallback_reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None
