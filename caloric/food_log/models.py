# -*- coding: utf-8 -*-
"""Food log — Pydantic models."""

from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snacks = "snacks"


class Period(str, Enum):
    day = "day"
    week = "week"
    month = "month"


class NutritionTotals(BaseModel):
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)


class FoodEntry(BaseModel):
    id: str
    user_id: Optional[str] = None
    name: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    serving_size: Optional[str] = None
    meal_type: Optional[MealType] = None
    logged_at: str
    created_at: Optional[str] = None

    @field_validator("protein", "carbs", "fat", mode="before")
    @classmethod
    def _null_macro(cls, value: object) -> object:
        # Older rows may carry NULL macros.
        return 0.0 if value is None else value


class FoodEntryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    calories: float = Field(..., ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)
    serving_size: Optional[str] = Field(None, max_length=100)
    meal_type: MealType
    logged_at: Optional[datetime] = Field(None, description="ISO8601; defaults to now")
    date: Optional[Date] = Field(None, description="YYYY-MM-DD; logs at the current time of that day")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        v = value.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class FoodEntriesResponse(BaseModel):
    date: str
    count: int
    entries: List[FoodEntry]


class DailySummary(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    totals: NutritionTotals
    entry_count: int = Field(0, ge=0)


class DayProgress(BaseModel):
    date: str
    totals: NutritionTotals
    target_calories: Optional[int] = None
    progress_percent: float = 0.0
    remaining_calories: Optional[float] = None
    over_target: bool = False
    over_by: float = 0.0
    macro_percentages: Dict[str, float]
    meals: Dict[str, List[FoodEntry]]
    entry_count: int = 0


class PeriodProgress(BaseModel):
    period: Period
    start: str
    end: str
    days_with_data: int
    averages: NutritionTotals
    totals: NutritionTotals
    entry_count: int
    target_calories: Optional[int] = None
    days: List[DailySummary]
