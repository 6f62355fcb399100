# -*- coding: utf-8 -*-
"""Profiles — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Gender(str, Enum):
    male = "male"
    female = "female"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    light = "light"
    moderate = "moderate"
    active = "active"
    very_active = "very-active"


class Goal(str, Enum):
    bulk = "bulk"
    cut = "cut"
    maintain = "maintain"


class BmrFormula(str, Enum):
    harris_benedict = "harris_benedict"
    mifflin_st_jeor = "mifflin_st_jeor"


class BodyMetrics(BaseModel):
    weight: float = Field(..., gt=0, lt=1000, description="kg")
    height: float = Field(..., gt=0, lt=1000, description="cm")
    age: int = Field(..., gt=0, lt=150)
    gender: Gender
    activity_level: ActivityLevel = ActivityLevel.moderate
    goal: Goal = Goal.maintain

    @field_validator("activity_level", mode="before")
    @classmethod
    def _dash_activity(cls, value: object) -> object:
        # Accept `very_active` as well as the stored `very-active`.
        if isinstance(value, str):
            return value.strip().lower().replace("_", "-")
        return value


class TargetsRequest(BodyMetrics):
    formula: BmrFormula = BmrFormula.harris_benedict


class TargetsResponse(BaseModel):
    bmr: float
    maintenance_calories: int
    target_calories: int
    formula: BmrFormula


class Profile(BaseModel):
    id: str
    weight: Optional[float] = None
    height: Optional[float] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    activity_level: Optional[ActivityLevel] = None
    goal: Optional[Goal] = None
    maintenance_calories: Optional[int] = None
    target_calories: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
