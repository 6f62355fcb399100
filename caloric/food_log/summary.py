# -*- coding: utf-8 -*-
"""Food log — daily progress against the calorie target and period averages."""

from __future__ import annotations

from collections import OrderedDict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from ..profiles.targets import macro_energy_percentages
from .models import DailySummary, DayProgress, FoodEntry, MealType, NutritionTotals, Period, PeriodProgress

PERIOD_DAYS = {Period.day: 1, Period.week: 7, Period.month: 30}


def compute_totals(entries: Iterable[FoodEntry]) -> NutritionTotals:
    calories = 0.0
    protein = 0.0
    carbs = 0.0
    fat = 0.0
    for e in entries:
        calories += float(e.calories or 0.0)
        protein += float(e.protein or 0.0)
        carbs += float(e.carbs or 0.0)
        fat += float(e.fat or 0.0)
    return NutritionTotals(
        calories=round(calories, 1),
        protein=round(protein, 1),
        carbs=round(carbs, 1),
        fat=round(fat, 1),
    )


def entry_day(entry: FoodEntry) -> str:
    return entry.logged_at.split("T", 1)[0][:10]


def period_start(period: Period, end: date) -> date:
    return end - timedelta(days=PERIOD_DAYS[period] - 1)


def day_progress(entries: List[FoodEntry], day: date, target_calories: Optional[int]) -> DayProgress:
    key = day.isoformat()
    todays = [e for e in entries if entry_day(e) == key]
    totals = compute_totals(todays)

    meals: Dict[str, List[FoodEntry]] = OrderedDict((m.value, []) for m in MealType)
    for e in todays:
        # Entries logged before meal tagging existed go with snacks.
        meal = e.meal_type.value if e.meal_type else MealType.snacks.value
        meals[meal].append(e)

    progress = 0.0
    remaining: Optional[float] = None
    over_by = 0.0
    if target_calories and target_calories > 0:
        progress = round(min(totals.calories / target_calories * 100, 100.0), 1)
        remaining = round(max(target_calories - totals.calories, 0.0), 1)
        over_by = round(max(totals.calories - target_calories, 0.0), 1)

    return DayProgress(
        date=key,
        totals=totals,
        target_calories=target_calories,
        progress_percent=progress,
        remaining_calories=remaining,
        over_target=over_by > 0,
        over_by=over_by,
        macro_percentages=macro_energy_percentages(totals.calories, totals.protein, totals.carbs, totals.fat),
        meals=meals,
        entry_count=len(todays),
    )


def period_progress(
    entries: List[FoodEntry],
    period: Period,
    end: date,
    target_calories: Optional[int],
) -> PeriodProgress:
    """Per-day totals plus averages over the days that have data.

    The divisor is the number of distinct logged days, at least 1 and at most
    the period length, so a partly logged week is not diluted by empty days.
    """
    span = PERIOD_DAYS[period]
    start = period_start(period, end)

    by_day: Dict[str, List[FoodEntry]] = OrderedDict()
    for i in range(span):
        by_day[(start + timedelta(days=i)).isoformat()] = []
    in_range: List[FoodEntry] = []
    for e in entries:
        key = entry_day(e)
        if key in by_day:
            by_day[key].append(e)
            in_range.append(e)

    days = [
        DailySummary(date=key, totals=compute_totals(items), entry_count=len(items))
        for key, items in by_day.items()
    ]
    days_with_data = sum(1 for items in by_day.values() if items)
    divisor = min(span, max(1, days_with_data))
    totals = compute_totals(in_range)
    averages = NutritionTotals(
        calories=round(totals.calories / divisor),
        protein=round(totals.protein / divisor),
        carbs=round(totals.carbs / divisor),
        fat=round(totals.fat / divisor),
    )

    return PeriodProgress(
        period=period,
        start=start.isoformat(),
        end=end.isoformat(),
        days_with_data=days_with_data,
        averages=averages,
        totals=totals,
        entry_count=len(in_range),
        target_calories=target_calories,
        days=days,
    )
