# -*- coding: utf-8 -*-
"""Assistant — plain-text nutrition context handed to the chat model."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from ..food_log.models import FoodEntry, Period
from ..food_log.summary import compute_totals, entry_day, period_progress
from ..profiles.models import Profile


def _fmt(value: float) -> str:
    return f"{value:g}"


def _value(enum_or_none: object) -> str:
    return getattr(enum_or_none, "value", None) or "Not set"


def build_user_context(profile: Optional[Profile], entries: List[FoodEntry], today: date) -> str:
    """Summarize profile, today's intake and 7/30-day averages.

    `entries` should cover the last 30 days (newest first, as the store returns them).
    """
    target = profile.target_calories if profile else None
    key = today.isoformat()
    todays = [e for e in entries if entry_day(e) == key]
    today_totals = compute_totals(todays)
    week = period_progress(entries, Period.week, today, target)
    month = period_progress(entries, Period.month, today, target)
    pct = round(today_totals.calories / target * 100) if target else 0

    lines = ["USER PROFILE:"]
    if profile:
        lines += [
            f"- Weight: {_fmt(profile.weight) + ' kg' if profile.weight else 'Not set'}",
            f"- Height: {_fmt(profile.height) + ' cm' if profile.height else 'Not set'}",
            f"- Age: {profile.age or 'Not set'}",
            f"- Gender: {_value(profile.gender)}",
            f"- Activity level: {_value(profile.activity_level)}",
            f"- Goal: {_value(profile.goal)}",
            f"- Target Calories: {profile.target_calories or 'Not set'}",
            f"- Maintenance Calories: {profile.maintenance_calories or 'Not set'}",
        ]
    else:
        lines.append("- No profile yet")

    foods = ", ".join(f"{e.name} ({_fmt(e.calories)} cal)" for e in todays) or "None"
    lines += [
        "",
        f"TODAY'S INTAKE ({key}):",
        f"- Calories: {_fmt(today_totals.calories)}/{target or 'N/A'} ({pct}%)",
        f"- Protein: {_fmt(today_totals.protein)}g",
        f"- Carbs: {_fmt(today_totals.carbs)}g",
        f"- Fat: {_fmt(today_totals.fat)}g",
        f"- Foods logged today: {foods}",
    ]

    for label, summary, span in (("WEEKLY", week, 7), ("MONTHLY", month, 30)):
        lines += [
            "",
            f"{label} AVERAGES (Last {span} days, {summary.days_with_data} days with data):",
            f"- Average Calories: {_fmt(summary.averages.calories)}/day",
            f"- Average Protein: {_fmt(summary.averages.protein)}g/day",
            f"- Average Carbs: {_fmt(summary.averages.carbs)}g/day",
            f"- Average Fat: {_fmt(summary.averages.fat)}g/day",
            f"- Total entries: {summary.entry_count}",
        ]

    week_keys = {d.date for d in week.days}
    recent = [e for e in entries if entry_day(e) in week_keys][:5]
    lines += ["", "RECENT FOODS (this week):"]
    if recent:
        lines += [
            f"- {e.name}: {_fmt(e.calories)} cal, {_fmt(e.protein)}g protein ({entry_day(e)})" for e in recent
        ]
    else:
        lines.append("- None")
    return "\n".join(lines)
