from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from coach_app.agents.dates import to_local_day
from shared.database.store import FitnessStore

NO_CONTEXT = "No user context available. Provide general fitness guidance."
CONTEXT_ERROR = "Error loading user context. Provide general fitness guidance."

WORKOUT_LOOKBACK_DAYS = 7
MEAL_LOOKBACK_DAYS = 3
MAX_WORKOUTS_SHOWN = 5
MAX_MEAL_DAYS_SHOWN = 2


def _or(value: Any, fallback: str = "Not specified") -> Any:
    return fallback if value is None or value == "" else value


def _with_unit(value: Any, unit: str, fallback: str = "Not specified") -> str:
    if value is None or value == "":
        return fallback
    return f"{value}{unit}"


def _first(rows: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return rows[0] if rows else None


class ContextBuilder:
    """Assembles the user's fitness digest used to condition the coach prompt.

    Each read is independent; any failure collapses the whole digest to a
    fixed fallback string instead of failing the request.
    """

    def __init__(self, store: FitnessStore) -> None:
        self.store = store
        self.log = logging.getLogger("coach_app")

    async def build(self, user_id: Optional[str], now: datetime) -> str:
        if not user_id:
            return NO_CONTEXT
        try:
            return await self._build(user_id, now)
        except Exception as e:
            self.log.error(f"Error fetching user context: {e}")
            return CONTEXT_ERROR

    async def _build(self, user_id: str, now: datetime) -> str:
        owner = {"user_id": user_id}
        profile = _first(await self.store.select("profiles", filters=owner, limit=1))
        goals = _first(await self.store.select("user_goals", filters=owner, limit=1))
        workouts = await self.store.select(
            "workouts",
            filters=owner,
            gte={"date": to_local_day(now - timedelta(days=WORKOUT_LOOKBACK_DAYS))},
            order_by="date",
            descending=True,
        )
        foods = await self.store.select(
            "food_entries",
            filters=owner,
            gte={"date": to_local_day(now - timedelta(days=MEAL_LOOKBACK_DAYS))},
            order_by="date",
            descending=True,
        )
        progress = _first(
            await self.store.select("progress_entries", filters=owner, order_by="date", descending=True, limit=1)
        )

        lines: List[str] = ["USER PROFILE:"]
        if profile:
            goal_list = profile.get("goals")
            lines += [
                f"- Name: {profile.get('display_name') or 'User'}",
                f"- Age: {_or(profile.get('age'))}",
                f"- Height: {_or(profile.get('height'))}",
                f"- Weight: {_with_unit(profile.get('weight'), ' lbs')}",
                f"- Fitness Level: {_or(profile.get('fitness_level'))}",
                f"- Goals: {', '.join(goal_list) if goal_list else 'Not specified'}",
            ]
        else:
            lines.append("- Profile: Not specified")

        if goals:
            lines += [
                "",
                "DAILY TARGETS:",
                f"- Calories: {_with_unit(goals.get('daily_calories'), ' cal')}",
                f"- Protein: {_with_unit(goals.get('daily_protein'), 'g')}",
                f"- Carbs: {_with_unit(goals.get('daily_carbs'), 'g')}",
                f"- Fat: {_with_unit(goals.get('daily_fat'), 'g')}",
                f"- Workout Minutes: {_with_unit(goals.get('daily_workout_minutes'), ' min')}",
                f"- Weekly Workouts: {_or(goals.get('weekly_workouts'))}",
            ]

        if workouts:
            lines += ["", f"RECENT WORKOUTS (Last {WORKOUT_LOOKBACK_DAYS} days):"]
            for w in workouts[:MAX_WORKOUTS_SHOWN]:
                state = "Completed" if w.get("is_completed") else "Planned"
                lines.append(f"- {w.get('name')}: {_with_unit(w.get('duration_minutes'), ' min')} ({state}) - {w.get('date')}")

        if foods:
            lines += ["", f"RECENT MEALS (Last {MEAL_LOOKBACK_DAYS} days):"]
            by_day: Dict[str, float] = {}
            for food in foods:
                by_day[food["date"]] = by_day.get(food["date"], 0) + (food.get("calories") or 0)
            for day in list(by_day)[:MAX_MEAL_DAYS_SHOWN]:
                lines.append(f"- {day}: {by_day[day]:g} calories")

        if progress:
            lines += [
                "",
                "RECENT PROGRESS:",
                f"- Latest weight: {_with_unit(progress.get('weight'), ' lbs', 'Not recorded')} ({progress.get('date')})",
                f"- Body fat: {_with_unit(progress.get('body_fat_percentage'), '%', 'Not recorded')}",
            ]
            if progress.get("notes"):
                lines.append(f"- Notes: {progress['notes']}")

        return "\n".join(lines) + "\n"
