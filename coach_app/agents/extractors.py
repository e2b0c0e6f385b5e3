"""Heuristic field extraction: one pure function per intent.

Each extractor takes the raw user message and the request's ``now`` and
returns a structured record. Nothing here touches the store or the clock.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from coach_app.agents.dates import resolve_dates, resolve_time
from coach_app.agents.keywords import (
    ACTIVITY_NAMES,
    CARB_WORDS,
    FOOD_KEYWORDS,
    MEAL_TYPES,
    PLANNER_MEAL_WORDS,
    PLANNER_WORKOUT_WORDS,
    PROTEIN_WORDS,
    VEGETABLE_WORDS,
    contains_any,
    first_match,
    has_phrase,
)
from coach_app.agents.records import (
    MealLogRecord,
    PlannerItemRecord,
    WorkoutCreationRecord,
    WorkoutLogRecord,
)
from coach_app.agents.templates import build_template

DEFAULT_WORKOUT_MINUTES = 30
DEFAULT_PLANNED_MINUTES = 60
DESCRIPTION_LIMIT = 100

MEAL_BASE_CALORIES = {"breakfast": 350, "lunch": 450, "dinner": 500, "snack": 200}
CARB_BONUS = 100
PROTEIN_BONUS = 50
VEGETABLE_DISCOUNT = 50

# Fraction of calories and kcal per gram for each macro.
PROTEIN_RATIO, CARBS_RATIO, FAT_RATIO = 0.15, 0.45, 0.30
KCAL_PER_G_PROTEIN, KCAL_PER_G_CARBS, KCAL_PER_G_FAT = 4, 4, 9

_DURATION_RE = re.compile(r"\b(\d+(?:\.\d+)?)\s*(minutes|minute|mins|min|hours|hour|hrs|hr)\b", re.IGNORECASE)
_CALORIES_RE = re.compile(r"\b(\d{2,4})\s*(?:kcal|calories|calorie|cals|cal)\b", re.IGNORECASE)

_ARTICLE = r"(?:(?:a|an|some|the|my)\s+)?"
_FOOD_PATTERNS: Tuple[re.Pattern, ...] = (
    # consumption verb + object
    re.compile(r"\b(?:have had|ate|eaten|had|eating|having|drank|consumed)\s+" + _ARTICLE + r"(?P<food>.+)", re.IGNORECASE),
    # meal reference + copula + object
    re.compile(r"\b(?:breakfast|lunch|dinner|supper|snack|meal)\s+(?:was|is|were)\s+" + _ARTICLE + r"(?P<food>.+)", re.IGNORECASE),
    # preparation verb + object
    re.compile(r"\b(?:made|cooked|prepared|grabbed|ordered|fixed)\s+(?:myself\s+)?" + _ARTICLE + r"(?P<food>.+)", re.IGNORECASE),
)
_TRAILING_CLAUSE_RE = re.compile(
    r"\s+(?:for\s+(?:breakfast|lunch|dinner|supper|a\s+snack|snack|today|yesterday)|today|yesterday|this morning|tonight)\b.*$",
    re.IGNORECASE,
)
_TRAILING_PUNCT_RE = re.compile(r"[\s.,;:!?]+$")

# Ordered archetype table: keywords -> (workout name, workout type).
WORKOUT_ARCHETYPES: Tuple[Tuple[Tuple[str, ...], Tuple[str, str]], ...] = (
    (("push",), ("Push Workout", "strength")),
    (("pull",), ("Pull Workout", "strength")),
    (("leg", "legs"), ("Leg Day", "strength")),
    (("upper body", "upper"), ("Upper Body Workout", "strength")),
    (("lower body", "lower"), ("Lower Body Workout", "strength")),
    (("full body", "full-body", "total body"), ("Full Body Workout", "strength")),
    (("cardio",), ("Cardio Workout", "cardio")),
    (("hiit",), ("HIIT Workout", "cardio")),
    (("strength",), ("Strength Training", "strength")),
    (("chest",), ("Chest Workout", "strength")),
    (("back",), ("Back Workout", "strength")),
    (("arms", "arm", "biceps", "triceps"), ("Arms Workout", "strength")),
    (("shoulders", "shoulder"), ("Shoulder Workout", "strength")),
    (("core",), ("Core Workout", "strength")),
    (("abs", "ab"), ("Abs Workout", "strength")),
)
DEFAULT_ARCHETYPE = ("Custom Workout", "general")

# Strength sub-match on the archetype name -> template key.
STRENGTH_TEMPLATES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("push", "chest"), "push"),
    (("pull", "back"), "pull"),
    (("leg", "lower"), "legs"),
)


def parse_duration(text: str) -> Optional[int]:
    """Minutes from ``<n> minutes|mins|hours|hrs``; hours are multiplied by 60."""
    m = _DURATION_RE.search(text)
    if not m:
        return None
    value = float(m.group(1))
    if m.group(2).lower().startswith("h"):
        value *= 60
    minutes = int(round(value))
    return minutes if minutes > 0 else None


# ---------------- Workout logging ----------------
def extract_workout_log(message: str, now: datetime) -> WorkoutLogRecord:
    lowered = message.lower()
    name = first_match(lowered, ACTIVITY_NAMES) or "General Workout"
    return WorkoutLogRecord(
        name=name,
        duration_minutes=parse_duration(lowered) or DEFAULT_WORKOUT_MINUTES,
        description=message[:DESCRIPTION_LIMIT],
        date=now.date(),
    )


# ---------------- Meal logging ----------------
def resolve_meal_type(lowered: str, hour: int) -> str:
    for meal_type in MEAL_TYPES:
        if has_phrase(lowered, meal_type):
            return meal_type
    if 6 <= hour < 11:
        return "breakfast"
    if 11 <= hour < 16:
        return "lunch"
    if 16 <= hour < 22:
        return "dinner"
    return "snack"


def _clean_food(raw: str) -> str:
    food = _TRAILING_CLAUSE_RE.sub("", raw.strip())
    return _TRAILING_PUNCT_RE.sub("", food).strip()


def _food_from_pattern(pattern: re.Pattern) -> Callable[[str], Optional[str]]:
    def attempt(message: str) -> Optional[str]:
        m = pattern.search(message)
        if not m:
            return None
        return _clean_food(m.group("food")) or None
    return attempt


def _food_from_keywords(message: str) -> Optional[str]:
    lowered = message.lower()
    hits: List[str] = []
    for word in FOOD_KEYWORDS:
        if word not in hits and has_phrase(lowered, word):
            hits.append(word)
    return " and ".join(hits) or None


_FOOD_NAME_PIPELINE: Sequence[Callable[[str], Optional[str]]] = (
    *(_food_from_pattern(p) for p in _FOOD_PATTERNS),
    _food_from_keywords,
)


def resolve_food_name(message: str) -> str:
    """First successful step of: verb pattern, copula pattern, preparation pattern, keyword join."""
    for step in _FOOD_NAME_PIPELINE:
        name = step(message)
        if name:
            name = name[:DESCRIPTION_LIMIT]
            return name[0].upper() + name[1:]
    return "Mixed meal"


def estimate_calories(lowered: str, meal_type: str) -> int:
    explicit = _CALORIES_RE.search(lowered)
    if explicit:
        return int(explicit.group(1))
    calories = MEAL_BASE_CALORIES[meal_type]
    if contains_any(lowered, CARB_WORDS):
        calories += CARB_BONUS
    if contains_any(lowered, PROTEIN_WORDS):
        calories += PROTEIN_BONUS
    if contains_any(lowered, VEGETABLE_WORDS):
        calories -= VEGETABLE_DISCOUNT
    return calories


def macros_for(calories: float) -> Tuple[float, float, float]:
    """(protein, carbs, fat) grams from the fixed 15/45/30 split."""
    protein = round(calories * PROTEIN_RATIO / KCAL_PER_G_PROTEIN, 1)
    carbs = round(calories * CARBS_RATIO / KCAL_PER_G_CARBS, 1)
    fat = round(calories * FAT_RATIO / KCAL_PER_G_FAT, 1)
    return protein, carbs, fat


def extract_meal_log(message: str, now: datetime) -> MealLogRecord:
    lowered = message.lower()
    meal_type = resolve_meal_type(lowered, now.hour)
    calories = estimate_calories(lowered, meal_type)
    protein, carbs, fat = macros_for(calories)
    return MealLogRecord(
        name=resolve_food_name(message),
        meal_type=meal_type,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        date=now.date(),
    )


# ---------------- Planner ----------------
def resolve_planner_kind(lowered: str) -> Tuple[str, str]:
    """(item_type, title); workout vocabulary is checked before meal vocabulary."""
    if contains_any(lowered, PLANNER_WORKOUT_WORDS):
        return "workout", "Planned workout session"
    if contains_any(lowered, PLANNER_MEAL_WORDS):
        return "meal", "Planned meal"
    return "other", "Planned activity"


def extract_planner_items(message: str, now: datetime) -> List[PlannerItemRecord]:
    lowered = message.lower()
    item_type, title = resolve_planner_kind(lowered)
    time = resolve_time(lowered, item_type)
    duration = parse_duration(lowered) or DEFAULT_PLANNED_MINUTES
    return [
        PlannerItemRecord(title=title, item_type=item_type, date=day, time=time, duration_minutes=duration)
        for day in resolve_dates(lowered, now).dates
    ]


def build_auto_planner_item(now: datetime) -> PlannerItemRecord:
    """Planner entry added alongside every created workout."""
    return PlannerItemRecord(
        title="Workout Session",
        item_type="workout",
        date=now.date(),
        time=resolve_time("", "workout"),
        duration_minutes=DEFAULT_PLANNED_MINUTES,
    )


# ---------------- Workout creation ----------------
def resolve_archetype(lowered: str) -> Tuple[str, str]:
    return first_match(lowered, WORKOUT_ARCHETYPES) or DEFAULT_ARCHETYPE


def template_key_for(name: str, workout_type: str) -> str:
    if workout_type == "cardio":
        return "cardio"
    if workout_type == "strength":
        return first_match(name.lower(), STRENGTH_TEMPLATES) or "full_body"
    return "full_body"


def extract_workout_creation(message: str, now: datetime) -> WorkoutCreationRecord:
    lowered = message.lower()
    name, workout_type = resolve_archetype(lowered)
    return WorkoutCreationRecord(
        name=name,
        workout_type=workout_type,
        description=f"Created by your AI coach: {message[:DESCRIPTION_LIMIT]}",
        date=now.date(),
        exercises=build_template(template_key_for(name, workout_type)),
    )
