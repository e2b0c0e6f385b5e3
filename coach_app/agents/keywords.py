"""Keyword vocabularies shared by the classifier and the extractors.

Tables are tuples so that evaluation order is the source order; callers rely
on first-match-wins.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Optional, Sequence, Tuple


@lru_cache(maxsize=None)
def _phrase_re(phrase: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(phrase) + r"\b")


def has_phrase(text: str, phrase: str) -> bool:
    return bool(_phrase_re(phrase).search(text))


def contains_any(text: str, phrases: Iterable[str]) -> bool:
    return any(has_phrase(text, p) for p in phrases)


def first_match(text: str, table: Sequence[Tuple[Tuple[str, ...], object]]) -> Optional[object]:
    """Result of the first (keywords, result) row with any keyword present."""
    for phrases, result in table:
        if contains_any(text, phrases):
            return result
    return None


# ---------------- Workout creation ----------------
CREATION_VERBS = ("create", "make", "build", "design", "generate", "give me")
WORKOUT_NOUNS = ("workout", "workouts", "training plan", "training program", "exercise routine")
CREATION_PHRASES = (
    "push workout", "pull workout", "leg workout", "legs workout", "leg day", "push day", "pull day",
    "upper body workout", "lower body workout", "full body workout", "cardio workout",
    "hiit workout", "strength workout", "chest workout", "back workout", "arm workout",
    "arms workout", "shoulder workout", "core workout", "abs workout", "workout plan",
    "workout routine",
)

# ---------------- Workout logging ----------------
LOGGING_VERBS = (
    "ran", "jogged", "lifted", "trained", "worked out", "walked", "swam", "cycled", "biked",
    "hiked", "rowed", "log my workout", "log a workout", "log workout", "log my run",
    "log my training",
)
# Only count as logging next to a workout noun or an activity keyword.
GENERIC_LOGGING_VERBS = ("did", "done", "completed", "finished", "went for a")
LOGGED_WORKOUT_NOUNS = WORKOUT_NOUNS + (
    "exercise", "exercises", "training", "session", "sets", "reps", "gym", "run", "walk",
    "swim", "hike", "ride", "class",
)

# Ordered activity table: keywords -> canonical display name.
ACTIVITY_NAMES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("bench press", "benched"), "Bench Press"),
    (("deadlift", "deadlifts", "deadlifted"), "Deadlifts"),
    (("squat", "squats", "squatted"), "Squats"),
    (("overhead press", "shoulder press"), "Overhead Press"),
    (("pull-ups", "pull ups", "pullups", "chin-ups"), "Pull-ups"),
    (("push-ups", "push ups", "pushups"), "Push-ups"),
    (("running", "ran", "jogging", "jogged"), "Running"),
    (("cycling", "cycled", "biked", "biking", "bike ride"), "Cycling"),
    (("swimming", "swam"), "Swimming"),
    (("walking", "walked"), "Walking"),
    (("hiking", "hiked"), "Hiking"),
    (("rowing", "rowed"), "Rowing"),
    (("yoga",), "Yoga"),
    (("pilates",), "Pilates"),
    (("hiit",), "HIIT Workout"),
    (("cardio",), "Cardio Session"),
    (("weightlifting", "weights", "lifted", "lifting"), "Weight Training"),
    (("stretching", "stretched"), "Stretching"),
)
ACTIVITY_KEYWORDS = tuple(kw for phrases, _ in ACTIVITY_NAMES for kw in phrases)

# ---------------- Meals ----------------
MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")
STRONG_CONSUMPTION = ("ate", "eaten", "log my meal", "log a meal", "log meal", "log food", "log my food")
WEAK_CONSUMPTION = ("had", "have had", "drank", "eating", "having", "consumed")
MEAL_WORDS = MEAL_TYPES + ("meal", "supper", "brunch")

CARB_WORDS = (
    "rice", "pasta", "bread", "potato", "potatoes", "noodles", "oats", "oatmeal", "cereal",
    "pizza", "bagel", "toast", "tortilla", "quinoa", "fries", "sandwich", "burrito",
)
PROTEIN_WORDS = (
    "chicken", "beef", "steak", "fish", "salmon", "tuna", "egg", "eggs", "turkey", "pork",
    "tofu", "shrimp", "protein", "yogurt", "burger",
)
VEGETABLE_WORDS = (
    "salad", "vegetables", "veggies", "broccoli", "spinach", "kale", "greens", "lettuce",
    "carrots", "asparagus",
)
OTHER_FOOD_WORDS = ("fruit", "apple", "banana", "berries", "smoothie", "nuts", "cheese", "soup", "milk")
FOOD_KEYWORDS = PROTEIN_WORDS + CARB_WORDS + VEGETABLE_WORDS + OTHER_FOOD_WORDS

# ---------------- Planner ----------------
PLANNER_WORDS = (
    "schedule", "remind me", "planner", "calendar", "add to my planner", "add to my calendar",
    "set a reminder",
)
# Only count as planning together with a date or time cue.
GENERIC_PLANNER_WORDS = ("plan", "book")
DATE_CUES = ("today", "tonight", "tomorrow", "next week", "this week", "weekend", "every")
PLANNER_WORKOUT_WORDS = (
    "workout", "exercise", "training", "gym", "run", "running", "yoga", "cardio", "lift",
    "lifting", "swim", "bike", "hiit", "session",
)
PLANNER_MEAL_WORDS = ("meal", "breakfast", "lunch", "dinner", "snack", "eat", "food", "meal prep")
