from __future__ import annotations

from enum import Enum

from langsmith.run_helpers import traceable

from coach_app.agents.dates import find_month, find_weekday, mentions_time
from coach_app.agents.keywords import (
    ACTIVITY_KEYWORDS,
    CREATION_PHRASES,
    CREATION_VERBS,
    DATE_CUES,
    FOOD_KEYWORDS,
    GENERIC_LOGGING_VERBS,
    GENERIC_PLANNER_WORDS,
    LOGGED_WORKOUT_NOUNS,
    LOGGING_VERBS,
    MEAL_WORDS,
    PLANNER_WORDS,
    STRONG_CONSUMPTION,
    WEAK_CONSUMPTION,
    WORKOUT_NOUNS,
    contains_any,
)


class Intent(str, Enum):
    WORKOUT_CREATION = "workout_creation"
    WORKOUT_LOGGING = "workout_logging"
    MEAL_LOGGING = "meal_logging"
    PLANNER_REQUEST = "planner_request"
    NONE = "none"


def is_workout_creation(text: str) -> bool:
    if contains_any(text, CREATION_PHRASES):
        return True
    return contains_any(text, CREATION_VERBS) and contains_any(text, WORKOUT_NOUNS)


def is_workout_log(text: str) -> bool:
    if contains_any(text, LOGGING_VERBS) or contains_any(text, ACTIVITY_KEYWORDS):
        return True
    # "did", "finished" and friends need something to have done
    return contains_any(text, GENERIC_LOGGING_VERBS) and contains_any(text, LOGGED_WORKOUT_NOUNS)


def is_workout_related(text: str) -> bool:
    return is_workout_creation(text) or is_workout_log(text)


def is_meal_log(text: str) -> bool:
    if contains_any(text, STRONG_CONSUMPTION):
        return True
    return contains_any(text, WEAK_CONSUMPTION) and (
        contains_any(text, MEAL_WORDS) or contains_any(text, FOOD_KEYWORDS)
    )


def has_date_cue(text: str) -> bool:
    return (
        contains_any(text, DATE_CUES)
        or find_weekday(text) is not None
        or find_month(text) is not None
        or mentions_time(text)
    )


def is_planner_request(text: str) -> bool:
    if contains_any(text, PLANNER_WORDS):
        return True
    return contains_any(text, GENERIC_PLANNER_WORDS) and has_date_cue(text)


@traceable(name="classifier.classify_intent", run_type="chain")
def classify_intent(text: str) -> Intent:
    """Pick exactly one intent for a lowered message.

    Checks run in a fixed order and the first hit returns: creation, logging,
    meal, planner. Meal and planner checks also exclude anything
    workout-related, and planner excludes meal logs, so workouts always win.
    """
    if is_workout_creation(text):
        return Intent.WORKOUT_CREATION
    if is_workout_log(text):
        return Intent.WORKOUT_LOGGING
    if is_meal_log(text) and not is_workout_related(text):
        return Intent.MEAL_LOGGING
    if is_planner_request(text) and not is_workout_related(text) and not is_meal_log(text):
        return Intent.PLANNER_REQUEST
    return Intent.NONE
