"""Structured records produced by the extractors and consumed by the record writer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List

from coach_app.agents.templates import ExerciseTemplate, SetTemplate

__all__ = [
    "WorkoutLogRecord",
    "WorkoutCreationRecord",
    "MealLogRecord",
    "PlannerItemRecord",
    "ExerciseTemplate",
    "SetTemplate",
]


@dataclass
class WorkoutLogRecord:
    name: str
    duration_minutes: int
    description: str
    date: date


@dataclass
class WorkoutCreationRecord:
    name: str
    workout_type: str
    description: str
    date: date
    exercises: List[ExerciseTemplate] = field(default_factory=list)


@dataclass
class MealLogRecord:
    name: str
    meal_type: str
    calories: int
    protein: float
    carbs: float
    fat: float
    date: date


@dataclass
class PlannerItemRecord:
    title: str
    item_type: str
    date: date
    time: str
    duration_minutes: int
