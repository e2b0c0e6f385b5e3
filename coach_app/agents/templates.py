"""Fixed exercise templates used when a user asks the coach to create a workout."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class SetTemplate:
    reps: int
    order: int
    weight: Optional[float] = None


@dataclass
class ExerciseTemplate:
    name: str
    category: str
    rest_time_seconds: int
    sets: List[SetTemplate] = field(default_factory=list)


# (name, category, rest seconds, reps per set)
_Row = Tuple[str, str, int, Tuple[int, int, int]]

_PUSH: Tuple[_Row, ...] = (
    ("Bench Press", "chest", 90, (8, 8, 8)),
    ("Overhead Press", "shoulders", 90, (10, 10, 10)),
    ("Incline Dumbbell Press", "chest", 60, (10, 10, 10)),
    ("Tricep Dips", "arms", 60, (12, 12, 12)),
)
_PULL: Tuple[_Row, ...] = (
    ("Pull-ups", "back", 90, (8, 8, 8)),
    ("Barbell Rows", "back", 90, (10, 10, 10)),
    ("Lat Pulldowns", "back", 60, (12, 12, 12)),
    ("Bicep Curls", "arms", 60, (12, 12, 12)),
)
_LEGS: Tuple[_Row, ...] = (
    ("Squats", "legs", 120, (10, 10, 10)),
    ("Deadlifts", "legs", 120, (6, 6, 6)),
    ("Lunges", "legs", 60, (12, 12, 12)),
    ("Calf Raises", "legs", 45, (15, 15, 15)),
)
_FULL_BODY: Tuple[_Row, ...] = (
    ("Squats", "legs", 90, (10, 10, 10)),
    ("Push-ups", "chest", 60, (12, 12, 12)),
    ("Dumbbell Rows", "back", 60, (10, 10, 10)),
    ("Mountain Climbers", "core", 45, (20, 20, 20)),
)
_CARDIO: Tuple[_Row, ...] = (
    ("Jumping Jacks", "cardio", 30, (30, 30, 30)),
    ("Burpees", "cardio", 45, (10, 10, 10)),
    ("Mountain Climbers", "cardio", 30, (20, 20, 20)),
    ("High Knees", "cardio", 30, (30, 30, 30)),
)

TEMPLATES: Dict[str, Tuple[_Row, ...]] = {
    "push": _PUSH,
    "pull": _PULL,
    "legs": _LEGS,
    "full_body": _FULL_BODY,
    "cardio": _CARDIO,
}


def build_template(key: str) -> List[ExerciseTemplate]:
    """Fresh ExerciseTemplate list for a template key; set order is 1-based."""
    return [
        ExerciseTemplate(
            name=name,
            category=category,
            rest_time_seconds=rest,
            sets=[SetTemplate(reps=reps, order=i) for i, reps in enumerate(rep_targets, start=1)],
        )
        for name, category, rest, rep_targets in TEMPLATES[key]
    ]
