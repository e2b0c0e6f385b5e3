"""Persists extracted records through the store, one insert per entity.

Nothing here is transactional: a created workout keeps whatever exercises
made it in even when a sibling fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from coach_app.agents.dates import to_local_day
from coach_app.agents.records import (
    ExerciseTemplate,
    MealLogRecord,
    PlannerItemRecord,
    WorkoutCreationRecord,
    WorkoutLogRecord,
)
from shared.database.store import FitnessStore, StoreError

logger = logging.getLogger("coach_app")

CREATED_WORKOUT_MINUTES = 60


class WriteStatus(str, Enum):
    SUCCEEDED = "succeeded"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class ExerciseWriteResult:
    name: str
    exercise_id: Optional[str] = None
    sets_written: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class WriteOutcome:
    status: WriteStatus
    record_id: Optional[str] = None
    error: Optional[str] = None
    exercises: List[ExerciseWriteResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the top-level row exists, even if some children failed."""
        return self.status is not WriteStatus.FAILED


class RecordWriter:
    def __init__(self, store: FitnessStore) -> None:
        self.store = store

    async def _insert_one(self, table: str, row: Dict[str, Any], label: str) -> WriteOutcome:
        try:
            created = await self.store.insert(table, row)
        except StoreError as e:
            logger.error(f"Failed to write {label}: {e}")
            return WriteOutcome(status=WriteStatus.FAILED, error=str(e))
        logger.info(f"Wrote {label} {created.get('id')}")
        return WriteOutcome(status=WriteStatus.SUCCEEDED, record_id=created.get("id"))

    async def write_workout_log(self, record: WorkoutLogRecord, user_id: str) -> WriteOutcome:
        row = {
            "user_id": user_id,
            "name": record.name,
            "duration_minutes": record.duration_minutes,
            "description": record.description,
            "is_completed": True,
            "date": to_local_day(record.date),
        }
        return await self._insert_one("workouts", row, "workout log")

    async def write_meal_log(self, record: MealLogRecord, user_id: str) -> WriteOutcome:
        row = {
            "user_id": user_id,
            "name": record.name,
            "meal_type": record.meal_type,
            "calories": record.calories,
            "protein": record.protein,
            "carbs": record.carbs,
            "fat": record.fat,
            "date": to_local_day(record.date),
        }
        return await self._insert_one("food_entries", row, "food entry")

    async def write_planner_item(self, record: PlannerItemRecord, user_id: str) -> WriteOutcome:
        row = {
            "user_id": user_id,
            "title": record.title,
            "type": record.item_type,
            "date": to_local_day(record.date),
            "time": record.time,
            "duration": record.duration_minutes,
            "completed": False,
        }
        return await self._insert_one("planned_items", row, "planned item")

    async def _write_exercise(self, workout_id: str, exercise: ExerciseTemplate) -> ExerciseWriteResult:
        result = ExerciseWriteResult(name=exercise.name)
        try:
            created = await self.store.insert(
                "exercises",
                {
                    "workout_id": workout_id,
                    "name": exercise.name,
                    "category": exercise.category,
                    "rest_time": exercise.rest_time_seconds,
                },
            )
        except StoreError as e:
            logger.warning(f"Skipping exercise {exercise.name}: {e}")
            result.error = str(e)
            return result
        result.exercise_id = created.get("id")

        set_rows = [
            {
                "exercise_id": result.exercise_id,
                "reps": s.reps,
                "weight": s.weight,
                "set_order": s.order,
                "is_completed": False,
            }
            for s in exercise.sets
        ]
        try:
            written = await self.store.insert_many("exercise_sets", set_rows)
        except StoreError as e:
            logger.warning(f"Failed to write sets for {exercise.name}: {e}")
            result.error = str(e)
            return result
        result.sets_written = len(written)
        return result

    async def write_workout_creation(self, record: WorkoutCreationRecord, user_id: str) -> WriteOutcome:
        """Workout row first, then each exercise and its set batch.

        An empty exercise list or a failed workout row fails the whole
        operation; a failed exercise or set batch is logged and skipped.
        """
        if not record.exercises:
            logger.error(f"Refusing to create workout {record.name!r} without exercises")
            return WriteOutcome(status=WriteStatus.FAILED, error="workout has no exercises")

        parent = await self._insert_one(
            "workouts",
            {
                "user_id": user_id,
                "name": record.name,
                "description": record.description,
                "duration_minutes": CREATED_WORKOUT_MINUTES,
                "is_completed": False,
                "date": to_local_day(record.date),
            },
            "workout",
        )
        if not parent.ok:
            return parent

        for exercise in record.exercises:
            parent.exercises.append(await self._write_exercise(parent.record_id, exercise))

        if not all(r.ok for r in parent.exercises):
            parent.status = WriteStatus.PARTIAL
        return parent
