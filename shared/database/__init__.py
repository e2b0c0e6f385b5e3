"""
Shared database module for the fitness coach
"""

from .connection import (
    Base,
    engine,
    SessionLocal,
    build_engine,
    check_connection,
    create_all_tables,
    drop_all_tables,
)

from .models import (
    Workouts,
    Exercises,
    ExerciseSets,
    FoodEntries,
    PlannedItems,
    Profiles,
    UserGoals,
    ProgressEntries,
    TABLES,
)

from .store import FitnessStore, SqlAlchemyStore, StoreError

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "build_engine",
    "check_connection",
    "create_all_tables",
    "drop_all_tables",
    "Workouts",
    "Exercises",
    "ExerciseSets",
    "FoodEntries",
    "PlannedItems",
    "Profiles",
    "UserGoals",
    "ProgressEntries",
    "TABLES",
    "FitnessStore",
    "SqlAlchemyStore",
    "StoreError",
]
