"""
Database models for the fitness coach (one table per store collection)
"""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Float, Text, DateTime, JSON, Boolean, ForeignKey
import uuid

from .connection import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Workouts(Base):
    __tablename__ = "workouts"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    duration_minutes = Column(Integer)
    is_completed = Column(Boolean, default=False)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD, user's local day
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Exercises(Base):
    __tablename__ = "exercises"

    id = Column(String(36), primary_key=True, default=_uuid)
    workout_id = Column(String(36), ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    category = Column(String)
    rest_time = Column(Integer)  # seconds
    created_at = Column(DateTime, default=datetime.utcnow)


class ExerciseSets(Base):
    __tablename__ = "exercise_sets"

    id = Column(String(36), primary_key=True, default=_uuid)
    exercise_id = Column(String(36), ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False)
    reps = Column(Integer, nullable=False)
    weight = Column(Float)
    set_order = Column(Integer, nullable=False)
    is_completed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class FoodEntries(Base):
    __tablename__ = "food_entries"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    meal_type = Column(String, nullable=False)
    calories = Column(Float, nullable=False)
    protein = Column(Float)
    carbs = Column(Float)
    fat = Column(Float)
    date = Column(String(10), nullable=False)
    logged_at = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)


class PlannedItems(Base):
    __tablename__ = "planned_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    type = Column(String, nullable=False)
    date = Column(String(10), nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM, 24h
    duration = Column(Integer)
    calories = Column(Float)
    difficulty = Column(String)
    completed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Profiles(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String, nullable=False, unique=True)
    display_name = Column(String)
    age = Column(Integer)
    height = Column(String)
    weight = Column(Float)
    fitness_level = Column(String)
    goals = Column(JSON)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class UserGoals(Base):
    __tablename__ = "user_goals"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String, nullable=False, unique=True)
    daily_calories = Column(Float)
    daily_protein = Column(Float)
    daily_carbs = Column(Float)
    daily_fat = Column(Float)
    daily_water = Column(Float)
    daily_workout_minutes = Column(Integer)
    weekly_workouts = Column(Integer)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ProgressEntries(Base):
    __tablename__ = "progress_entries"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String, nullable=False, index=True)
    weight = Column(Float)
    body_fat_percentage = Column(Float)
    notes = Column(Text)
    date = Column(String(10), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


TABLES = {
    model.__tablename__: model
    for model in (
        Workouts,
        Exercises,
        ExerciseSets,
        FoodEntries,
        PlannedItems,
        Profiles,
        UserGoals,
        ProgressEntries,
    )
}
