"""
Fitness Coach - Coach App

The COACH APP answers chat messages as a fitness coach and turns requests into
records in the user's fitness store.

Features:
- Intent classification for workout creation, workout logs, meals and planner requests
- Heuristic field extraction (durations, calories, macros, recurring dates, templates)
- Best-effort record writing with per-exercise outcomes
- Prompt conditioning on the user's recent profile, goals, workouts, meals and progress

Components:
- FitnessCoach: Orchestrates one message end to end
- RecordWriter: Persists extracted records through the store
- ContextBuilder: Builds the textual fitness digest
"""

__version__ = "1.0.0"
