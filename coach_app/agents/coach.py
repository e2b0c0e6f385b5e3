from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from langsmith.run_helpers import traceable

from coach_app.agents.classifier import Intent, classify_intent
from coach_app.agents.context_builder import ContextBuilder
from coach_app.agents.errors import InvalidRequestError
from coach_app.agents.extractors import (
    build_auto_planner_item,
    extract_meal_log,
    extract_planner_items,
    extract_workout_creation,
    extract_workout_log,
)
from coach_app.agents.llm_utils import OpenAITextGenerator
from coach_app.agents.record_writer import RecordWriter
from coach_app.agents.records import (
    MealLogRecord,
    PlannerItemRecord,
    WorkoutCreationRecord,
    WorkoutLogRecord,
)
from coach_app.agents.dates import local_now
from shared.database.store import FitnessStore

SYSTEM_PROMPT_TEMPLATE = """You are an expert AI fitness coach and nutritionist. Your role is to provide personalized, science-based fitness and nutrition guidance.

USER CONTEXT:
{context}

INSTRUCTIONS:
- Be encouraging, motivating, and supportive
- Provide specific, actionable advice
- Use emojis appropriately to make responses engaging
- Keep responses concise but informative (2-3 paragraphs max)
- Always consider the user's current fitness level and goals
- If workouts, meals or planner items were saved, confirm them briefly and do not ask the user to log them again
- Provide specific numbers for exercises (sets, reps, duration)
- For meal suggestions, include approximate calories and macros
- Be knowledgeable about exercise form, injury prevention, and progressive overload
- If the user asks about something unrelated to fitness/health, politely redirect back to fitness topics

RESPONSE STYLE:
- Start with encouraging words
- Provide the main advice or information
- End with a question or call to action to keep the conversation going"""


@dataclass
class Interpretation:
    """Classified intent plus the records it produced, before anything is written."""

    intent: Intent
    records: List[Any] = field(default_factory=list)


@dataclass
class CoachReply:
    response: str
    logged_items: List[str]
    intent: Intent
    duration_seconds: float = 0.0


def interpret(message: str, now: datetime) -> Interpretation:
    intent = classify_intent(message.lower())
    if intent is Intent.WORKOUT_CREATION:
        return Interpretation(intent, [extract_workout_creation(message, now), build_auto_planner_item(now)])
    if intent is Intent.WORKOUT_LOGGING:
        return Interpretation(intent, [extract_workout_log(message, now)])
    if intent is Intent.MEAL_LOGGING:
        return Interpretation(intent, [extract_meal_log(message, now)])
    if intent is Intent.PLANNER_REQUEST:
        return Interpretation(intent, extract_planner_items(message, now))
    return Interpretation(intent)


def describe_record(record: Any) -> str:
    """Confirmation line for one written top-level record."""
    if isinstance(record, WorkoutCreationRecord):
        return f"💪 Created workout: {record.name} ({len(record.exercises)} exercises)"
    if isinstance(record, WorkoutLogRecord):
        return f"🏋️ Logged workout: {record.name} ({record.duration_minutes} min)"
    if isinstance(record, MealLogRecord):
        return f"🍽️ Logged {record.meal_type}: {record.name} ({record.calories} cal)"
    if isinstance(record, PlannerItemRecord):
        return f"📅 Scheduled: {record.title} on {record.date.isoformat()} at {record.time}"
    raise TypeError(f"Unsupported record type: {type(record).__name__}")


def augment_message(message: str, logged_items: List[str]) -> str:
    if not logged_items:
        return message
    saved = "\n".join(logged_items)
    return (
        f"{message}\n\n"
        f"[Note: the following items were saved to the user's records:\n{saved}\n"
        "Acknowledge them briefly in your reply.]"
    )


class FitnessCoach:
    """Runs one chat message through classify -> extract -> write -> context -> reply."""

    def __init__(self, store: FitnessStore, generator: OpenAITextGenerator) -> None:
        self.store = store
        self.writer = RecordWriter(store)
        self.context_builder = ContextBuilder(store)
        self.generator = generator
        self.log = logging.getLogger("coach_app")

    async def _write(self, record: Any, user_id: str) -> bool:
        if isinstance(record, WorkoutCreationRecord):
            outcome = await self.writer.write_workout_creation(record, user_id)
        elif isinstance(record, WorkoutLogRecord):
            outcome = await self.writer.write_workout_log(record, user_id)
        elif isinstance(record, MealLogRecord):
            outcome = await self.writer.write_meal_log(record, user_id)
        else:
            outcome = await self.writer.write_planner_item(record, user_id)
        return outcome.ok

    @traceable(name="coach.handle", run_type="chain")
    async def handle(self, message: Optional[str], user_id: Optional[str], now: Optional[datetime] = None) -> CoachReply:
        t0 = time.time()
        if not message or not message.strip():
            raise InvalidRequestError("Message is required")
        if not user_id:
            raise InvalidRequestError("User ID is required")
        self.generator.ensure_configured()
        now = now or local_now()

        interpretation = interpret(message, now)
        self.log.info(f"Classified message as {interpretation.intent.value} ({len(interpretation.records)} records)")

        logged_items: List[str] = []
        for record in interpretation.records:
            if await self._write(record, user_id):
                logged_items.append(describe_record(record))

        context = await self.context_builder.build(user_id, now)
        self.log.debug(f"User fitness context: {context}")

        system_prompt = SYSTEM_PROMPT_TEMPLATE.format(context=context)
        response = await self.generator.generate(system_prompt, augment_message(message, logged_items))
        self.log.info("AI response generated successfully")

        return CoachReply(
            response=response,
            logged_items=logged_items,
            intent=interpretation.intent,
            duration_seconds=time.time() - t0,
        )
