import pytest

from coach_app.agents.classifier import Intent
from coach_app.agents.coach import FitnessCoach, augment_message, interpret
from coach_app.agents.errors import ConfigurationError, InvalidRequestError, TextGenerationError
from coach_app.agents.records import PlannerItemRecord, WorkoutCreationRecord

from conftest import DummyGenerator, FlakyStore


def test_interpret_creation_adds_auto_planner_item(now):
    result = interpret("Create a leg workout", now)
    assert result.intent is Intent.WORKOUT_CREATION
    creation, planned = result.records
    assert isinstance(creation, WorkoutCreationRecord)
    assert isinstance(planned, PlannerItemRecord)
    assert planned.title == "Workout Session"


def test_interpret_chat_only(now):
    result = interpret("What's the weather like?", now)
    assert result.intent is Intent.NONE
    assert result.records == []


def test_augment_message_without_items_is_untouched():
    assert augment_message("hi", []) == "hi"


@pytest.mark.asyncio
async def test_leg_workout_end_to_end(store, generator, now):
    coach = FitnessCoach(store, generator)
    reply = await coach.handle("Create a leg workout", "user-1", now=now)

    assert reply.intent is Intent.WORKOUT_CREATION
    assert reply.response == generator.reply
    assert reply.logged_items == [
        "💪 Created workout: Leg Day (4 exercises)",
        "📅 Scheduled: Workout Session on 2025-03-03 at 18:00",
    ]
    assert len(await store.select("workouts")) == 1
    assert len(await store.select("exercise_sets")) == 12
    assert len(await store.select("planned_items")) == 1

    (call,) = generator.calls
    assert "USER CONTEXT:" in call["system"]
    # the freshly written workout already shows up in the digest
    assert "Leg Day: 60 min (Planned) - 2025-03-03" in call["system"]
    assert "[Note: the following items were saved" in call["user"]
    assert "💪 Created workout: Leg Day (4 exercises)" in call["user"]


@pytest.mark.asyncio
async def test_meal_logging_confirmation(store, generator, now):
    reply = await FitnessCoach(store, generator).handle("I ate chicken and rice for lunch", "user-1", now=now)
    assert reply.logged_items == ["🍽️ Logged lunch: Chicken and rice (600 cal)"]


@pytest.mark.asyncio
async def test_recurring_planner_confirms_each_date(store, generator, now):
    reply = await FitnessCoach(store, generator).handle("schedule workout every Monday in March 2025", "u", now=now)
    assert len(reply.logged_items) == 5
    assert reply.logged_items[-1] == "📅 Scheduled: Planned workout session on 2025-03-31 at 18:00"


@pytest.mark.asyncio
async def test_chat_only_writes_nothing(store, generator, now):
    flaky = FlakyStore(store)
    reply = await FitnessCoach(flaky, generator).handle("What's the weather like?", "user-1", now=now)
    assert reply.logged_items == []
    assert flaky.inserts == []
    assert generator.calls[0]["user"] == "What's the weather like?"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message",
    [
        "What did I eat for lunch yesterday?",
        "I finished my dinner",
        "I'm reading a good book about nutrition",
        "what's your plan for my diet?",
    ],
)
async def test_questions_and_small_talk_write_no_records(store, generator, now, message):
    flaky = FlakyStore(store)
    reply = await FitnessCoach(flaky, generator).handle(message, "u", now=now)
    assert reply.intent is Intent.NONE
    assert reply.logged_items == []
    assert flaky.inserts == []


@pytest.mark.asyncio
async def test_failed_write_is_not_confirmed(store, generator, now):
    flaky = FlakyStore(store, fail_tables={"food_entries"})
    reply = await FitnessCoach(flaky, generator).handle("I ate a banana", "user-1", now=now)
    assert reply.logged_items == []
    assert reply.response == generator.reply


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message,user_id,error",
    [
        ("", "user-1", "Message is required"),
        ("   ", "user-1", "Message is required"),
        (None, "user-1", "Message is required"),
        ("hello", "", "User ID is required"),
        ("hello", None, "User ID is required"),
    ],
)
async def test_validation(store, generator, now, message, user_id, error):
    with pytest.raises(InvalidRequestError, match=error):
        await FitnessCoach(store, generator).handle(message, user_id, now=now)
    assert generator.calls == []


@pytest.mark.asyncio
async def test_missing_credential_fails_before_any_write(store, now):
    flaky = FlakyStore(store)
    coach = FitnessCoach(flaky, DummyGenerator(configured=False))
    with pytest.raises(ConfigurationError):
        await coach.handle("I ate chicken and rice for lunch", "user-1", now=now)
    assert flaky.inserts == []


@pytest.mark.asyncio
async def test_generation_failure_keeps_written_records(store, now):
    generator = DummyGenerator(error=TextGenerationError("OpenAI API error: boom"))
    with pytest.raises(TextGenerationError):
        await FitnessCoach(store, generator).handle("ran for 45 minutes", "user-1", now=now)
    (row,) = await store.select("workouts")
    assert row["duration_minutes"] == 45


@pytest.mark.asyncio
async def test_context_failure_still_replies(store, now):
    class ReadFailingStore(FlakyStore):
        async def select(self, *args, **kwargs):
            raise RuntimeError("read timeout")

    generator = DummyGenerator()
    reply = await FitnessCoach(ReadFailingStore(store), generator).handle("hello coach", "user-1", now=now)
    assert reply.response == generator.reply
    assert "Error loading user context" in generator.calls[0]["system"]
