import pytest

from coach_app.agents.extractors import (
    extract_meal_log,
    extract_planner_items,
    extract_workout_creation,
    extract_workout_log,
)
from coach_app.agents.record_writer import RecordWriter, WriteStatus
from coach_app.agents.records import WorkoutCreationRecord

from conftest import FlakyStore


@pytest.mark.asyncio
async def test_push_workout_writes_full_tree(store, now):
    writer = RecordWriter(store)
    outcome = await writer.write_workout_creation(extract_workout_creation("create a push workout", now), "user-1")

    assert outcome.status is WriteStatus.SUCCEEDED
    assert len(await store.select("workouts")) == 1
    exercises = await store.select("exercises", filters={"workout_id": outcome.record_id})
    assert len(exercises) == 4
    sets = await store.select("exercise_sets")
    assert len(sets) == 12
    assert sorted({s["set_order"] for s in sets}) == [1, 2, 3]
    assert all(r.sets_written == 3 for r in outcome.exercises)


@pytest.mark.asyncio
async def test_workout_row_attributes(store, now):
    writer = RecordWriter(store)
    outcome = await writer.write_workout_creation(extract_workout_creation("create a leg workout", now), "user-1")
    (row,) = await store.select("workouts", filters={"id": outcome.record_id})
    assert row["user_id"] == "user-1"
    assert row["date"] == "2025-03-03"
    assert row["name"] == "Leg Day"
    assert row["is_completed"] is False


@pytest.mark.asyncio
async def test_empty_exercise_list_is_hard_failure(store, now):
    flaky = FlakyStore(store)
    record = WorkoutCreationRecord(name="Empty", workout_type="general", description="", date=now.date())
    outcome = await RecordWriter(flaky).write_workout_creation(record, "user-1")
    assert outcome.status is WriteStatus.FAILED
    assert flaky.inserts == []


@pytest.mark.asyncio
async def test_failed_workout_row_aborts_exercises(store, now):
    flaky = FlakyStore(store, fail_tables={"workouts"})
    outcome = await RecordWriter(flaky).write_workout_creation(extract_workout_creation("create a push workout", now), "u")
    assert outcome.status is WriteStatus.FAILED
    assert outcome.exercises == []
    assert flaky.inserts == []


@pytest.mark.asyncio
async def test_failed_exercise_is_skipped(store, now):
    flaky = FlakyStore(store, fail_exercises={"Deadlifts"})
    outcome = await RecordWriter(flaky).write_workout_creation(extract_workout_creation("create a leg workout", now), "u")

    assert outcome.status is WriteStatus.PARTIAL
    assert outcome.ok
    assert [r.name for r in outcome.exercises if not r.ok] == ["Deadlifts"]
    assert [r["name"] for r in await store.select("exercises")] == ["Squats", "Lunges", "Calf Raises"]
    assert len(await store.select("exercise_sets")) == 9


@pytest.mark.asyncio
async def test_failed_set_batch_is_partial(store, now):
    flaky = FlakyStore(store, fail_tables={"exercise_sets"})
    outcome = await RecordWriter(flaky).write_workout_creation(extract_workout_creation("create a push workout", now), "u")
    assert outcome.status is WriteStatus.PARTIAL
    assert len(await store.select("exercises")) == 4
    assert await store.select("exercise_sets") == []


@pytest.mark.asyncio
async def test_workout_log_row(store, now):
    outcome = await RecordWriter(store).write_workout_log(extract_workout_log("ran 5k in 25 minutes", now), "user-2")
    assert outcome.status is WriteStatus.SUCCEEDED
    (row,) = await store.select("workouts", filters={"user_id": "user-2"})
    assert (row["name"], row["duration_minutes"], row["is_completed"], row["date"]) == ("Running", 25, True, "2025-03-03")


@pytest.mark.asyncio
async def test_meal_log_row(store, now):
    outcome = await RecordWriter(store).write_meal_log(extract_meal_log("I ate chicken and rice for lunch", now), "user-2")
    assert outcome.ok
    (row,) = await store.select("food_entries")
    assert row["meal_type"] == "lunch"
    assert row["calories"] == 600
    assert (row["protein"], row["carbs"], row["fat"]) == (22.5, 67.5, 20.0)


@pytest.mark.asyncio
async def test_planner_rows_and_failure(store, now):
    writer = RecordWriter(store)
    for item in extract_planner_items("schedule workout every monday in march 2025", now):
        assert (await writer.write_planner_item(item, "user-3")).ok
    rows = await store.select("planned_items", order_by="date")
    assert [r["date"] for r in rows] == ["2025-03-03", "2025-03-10", "2025-03-17", "2025-03-24", "2025-03-31"]
    assert {r["time"] for r in rows} == {"18:00"}

    failing = RecordWriter(FlakyStore(store, fail_tables={"planned_items"}))
    outcome = await failing.write_planner_item(extract_planner_items("schedule a meal tomorrow", now)[0], "user-3")
    assert outcome.status is WriteStatus.FAILED
    assert outcome.error


@pytest.mark.asyncio
async def test_unresolved_recurrence_writes_nothing(store, now):
    flaky = FlakyStore(store)
    writer = RecordWriter(flaky)
    for item in extract_planner_items("schedule yoga every week", now):
        await writer.write_planner_item(item, "u")
    assert flaky.inserts == []
