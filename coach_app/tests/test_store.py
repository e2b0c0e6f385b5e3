import pytest

from shared.database import FitnessStore, StoreError, check_connection


@pytest.mark.asyncio
async def test_insert_assigns_id_and_defaults(store):
    row = await store.insert("planned_items", {"user_id": "u", "title": "Yoga", "type": "other", "date": "2025-03-04", "time": "18:00"})
    assert len(row["id"]) == 36
    assert row["completed"] is False


@pytest.mark.asyncio
async def test_select_filters_orders_and_limits(store):
    await store.insert_many(
        "progress_entries",
        [{"user_id": "u", "weight": w, "date": d} for w, d in [(180.0, "2025-01-01"), (176.0, "2025-02-01"), (174.0, "2025-03-01")]],
    )
    await store.insert("progress_entries", {"user_id": "other", "weight": 150.0, "date": "2025-03-02"})

    rows = await store.select("progress_entries", filters={"user_id": "u"}, gte={"date": "2025-02-01"}, order_by="date", descending=True)
    assert [r["weight"] for r in rows] == [174.0, 176.0]
    latest = await store.select("progress_entries", filters={"user_id": "u"}, order_by="date", descending=True, limit=1)
    assert latest[0]["date"] == "2025-03-01"


@pytest.mark.asyncio
async def test_update_by_filter(store):
    row = await store.insert("planned_items", {"user_id": "u", "title": "Run", "type": "workout", "date": "2025-03-05", "time": "07:00"})
    assert await store.update("planned_items", {"completed": True}, {"id": row["id"]}) == 1
    (updated,) = await store.select("planned_items", filters={"id": row["id"]})
    assert updated["completed"] is True
    with pytest.raises(StoreError):
        await store.update("planned_items", {"completed": False}, {})


@pytest.mark.asyncio
async def test_errors_surface_as_store_error(store):
    with pytest.raises(StoreError):
        await store.select("nope")
    with pytest.raises(StoreError):
        await store.insert("workouts", {"user_id": "u", "name": "x", "date": "2025-03-03", "bogus": 1})
    with pytest.raises(StoreError):
        # missing NOT NULL date
        await store.insert("workouts", {"user_id": "u", "name": "x"})
    assert await store.insert_many("workouts", []) == []


def test_check_connection(store):
    engine = store.session_factory.kw["bind"]
    assert check_connection(bind=engine) is True


@pytest.mark.asyncio
async def test_unknown_columns_raise_store_error(store):
    with pytest.raises(StoreError, match="Unknown column"):
        await store.select("workouts", filters={"owner": "u"})
    with pytest.raises(StoreError, match="Unknown column"):
        await store.select("workouts", gte={"day": "2025-03-01"})
    with pytest.raises(StoreError, match="Unknown column"):
        await store.select("workouts", order_by="when")
    with pytest.raises(StoreError, match="Unknown column"):
        await store.update("workouts", {"is_completed": True}, {"owner": "u"})


def test_incomplete_store_cannot_be_created():
    class ReadOnlyStore(FitnessStore):
        async def select(self, table, filters=None, gte=None, order_by=None, descending=False, limit=None):
            return []

    with pytest.raises(TypeError):
        ReadOnlyStore()
