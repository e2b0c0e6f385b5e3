from datetime import datetime
from typing import Any, Dict, List

import pytest
from sqlalchemy.orm import sessionmaker

from coach_app.agents.errors import ConfigurationError
from shared.database.connection import build_engine, create_all_tables, drop_all_tables
from shared.database.store import FitnessStore, SqlAlchemyStore, StoreError


# Monday 3 March 2025, early afternoon
FIXED_NOW = datetime(2025, 3, 3, 13, 0)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def store():
    engine = build_engine("sqlite://")
    create_all_tables(bind=engine)
    yield SqlAlchemyStore(sessionmaker(bind=engine, autoflush=False))
    drop_all_tables(bind=engine)
    engine.dispose()


class DummyGenerator:
    def __init__(self, reply: str = "Nice work! 💪 Keep it up.", configured: bool = True, error: Exception | None = None):
        self.reply = reply
        self.configured = configured
        self.error = error
        self.calls: List[Dict[str, str]] = []

    def ensure_configured(self):
        if not self.configured:
            raise ConfigurationError("OpenAI API key not configured")

    async def generate(self, system_prompt: str, user_message: str) -> str:
        self.calls.append({"system": system_prompt, "user": user_message})
        if self.error:
            raise self.error
        return self.reply


class FlakyStore(FitnessStore):
    """Delegates to a real store but fails selected operations."""

    def __init__(self, inner: FitnessStore, fail_tables=(), fail_exercises=(), fail_selects: bool = False):
        self.inner = inner
        self.fail_tables = set(fail_tables)
        self.fail_exercises = set(fail_exercises)
        self.fail_selects = fail_selects
        self.inserts: List[tuple] = []

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        if table in self.fail_tables or (table == "exercises" and row.get("name") in self.fail_exercises):
            raise StoreError(f"insert into {table} rejected")
        self.inserts.append((table, row))
        return await self.inner.insert(table, row)

    async def insert_many(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if table in self.fail_tables:
            raise StoreError(f"insert into {table} rejected")
        self.inserts.extend((table, row) for row in rows)
        return await self.inner.insert_many(table, rows)

    async def select(self, table, filters=None, gte=None, order_by=None, descending=False, limit=None):
        if self.fail_selects:
            raise StoreError(f"select from {table} failed")
        return await self.inner.select(table, filters=filters, gte=gte, order_by=order_by, descending=descending, limit=limit)

    async def update(self, table, values, filters):
        return await self.inner.update(table, values, filters)


@pytest.fixture
def generator():
    return DummyGenerator()
