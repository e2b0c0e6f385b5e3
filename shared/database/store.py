"""
Row-level CRUD interface over the store collections.

The coach only ever talks to the store through ``FitnessStore``; every call is
awaitable so request handlers never block the event loop on database I/O.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy import select as sa_select, update as sa_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .connection import SessionLocal
from .models import TABLES


class StoreError(Exception):
    """Raised when a store read or write fails."""


class FitnessStore(ABC):
    """Generic insert/select/update-by-filter operations against named collections."""

    @abstractmethod
    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def insert_many(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        gte: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> int:
        ...


def _row_to_dict(obj: Any) -> Dict[str, Any]:
    return {col.name: getattr(obj, col.name) for col in obj.__table__.columns}


class SqlAlchemyStore(FitnessStore):
    """FitnessStore backed by the SQLAlchemy models in ``shared.database.models``."""

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        self.session_factory = session_factory or SessionLocal
        self.log = logging.getLogger("coach_app")

    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise StoreError(f"Unknown table: {table}") from None

    def _column(self, model, key: str):
        try:
            return model.__table__.columns[key]
        except KeyError:
            raise StoreError(f"Unknown column for {model.__tablename__}: {key}") from None

    def _run(self, fn, *args):
        session: Session = self.session_factory()
        try:
            return fn(session, *args)
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(str(e)) from e
        finally:
            session.close()

    # --------- sync implementations (run in worker threads) ---------
    def _insert_many_sync(self, session: Session, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        model = self._model(table)
        try:
            objs = [model(**row) for row in rows]
        except TypeError as e:
            raise StoreError(f"Invalid row for {table}: {e}") from e
        session.add_all(objs)
        session.commit()
        for obj in objs:
            session.refresh(obj)
        return [_row_to_dict(obj) for obj in objs]

    def _select_sync(self, session: Session, table: str, filters, gte, order_by, descending, limit) -> List[Dict[str, Any]]:
        model = self._model(table)
        stmt = sa_select(model)
        for key, value in (filters or {}).items():
            stmt = stmt.where(self._column(model, key) == value)
        for key, value in (gte or {}).items():
            stmt = stmt.where(self._column(model, key) >= value)
        if order_by:
            column = self._column(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return [_row_to_dict(obj) for obj in session.scalars(stmt).all()]

    def _update_sync(self, session: Session, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> int:
        if not filters:
            raise StoreError("Refusing to update without a filter")
        model = self._model(table)
        stmt = sa_update(model).values(**values)
        for key, value in filters.items():
            stmt = stmt.where(self._column(model, key) == value)
        result = session.execute(stmt)
        session.commit()
        return result.rowcount or 0

    # --------- async interface ---------
    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = await asyncio.to_thread(self._run, self._insert_many_sync, table, [row])
        return rows[0]

    async def insert_many(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not rows:
            return []
        return await asyncio.to_thread(self._run, self._insert_many_sync, table, rows)

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        gte: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._run, self._select_sync, table, filters, gte, order_by, descending, limit)

    async def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> int:
        return await asyncio.to_thread(self._run, self._update_sync, table, values, filters)
