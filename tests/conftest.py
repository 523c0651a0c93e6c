import copy
import re
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from database.db_manager import DatabaseManager
from database.store import FILTER_OPERATORS, SelectResult
from models import (
    BagSetup,
    Course,
    Event,
    EventParticipant,
    Profile,
    Round,
    Score,
    Series,
    SeriesParticipant,
    TeeSet,
    UserNote,
)

TABLE_MODELS = {
    "bag_setups": BagSetup,
    "courses": Course,
    "tee_sets": TeeSet,
    "series": Series,
    "series_participants": SeriesParticipant,
    "events": Event,
    "event_participants": EventParticipant,
    "profiles": Profile,
    "rounds": Round,
    "scores": Score,
    "user_notes": UserNote,
}

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ================================================================
# In-memory store double
# ================================================================

def _like(pattern: str, value: Any, flags: int = 0) -> bool:
    if value is None:
        return False
    regex = ".*".join(re.escape(part) for part in pattern.split("%"))
    return re.fullmatch(regex, str(value), flags) is not None


def _matches(row: Dict[str, Any], column: str, op: str, value: Any) -> bool:
    actual = row.get(column)
    if op == "eq":
        return actual == value
    if op == "neq":
        return actual != value
    if op == "is":
        return actual is value
    if op == "in":
        return actual in value
    if op == "contains":
        return actual is not None and all(v in actual for v in value)
    if op == "like":
        return _like(value, actual)
    if op == "ilike":
        return _like(value, actual, re.IGNORECASE)
    if actual is None:
        return False
    return {
        "gt": actual > value,
        "gte": actual >= value,
        "lt": actual < value,
        "lte": actual <= value,
    }[op]


class FakeTableQuery:
    """Same builder surface as database.store.TableQuery, backed by FakeStore."""

    def __init__(self, store: "FakeStore", table: str):
        self._store = store
        self._table = table
        self._filters: List[Tuple[str, str, Any]] = []
        self._order: List[Tuple[str, bool]] = []
        self._range: Optional[Tuple[int, int]] = None

    def filter(self, column, op, value):
        assert op in FILTER_OPERATORS, op
        self._filters.append((column, op, value))
        return self

    def eq(self, column, value):
        return self.filter(column, "eq", value)

    def neq(self, column, value):
        return self.filter(column, "neq", value)

    def gt(self, column, value):
        return self.filter(column, "gt", value)

    def gte(self, column, value):
        return self.filter(column, "gte", value)

    def lt(self, column, value):
        return self.filter(column, "lt", value)

    def lte(self, column, value):
        return self.filter(column, "lte", value)

    def like(self, column, pattern):
        return self.filter(column, "like", pattern)

    def ilike(self, column, pattern):
        return self.filter(column, "ilike", pattern)

    def in_(self, column, values):
        return self.filter(column, "in", list(values))

    def contains(self, column, value):
        return self.filter(column, "contains", value)

    def is_(self, column, value):
        return self.filter(column, "is", value)

    def order(self, column, *, ascending=True):
        self._order.append((column, ascending))
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def _matching(self) -> List[Dict[str, Any]]:
        rows = self._store.tables.setdefault(self._table, [])
        return [r for r in rows if all(_matches(r, c, o, v) for c, o, v in self._filters)]

    async def select(self, columns: str = "*", *, count: bool = False) -> SelectResult:
        self._store.record(self._table, "select")
        rows = self._matching()
        for column, ascending in reversed(self._order):
            rows = sorted(
                rows,
                key=lambda r: (r.get(column) is None, r.get(column)),
                reverse=not ascending,
            )
        total = len(rows)
        if self._range is not None:
            rows = rows[self._range[0]:self._range[1] + 1]
        if columns != "*":
            wanted = [c.strip() for c in columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        return SelectResult([dict(r) for r in rows], total if count else None)

    async def count(self) -> int:
        self._store.record(self._table, "count")
        return len(self._matching())

    async def insert(self, values):
        self._store.record(self._table, "insert")
        batch = [values] if isinstance(values, dict) else list(values)
        created = [self._store.new_row(self._table, v) for v in batch]
        self._store.tables.setdefault(self._table, []).extend(created)
        return [dict(r) for r in created]

    async def update(self, values):
        if not self._filters:
            raise ValueError("UPDATE requires at least one filter")
        self._store.record(self._table, "update")
        updated = []
        for row in self._matching():
            row.update(values)
            updated.append(dict(row))
        return updated

    async def delete(self):
        if not self._filters:
            raise ValueError("DELETE requires at least one filter")
        self._store.record(self._table, "delete")
        doomed = self._matching()
        rows = self._store.tables.setdefault(self._table, [])
        self._store.tables[self._table] = [r for r in rows if r not in doomed]
        return [dict(r) for r in doomed]


class FakeStore:
    """Stand-in for StoreClient keeping tables as lists of dicts.

    ``ops`` logs every (table, operation) in order. ``fail`` arms an
    exception for a future operation.
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.ops: List[Tuple[str, str]] = []
        self._failures: List[list] = []
        self._tick = 0

    def table(self, name: str) -> FakeTableQuery:
        return FakeTableQuery(self, name)

    def fail(self, table: str, op: str, exc: BaseException, after: int = 0) -> None:
        """Raise ``exc`` on the (after + 1)-th ``op`` against ``table``."""
        self._failures.append([table, op, exc, after])

    def record(self, table: str, op: str) -> None:
        for failure in self._failures:
            if failure[0] == table and failure[1] == op:
                if failure[3] == 0:
                    self._failures.remove(failure)
                    raise failure[2]
                failure[3] -= 1
        self.ops.append((table, op))

    def writes(self, table: str) -> List[str]:
        return [op for t, op in self.ops if t == table and op in ("insert", "update", "delete")]

    def now(self) -> datetime:
        self._tick += 1
        return _EPOCH + timedelta(seconds=self._tick)

    def new_row(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        row = {"id": str(uuid4()), **values}
        now = self.now()
        row.setdefault("created_at", now)
        row.setdefault("updated_at", now)
        model = TABLE_MODELS.get(table)
        if model is not None:
            # Fill column defaults the way the table would
            full = model.model_validate(row).model_dump()
            row = {k: v.value if isinstance(v, Enum) else v for k, v in full.items()}
        return row

    def seed(self, table: str, **values: Any) -> Dict[str, Any]:
        row = self.new_row(table, values)
        self.tables.setdefault(table, []).append(row)
        return dict(row)

    def rows(self, table: str, **where: Any) -> List[Dict[str, Any]]:
        return [
            dict(r) for r in self.tables.get(table, [])
            if all(r.get(k) == v for k, v in where.items())
        ]

    @asynccontextmanager
    async def transaction(self):
        snapshot = copy.deepcopy(self.tables)
        try:
            yield self
        except BaseException:
            self.tables = snapshot
            raise


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def dbm(store):
    return DatabaseManager(store)


@pytest.fixture
def mock_pool():
    pool = MagicMock()
    conn = AsyncMock()
    conn.transaction = MagicMock()
    conn.transaction.return_value.__aenter__.return_value = None
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


@pytest.fixture
def user_id():
    return str(uuid4())


@pytest.fixture
def other_user_id():
    return str(uuid4())
