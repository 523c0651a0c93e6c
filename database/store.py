"""Table-scoped query client over an asyncpg pool.

Mirrors the hosted database's generic client: pick a table, chain filters,
then await one of select/insert/update/delete. Every operation runs on its own
connection inside a transaction that carries the caller's JWT claims, so the
store's row-level security policies decide what the caller may see or change.
"""

import json
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import asyncpg

from database.converters import record_to_dict

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_COMPARISONS = {
    "eq": "=",
    "neq": "<>",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
    "like": "LIKE",
    "ilike": "ILIKE",
    "contains": "@>",
}

FILTER_OPERATORS = frozenset(_COMPARISONS) | {"in", "is"}


def quote_identifier(name: str) -> str:
    """Quote a column or (schema-qualified) table name, rejecting anything odd."""
    parts = name.split(".")
    if len(parts) > 2 or not all(_IDENTIFIER.match(p) for p in parts):
        raise ValueError(f"Invalid identifier: {name!r}")
    return ".".join(f'"{p}"' for p in parts)


@dataclass
class SelectResult:
    rows: List[Dict[str, Any]]
    count: Optional[int] = None


class TableQuery:
    """Filter/order/range builder for one table. Terminal methods are coroutines."""

    def __init__(self, client: "StoreClient", table: str):
        self._client = client
        self._table = quote_identifier(table)
        self._filters: List[Tuple[str, str, Any]] = []
        self._order: List[Tuple[str, bool]] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    # ================================================================
    # Builders
    # ================================================================

    def filter(self, column: str, op: str, value: Any) -> "TableQuery":
        if op not in FILTER_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {op!r}")
        self._filters.append((quote_identifier(column), op, value))
        return self

    def eq(self, column: str, value: Any) -> "TableQuery":
        return self.filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> "TableQuery":
        return self.filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> "TableQuery":
        return self.filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> "TableQuery":
        return self.filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> "TableQuery":
        return self.filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> "TableQuery":
        return self.filter(column, "lte", value)

    def like(self, column: str, pattern: str) -> "TableQuery":
        return self.filter(column, "like", pattern)

    def ilike(self, column: str, pattern: str) -> "TableQuery":
        return self.filter(column, "ilike", pattern)

    def in_(self, column: str, values: Sequence[Any]) -> "TableQuery":
        return self.filter(column, "in", list(values))

    def contains(self, column: str, value: Any) -> "TableQuery":
        return self.filter(column, "contains", value)

    def is_(self, column: str, value: Optional[bool]) -> "TableQuery":
        return self.filter(column, "is", value)

    def order(self, column: str, *, ascending: bool = True) -> "TableQuery":
        self._order.append((quote_identifier(column), ascending))
        return self

    def range(self, start: int, end: int) -> "TableQuery":
        """Restrict to rows start..end inclusive."""
        if start < 0 or end < start:
            raise ValueError(f"Invalid range {start}..{end}")
        self._offset = start
        self._limit = end - start + 1
        return self

    # ================================================================
    # SQL compilation
    # ================================================================

    def _where(self, params: List[Any]) -> str:
        """Compile filters, appending bound values to ``params``."""
        clauses = []
        for column, op, value in self._filters:
            if op == "is" or (op in ("eq", "neq") and value is None):
                if value is None:
                    keyword = "IS NOT NULL" if op == "neq" else "IS NULL"
                elif value is True:
                    keyword = "IS TRUE"
                elif value is False:
                    keyword = "IS FALSE"
                else:
                    raise ValueError(f"'is' filter expects None/True/False, got {value!r}")
                clauses.append(f"{column} {keyword}")
            elif op == "in":
                params.append(list(value))
                clauses.append(f"{column} = ANY(${len(params)})")
            else:
                params.append(value)
                clauses.append(f"{column} {_COMPARISONS[op]} ${len(params)}")
        return f" WHERE {' AND '.join(clauses)}" if clauses else ""

    def _tail(self) -> str:
        sql = ""
        if self._order:
            sql += " ORDER BY " + ", ".join(
                f"{col} {'ASC' if asc else 'DESC'}" for col, asc in self._order
            )
        if self._limit is not None:
            sql += f" LIMIT {int(self._limit)}"
        if self._offset:
            sql += f" OFFSET {int(self._offset)}"
        return sql

    def _require_filters(self, action: str) -> None:
        if not self._filters:
            raise ValueError(f"{action} on {self._table} requires at least one filter")

    # ================================================================
    # Terminal operations
    # ================================================================

    async def select(self, columns: str = "*", *, count: bool = False) -> SelectResult:
        if columns != "*":
            columns = ", ".join(quote_identifier(c.strip()) for c in columns.split(","))
        params: List[Any] = []
        where = self._where(params)
        async with self._client.connection() as conn:
            rows = await conn.fetch(
                f"SELECT {columns} FROM {self._table}{where}{self._tail()}", *params
            )
            total = None
            if count:
                total = await conn.fetchval(
                    f"SELECT count(*) FROM {self._table}{where}", *params
                )
        return SelectResult([record_to_dict(r) for r in rows], total)

    async def count(self) -> int:
        params: List[Any] = []
        where = self._where(params)
        async with self._client.connection() as conn:
            return await conn.fetchval(f"SELECT count(*) FROM {self._table}{where}", *params)

    async def insert(
        self, values: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]
    ) -> List[Dict[str, Any]]:
        """Insert one or many rows. Keys missing from a row use the column DEFAULT."""
        rows = [values] if isinstance(values, Mapping) else list(values)
        if not rows:
            return []
        columns: List[str] = []
        for row in rows:
            for key in row:
                if key not in columns:
                    columns.append(key)

        params: List[Any] = []
        tuples = []
        for row in rows:
            slots = []
            for col in columns:
                if col in row:
                    params.append(row[col])
                    slots.append(f"${len(params)}")
                else:
                    slots.append("DEFAULT")
            tuples.append(f"({', '.join(slots)})")

        column_sql = ", ".join(quote_identifier(c) for c in columns)
        sql = (
            f"INSERT INTO {self._table} ({column_sql}) "
            f"VALUES {', '.join(tuples)} RETURNING *"
        )
        async with self._client.connection() as conn:
            result = await conn.fetch(sql, *params)
        return [record_to_dict(r) for r in result]

    async def update(self, values: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Update matching rows. Returns the updated rows."""
        self._require_filters("UPDATE")
        if not values:
            raise ValueError("UPDATE requires at least one column")
        params: List[Any] = list(values.values())
        set_clause = ", ".join(
            f"{quote_identifier(k)} = ${i + 1}" for i, k in enumerate(values)
        )
        where = self._where(params)
        async with self._client.connection() as conn:
            result = await conn.fetch(
                f"UPDATE {self._table} SET {set_clause}{where} RETURNING *", *params
            )
        return [record_to_dict(r) for r in result]

    async def delete(self) -> List[Dict[str, Any]]:
        """Delete matching rows. Returns the deleted rows."""
        self._require_filters("DELETE")
        params: List[Any] = []
        where = self._where(params)
        async with self._client.connection() as conn:
            result = await conn.fetch(f"DELETE FROM {self._table}{where} RETURNING *", *params)
        return [record_to_dict(r) for r in result]


class StoreClient:
    """Caller-scoped handle on the store.

    ``claims`` are the verified JWT claims of the caller (None for anonymous
    requests) and ``role`` the database role RLS policies are written for.
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        *,
        claims: Optional[Dict[str, Any]] = None,
        role: Optional[str] = None,
        connection: Optional[asyncpg.Connection] = None,
    ):
        self._pool = pool
        self._claims = claims
        self._role = role
        self._conn = connection

    def table(self, name: str) -> TableQuery:
        return TableQuery(self, name)

    async def _prepare(self, conn) -> None:
        """Expose the caller to RLS for the current transaction only."""
        if self._claims is not None:
            await conn.execute(
                "SELECT set_config('request.jwt.claims', $1, true)",
                json.dumps(self._claims, default=str),
            )
        if self._role:
            await conn.execute("SELECT set_config('role', $1, true)", self._role)

    @asynccontextmanager
    async def connection(self):
        """Yield a prepared connection: the bound one, or a fresh pooled one."""
        if self._conn is not None:
            yield self._conn
            return
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await self._prepare(conn)
                yield conn

    @asynccontextmanager
    async def transaction(self):
        """Yield a client whose operations share one connection and commit together."""
        if self._conn is not None:
            async with self._conn.transaction():
                yield self
            return
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await self._prepare(conn)
                yield StoreClient(
                    self._pool, claims=self._claims, role=self._role, connection=conn
                )
