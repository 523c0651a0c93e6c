"""Generic CRUD over one table, returning tagged results.

Subclasses declare the table, the record model and which fields are
required on create or frozen on update. Store failures are logged and
wrapped as DatabaseError; nothing is retried.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

import asyncpg
from pydantic import ValidationError as ModelValidationError

from models import BaseRecord
from models.casing import keys_to_snake
from database.converters import payload_to_row, row_to_model, rows_to_models
from database.exceptions import (
    DatabaseError,
    ForbiddenError,
    IntegrityError,
    NotFoundError,
    ValidationError,
)
from database.pagination import OrderParams, Page, PageParams
from database.result import Err, Ok, Result
from database.store import FILTER_OPERATORS, StoreClient, TableQuery

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseRecord)

# Failures raised by the driver or the network, as opposed to programming errors.
STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

SYSTEM_FIELDS: FrozenSet[str] = frozenset({"id", "created_at", "updated_at"})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordRepository(Generic[M]):
    """Async CRUD for a single table."""

    table: str
    model: Type[M]
    entity: str = "Record"
    owner_field: Optional[str] = None
    required_fields: Tuple[str, ...] = ()
    immutable_fields: FrozenSet[str] = frozenset()
    default_order: Optional[OrderParams] = OrderParams(column="created_at", ascending=False)

    def __init__(self, store: StoreClient):
        self._store = store

    # ================================================================
    # Private helpers
    # ================================================================

    def _query(self, store: Optional[StoreClient] = None) -> TableQuery:
        return (store or self._store).table(self.table)

    @property
    def _columns(self) -> FrozenSet[str]:
        return self.model.column_names()

    @property
    def _frozen(self) -> FrozenSet[str]:
        """Fields an update may never touch."""
        owner = {self.owner_field} if self.owner_field else set()
        return SYSTEM_FIELDS | self.immutable_fields | owner

    def _store_error(self, exc: BaseException, message: str) -> Err:
        logger.error("%s (%s): %s", message, self.table, exc)
        if isinstance(exc, asyncpg.IntegrityConstraintViolationError):
            constraint = getattr(exc, "constraint_name", None)
            detail = f" ({constraint})" if constraint else ""
            return Err(IntegrityError(f"{message}: constraint violated{detail}", original=exc))
        return Err(DatabaseError(message, original=exc))

    def _validate_new(self, row: Dict[str, Any]) -> Optional[Err]:
        """Check a row about to be inserted. Returns Err, or None if valid."""
        missing = [f for f in self.required_fields if row.get(f) in (None, "")]
        if missing:
            return Err(ValidationError(
                f"{', '.join(missing)} required to create {self.entity.lower()}",
                details={"missing": missing},
            ))
        try:
            self.model.model_validate(row)
        except ModelValidationError as e:
            return Err(ValidationError(
                f"Invalid {self.entity.lower()}",
                details=e.errors(include_url=False, include_context=False),
            ))
        return None

    def _apply_filters(self, query: TableQuery, conditions: Mapping[str, Any]) -> None:
        """Translate {column: value | {op: value}} into store predicates.

        Raises ValidationError for unknown columns or operators. Operator
        operands of None are skipped, except ``is`` and ``neq`` (IS NOT NULL).
        """
        for column, value in conditions.items():
            if column not in self._columns:
                raise ValidationError(f"Unknown filter field: {column}")
            if value is None:
                continue
            if not isinstance(value, dict):
                query.eq(column, getattr(value, "value", value))
                continue
            for op, operand in value.items():
                if op not in FILTER_OPERATORS:
                    raise ValidationError(f"Unsupported filter operator: {op}")
                if operand is None and op not in ("is", "neq"):
                    continue
                if op in ("like", "ilike"):
                    operand = f"%{operand}%"
                elif op == "in" and not isinstance(operand, (list, tuple, set)):
                    operand = [operand]
                query.filter(column, op, operand)

    def _apply_order(self, query: TableQuery, order: Optional[OrderParams]) -> None:
        order = order or self.default_order
        if order is None:
            return
        if order.column not in self._columns:
            raise ValidationError(f"Cannot sort by unknown field: {order.column}")
        query.order(order.column, ascending=order.ascending)

    async def _update_row(
        self,
        record_id: str,
        changes: Dict[str, Any],
        message: str,
        *,
        extra_filters: Optional[Mapping[str, Any]] = None,
    ) -> Result[M]:
        """UPDATE one row by id with already-sanitized snake_case changes."""
        query = self._query().eq("id", record_id)
        for column, value in (extra_filters or {}).items():
            query.eq(column, value)
        try:
            rows = await query.update({**changes, "updated_at": utcnow()})
        except STORE_ERRORS as e:
            return self._store_error(e, message)
        if not rows:
            return Err(NotFoundError(f"{self.entity} {record_id} not found"))
        return Ok(row_to_model(self.model, rows[0]))

    async def _current_if_valid(self, record_id: str, changes: Mapping[str, Any]) -> Result[M]:
        """The stored record, or Err if applying ``changes`` would make it invalid."""
        current = await self.get_by_id(record_id)
        if not current.ok:
            return current
        try:
            self.model.model_validate({**current.data.model_dump(), **changes})
        except ModelValidationError as e:
            return Err(ValidationError(
                f"Invalid {self.entity.lower()}",
                details=e.errors(include_url=False, include_context=False),
            ))
        return current

    async def _select_models(self, query: TableQuery, message: str) -> Result[List[M]]:
        try:
            result = await query.select()
        except STORE_ERRORS as e:
            return self._store_error(e, message)
        return Ok(rows_to_models(self.model, result.rows))

    # ================================================================
    # Create
    # ================================================================

    async def create(self, payload: Mapping[str, Any]) -> Result[M]:
        """Insert a record and return it as stored."""
        row = payload_to_row(payload, self._columns, exclude=SYSTEM_FIELDS)
        invalid = self._validate_new(row)
        if invalid:
            return invalid
        try:
            rows = await self._query().insert(row)
        except STORE_ERRORS as e:
            return self._store_error(e, f"Failed to create {self.entity.lower()}")
        return Ok(row_to_model(self.model, rows[0]))

    # ================================================================
    # Read
    # ================================================================

    async def get_by_id(self, record_id: str) -> Result[M]:
        """Fetch one record. Visibility is decided by the store's RLS policies."""
        try:
            result = await self._query().eq("id", record_id).select()
        except STORE_ERRORS as e:
            return self._store_error(e, f"Failed to fetch {self.entity.lower()}")
        if not result.rows:
            return Err(NotFoundError(f"{self.entity} {record_id} not found"))
        return Ok(row_to_model(self.model, result.rows[0]))

    async def get_owned(self, record_id: str, user_id: str) -> Result[M]:
        """Fetch a record that must belong to ``user_id``."""
        if not self.owner_field:
            raise TypeError(f"{type(self).__name__} has no owner field")
        current = await self.get_by_id(record_id)
        if not current.ok:
            return current
        owner = getattr(current.data, self.owner_field)
        if owner != user_id:
            logger.warning(
                "User %s denied access to %s %s owned by %s",
                user_id, self.table, record_id, owner,
            )
            return Err(ForbiddenError(f"{self.entity} {record_id} belongs to another user"))
        return current

    async def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        page: Optional[PageParams] = None,
        order: Optional[OrderParams] = None,
        owner_id: Optional[str] = None,
    ) -> Result[Page[M]]:
        """Paginated list with equality (or operator) filters.

        ``owner_id`` is merged in last and overrides any owner key in
        ``filters``, so a caller can never widen the listing to other owners.
        """
        page = page or PageParams()
        conditions = keys_to_snake(dict(filters or {}))
        if owner_id is not None:
            if not self.owner_field:
                raise TypeError(f"{type(self).__name__} has no owner field")
            conditions[self.owner_field] = owner_id

        query = self._query()
        try:
            self._apply_filters(query, conditions)
            self._apply_order(query, order)
        except ValidationError as e:
            return Err(e)
        query.range(page.start, page.start + page.limit - 1)

        try:
            result = await query.select(count=True)
        except STORE_ERRORS as e:
            return self._store_error(e, f"Failed to list {self.table}")
        return Ok(Page(
            items=rows_to_models(self.model, result.rows),
            total=result.count or 0,
            page=page.page_number,
            limit=page.limit,
        ))

    # ================================================================
    # Update
    # ================================================================

    async def update(self, record_id: str, payload: Mapping[str, Any]) -> Result[M]:
        """Update only the supplied fields. Identity, owner and timestamps never change.

        The merged record is validated before anything is written.
        """
        changes = payload_to_row(payload, self._columns, exclude=self._frozen)
        if not changes:
            return await self.get_by_id(record_id)
        current = await self._current_if_valid(record_id, changes)
        if not current.ok:
            return current
        return await self._update_row(
            record_id, changes, f"Failed to update {self.entity.lower()}"
        )

    # ================================================================
    # Delete
    # ================================================================

    async def delete(self, record_id: str) -> Result[None]:
        """Delete a record. Deleting a record that does not exist succeeds."""
        try:
            rows = await self._query().eq("id", record_id).delete()
        except STORE_ERRORS as e:
            return self._store_error(e, f"Failed to delete {self.entity.lower()}")
        if not rows:
            logger.debug("Delete of %s %s matched no rows", self.table, record_id)
        return Ok(None)
