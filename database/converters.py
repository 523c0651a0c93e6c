"""Conversion between store rows, API payloads and pydantic records.

The store returns snake_case rows with driver types (UUID, Decimal); payloads
may arrive in camelCase. Everything is normalized here so the repositories
only ever deal with snake_case dicts of plain values.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Type, TypeVar
from uuid import UUID

from models import BaseRecord
from models.casing import keys_to_snake

M = TypeVar("M", bound=BaseRecord)


# ================================================================
# Row -> dict / model (reads)
# ================================================================

def _plain(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def record_to_dict(record: Mapping[str, Any]) -> Dict[str, Any]:
    """asyncpg Record (or any mapping) -> dict of plain Python values."""
    return {key: _plain(value) for key, value in record.items()}


def row_to_model(model: Type[M], row: Mapping[str, Any]) -> M:
    """Store row -> record model. Extra columns are ignored."""
    return model.model_validate(dict(row))


def rows_to_models(model: Type[M], rows: Iterable[Mapping[str, Any]]) -> List[M]:
    return [row_to_model(model, r) for r in rows]


# ================================================================
# Payload -> row dict (writes)
# ================================================================

def payload_to_row(
    payload: Mapping[str, Any],
    columns: FrozenSet[str],
    *,
    exclude: FrozenSet[str] = frozenset(),
) -> Dict[str, Any]:
    """camelCase or snake_case payload -> snake_case dict of known, writable columns."""
    row = keys_to_snake(dict(payload))
    return {
        key: _enum_value(value)
        for key, value in row.items()
        if key in columns and key not in exclude
    }


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value
