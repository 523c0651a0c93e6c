"""Shared request models and query-parameter dependencies."""

from typing import Optional
from uuid import UUID

from fastapi import Query
from pydantic import BaseModel, ConfigDict

from database.pagination import DEFAULT_LIMIT, MAX_LIMIT, OrderParams, PageParams
from models.casing import to_camel, to_snake


class RequestModel(BaseModel):
    """Request body base: camelCase on the wire, snake_case or camelCase accepted."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def payload(self) -> dict:
        """Only the fields the client actually sent, snake_case."""
        return self.model_dump(exclude_unset=True)


class RespondRequest(RequestModel):
    """Answer to an invitation."""
    accept: bool


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: Optional[int] = Query(None, ge=0),
) -> PageParams:
    return PageParams(page=page, limit=limit, offset=offset)


def order_params(
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder", pattern="^(asc|desc)$"),
) -> Optional[OrderParams]:
    """``?sortBy=createdAt&sortOrder=desc``. Unknown columns are rejected downstream."""
    if not sort_by:
        return None
    return OrderParams(column=to_snake(sort_by), ascending=sort_order == "asc")


def uuids_to_str(payload: dict) -> dict:
    """Path and body UUIDs go to the store as text."""
    return {k: str(v) if isinstance(v, UUID) else v for k, v in payload.items()}
