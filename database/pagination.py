"""Paging and ordering parameters for list queries, and the page they produce."""

import math
from pydantic import BaseModel, Field
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class PageParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    offset: Optional[int] = Field(None, ge=0)

    @property
    def start(self) -> int:
        """Index of the first row. An explicit offset wins over page."""
        if self.offset is not None:
            return self.offset
        return (self.page - 1) * self.limit

    @property
    def page_number(self) -> int:
        return self.start // self.limit + 1


class OrderParams(BaseModel):
    column: str
    ascending: bool = True


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages

    def metadata(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasMore": self.has_more,
        }
