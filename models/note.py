from enum import Enum
from pydantic import Field
from typing import Optional

from .base import BaseRecord


class NoteResourceType(str, Enum):
    SERIES = "series"
    EVENT = "event"
    ROUND = "round"
    COURSE = "course"
    PLAYER = "player"


class UserNote(BaseRecord):
    """A private note, optionally pinned to another record."""
    user_id: str
    content: str = Field(..., min_length=1)
    related_resource_id: Optional[str] = None
    related_resource_type: Optional[NoteResourceType] = None
