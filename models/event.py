from datetime import date
from enum import Enum
from pydantic import Field, model_validator
from typing import List, Optional

from .base import BaseRecord
from .event_participant import EventParticipant
from .series import ScoringType


class EventFormat(str, Enum):
    STROKE = "stroke"
    MATCH = "match"
    STABLEFORD = "stableford"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Event(BaseRecord):
    """A single competition day on a course, standalone or part of a series."""
    series_id: Optional[str] = None
    is_standalone: bool = True
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    event_date: date
    registration_close_date: Optional[date] = None
    course_id: str
    event_format: EventFormat = EventFormat.STROKE
    status: EventStatus = EventStatus.UPCOMING
    scoring_type: ScoringType = ScoringType.GROSS
    max_participants: Optional[int] = Field(None, ge=1)
    created_by: Optional[str] = None

    @model_validator(mode='after')
    def validate_registration_window(self):
        if self.registration_close_date and self.registration_close_date > self.event_date:
            raise ValueError("registration_close_date cannot be after event_date")
        return self


class EventWithParticipants(Event):
    participants: List[EventParticipant] = Field(default_factory=list)
