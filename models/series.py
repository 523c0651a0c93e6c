from datetime import date
from enum import Enum
from pydantic import Field, model_validator
from typing import Dict, FrozenSet, Optional

from .base import BaseRecord


class SeriesStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SeriesType(str, Enum):
    LEAGUE = "league"
    TOURNAMENT = "tournament"
    LADDER = "ladder"


class ScoringType(str, Enum):
    GROSS = "gross"
    NET = "net"
    BOTH = "both"


# upcoming -> active -> completed, with cancellation allowed before completion.
SERIES_TRANSITIONS: Dict[SeriesStatus, FrozenSet[SeriesStatus]] = {
    SeriesStatus.UPCOMING: frozenset({SeriesStatus.ACTIVE, SeriesStatus.CANCELLED}),
    SeriesStatus.ACTIVE: frozenset({SeriesStatus.COMPLETED, SeriesStatus.CANCELLED}),
    SeriesStatus.COMPLETED: frozenset(),
    SeriesStatus.CANCELLED: frozenset(),
}


class Series(BaseRecord):
    """A competition container holding events and a participant roster."""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: date
    end_date: date
    status: SeriesStatus = SeriesStatus.UPCOMING
    series_type: SeriesType = SeriesType.LEAGUE
    scoring_type: ScoringType = ScoringType.GROSS
    max_participants: Optional[int] = Field(None, ge=1)
    registration_deadline: Optional[date] = None
    created_by: Optional[str] = None

    @model_validator(mode='after')
    def validate_date_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self

    def can_transition_to(self, new_status: SeriesStatus) -> bool:
        """True if moving from the current status to ``new_status`` is allowed."""
        new_status = SeriesStatus(new_status)
        if new_status == self.status:
            return True
        return new_status in SERIES_TRANSITIONS[self.status]
