from datetime import datetime
from enum import Enum
from pydantic import Field
from typing import List, Optional

from .base import BaseRecord
from .score import Score


class RoundStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class Round(BaseRecord):
    """A round of golf played by a user, optionally as part of an event."""
    user_id: str
    event_id: Optional[str] = None
    course_id: str
    course_tee_id: str
    bag_id: Optional[str] = None
    round_date: Optional[datetime] = None
    status: RoundStatus = RoundStatus.IN_PROGRESS
    handicap_index_used: Optional[float] = Field(None, ge=-10, le=54)
    course_handicap: Optional[int] = Field(None, ge=-10, le=60)
    gross_score: Optional[int] = Field(None, ge=18, le=300)
    net_score: Optional[int] = None
    weather_conditions: Optional[str] = None
    course_conditions: Optional[str] = None
    wind_conditions: Optional[str] = None
    temperature: Optional[int] = None
    notes: Optional[str] = None


class RoundWithScores(Round):
    """A round with its hole-by-hole scores, ordered by hole number."""
    scores: List[Score] = Field(default_factory=list)

    def total_strokes(self) -> Optional[int]:
        """Total strokes over the holes scored so far."""
        return sum(s.strokes for s in self.scores) if self.scores else None

    def total_putts(self) -> Optional[int]:
        putts = [s.putts for s in self.scores if s.putts is not None]
        return sum(putts) if putts else None

    def front_nine(self) -> Optional[int]:
        front = [s.strokes for s in self.scores if s.hole_number <= 9]
        return sum(front) if front else None

    def back_nine(self) -> Optional[int]:
        back = [s.strokes for s in self.scores if s.hole_number >= 10]
        return sum(back) if back else None

    def is_complete(self) -> bool:
        """Every hole of a 9 or 18 hole round has a score."""
        holes = {s.hole_number for s in self.scores}
        expected = set(range(1, 19)) if any(h > 9 for h in holes) else set(range(1, 10))
        return holes == expected

    def summary(self) -> dict:
        return {
            "total_strokes": self.total_strokes(),
            "total_putts": self.total_putts(),
            "front_nine": self.front_nine(),
            "back_nine": self.back_nine(),
            "holes_played": len(self.scores),
            "is_complete": self.is_complete(),
        }
