from pydantic import Field, model_validator
from typing import Optional

from .base import BaseRecord


class Score(BaseRecord):
    """A player's result on one hole of a round."""
    round_id: str
    hole_number: int = Field(..., ge=1, le=18)
    strokes: int = Field(..., ge=1, le=15)
    putts: Optional[int] = Field(None, ge=0, le=10)
    fairway_hit: Optional[bool] = None
    green_in_regulation: Optional[bool] = None

    @model_validator(mode='after')
    def validate_putts(self):
        if self.putts is not None and self.putts > self.strokes:
            raise ValueError(f"Putts ({self.putts}) cannot exceed strokes ({self.strokes})")
        return self
