from enum import Enum
from pydantic import Field
from typing import Optional

from .base import BaseRecord


class TeeGender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    UNISEX = "Unisex"


class TeeSet(BaseRecord):
    """A rated set of tees on a course (e.g. Blue, White, Red)."""
    course_id: str
    tee_name: str = Field(..., min_length=1)
    gender: TeeGender = TeeGender.UNISEX
    color: Optional[str] = None
    rating: Optional[float] = Field(None, ge=55, le=78)
    slope_rating: Optional[float] = Field(None, ge=55, le=155)
    yardage: Optional[int] = Field(None, ge=4000, le=8000)
