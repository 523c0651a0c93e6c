from pydantic import Field
from typing import List, Optional

from .base import BaseRecord
from .tee import TeeSet


class Course(BaseRecord):
    """Golf course. Tee sets are loaded separately and attached on demand."""
    name: str = Field(..., min_length=1)
    city: Optional[str] = None
    state: Optional[str] = None
    country: str = "USA"
    website: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    created_by: Optional[str] = None


class CourseWithTees(Course):
    tees: List[TeeSet] = Field(default_factory=list)
