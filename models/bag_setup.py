from pydantic import Field
from typing import Optional

from .base import BaseRecord


class BagSetup(BaseRecord):
    """A player's equipment setup. At most one per user is the default."""
    user_id: str
    setup_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    current_handicap: Optional[float] = Field(None, ge=-10, le=54)
    is_default: bool = False
