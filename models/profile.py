from pydantic import Field
from typing import Optional

from .base import BaseRecord


class Profile(BaseRecord):
    """Public profile of an auth user. ``id`` is the auth user id."""
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_admin: bool = Field(False, description="Site administrator flag")
