from datetime import datetime
from enum import Enum
from pydantic import Field
from typing import Optional

from .base import BaseRecord
from .series_participant import InvitationStatus


class RegistrationStatus(str, Enum):
    REGISTERED = "registered"
    CONFIRMED = "confirmed"
    WITHDRAWN = "withdrawn"
    NO_SHOW = "no_show"


class EventParticipant(BaseRecord):
    """A player's entry in an event, from invitation through scoring."""
    event_id: str
    user_id: str
    invitation_status: InvitationStatus = InvitationStatus.INVITED
    invitation_date: Optional[datetime] = None
    response_date: Optional[datetime] = None
    # Only set once the invitation is accepted
    status: Optional[RegistrationStatus] = None
    tee_time: Optional[datetime] = None
    starting_hole: Optional[int] = Field(None, ge=1, le=18)
    group_number: Optional[int] = Field(None, ge=1)
    handicap_index: Optional[float] = Field(None, ge=-10, le=54)
    gross_score: Optional[int] = Field(None, ge=1)
    net_score: Optional[int] = None
