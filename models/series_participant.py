from datetime import datetime
from enum import Enum
from typing import Optional

from .base import BaseRecord


class SeriesRole(str, Enum):
    ADMIN = "admin"
    ORGANIZER = "organizer"
    PLAYER = "player"


class ParticipantStatus(str, Enum):
    """Whether the member takes part. Independent of the invitation lifecycle."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    REMOVED = "removed"


class InvitationStatus(str, Enum):
    INVITED = "invited"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class SeriesParticipant(BaseRecord):
    """Links a user to a series.

    ``status`` and ``invitation_status`` are orthogonal: a member can have
    accepted the invitation and still be inactive.
    """
    series_id: str
    user_id: str
    role: SeriesRole = SeriesRole.PLAYER
    status: ParticipantStatus = ParticipantStatus.INACTIVE
    invitation_status: InvitationStatus = InvitationStatus.INVITED
    invitation_date: Optional[datetime] = None
    joined_at: Optional[datetime] = None
