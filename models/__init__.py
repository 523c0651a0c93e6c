from .base import BaseRecord
from .bag_setup import BagSetup
from .course import Course, CourseWithTees
from .event import Event, EventFormat, EventStatus, EventWithParticipants
from .event_participant import EventParticipant, RegistrationStatus
from .note import NoteResourceType, UserNote
from .profile import Profile
from .round import Round, RoundStatus, RoundWithScores
from .score import Score
from .series import ScoringType, Series, SeriesStatus, SeriesType
from .series_participant import (
    InvitationStatus,
    ParticipantStatus,
    SeriesParticipant,
    SeriesRole,
)
from .tee import TeeGender, TeeSet

__all__ = [
    "BaseRecord",
    "BagSetup",
    "Course",
    "CourseWithTees",
    "Event",
    "EventFormat",
    "EventStatus",
    "EventWithParticipants",
    "EventParticipant",
    "RegistrationStatus",
    "NoteResourceType",
    "UserNote",
    "Profile",
    "Round",
    "RoundStatus",
    "RoundWithScores",
    "Score",
    "ScoringType",
    "Series",
    "SeriesStatus",
    "SeriesType",
    "InvitationStatus",
    "ParticipantStatus",
    "SeriesParticipant",
    "SeriesRole",
    "TeeGender",
    "TeeSet",
]
