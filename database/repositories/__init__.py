from .base import RecordRepository
from .bag_setup_repo import BagSetupRepositoryDB
from .course_repo import CourseRepositoryDB, TeeSetRepositoryDB
from .event_repo import EventParticipantRepositoryDB, EventRepositoryDB
from .note_repo import NoteRepositoryDB
from .profile_repo import ProfileRepositoryDB
from .round_repo import RoundRepositoryDB, ScoreRepositoryDB
from .series_repo import SeriesParticipantRepositoryDB, SeriesRepositoryDB

__all__ = [
    "RecordRepository",
    "BagSetupRepositoryDB",
    "CourseRepositoryDB",
    "TeeSetRepositoryDB",
    "EventRepositoryDB",
    "EventParticipantRepositoryDB",
    "NoteRepositoryDB",
    "ProfileRepositoryDB",
    "RoundRepositoryDB",
    "ScoreRepositoryDB",
    "SeriesRepositoryDB",
    "SeriesParticipantRepositoryDB",
]
