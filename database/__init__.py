from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.store import StoreClient
from database.result import Err, Ok, Result
from database.repositories import (
    BagSetupRepositoryDB,
    CourseRepositoryDB,
    EventParticipantRepositoryDB,
    EventRepositoryDB,
    NoteRepositoryDB,
    ProfileRepositoryDB,
    RoundRepositoryDB,
    ScoreRepositoryDB,
    SeriesParticipantRepositoryDB,
    SeriesRepositoryDB,
    TeeSetRepositoryDB,
)
from database.exceptions import (
    DatabaseError,
    ForbiddenError,
    IntegrityError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    UnexpectedError,
    ValidationError,
)

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "StoreClient",
    "Ok",
    "Err",
    "Result",
    "BagSetupRepositoryDB",
    "CourseRepositoryDB",
    "EventParticipantRepositoryDB",
    "EventRepositoryDB",
    "NoteRepositoryDB",
    "ProfileRepositoryDB",
    "RoundRepositoryDB",
    "ScoreRepositoryDB",
    "SeriesParticipantRepositoryDB",
    "SeriesRepositoryDB",
    "TeeSetRepositoryDB",
    "DatabaseError",
    "ForbiddenError",
    "IntegrityError",
    "NotFoundError",
    "ServiceError",
    "UnauthorizedError",
    "UnexpectedError",
    "ValidationError",
]
