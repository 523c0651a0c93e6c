"""Per-request entry point to the Record Access Layer."""

from database.store import StoreClient
from database.repositories import (
    BagSetupRepositoryDB,
    CourseRepositoryDB,
    EventParticipantRepositoryDB,
    EventRepositoryDB,
    NoteRepositoryDB,
    ProfileRepositoryDB,
    RoundRepositoryDB,
    SeriesParticipantRepositoryDB,
    SeriesRepositoryDB,
    TeeSetRepositoryDB,
)


class DatabaseManager:
    """Groups every repository around one caller-scoped store client.

    Built once per request, so each repository sees the caller's claims and
    nothing is shared between requests.
    """

    def __init__(self, store: StoreClient):
        self.store = store
        self.bag_setups = BagSetupRepositoryDB(store)
        self.courses = CourseRepositoryDB(store)
        self.tee_sets = TeeSetRepositoryDB(store)
        self.series = SeriesRepositoryDB(store)
        self.series_participants = SeriesParticipantRepositoryDB(store)
        self.events = EventRepositoryDB(store)
        self.event_participants = EventParticipantRepositoryDB(store)
        self.profiles = ProfileRepositoryDB(store)
        self.rounds = RoundRepositoryDB(store)
        self.notes = NoteRepositoryDB(store)
