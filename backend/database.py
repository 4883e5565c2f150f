import logging
from contextlib import contextmanager
from threading import Lock

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from backend.core import config
from backend.core.errors import InternalError

logger = logging.getLogger(__name__)

USERS = 'users'
SESSIONS = 'sessions'
REVIEWS = 'reviews'
BOOKINGS = 'bookings'
NOTES = 'notes'
MATERIALS = 'materials'


class Store:
    """The six collections of the study-session database."""

    def __init__(self, database: Database):
        self.database = database
        self._indexes_checked = False
        self._index_lock = Lock()

    @property
    def users(self) -> Collection:
        return self.database[USERS]

    @property
    def sessions(self) -> Collection:
        return self.database[SESSIONS]

    @property
    def reviews(self) -> Collection:
        return self.database[REVIEWS]

    @property
    def bookings(self) -> Collection:
        return self.database[BOOKINGS]

    @property
    def notes(self) -> Collection:
        return self.database[NOTES]

    @property
    def materials(self) -> Collection:
        return self.database[MATERIALS]

    def ping(self) -> None:
        self.database.command('ping')

    def ensure_indexes(self) -> None:
        if self._indexes_checked:
            return

        with self._index_lock:
            if self._indexes_checked:
                return

            self.users.create_index([('email', ASCENDING)], unique=True, name='uniq_users_email')
            self.bookings.create_index(
                [('sessionId', ASCENDING), ('studentEmail', ASCENDING)],
                unique=True,
                name='uniq_bookings_session_student',
            )
            self.bookings.create_index([('studentEmail', ASCENDING)], name='idx_bookings_student')
            self.sessions.create_index([('status', ASCENDING)], name='idx_sessions_status')
            self.sessions.create_index(
                [('tutorEmail', ASCENDING), ('status', ASCENDING)],
                name='idx_sessions_tutor_status',
            )
            self.reviews.create_index([('sessionId', ASCENDING)], name='idx_reviews_session')
            self.notes.create_index([('email', ASCENDING)], name='idx_notes_email')

            self._indexes_checked = True


@contextmanager
def store_errors(action: str):
    try:
        yield
    except PyMongoError as exc:
        logger.exception('Store operation failed: %s', action)
        raise InternalError(f'Failed to {action}') from exc


_client_lock = Lock()
_client: MongoClient | None = None
_store: Store | None = None


def create_client(uri: str | None = None) -> MongoClient:
    return MongoClient(
        uri or config.MONGODB_URI,
        serverSelectionTimeoutMS=config.MONGODB_TIMEOUT_MS,
        tz_aware=True,
    )


def get_store() -> Store:
    global _client, _store

    if _store is not None:
        return _store

    with _client_lock:
        if _store is None:
            _client = create_client()
            _store = Store(_client[config.DATABASE_NAME])
    return _store


def close_store() -> None:
    global _client, _store

    with _client_lock:
        if _client is not None:
            _client.close()
        _client = None
        _store = None
