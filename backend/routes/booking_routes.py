from bson import ObjectId
from fastapi import APIRouter, Depends
from pymongo.errors import DuplicateKeyError

from backend.auth.dependencies import get_verified_identity
from backend.core.errors import BadRequest
from backend.database import Store, get_store, store_errors
from backend.models.booking import CreateBookingRequest
from backend.models.document import serialize_document, serialize_documents, without_id
from backend.models.user import normalize_email

router = APIRouter(tags=['bookings'])
verified = [Depends(get_verified_identity)]


def require_email(email: str | None) -> str:
    normalized = normalize_email(email)
    if not normalized:
        raise BadRequest('Email is required')
    return normalized


def attach_sessions(bookings: list[dict], sessions: list[dict]) -> list[dict]:
    """Join each booking to its session by id; a missing session leaves no ``session`` key."""
    sessions_by_id = {str(session['_id']): session for session in sessions}

    enriched = []
    for booking in bookings:
        entry = serialize_document(booking)
        session = sessions_by_id.get(str(booking.get('sessionId')))
        if session is not None:
            entry['session'] = serialize_document(session)
        enriched.append(entry)
    return enriched


@router.get('/bookings', dependencies=verified)
def list_bookings_with_sessions(email: str | None = None, store: Store = Depends(get_store)):
    student_email = require_email(email)

    with store_errors('fetch bookings'):
        bookings = list(store.bookings.find({'studentEmail': student_email}))
        session_ids = [
            ObjectId(booking['sessionId'])
            for booking in bookings
            if ObjectId.is_valid(booking.get('sessionId'))
        ]
        sessions = list(store.sessions.find({'_id': {'$in': session_ids}})) if session_ids else []

    return attach_sessions(bookings, sessions)


@router.get('/bookings/student', dependencies=verified)
def list_student_bookings(email: str | None = None, store: Store = Depends(get_store)):
    student_email = require_email(email)

    with store_errors('fetch bookings'):
        return serialize_documents(store.bookings.find({'studentEmail': student_email}))


@router.post('/bookings', dependencies=verified)
def create_booking(data: CreateBookingRequest, store: Store = Depends(get_store)):
    document = without_id(data.model_dump(exclude_none=True))

    with store_errors('create booking'):
        try:
            result = store.bookings.update_one(
                {'sessionId': data.sessionId, 'studentEmail': data.studentEmail},
                {'$setOnInsert': document},
                upsert=True,
            )
        except DuplicateKeyError:
            result = None

    if result is None or result.upserted_id is None:
        return {'success': False, 'message': 'Already booked'}

    return {'success': True, 'insertedId': str(result.upserted_id)}
