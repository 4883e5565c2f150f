from collections.abc import Iterable
from typing import Any

from fastapi import APIRouter, Body, Depends

from backend.auth.dependencies import get_verified_identity
from backend.core.errors import BadRequest
from backend.database import Store, get_store, store_errors
from backend.models.document import (
    delete_result,
    insert_result,
    serialize_document,
    serialize_documents,
    to_object_id,
    update_result,
    without_id,
)
from backend.models.session import (
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    ApproveSessionRequest,
    CreateSessionRequest,
    RejectSessionRequest,
)
from backend.models.user import normalize_email

router = APIRouter(tags=['sessions'])
verified = [Depends(get_verified_identity)]

APPROVED_PREVIEW_LIMIT = 6
TUTOR_FIELDS = {'tutorEmail': 1, 'tutorName': 1}


def build_tutor_roster(sessions: Iterable[dict]) -> list[dict]:
    """Group approved sessions by tutor, in first-seen order."""
    roster: dict[str, dict] = {}
    for session in sessions:
        tutor_email = session.get('tutorEmail')
        if not tutor_email:
            continue

        entry = roster.get(tutor_email)
        if entry is None:
            entry = roster[tutor_email] = {
                'tutorEmail': tutor_email,
                'tutorName': session.get('tutorName'),
                'sessionCount': 0,
            }
        entry['sessionCount'] += 1

    return list(roster.values())


@router.get('/sessions', dependencies=verified)
def list_sessions(store: Store = Depends(get_store)):
    with store_errors('fetch sessions'):
        return serialize_documents(store.sessions.find())


@router.get('/sessions/available')
def list_available_sessions(store: Store = Depends(get_store)):
    with store_errors('fetch available sessions'):
        return serialize_documents(store.sessions.find({'status': STATUS_APPROVED}))


@router.get('/sessions/approved')
def list_approved_preview(store: Store = Depends(get_store)):
    with store_errors('fetch approved sessions'):
        sessions = store.sessions.find({'status': STATUS_APPROVED}).limit(APPROVED_PREVIEW_LIMIT)
        return serialize_documents(sessions)


@router.get('/sessions/tutor/approved/{email}', dependencies=verified)
def list_tutor_approved_sessions(email: str, store: Store = Depends(get_store)):
    with store_errors('fetch tutor sessions'):
        sessions = store.sessions.find({'tutorEmail': normalize_email(email), 'status': STATUS_APPROVED})
        return serialize_documents(sessions)


@router.get('/sessions/tutor/{email}', dependencies=verified)
def list_tutor_sessions(email: str, store: Store = Depends(get_store)):
    with store_errors('fetch tutor sessions'):
        return serialize_documents(store.sessions.find({'tutorEmail': normalize_email(email)}))


@router.get('/sessions/{session_id}', dependencies=verified)
def get_approved_session(session_id: str, store: Store = Depends(get_store)):
    object_id = to_object_id(session_id)

    with store_errors('fetch session'):
        session = store.sessions.find_one({'_id': object_id, 'status': STATUS_APPROVED})

    return serialize_document(session)


@router.get('/tutors')
def list_tutors(store: Store = Depends(get_store)):
    with store_errors('fetch tutors'):
        sessions = store.sessions.find({'status': STATUS_APPROVED}, TUTOR_FIELDS)
        return build_tutor_roster(sessions)


@router.post('/sessions', dependencies=verified)
def create_session(data: CreateSessionRequest, store: Store = Depends(get_store)):
    document = without_id(data.model_dump(exclude_none=True))
    document['status'] = STATUS_PENDING

    with store_errors('create session'):
        result = store.sessions.insert_one(document)

    return insert_result(result)


@router.patch('/approve-session/{session_id}', dependencies=verified)
def approve_session(session_id: str, data: ApproveSessionRequest, store: Store = Depends(get_store)):
    object_id = to_object_id(session_id)
    changes = {
        'status': STATUS_APPROVED,
        'isPaid': data.isPaid,
        'price': data.resolved_price(),
    }

    with store_errors('approve session'):
        result = store.sessions.update_one(
            {'_id': object_id, 'status': STATUS_PENDING},
            {'$set': changes},
        )

    return update_result(result)


@router.patch('/reject-session/{session_id}', dependencies=verified)
def reject_session(
    session_id: str,
    data: RejectSessionRequest | None = None,
    store: Store = Depends(get_store),
):
    object_id = to_object_id(session_id)
    changes = {'status': STATUS_REJECTED}
    if data is not None:
        changes.update(data.model_dump(exclude_none=True))

    with store_errors('reject session'):
        result = store.sessions.update_one(
            {'_id': object_id, 'status': STATUS_APPROVED},
            {'$set': changes},
        )

    return update_result(result)


@router.patch('/sessions/request/{session_id}', dependencies=verified)
def request_session_review(session_id: str, store: Store = Depends(get_store)):
    object_id = to_object_id(session_id)

    with store_errors('request session review'):
        result = store.sessions.update_one({'_id': object_id}, {'$set': {'status': STATUS_PENDING}})

    return update_result(result)


@router.patch('/update-session/{session_id}', dependencies=verified)
def update_session(
    session_id: str,
    fields: dict[str, Any] = Body(...),
    store: Store = Depends(get_store),
):
    object_id = to_object_id(session_id)
    if not fields:
        raise BadRequest('No fields to update')

    with store_errors('update session'):
        result = store.sessions.update_one({'_id': object_id}, {'$set': fields})

    return update_result(result)


@router.delete('/delete-session/{session_id}', dependencies=verified)
def delete_session(session_id: str, store: Store = Depends(get_store)):
    object_id = to_object_id(session_id)

    with store_errors('delete session'):
        result = store.sessions.delete_one({'_id': object_id, 'status': STATUS_APPROVED})

    return delete_result(result)
