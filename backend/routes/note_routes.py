from typing import Any

from fastapi import APIRouter, Body, Depends

from backend.auth.dependencies import get_verified_identity
from backend.core.errors import BadRequest
from backend.database import Store, get_store, store_errors
from backend.models.document import (
    delete_result,
    insert_result,
    serialize_documents,
    to_object_id,
    update_result,
    utc_now,
    without_id,
)
from backend.models.note import CreateNoteRequest
from backend.models.user import normalize_email

router = APIRouter(tags=['notes'], dependencies=[Depends(get_verified_identity)])


@router.get('/notes/{email}')
def list_notes(email: str, store: Store = Depends(get_store)):
    with store_errors('fetch notes'):
        return serialize_documents(store.notes.find({'email': normalize_email(email)}))


@router.post('/notes')
def create_note(data: CreateNoteRequest, store: Store = Depends(get_store)):
    document = without_id(data.model_dump(exclude_none=True))
    document['createdAt'] = utc_now()

    with store_errors('create note'):
        result = store.notes.insert_one(document)

    return insert_result(result)


@router.patch('/notes/{note_id}')
def update_note(
    note_id: str,
    fields: dict[str, Any] = Body(...),
    store: Store = Depends(get_store),
):
    object_id = to_object_id(note_id)
    if not fields:
        raise BadRequest('No fields to update')

    with store_errors('update note'):
        result = store.notes.update_one({'_id': object_id}, {'$set': fields})

    return update_result(result)


@router.delete('/notes/{note_id}')
def delete_note(note_id: str, store: Store = Depends(get_store)):
    object_id = to_object_id(note_id)

    with store_errors('delete note'):
        result = store.notes.delete_one({'_id': object_id})

    return delete_result(result)
