from datetime import datetime

import pytest
from bson import ObjectId

from backend.core.errors import BadRequest
from backend.models.note import CreateNoteRequest
from backend.routes.note_routes import create_note, delete_note, list_notes, update_note


def test_create_note_overwrites_client_timestamp(store) -> None:
    result = create_note(
        CreateNoteRequest(email='student@example.edu', title='Limits', createdAt='1999-01-01'),
        store=store,
    )

    stored = store.notes.find_one({'_id': ObjectId(result['insertedId'])})
    assert isinstance(stored['createdAt'], datetime)
    assert stored['title'] == 'Limits'


def test_list_notes_is_scoped_to_owner(store) -> None:
    store.notes.insert_many([
        {'email': 'student@example.edu', 'title': 'Mine'},
        {'email': 'other@example.edu', 'title': 'Theirs'},
    ])

    notes = list_notes('student@example.edu', store=store)

    assert [note['title'] for note in notes] == ['Mine']


def test_update_note_merges_fields_without_allow_list(store) -> None:
    note_id = store.notes.insert_one({'email': 'student@example.edu', 'title': 'Draft'}).inserted_id

    result = update_note(str(note_id), {'title': 'Final', 'email': 'new-owner@example.edu'}, store=store)

    stored = store.notes.find_one({'_id': note_id})
    assert result['modifiedCount'] == 1
    assert stored['title'] == 'Final'
    assert stored['email'] == 'new-owner@example.edu'


def test_update_note_rejects_empty_payload(store) -> None:
    with pytest.raises(BadRequest):
        update_note(str(ObjectId()), {}, store=store)


def test_delete_note_removes_document(store) -> None:
    note_id = store.notes.insert_one({'email': 'student@example.edu'}).inserted_id

    assert delete_note(str(note_id), store=store)['deletedCount'] == 1
    assert delete_note(str(note_id), store=store)['deletedCount'] == 0


def test_note_lifecycle_over_http(client, auth_headers) -> None:
    created = client.post('/notes', json={'email': 'student@example.edu', 'title': 'Limits'}, headers=auth_headers)
    note_id = created.json()['insertedId']

    patched = client.patch(f'/notes/{note_id}', json={'title': 'Derivatives'}, headers=auth_headers)
    listed = client.get('/notes/student@example.edu', headers=auth_headers)
    deleted = client.delete(f'/notes/{note_id}', headers=auth_headers)

    assert patched.json()['modifiedCount'] == 1
    assert listed.json()[0]['title'] == 'Derivatives'
    assert isinstance(listed.json()[0]['createdAt'], str)
    assert deleted.json() == {'acknowledged': True, 'deletedCount': 1}


def test_note_owner_lookup_ignores_email_case(store) -> None:
    create_note(CreateNoteRequest(email='Student@Example.edu', title='Limits'), store=store)

    notes = list_notes('STUDENT@example.edu', store=store)

    assert [note['email'] for note in notes] == ['student@example.edu']
