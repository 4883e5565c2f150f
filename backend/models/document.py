"""Helpers shared by every collection: id conversion and result serialization."""

from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from backend.core.errors import BadRequest


def to_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise BadRequest('Invalid id') from exc


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize_value(item) for item in value]
    return value


def serialize_document(document: dict | None) -> dict | None:
    if document is None:
        return None
    return serialize_value(document)


def serialize_documents(documents) -> list[dict]:
    return [serialize_document(document) for document in documents]


def insert_result(result: InsertOneResult) -> dict:
    return {
        'acknowledged': result.acknowledged,
        'insertedId': str(result.inserted_id),
    }


def update_result(result: UpdateResult) -> dict:
    upserted_id = result.upserted_id
    return {
        'acknowledged': result.acknowledged,
        'matchedCount': result.matched_count,
        'modifiedCount': result.modified_count,
        'upsertedCount': 1 if upserted_id is not None else 0,
        'upsertedId': str(upserted_id) if upserted_id is not None else None,
    }


def delete_result(result: DeleteResult) -> dict:
    return {
        'acknowledged': result.acknowledged,
        'deletedCount': result.deleted_count,
    }


def without_id(fields: dict) -> dict:
    """Drop ``_id`` from a client payload before it reaches a write."""
    return {key: value for key, value in fields.items() if key != '_id'}
