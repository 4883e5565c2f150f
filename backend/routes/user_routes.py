import re

from fastapi import APIRouter, Depends
from pymongo.errors import DuplicateKeyError

from backend.auth.dependencies import get_verified_identity
from backend.core.errors import NotFound
from backend.database import Store, get_store, store_errors
from backend.models.document import (
    delete_result,
    serialize_documents,
    to_object_id,
    update_result,
    without_id,
)
from backend.models.user import DEFAULT_ROLE, CreateUserRequest, UpdateRoleRequest, normalize_email

router = APIRouter(tags=['users'])


def build_user_search_query(search: str | None) -> dict:
    term = (search or '').strip()
    if not term:
        return {}

    pattern = {'$regex': re.escape(term), '$options': 'i'}
    return {'$or': [{'name': pattern}, {'email': pattern}]}


@router.get('/users/{email}/role')
def get_user_role(email: str, store: Store = Depends(get_store)):
    with store_errors('fetch user role'):
        user = store.users.find_one({'email': normalize_email(email)}, {'role': 1})

    if user is None:
        raise NotFound('User not found')

    return {'role': user.get('role') or DEFAULT_ROLE}


@router.post('/users')
def create_user(data: CreateUserRequest, store: Store = Depends(get_store)):
    document = without_id(data.model_dump(exclude_none=True))

    with store_errors('create user'):
        try:
            result = store.users.update_one(
                {'email': data.email},
                {'$setOnInsert': document},
                upsert=True,
            )
        except DuplicateKeyError:
            result = None

    if result is None or result.upserted_id is None:
        return {'message': 'user already exists', 'inserted': False}

    return {
        'acknowledged': result.acknowledged,
        'insertedId': str(result.upserted_id),
        'inserted': True,
    }


@router.get('/users', dependencies=[Depends(get_verified_identity)])
def list_users(
    search: str = '',
    store: Store = Depends(get_store),
):
    with store_errors('fetch users'):
        users = store.users.find(build_user_search_query(search))
        return serialize_documents(users)


@router.patch('/users/role/{user_id}', dependencies=[Depends(get_verified_identity)])
def update_user_role(user_id: str, data: UpdateRoleRequest, store: Store = Depends(get_store)):
    object_id = to_object_id(user_id)

    with store_errors('update user role'):
        result = store.users.update_one({'_id': object_id}, {'$set': {'role': data.role}})

    return update_result(result)


@router.delete('/users/{user_id}', dependencies=[Depends(get_verified_identity)])
def delete_user(user_id: str, store: Store = Depends(get_store)):
    object_id = to_object_id(user_id)

    with store_errors('delete user'):
        result = store.users.delete_one({'_id': object_id})

    return delete_result(result)
