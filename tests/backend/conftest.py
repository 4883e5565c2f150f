import time

import jwt
import mongomock
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

from backend.auth.token_verifier import TokenVerifier, get_token_verifier
from backend.database import Store, get_store
from backend.main import app

PROJECT_ID = 'collab-study-test'
KEY_ID = 'test-key'


@pytest.fixture
def store() -> Store:
    return Store(mongomock.MongoClient()['collabStudy'])


@pytest.fixture(scope='session')
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope='session')
def verifier(signing_key) -> TokenVerifier:
    public_key = signing_key.public_key()
    return TokenVerifier(PROJECT_ID, key_resolver=lambda _token: public_key)


@pytest.fixture(scope='session')
def make_token(signing_key):
    def _make_token(subject: str = 'uid-1', key=None, **overrides) -> str:
        now = int(time.time())
        payload = {
            'iss': f'https://securetoken.google.com/{PROJECT_ID}',
            'aud': PROJECT_ID,
            'sub': subject,
            'iat': now,
            'exp': now + 3600,
            'email': f'{subject}@example.edu',
        }
        payload.update(overrides)
        return jwt.encode(payload, key or signing_key, algorithm='RS256', headers={'kid': KEY_ID})

    return _make_token


@pytest.fixture
def client(store, verifier):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_token_verifier] = lambda: verifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(make_token) -> dict:
    return {'Authorization': f'Bearer {make_token()}'}
