import pytest
from pymongo.errors import ServerSelectionTimeoutError

from backend.core.errors import InternalError
from backend.database import Store, get_store, store_errors
from backend.main import app


class _UnreachableCollection:
    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError('No servers available')

        return fail


class _UnreachableDatabase:
    def __getitem__(self, name):
        return _UnreachableCollection()

    def command(self, *args, **kwargs):
        raise ServerSelectionTimeoutError('No servers available')


def test_store_errors_converts_driver_failures() -> None:
    with pytest.raises(InternalError) as exception_info:
        with store_errors('fetch sessions'):
            raise ServerSelectionTimeoutError('No servers available')

    assert exception_info.value.status_code == 500
    assert exception_info.value.message == 'Failed to fetch sessions'


def test_store_failure_over_http_returns_500_message(client) -> None:
    app.dependency_overrides[get_store] = lambda: Store(_UnreachableDatabase())

    response = client.get('/sessions/available')

    assert response.status_code == 500
    assert response.json() == {'message': 'Failed to fetch available sessions'}


def test_health_reports_unreachable_store(client) -> None:
    app.dependency_overrides[get_store] = lambda: Store(_UnreachableDatabase())

    response = client.get('/health')

    assert response.status_code == 503
    assert 'message' in response.json()


def test_health_and_root(client, store, monkeypatch) -> None:
    monkeypatch.setattr(store, 'ping', lambda: None)

    assert client.get('/').json() == {'status': 'Study Session API Running'}
    assert client.get('/health').json() == {'status': 'ok', 'database': 'connected'}


def test_unknown_route_uses_message_body(client) -> None:
    response = client.get('/materials')

    assert response.status_code == 404
    assert response.json() == {'message': 'Not Found'}
