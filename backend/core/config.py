import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None or not value.strip():
        return default
    return [item.strip() for item in value.split(',') if item.strip()]


def _build_mongodb_uri() -> str:
    uri = os.getenv('MONGODB_URI')
    if uri:
        return uri

    user = os.getenv('DB_USER')
    password = os.getenv('DB_PASS')
    host = os.getenv('DB_HOST')
    if user and password and host:
        return (
            f'mongodb+srv://{quote_plus(user)}:{quote_plus(password)}@{host}/'
            '?retryWrites=true&w=majority'
        )
    return 'mongodb://localhost:27017'


APP_ENV = os.getenv('APP_ENV', 'development')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

MONGODB_URI = _build_mongodb_uri()
DATABASE_NAME = os.getenv('DATABASE_NAME', 'collabStudy')
MONGODB_TIMEOUT_MS = int(os.getenv('MONGODB_TIMEOUT_MS', '5000'))

FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID', '')
FIREBASE_JWKS_URL = os.getenv(
    'FIREBASE_JWKS_URL',
    'https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com',
)
FIREBASE_ISSUER_PREFIX = 'https://securetoken.google.com/'
TOKEN_LEEWAY_SECONDS = int(os.getenv('TOKEN_LEEWAY_SECONDS', '0'))

CORS_ALLOW_ORIGINS = _get_list(os.getenv('CORS_ALLOW_ORIGINS'), ['*'])


def validate_runtime_config() -> None:
    if APP_ENV.lower() != 'production':
        return
    if not FIREBASE_PROJECT_ID:
        raise RuntimeError('FIREBASE_PROJECT_ID must be set in production.')
    if MONGODB_URI == 'mongodb://localhost:27017':
        raise RuntimeError('MONGODB_URI (or DB_USER/DB_PASS/DB_HOST) must be set in production.')
