import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from backend.core import config
from backend.core.errors import ServiceUnavailable, register_error_handlers
from backend.database import Store, close_store, get_store
from backend.routes import booking_routes, note_routes, review_routes, session_routes, user_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.validate_runtime_config()
    try:
        get_store().ensure_indexes()
    except PyMongoError:
        logger.exception('Index initialization failed. Check MONGODB_URI and database credentials.')
    yield
    close_store()


app = FastAPI(title='Study Session API', lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials='*' not in config.CORS_ALLOW_ORIGINS,
    allow_methods=['*'],
    allow_headers=['*'],
)

register_error_handlers(app)


@app.get('/')
def root():
    return {'status': 'Study Session API Running'}


@app.get('/health')
def health(store: Store = Depends(get_store)):
    try:
        store.ping()
    except PyMongoError as exc:
        logger.warning('Health check failed: %s', exc)
        raise ServiceUnavailable('Database unavailable. Verify MONGODB_URI and credentials.') from exc
    return {'status': 'ok', 'database': 'connected'}


app.include_router(user_routes.router)
app.include_router(session_routes.router)
app.include_router(review_routes.router)
app.include_router(booking_routes.router)
app.include_router(note_routes.router)
