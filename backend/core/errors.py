"""Error taxonomy for the API.

Every error leaves the service as ``{"message": "..."}`` with the matching
HTTP status. There is no machine-readable error code.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Internal server error'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Bad request'


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = 'unauthorized access'


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'forbidden access'


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found'


class InternalError(ApiError):
    pass


class ServiceUnavailable(ApiError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = 'Database unavailable'


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'message': message})


def register_error_handlers(app: FastAPI) -> None:
    """Render every error as a ``{message}`` body."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error('%s %s failed: %s', request.method, request.url.path, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={'message': message},
            headers=getattr(exc, 'headers', None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info('Validation error on %s: %s', request.url.path, errors)
        if errors:
            first = errors[0]
            field = '.'.join(str(part) for part in first.get('loc', ()) if part != 'body')
            message = f"{field}: {first.get('msg')}" if field else str(first.get('msg'))
        else:
            message = 'Invalid request data'
        return error_response(status.HTTP_400_BAD_REQUEST, message)
