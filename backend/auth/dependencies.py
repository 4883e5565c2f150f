import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.auth.token_verifier import TokenVerificationError, TokenVerifier, get_token_verifier
from backend.core.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_verified_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> dict:
    if credentials is None or not credentials.credentials:
        raise Unauthorized()

    try:
        decoded = verifier.verify(credentials.credentials)
    except TokenVerificationError as exc:
        logger.info('Rejected bearer token on %s: %s', request.url.path, exc)
        raise Forbidden() from exc

    request.state.decoded = decoded
    return decoded
