from collections.abc import Callable
from threading import Lock

import jwt

from backend.core import config

ALGORITHMS = ['RS256']
REQUIRED_CLAIMS = ['exp', 'iat', 'aud', 'iss', 'sub']

KeyResolver = Callable[[str], object]


class TokenVerificationError(Exception):
    pass


def jwks_key_resolver(jwks_url: str) -> KeyResolver:
    client = jwt.PyJWKClient(jwks_url, cache_keys=True)

    def resolve(token: str):
        return client.get_signing_key_from_jwt(token).key

    return resolve


class TokenVerifier:
    """Checks ID tokens against the identity provider's published signing keys."""

    def __init__(
        self,
        project_id: str,
        key_resolver: KeyResolver | None = None,
        leeway: int = 0,
    ):
        self.project_id = project_id
        self.issuer = f'{config.FIREBASE_ISSUER_PREFIX}{project_id}'
        self.leeway = leeway
        self._key_resolver = key_resolver or jwks_key_resolver(config.FIREBASE_JWKS_URL)

    def verify(self, token: str) -> dict:
        if not self.project_id:
            raise TokenVerificationError('Identity project is not configured')

        try:
            key = self._key_resolver(token)
            claims = jwt.decode(
                token,
                key,
                algorithms=ALGORITHMS,
                audience=self.project_id,
                issuer=self.issuer,
                leeway=self.leeway,
                options={'require': REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as exc:
            raise TokenVerificationError(str(exc)) from exc

        subject = claims.get('sub')
        if not isinstance(subject, str) or not subject:
            raise TokenVerificationError('Token has an empty subject')
        return claims


_verifier_lock = Lock()
_verifier: TokenVerifier | None = None


def get_token_verifier() -> TokenVerifier:
    global _verifier

    if _verifier is None:
        with _verifier_lock:
            if _verifier is None:
                _verifier = TokenVerifier(
                    config.FIREBASE_PROJECT_ID,
                    leeway=config.TOKEN_LEEWAY_SECONDS,
                )
    return _verifier
