"""JWT bearer token verification.

- No token -> 401
- Invalid/expired token -> 401
- Valid token -> user id from the ``sub`` claim

Tokens are issued by the account service; this gateway only verifies them.
Uses PyJWT (HS256). Secret must come from environment, never hardcoded.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import jwt

from src.shared.errors import AuthenticationError

_ALGORITHM = "HS256"
_BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT payload."""

    user_id: str


def encode_token(*, user_id: str, secret: str, ttl_seconds: int = 3600) -> str:
    """Create a signed JWT for ``user_id`` (tests and local tooling)."""
    now = int(time.time())
    payload = {"sub": user_id, "iat": now, "exp": now + ttl_seconds}
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def decode_token(token: str, *, secret: str) -> TokenPayload:
    """Decode and validate a JWT. Raises AuthenticationError on failure."""
    try:
        data = jwt.decode(token, secret, algorithms=[_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError(f"Invalid token: {exc}") from exc

    user_id = data.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise AuthenticationError("Invalid token: missing subject")
    return TokenPayload(user_id=user_id)


def extract_bearer_token(authorization: str) -> str | None:
    """Return the token from an ``Authorization: Bearer ...`` header value."""
    if not authorization.startswith(_BEARER_PREFIX):
        return None
    return authorization[len(_BEARER_PREFIX) :].strip() or None
