from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Annotated, Any

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from account_service.core.config import settings
from account_service.core.errors import UnauthenticatedError
from account_service.utils.misc import get_utc_now

# HTTP Bearer scheme for FastAPI dependencies
bearer_scheme = HTTPBearer(auto_error=False)


def _get_jwt_secret() -> str:
    """Get the JWT secret, generating an ephemeral one for dev if not set.

    WARNING: If not set, an ephemeral secret is generated per-process, which will
    invalidate tokens on restart. Configure settings.jwt_secret in production.
    """
    if settings.jwt_secret:
        return settings.jwt_secret
    secret = secrets.token_urlsafe(32)
    logger.warning(
        "JWT secret not configured. Using ephemeral secret for this process; tokens will invalidate on restart."
    )
    # Cache on settings to keep it stable during process lifetime
    settings.jwt_secret = secret
    return secret


def create_access_token(*, sub: str, now: datetime | None = None) -> tuple[str, datetime]:
    """Create a short-lived access JWT and return it with its expiry.

    Claims:
      - sub: subject (upstream account id)
      - iat: issued at
      - exp: expiry, ``settings.access_token_ttl_seconds`` after iat
      - jti: random id so two tokens minted in the same second still differ
    """
    now = now or get_utc_now()
    expires_at = now + timedelta(seconds=settings.access_token_ttl_seconds)
    payload: dict[str, Any] = {
        "sub": sub,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": secrets.token_hex(8),
    }
    token = jwt.encode(payload, _get_jwt_secret(), algorithm=settings.jwt_algorithm)
    return token, expires_at


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token, returning claims or raising.

    Raises jwt.InvalidTokenError (caught by caller) on invalid token.
    """
    return jwt.decode(token, _get_jwt_secret(), algorithms=[settings.jwt_algorithm])


def generate_opaque_token(nbytes: int = 16) -> str:
    """Generate a random hex token (state values and refresh tokens)."""
    return secrets.token_hex(nbytes)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def get_current_account_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Resolve the account id from Authorization: Bearer <jwt>."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise UnauthenticatedError
    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token expired") from None
    except jwt.InvalidTokenError:
        raise UnauthenticatedError("Invalid token") from None

    sub = claims.get("sub")
    if not sub or not isinstance(sub, str):
        raise UnauthenticatedError("Invalid token subject")
    return sub
