"""JWT access and refresh token issuance (HS256).

Both tokens share one symmetric signing key so that any service holding
JWT_SECRET_KEY can verify them. They differ only in the ``type`` claim
and their lifetime:

    access_token   1 hour
    refresh_token  7 days

Tokens are never stored here. Validity is the signature plus ``exp``.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from app.core.config import SETTINGS
from app.core.errors import IssuanceError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ISSUER = "http://localhost:8080"
AUDIENCE = "upfirst"

ACCESS_TOKEN_TYPE = "access_token"
REFRESH_TOKEN_TYPE = "refresh_token"
ACCESS_TOKEN_TTL = timedelta(hours=1)
REFRESH_TOKEN_TTL = timedelta(days=7)

TOKEN_TYPE_BEARER = "bearer"


# ---------------------------------------------------------------------------
# Key management
# ---------------------------------------------------------------------------
# JWT_SECRET_KEY if configured. Otherwise a random key is generated on
# import, so every restart invalidates all previously issued tokens.


def _load_signing_key(configured: str | None) -> bytes:
    if configured:
        return configured.encode("utf-8")
    logger.warning(
        "JWT_SECRET_KEY not set; generated an ephemeral signing key "
        "(tokens will not survive a restart)"
    )
    return secrets.token_hex(32).encode("utf-8")


_signing_key: bytes = _load_signing_key(SETTINGS.jwt_secret_key)


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = TOKEN_TYPE_BEARER
    expires_in: int = int(ACCESS_TOKEN_TTL.total_seconds())


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _build_claims(
    *, sub: str, token_type: str, issued_at: datetime, ttl: timedelta
) -> dict:
    iat = int(issued_at.timestamp())
    return {
        "sub": sub,
        "type": token_type,
        "iat": iat,
        "exp": iat + int(ttl.total_seconds()),
        "iss": ISSUER,
        "aud": AUDIENCE,
    }


def create_access_token(*, sub: str, now: datetime | None = None) -> str:
    claims = _build_claims(
        sub=sub,
        token_type=ACCESS_TOKEN_TYPE,
        issued_at=now or _utcnow(),
        ttl=ACCESS_TOKEN_TTL,
    )
    return jwt.encode(claims, _signing_key, algorithm=ALGORITHM)


def create_refresh_token(*, sub: str, now: datetime | None = None) -> str:
    claims = _build_claims(
        sub=sub,
        token_type=REFRESH_TOKEN_TYPE,
        issued_at=now or _utcnow(),
        ttl=REFRESH_TOKEN_TTL,
    )
    return jwt.encode(claims, _signing_key, algorithm=ALGORITHM)


def issue_tokens(subject: str, *, now: datetime | None = None) -> TokenPair:
    """Mint an access/refresh token pair for ``subject``.

    Both tokens carry the same ``iat``. Issuance is all-or-nothing: if
    either signature fails, IssuanceError is raised and nothing is
    returned. The underlying cause is logged here, never surfaced to
    the caller.
    """
    issued_at = now or _utcnow()
    try:
        access_token = create_access_token(sub=subject, now=issued_at)
        refresh_token = create_refresh_token(sub=subject, now=issued_at)
    except Exception as exc:
        logger.exception("Token generation failed for sub=%s", subject)
        raise IssuanceError() from exc
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


def decode_token(token: str, *, expected_type: str | None = None) -> dict:
    """Verify signature and standard claims, return the payload.

    Pins the algorithm to HS256 and checks iss/aud. When expected_type
    is given the ``type`` claim must match it.

    Raises jwt.ExpiredSignatureError, jwt.InvalidTokenError on failure.
    """
    claims = jwt.decode(
        token,
        _signing_key,
        algorithms=[ALGORITHM],
        issuer=ISSUER,
        audience=AUDIENCE,
        options={"require": ["sub", "type", "iat", "exp"]},
    )
    if expected_type is not None and claims.get("type") != expected_type:
        raise jwt.InvalidTokenError(
            f"expected {expected_type} but got {claims.get('type')!r}"
        )
    return claims
