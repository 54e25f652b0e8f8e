from __future__ import annotations

import json
import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from app.core.config import SETTINGS
from app.core.errors import (
    InvalidClient,
    InvalidCode,
    InvalidRedirect,
    MissingParameter,
    UnsupportedGrantType,
)
from app.core.metrics import TOKENS_ISSUED
from app.models.oauth_client import OAuthClientConfig
from app.repos.state_store import InMemoryStateStore
from app.services import token_service

# ---------------------------------------------------------------------------
# Mock Authorization Server - OAuth 2.0 Authorization Code grant
#
# Endpoints:
#   GET  /api/oauth/authorize  - validate client, redirect back with the code
#   POST /api/oauth/token      - exchange the code for access + refresh tokens
#
# There is exactly one client (from the environment) and exactly one
# authorization code. The code never expires and can be redeemed any
# number of times.
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/oauth", tags=["oauth"])

# Module-level singletons, read-only after import
oauth_client: OAuthClientConfig = SETTINGS.oauth_client

# Pending authorization requests keyed by state. Declared for future
# state correlation; neither endpoint reads or writes it.
state_store = InMemoryStateStore()

AUTHORIZATION_CODE = "SOME_CODE"
GRANT_TYPE_AUTHORIZATION_CODE = "authorization_code"

# No user login: every exchange issues tokens for this subject.
MOCK_SUBJECT = "user123"

TOKEN_CONTENT_TYPE = "application/json;charset=UTF-8"


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


def _append_query(url: str, params: dict[str, str]) -> str:
    """Append params to url, keeping any query string it already has."""
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


# ========================== GET /api/oauth/authorize ======================


@router.get("/authorize")
def authorize(
    response_type: str | None = Query(None),
    client_id: str | None = Query(None),
    redirect_uri: str | None = Query(None),
    state: str | None = Query(None),
) -> RedirectResponse:
    # NOTE: response_type is only checked for presence, any value is accepted.
    if not response_type or not client_id or not redirect_uri:
        raise MissingParameter()

    if not oauth_client.matches_client(client_id):
        raise InvalidClient()

    # Exact match only. No prefixes, no allow-list.
    if not oauth_client.matches_redirect(redirect_uri):
        raise InvalidRedirect()

    params = {"code": AUTHORIZATION_CODE}
    if state:
        params["state"] = state
    redirect_url = _append_query(redirect_uri, params)

    logger.info(
        "authorization code issued, redirecting  client_id=%s state=%s",
        client_id,
        "yes" if state else "no",
        extra={"client_id": client_id},
    )
    return RedirectResponse(url=redirect_url, status_code=status.HTTP_302_FOUND)


# ========================== POST /api/oauth/token =========================


async def _read_token_request(request: Request) -> dict:
    """Body fields from either a JSON object or a urlencoded form.

    Any other media type, or anything unreadable, is treated as an empty
    body, which the caller rejects as missing parameters.
    """
    # Media types are case-insensitive
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.debug("token request body is not valid JSON")
            return {}
        return body if isinstance(body, dict) else {}
    if content_type.startswith("application/x-www-form-urlencoded"):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    return {}


@router.post("/token", response_model=Token)
async def exchange_token(request: Request) -> JSONResponse:
    body = await _read_token_request(request)
    grant_type = body.get("grant_type")
    code = body.get("code")
    client_id = body.get("client_id")
    redirect_uri = body.get("redirect_uri")

    # Order matters: presence → grant_type → client_id → redirect_uri → code
    if not grant_type or not code or not client_id or not redirect_uri:
        raise MissingParameter()

    if grant_type != GRANT_TYPE_AUTHORIZATION_CODE:
        raise UnsupportedGrantType()

    if not isinstance(client_id, str) or not oauth_client.matches_client(client_id):
        raise InvalidClient()

    if not isinstance(redirect_uri, str) or not oauth_client.matches_redirect(
        redirect_uri
    ):
        raise InvalidRedirect()

    if code != AUTHORIZATION_CODE:
        raise InvalidCode()

    # Raises IssuanceError (500) after logging the real cause.
    pair = token_service.issue_tokens(MOCK_SUBJECT)
    TOKENS_ISSUED.inc()
    logger.info(
        "tokens issued  client_id=%s sub=%s expires_in=%d",
        client_id,
        MOCK_SUBJECT,
        pair.expires_in,
        extra={"client_id": client_id},
    )

    token = Token(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        token_type=pair.token_type,
        expires_in=pair.expires_in,
    )
    return JSONResponse(token.model_dump(), media_type=TOKEN_CONTENT_TYPE)
