"""OAuth error taxonomy.

Every failure the OAuth endpoints can produce is one of these classes.
The exception handler in app/main.py renders them as::

    {"error": "<message>"}

with the class's status code. Client errors (400/401) are terminal for
the request. IssuanceError is the only server-side failure; its message
is deliberately generic, the real cause goes to the server log.
"""

from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.core.metrics import OAUTH_ERRORS

logger = logging.getLogger(__name__)


class OAuthError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Invalid request"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MissingParameter(OAuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Missing required parameters"


class InvalidClient(OAuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid client_id"


class InvalidRedirect(OAuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid redirect_uri"


class UnsupportedGrantType(OAuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid grant_type"


class InvalidCode(OAuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid authorization code"


class IssuanceError(OAuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to generate tokens"


async def oauth_error_handler(request: Request, exc: OAuthError) -> JSONResponse:
    OAUTH_ERRORS.labels(error=type(exc).__name__).inc()
    if exc.status_code < 500:
        logger.warning(
            "OAuth request rejected  path=%s error=%s status=%d",
            request.url.path,
            type(exc).__name__,
            exc.status_code,
            extra={"error": type(exc).__name__},
        )
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)
