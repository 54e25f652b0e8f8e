from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.health import router as health_router
from app.api.metrics_endpoint import router as metrics_router
from app.api.oauth import oauth_client
from app.api.oauth import router as oauth_router
from app.core.config import SETTINGS
from app.core.errors import OAuthError, oauth_error_handler
from app.core.logging import setup_logging
from app.middleware.metrics import MetricsMiddleware
from app.middleware.request_context import (
    RequestContextMiddleware,
    install_request_context_filter,
)

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
install_request_context_filter()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="mock-oauth-server",
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# Any origin may drive the flow; this server exists for local client testing.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware execution order: last-added runs first (outermost layer).
# RequestContext (outermost) → Metrics → CORS → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(OAuthError, oauth_error_handler)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(oauth_router)

logger.info(
    "mock-oauth-server configured  env=%s log_level=%s port=%d oauth=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    oauth_client.to_log_dict(),
)
if oauth_client.client_id is None or oauth_client.redirect_uri is None:
    logger.warning(
        "OAUTH_CLIENT_ID or OAUTH_REDIRECT_URI not set; "
        "every authorize/token request will be rejected"
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=SETTINGS.port)
