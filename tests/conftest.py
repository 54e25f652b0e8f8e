from __future__ import annotations

import os
import sys
from pathlib import Path

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read once at import time, so the OAuth client must be in
# the environment before anything under app/ is imported.
CLIENT_ID = "upfirst"
CLIENT_SECRET = "test-client-secret"
REDIRECT_URI = "http://localhost:8081/process"
SIGNING_KEY = "test-signing-key-0123456789abcdef0123456789abcdef"

os.environ["APP_ENV"] = "test"
os.environ["OAUTH_CLIENT_ID"] = CLIENT_ID
os.environ["OAUTH_CLIENT_SECRET"] = CLIENT_SECRET
os.environ["OAUTH_REDIRECT_URI"] = REDIRECT_URI
os.environ["OAUTH_AUTH_ENDPOINT"] = "http://localhost:8080/api/oauth/authorize"
os.environ["OAUTH_TOKEN_ENDPOINT"] = "http://localhost:8080/api/oauth/token"
os.environ["JWT_SECRET_KEY"] = SIGNING_KEY

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402


@pytest.fixture
def client() -> TestClient:
    return TestClient(app, follow_redirects=False)


def token_request_body(**overrides: str | None) -> dict[str, str]:
    """A valid token request body; pass name=None to drop a field."""
    body: dict[str, str | None] = {
        "grant_type": "authorization_code",
        "code": "SOME_CODE",
        "client_id": CLIENT_ID,
        "redirect_uri": REDIRECT_URI,
    }
    body.update(overrides)
    return {k: v for k, v in body.items() if v is not None}


def authorize_params(**overrides: str | None) -> dict[str, str]:
    """Valid authorize query params; pass name=None to drop one."""
    params: dict[str, str | None] = {
        "response_type": "code",
        "client_id": CLIENT_ID,
        "redirect_uri": REDIRECT_URI,
        "state": "xyz",
    }
    params.update(overrides)
    return {k: v for k, v in params.items() if v is not None}
