from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from app.api import oauth
from app.models.oauth_client import OAuthClientConfig
from tests.conftest import CLIENT_ID, REDIRECT_URI, authorize_params


def test_authorize_redirects_with_code_and_state(client: TestClient) -> None:
    resp = client.get("/api/oauth/authorize", params=authorize_params())

    assert resp.status_code == 302
    location = resp.headers["location"]
    assert location.startswith(REDIRECT_URI)
    query = parse_qs(urlparse(location).query)
    assert query == {"code": ["SOME_CODE"], "state": ["xyz"]}


def test_authorize_without_state_omits_state(client: TestClient) -> None:
    resp = client.get("/api/oauth/authorize", params=authorize_params(state=None))

    assert resp.status_code == 302
    assert resp.headers["location"] == f"{REDIRECT_URI}?code=SOME_CODE"


def test_authorize_empty_state_is_not_forwarded(client: TestClient) -> None:
    resp = client.get("/api/oauth/authorize", params=authorize_params(state=""))

    assert resp.status_code == 302
    assert "state" not in parse_qs(urlparse(resp.headers["location"]).query)


def test_authorize_state_is_query_escaped(client: TestClient) -> None:
    state = "a b&c=d/é"
    resp = client.get("/api/oauth/authorize", params=authorize_params(state=state))

    location = resp.headers["location"]
    assert "a b" not in location
    assert parse_qs(urlparse(location).query)["state"] == [state]


def test_authorize_accepts_any_response_type(client: TestClient) -> None:
    resp = client.get(
        "/api/oauth/authorize", params=authorize_params(response_type="token")
    )
    assert resp.status_code == 302


@pytest.mark.parametrize("missing", ["response_type", "client_id", "redirect_uri"])
def test_authorize_missing_parameter_returns_400(
    client: TestClient, missing: str
) -> None:
    resp = client.get(
        "/api/oauth/authorize", params=authorize_params(**{missing: None})
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required parameters"}


@pytest.mark.parametrize("empty", ["response_type", "client_id", "redirect_uri"])
def test_authorize_empty_parameter_counts_as_missing(
    client: TestClient, empty: str
) -> None:
    resp = client.get("/api/oauth/authorize", params=authorize_params(**{empty: ""}))
    assert resp.status_code == 400


def test_authorize_unknown_client_returns_401(client: TestClient) -> None:
    resp = client.get(
        "/api/oauth/authorize", params=authorize_params(client_id="someone-else")
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid client_id"}


def test_authorize_client_checked_before_redirect(client: TestClient) -> None:
    resp = client.get(
        "/api/oauth/authorize",
        params=authorize_params(client_id="nope", redirect_uri="http://evil/cb"),
    )
    assert resp.json() == {"error": "Invalid client_id"}


@pytest.mark.parametrize(
    "redirect_uri",
    [
        "http://evil.example/callback",
        REDIRECT_URI + "/extra",
        REDIRECT_URI + "?next=/",
        REDIRECT_URI.upper(),
    ],
)
def test_authorize_redirect_uri_requires_exact_match(
    client: TestClient, redirect_uri: str
) -> None:
    resp = client.get(
        "/api/oauth/authorize", params=authorize_params(redirect_uri=redirect_uri)
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid redirect_uri"}
    assert "location" not in resp.headers


def test_authorize_keeps_existing_query_on_redirect_uri(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    uri = "http://localhost:8081/process?tenant=acme"
    monkeypatch.setattr(
        oauth,
        "oauth_client",
        OAuthClientConfig(
            client_id=CLIENT_ID,
            client_secret=None,
            redirect_uri=uri,
            authorization_endpoint=None,
            token_endpoint=None,
        ),
    )
    resp = client.get("/api/oauth/authorize", params=authorize_params(redirect_uri=uri))

    assert resp.status_code == 302
    query = parse_qs(urlparse(resp.headers["location"]).query)
    assert query == {"tenant": ["acme"], "code": ["SOME_CODE"], "state": ["xyz"]}


def test_authorize_rejects_everything_when_client_unconfigured(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        oauth,
        "oauth_client",
        OAuthClientConfig(
            client_id=None,
            client_secret=None,
            redirect_uri=None,
            authorization_endpoint=None,
            token_endpoint=None,
        ),
    )
    resp = client.get("/api/oauth/authorize", params=authorize_params())
    assert resp.status_code == 401


def test_authorize_does_not_touch_state_store(client: TestClient) -> None:
    client.get("/api/oauth/authorize", params=authorize_params())
    assert len(oauth.state_store) == 0
