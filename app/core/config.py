from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

from dotenv import load_dotenv

from app.models.oauth_client import OAuthClientConfig

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

# Real environment variables win over .env entries.
load_dotenv(override=False)


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it’s easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


def _getenv_optional(name: str) -> str | None:
    return _getenv(name, "") or None


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    jwt_secret_key: str | None = field(default=None, repr=False)
    oauth_client_id: str | None = None
    oauth_client_secret: str | None = field(default=None, repr=False)
    oauth_redirect_uri: str | None = None
    oauth_auth_endpoint: str | None = None
    oauth_token_endpoint: str | None = None

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"

    @property
    def oauth_client(self) -> OAuthClientConfig:
        return OAuthClientConfig(
            client_id=self.oauth_client_id,
            client_secret=self.oauth_client_secret,
            redirect_uri=self.oauth_redirect_uri,
            authorization_endpoint=self.oauth_auth_endpoint,
            token_endpoint=self.oauth_token_endpoint,
        )


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    log_json_raw = _getenv("LOG_JSON", "false").lower()
    port_raw = _getenv("PORT", "8080")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    if log_json_raw not in ("true", "false", "1", "0", "yes", "no"):
        raise ValueError(f"LOG_JSON must be a boolean (got {log_json_raw!r})")

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=log_json_raw in ("true", "1", "yes"),
        port=port,
        jwt_secret_key=_getenv_optional("JWT_SECRET_KEY"),
        oauth_client_id=_getenv_optional("OAUTH_CLIENT_ID"),
        oauth_client_secret=_getenv_optional("OAUTH_CLIENT_SECRET"),
        oauth_redirect_uri=_getenv_optional("OAUTH_REDIRECT_URI"),
        oauth_auth_endpoint=_getenv_optional("OAUTH_AUTH_ENDPOINT"),
        oauth_token_endpoint=_getenv_optional("OAUTH_TOKEN_ENDPOINT"),
    )


# Optional: module-level singleton so imports are cheap
SETTINGS = load_settings()
