from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True, slots=True)
class OAuthClientConfig:
    """The single OAuth client this server knows about.

    Loaded once from the environment at startup. Any field may be unset;
    an unset client_id or redirect_uri simply never matches a request.
    """

    client_id: str | None
    # Held for completeness. The token endpoint does not authenticate clients.
    client_secret: str | None = field(repr=False)
    redirect_uri: str | None
    authorization_endpoint: str | None
    token_endpoint: str | None

    def matches_client(self, client_id: str) -> bool:
        return self.client_id is not None and client_id == self.client_id

    def matches_redirect(self, redirect_uri: str) -> bool:
        return self.redirect_uri is not None and redirect_uri == self.redirect_uri

    def to_log_dict(self) -> dict[str, str | None]:
        """Config snapshot safe to log: the client secret is masked."""
        data = asdict(self)
        if data["client_secret"]:
            data["client_secret"] = "***"
        return data
