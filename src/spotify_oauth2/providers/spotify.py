"""Spotify OAuth2 provider."""

import logging
from typing import Any, Mapping

import httpx

from ..config import SpotifyConfig, get_spotify_config
from ..models import AccessToken
from .base import IdentityProviderError, OAuthProvider, ResourceOwner

logger = logging.getLogger(__name__)

# Spotify OAuth URLs
SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_ME_URL = "https://api.spotify.com/v1/me"

DEFAULT_SCOPES = ["user-read-email"]


class SpotifyResourceOwner(ResourceOwner):
    """
    Spotify user profile as returned by ``GET /v1/me``.

    Top-level fields collapse empty values ("", "0" or 0) to None. Nested fields
    (spotify_url, followers, image) only check that the value is present,
    so a follower count of 0 is returned as 0. A follower count that is not
    numeric gives None.
    """

    def __init__(self, response: dict[str, Any] | None = None):
        self._response = response if response is not None else {}

    def _value(self, key: str) -> Any:
        value = self._response.get(key)
        # "0" counts as empty, like 0 and ""
        if not value or value == "0":
            return None
        return value

    def _nested(self, *path: str | int) -> Any:
        value: Any = self._response
        for key in path:
            if isinstance(key, int):
                if not isinstance(value, list) or len(value) <= key:
                    return None
            elif not isinstance(value, Mapping) or key not in value:
                return None
            value = value[key]
        return value

    @property
    def id(self) -> str | None:
        return self._value("id")

    @property
    def birthdate(self) -> str | None:
        return self._value("birthdate")

    @property
    def country(self) -> str | None:
        return self._value("country")

    @property
    def display_name(self) -> str | None:
        return self._value("display_name")

    @property
    def email(self) -> str | None:
        return self._value("email")

    @property
    def spotify_url(self) -> str | None:
        """Profile URL from ``external_urls.spotify``."""
        return self._nested("external_urls", "spotify")

    @property
    def followers(self) -> int | None:
        """Follower count from ``followers.total``."""
        total = self._nested("followers", "total")
        if total is None:
            return None
        try:
            return int(float(total))
        except (TypeError, ValueError, OverflowError):
            return None

    @property
    def image(self) -> str | None:
        """URL of the first profile image."""
        return self._nested("images", 0, "url")

    @property
    def product(self) -> str | None:
        return self._value("product")

    @property
    def type(self) -> str | None:
        return self._value("type")

    @property
    def uri(self) -> str | None:
        return self._value("uri")

    def to_dict(self) -> dict[str, Any]:
        return self._response

    def __repr__(self) -> str:
        return f"SpotifyResourceOwner(id={self.id!r}, display_name={self.display_name!r})"


class SpotifyProvider(OAuthProvider):
    """Spotify OAuth2 provider."""

    scope_separator = " "

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: list[str] | None = None,
        **kwargs: Any,
    ):
        super().__init__(client_id, client_secret, redirect_uri, **kwargs)
        self._default_scopes = list(scopes) if scopes else list(DEFAULT_SCOPES)

    @classmethod
    def from_config(
        cls, config: SpotifyConfig | None = None, http_client: httpx.Client | None = None
    ) -> "SpotifyProvider":
        """Create a provider from configuration (environment by default)."""
        config = config or get_spotify_config()
        return cls(
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_uri=config.redirect_uri,
            scopes=config.scopes,
            http_client=http_client,
            timeout=config.timeout,
        )

    @property
    def base_authorization_url(self) -> str:
        return SPOTIFY_AUTHORIZE_URL

    def base_access_token_url(self, params: Mapping[str, Any]) -> str:
        return SPOTIFY_TOKEN_URL

    def resource_owner_details_url(self, token: AccessToken) -> str:
        # /v1/me is resolved from the bearer token, not a user id
        return SPOTIFY_ME_URL

    @property
    def default_scopes(self) -> list[str]:
        return self._default_scopes

    def get_authorization_headers(self, token: AccessToken | str | None = None) -> dict[str, str]:
        if token is None:
            return {}
        return {"Authorization": f"Bearer {token}"}

    def check_response(self, response: httpx.Response, data: Any) -> None:
        """Raise IdentityProviderError for failed statuses or error bodies."""
        has_error = isinstance(data, Mapping) and ("error" in data or "error_description" in data)

        if 200 <= response.status_code < 400 and not has_error:
            return

        message = None
        if isinstance(data, Mapping):
            message = data.get("error_description") or data.get("error")
        if not message:
            message = response.reason_phrase

        # Spotify Web API errors use {"error": {"status": ..., "message": ...}}
        if isinstance(message, Mapping):
            message = message.get("message") or response.reason_phrase

        logger.error(f"Spotify request failed: status={response.status_code} error={message}")
        raise IdentityProviderError(str(message), status_code=response.status_code, response_body=data)

    def create_resource_owner(self, data: dict[str, Any], token: AccessToken) -> SpotifyResourceOwner:
        return SpotifyResourceOwner(data)
