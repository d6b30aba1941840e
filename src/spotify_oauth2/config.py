"""Spotify OAuth2 client configuration."""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class SpotifyConfig:
    """Credentials and defaults for the Spotify OAuth2 provider."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""

    # Empty means the provider's default scopes
    scopes: list[str] = field(default_factory=list)

    # HTTP timeout in seconds for token and profile requests
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        """Validate configuration."""
        if not self.client_id:
            raise ValueError("SPOTIFY_OAUTH_CLIENT_ID required")
        if not self.client_secret:
            raise ValueError("SPOTIFY_OAUTH_CLIENT_SECRET required")
        if not self.redirect_uri:
            raise ValueError("SPOTIFY_OAUTH_REDIRECT_URI required")


def _read_secret_file(path: str) -> str:
    """Read a secret from a file path."""
    try:
        return Path(path).read_text().strip()
    except (FileNotFoundError, PermissionError):
        logger.warning(f"Could not read secret file: {path}")
        return ""


def _split_scopes(value: str) -> list[str]:
    return [s for s in value.replace(",", " ").split() if s]


@lru_cache
def get_spotify_config() -> SpotifyConfig:
    """Load Spotify OAuth2 configuration from environment variables."""

    # Client secret: check env var first, then file path
    client_secret = os.environ.get("SPOTIFY_OAUTH_CLIENT_SECRET", "")
    if not client_secret:
        secret_file = os.environ.get("SPOTIFY_OAUTH_CLIENT_SECRET_FILE", "")
        if secret_file:
            client_secret = _read_secret_file(secret_file)

    return SpotifyConfig(
        client_id=os.environ.get("SPOTIFY_OAUTH_CLIENT_ID", ""),
        client_secret=client_secret,
        redirect_uri=os.environ.get("SPOTIFY_OAUTH_REDIRECT_URI", ""),
        scopes=_split_scopes(os.environ.get("SPOTIFY_OAUTH_SCOPES", "")),
        timeout=float(os.environ.get("SPOTIFY_OAUTH_TIMEOUT", str(DEFAULT_TIMEOUT))),
    )
