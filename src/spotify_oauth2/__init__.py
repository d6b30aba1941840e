"""Spotify provider for OAuth2 authorization code login."""

from .config import SpotifyConfig, get_spotify_config
from .models import AccessToken
from .providers import (
    IdentityProviderError,
    OAuthProvider,
    ResourceOwner,
    SpotifyProvider,
    SpotifyResourceOwner,
)

__all__ = [
    "AccessToken",
    "IdentityProviderError",
    "OAuthProvider",
    "ResourceOwner",
    "SpotifyConfig",
    "SpotifyProvider",
    "SpotifyResourceOwner",
    "get_spotify_config",
]
