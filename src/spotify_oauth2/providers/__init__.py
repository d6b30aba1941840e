"""OAuth2 providers for spotify-oauth2."""

from .base import IdentityProviderError, OAuthProvider, ResourceOwner
from .spotify import SpotifyProvider, SpotifyResourceOwner

__all__ = [
    "IdentityProviderError",
    "OAuthProvider",
    "ResourceOwner",
    "SpotifyProvider",
    "SpotifyResourceOwner",
]
