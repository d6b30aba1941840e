"""Pydantic models for Spotify OAuth2 tokens."""

import time
from typing import Any, Mapping

from pydantic import BaseModel, Field

# Larger values are taken as absolute timestamps (2012-10-01, the OAuth 2 RFC draft date)
OAUTH2_INCEPTION_TIMESTAMP = 1349067600

_TOKEN_FIELDS = ("access_token", "resource_owner_id", "refresh_token", "expires_in", "expires")


class AccessToken(BaseModel):
    """Access token issued by the authorization server."""

    access_token: str
    refresh_token: str | None = None
    expires: int | None = None
    resource_owner_id: str | None = None
    values: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_response(cls, data: Mapping[str, Any], now: int | None = None) -> "AccessToken":
        """
        Build a token from a decoded token endpoint response.

        Args:
            data: Decoded token response
            now: Current Unix time, defaults to time.time()

        Returns:
            AccessToken with an absolute expiry timestamp when one is known

        Raises:
            ValueError: If access_token is missing or expires_in/expires is not numeric
        """
        if not data.get("access_token"):
            raise ValueError('Required option not passed: "access_token"')

        if now is None:
            now = int(time.time())

        expires = None
        if data.get("expires_in") is not None:
            try:
                expires_in = int(data["expires_in"])
            except (TypeError, ValueError):
                raise ValueError("expires_in value must be an integer")
            expires = now + expires_in if expires_in != 0 else 0
        elif data.get("expires"):
            try:
                expires = int(data["expires"])
            except (TypeError, ValueError):
                raise ValueError("expires value must be an integer")
            if expires <= OAUTH2_INCEPTION_TIMESTAMP:
                expires += now

        resource_owner_id = data.get("resource_owner_id")

        return cls(
            access_token=str(data["access_token"]),
            refresh_token=data.get("refresh_token") or None,
            expires=expires,
            resource_owner_id=str(resource_owner_id) if resource_owner_id is not None else None,
            values={k: v for k, v in data.items() if k not in _TOKEN_FIELDS},
        )

    def has_expired(self) -> bool:
        """Check if the token is past its expiry time."""
        if not self.expires:
            raise ValueError('"expires" is not set on the token')
        return self.expires < time.time()

    def __str__(self) -> str:
        return self.access_token
