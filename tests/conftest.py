"""Pytest configuration and fixtures"""

import json

import httpx
import pytest

from spotify_oauth2.config import get_spotify_config
from spotify_oauth2.providers.spotify import SpotifyProvider


class FakeSpotify:
    """Queue of canned responses served through httpx.MockTransport"""

    def __init__(self):
        self.responses: list[httpx.Response] = []
        self.requests: list[httpx.Request] = []

    def add(self, status_code=200, body="", content_type="application/json"):
        if not isinstance(body, str):
            body = json.dumps(body)
        self.responses.append(
            httpx.Response(status_code, headers={"content-type": content_type}, text=body)
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


@pytest.fixture
def fake_spotify():
    return FakeSpotify()


@pytest.fixture
def provider(fake_spotify):
    """Provider wired to the fake transport."""
    client = httpx.Client(transport=httpx.MockTransport(fake_spotify.handler))
    yield SpotifyProvider(
        client_id="mock_client_id",
        client_secret="mock_secret",
        redirect_uri="none",
        http_client=client,
    )
    client.close()


@pytest.fixture(autouse=True)
def clear_config_cache():
    get_spotify_config.cache_clear()
    yield
    get_spotify_config.cache_clear()
