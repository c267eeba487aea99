"""
Shared fixtures for tests that drive a real client over a fake session.

The aiohttp session is replaced by a Mock whose request() returns async
context managers yielding canned responses, so no test touches the network.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, Mock


def _response(status=200, payload=None, text=""):
    response = Mock()
    response.status = status
    response.json = AsyncMock(return_value=payload)
    response.text = AsyncMock(return_value=text)
    return response


def _session(*responses):
    contexts = []
    for response in responses:
        ctx = MagicMock()
        ctx.__aenter__.return_value = response
        ctx.__aexit__.return_value = False
        contexts.append(ctx)

    session = Mock()
    session.request = Mock(side_effect=contexts)
    session.close = AsyncMock()
    return session


@pytest.fixture
def make_response():
    """Factory for fake aiohttp responses."""
    return _response


@pytest.fixture
def make_session():
    """Factory for fake aiohttp sessions answering with the given responses in order."""
    return _session


@pytest.fixture
def token_payload():
    return {
        "access_token": "test-access-token",
        "token_type": "Bearer",
        "expires_in": 3600,
        "scope": "playlist-modify-private user-read-private"
    }


@pytest.fixture
def track_payload():
    def build(track_id="track-1", name="Walking on Sunshine", artist="Katrina and the Waves"):
        return {
            "id": track_id,
            "name": name,
            "artists": [{"name": artist}],
            "external_urls": {"spotify": f"https://open.spotify.com/track/{track_id}"},
            "preview_url": None,
            "uri": f"spotify:track:{track_id}"
        }
    return build
