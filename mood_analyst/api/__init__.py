"""
API Module

Spotify client layer with consistent HTTP handling and error mapping.
The FastAPI host lives in mood_analyst.api.backend and is imported on demand.
"""

from .exceptions import (
    APIError,
    AuthError,
    CatalogError,
    DecodeError,
    NotAuthenticatedError,
    TransportError
)
from .base_client import BaseAPIClient
from .spotify_client import (
    AuthSession,
    SpotifyClient,
    SpotifyPlaylist,
    SpotifyTrack,
    SpotifyUser
)
from .client_factory import APIClientFactory

__all__ = [
    # Errors
    "CatalogError",
    "AuthError",
    "NotAuthenticatedError",
    "TransportError",
    "APIError",
    "DecodeError",

    # Base infrastructure
    "BaseAPIClient",

    # Spotify client and models
    "SpotifyClient",
    "SpotifyTrack",
    "SpotifyUser",
    "SpotifyPlaylist",
    "AuthSession",

    # Client factory
    "APIClientFactory",
]
