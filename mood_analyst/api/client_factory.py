"""
API Client Factory

Provides standardized creation and configuration of the Spotify client
from system configuration or environment variables.
"""

import os
from typing import Optional

import structlog

from ..models.agent_models import SystemConfig
from .spotify_client import SpotifyClient

logger = structlog.get_logger(__name__)


class APIClientFactory:
    """
    Factory for creating configured API clients.

    Explicit arguments win over system configuration, which wins over
    environment variables.
    """

    def __init__(self, system_config: Optional[SystemConfig] = None):
        """
        Initialize client factory.

        Args:
            system_config: System configuration (optional)
        """
        self.system_config = system_config
        self.logger = logger.bind(service="APIClientFactory")

        self.logger.info("API Client Factory initialized")

    def create_spotify_client(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        refresh_token: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> SpotifyClient:
        """
        Create configured Spotify client.

        The returned client is unauthenticated and has no open session;
        callers enter it as an async context manager and call authenticate().

        Args:
            client_id: Spotify client ID (defaults to system config or env var)
            client_secret: Spotify client secret (defaults to system config or env var)
            refresh_token: Refresh token for user-scoped access (optional)
            timeout: Per-request timeout in seconds

        Returns:
            Configured SpotifyClient instance

        Raises:
            ValueError: If the client ID or secret cannot be resolved
        """
        client_id = client_id or self._get_spotify_client_id()
        client_secret = client_secret or self._get_spotify_client_secret()
        refresh_token = refresh_token or self._get_spotify_refresh_token()
        timeout = timeout or self._get_request_timeout()

        if not client_id or not client_secret:
            raise ValueError("Spotify client ID and secret are required")

        client = SpotifyClient(
            client_id=client_id,
            client_secret=client_secret,
            refresh_token=refresh_token,
            timeout=timeout
        )

        self.logger.info(
            "Spotify client created",
            timeout=timeout,
            user_scoped=bool(refresh_token)
        )

        return client

    # Configuration resolution methods
    def _get_spotify_client_id(self) -> Optional[str]:
        if self.system_config:
            return self.system_config.spotify_client_id
        return os.getenv('SPOTIFY_CLIENT_ID')

    def _get_spotify_client_secret(self) -> Optional[str]:
        if self.system_config:
            return self.system_config.spotify_client_secret
        return os.getenv('SPOTIFY_CLIENT_SECRET')

    def _get_spotify_refresh_token(self) -> Optional[str]:
        if self.system_config:
            return self.system_config.spotify_refresh_token
        return os.getenv('SPOTIFY_REFRESH_TOKEN') or None

    def _get_request_timeout(self) -> float:
        if self.system_config:
            return self.system_config.request_timeout
        return float(os.getenv('SPOTIFY_REQUEST_TIMEOUT', '10'))
