"""
Agent Models for the Mood Analyst agent

Pydantic models for system configuration and the agent descriptor.
"""

import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AgentConfig(BaseModel):
    """Descriptor advertised by the hosted agent"""

    agent_name: str = Field(default="mood analyst", description="Name of the agent")
    description: str = Field(
        default=(
            "A sentiment inclined agent, that recommends music based on your mood"
            "(a user describes their mood, then the agent recommends a music by "
            "pulling the music from spotify)"
        ),
        description="Human readable agent description"
    )
    capabilities: List[str] = Field(
        default_factory=lambda: ["mood_analysis", "sentiment_analysis", "emotion_analysis"],
        description="Capabilities advertised to the host"
    )
    commands: List[str] = Field(
        default_factory=lambda: ["mood_analyzer"],
        description="Commands understood by the agent"
    )


class SystemConfig(BaseModel):
    """Overall system configuration"""

    # API configurations
    spotify_client_id: str = Field(..., min_length=1, description="Spotify client ID")
    spotify_client_secret: str = Field(..., min_length=1, description="Spotify client secret")
    spotify_refresh_token: Optional[str] = Field(
        default=None,
        description="Refresh token for user-scoped access; client credentials are used when absent"
    )
    request_timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")

    agent: AgentConfig = Field(default_factory=AgentConfig, description="Agent descriptor")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, Any]] = None) -> "SystemConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Validated system configuration

        Raises:
            ValueError: If Spotify credentials are missing
        """
        env = os.environ if environ is None else environ

        client_id = env.get("SPOTIFY_CLIENT_ID", "")
        client_secret = env.get("SPOTIFY_CLIENT_SECRET", "")
        if not client_id or not client_secret:
            raise ValueError(
                "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET environment variables are required"
            )

        return cls(
            spotify_client_id=client_id,
            spotify_client_secret=client_secret,
            spotify_refresh_token=env.get("SPOTIFY_REFRESH_TOKEN") or None,
            request_timeout=float(env.get("SPOTIFY_REQUEST_TIMEOUT", "10")),
            log_level=env.get("LOG_LEVEL", "INFO"),
            log_dir=env.get("LOG_DIR", "logs"),
        )
