"""
Models Module

Data models and configuration schemas for the Mood Analyst agent.
"""

from .mood_models import (
    MOOD_LABELS,
    NEUTRAL_MOOD,
    AudioFeatureTargets,
    MoodProfile
)
from .agent_models import AgentConfig, SystemConfig

__all__ = [
    # Mood models
    "MOOD_LABELS",
    "NEUTRAL_MOOD",
    "AudioFeatureTargets",
    "MoodProfile",

    # Configuration
    "AgentConfig",
    "SystemConfig",
]
