"""
Agents Module

The mood classifier and the agent that turns a classified mood into
Spotify recommendations.
"""

from .mood_analyzer import (
    MOOD_RULES,
    MoodAnalyzer,
    MoodRule,
    format_track_recommendation,
    get_mood_parameters
)
from .mood_agent import MoodAnalystAgent

__all__ = [
    "MOOD_RULES",
    "MoodAnalyzer",
    "MoodRule",
    "format_track_recommendation",
    "get_mood_parameters",
    "MoodAnalystAgent",
]
