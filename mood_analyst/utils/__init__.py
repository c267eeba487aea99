"""Logging utilities for the Mood Analyst agent."""

from .logging_config import (
    MoodAnalystLogger,
    log_api_request,
    set_request_context,
    setup_logging
)

__all__ = [
    "MoodAnalystLogger",
    "log_api_request",
    "set_request_context",
    "setup_logging",
]
