"""
Mood Analyst - Spotify Music Recommendations from a Described Mood

A command-driven agent that classifies a free-text mood description and
turns it into Spotify track recommendations, optionally saved as a playlist.
"""

__version__ = "0.1.0"
__author__ = "Mood Analyst Team"
