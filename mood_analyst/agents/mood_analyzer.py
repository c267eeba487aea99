"""
MoodAnalyzer Component

Maps a free-text mood description to a MoodProfile using an ordered table of
keyword rules. Rules are checked in table order and every matching rule
replaces the profile, so the last match wins.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

import structlog

from ..models.mood_models import NEUTRAL_MOOD, AudioFeatureTargets, MoodProfile

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MoodRule:
    """Keyword rule producing a complete mood profile."""
    mood: str
    keywords: Tuple[str, ...]
    targets: AudioFeatureTargets
    genres: Tuple[str, ...]
    search_terms: str

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)

    def to_profile(self) -> MoodProfile:
        return MoodProfile(
            mood=self.mood,
            targets=self.targets,
            suggested_genres=self.genres,
            search_query_terms=self.search_terms
        )


# Order matters: a later match overrides an earlier one.
MOOD_RULES: Tuple[MoodRule, ...] = (
    MoodRule(
        mood="happy",
        keywords=("happy", "joyful", "excited", "energetic", "upbeat", "great", "fantastic"),
        targets=AudioFeatureTargets(energy=0.8, danceability=0.7, valence=0.8, acousticness=0.3),
        genres=("pop", "dance", "electronic", "funk"),
        search_terms="happy upbeat energetic"
    ),
    MoodRule(
        mood="sad",
        keywords=("sad", "down", "depressed", "lonely", "blue", "heartbroken", "melancholy"),
        targets=AudioFeatureTargets(energy=0.3, danceability=0.2, valence=0.2, acousticness=0.7),
        genres=("indie", "folk", "soul", "acoustic"),
        search_terms="sad emotional soulful"
    ),
    MoodRule(
        mood="relaxed",
        keywords=("calm", "relaxed", "chill", "peaceful", "serene", "tranquil", "zen"),
        targets=AudioFeatureTargets(energy=0.2, danceability=0.3, valence=0.5, acousticness=0.8),
        genres=("ambient", "lo-fi", "jazz", "acoustic"),
        search_terms="relaxing chill ambient"
    ),
    MoodRule(
        mood="energetic",
        keywords=("pumped", "energetic", "motivated", "fired up", "adrenaline"),
        targets=AudioFeatureTargets(energy=0.9, danceability=0.8, valence=0.7, acousticness=0.1),
        genres=("hip-hop", "electronic", "rock", "metal"),
        search_terms="energetic powerful intense"
    ),
    MoodRule(
        mood="romantic",
        keywords=("romantic", "in love", "loved", "affectionate", "passionate"),
        targets=AudioFeatureTargets(energy=0.4, danceability=0.5, valence=0.7, acousticness=0.6),
        genres=("soul", "r&b", "indie", "acoustic pop"),
        search_terms="romantic love passionate"
    ),
    MoodRule(
        mood="focused",
        keywords=("focused", "studying", "concentrating", "working", "productive"),
        targets=AudioFeatureTargets(energy=0.5, danceability=0.3, valence=0.5, acousticness=0.5),
        genres=("lo-fi", "classical", "ambient", "instrumental"),
        search_terms="focus study concentration"
    ),
)


class MoodAnalyzer:
    """
    Keyword-based mood classifier.

    Classification is pure: the same description always yields the same
    profile and no state is kept between calls.
    """

    def __init__(self, rules: Tuple[MoodRule, ...] = MOOD_RULES):
        self.rules = rules
        self.logger = logger.bind(component="MoodAnalyzer")

    def analyze_mood(self, description: str) -> MoodProfile:
        """
        Classify a mood description.

        Args:
            description: Free-text mood description

        Returns:
            Profile of the last matching rule, or the neutral profile
        """
        text = (description or "").lower()

        profile = MoodProfile(mood=NEUTRAL_MOOD)
        for rule in self.rules:
            if rule.matches(text):
                profile = rule.to_profile()

        self.logger.debug("Mood analyzed", mood=profile.mood, energy=profile.energy)
        return profile


def get_mood_parameters(profile: MoodProfile) -> Dict[str, str]:
    """Return the target_* recommendation parameters for a profile."""
    return profile.targets.to_query_params()


def format_track_recommendation(name: str, artist: str, url: str) -> str:
    """Render one track for the text response."""
    return f"🎵 {name} by {artist}\n   🔗 {url}"
