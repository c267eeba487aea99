"""
Mood Models for the Mood Analyst agent

Pydantic models describing the result of mood classification: the mood label,
its audio feature targets and the catalog hints derived from it.
"""

from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

NEUTRAL_MOOD = "neutral"

MOOD_LABELS = (
    "happy",
    "sad",
    "relaxed",
    "energetic",
    "romantic",
    "focused",
    NEUTRAL_MOOD,
)


class AudioFeatureTargets(BaseModel):
    """Target audio feature values steering catalog recommendations"""

    model_config = ConfigDict(frozen=True)

    energy: float = Field(default=0.5, ge=0.0, le=1.0, description="Target energy")
    danceability: float = Field(default=0.5, ge=0.0, le=1.0, description="Target danceability")
    valence: float = Field(default=0.5, ge=0.0, le=1.0, description="Target valence (positiveness)")
    acousticness: float = Field(default=0.5, ge=0.0, le=1.0, description="Target acousticness")

    def to_query_params(self) -> Dict[str, str]:
        """Render targets as recommendation query parameters."""
        return {
            "target_energy": str(self.energy),
            "target_danceability": str(self.danceability),
            "target_valence": str(self.valence),
            "target_acousticness": str(self.acousticness),
        }


class MoodProfile(BaseModel):
    """Immutable result of classifying a free-text mood description"""

    model_config = ConfigDict(frozen=True)

    mood: str = Field(default=NEUTRAL_MOOD, description="Detected mood label")
    targets: AudioFeatureTargets = Field(
        default_factory=AudioFeatureTargets,
        description="Audio feature targets for recommendations"
    )
    suggested_genres: Tuple[str, ...] = Field(
        default=(),
        description="Ordered genre hints, used as padding recommendation seeds"
    )
    search_query_terms: str = Field(default="", description="Catalog search query")

    @property
    def energy(self) -> float:
        return self.targets.energy

    @property
    def danceability(self) -> float:
        return self.targets.danceability

    @property
    def valence(self) -> float:
        return self.targets.valence

    @property
    def acousticness(self) -> float:
        return self.targets.acousticness
