"""
Mood Analyst Agent

Handles commands for the hosted agent and runs the recommend-for-mood flow:
classify the description, search for seed tracks, ask the catalog for
recommendations (falling back to a broadened search), format the response
and optionally save the tracks as a playlist.
"""

from typing import List, Optional

import structlog

from ..api.exceptions import CatalogError
from ..api.spotify_client import SpotifyClient, SpotifyTrack
from ..models.agent_models import AgentConfig
from ..models.mood_models import MoodProfile
from .mood_analyzer import MoodAnalyzer, format_track_recommendation

logger = structlog.get_logger(__name__)

MOOD_COMMAND = "mood_analyzer"
MAX_SEEDS = 5
SEED_SEARCH_LIMIT = 5
RECOMMENDATION_LIMIT = 15
FALLBACK_SEARCH_LIMIT = 15


class MoodAnalystAgent:
    """
    Command-driven agent recommending music for a described mood.

    All catalog calls are awaited one after another. recommend_music never
    raises: catalog failures become apology messages or are logged and
    skipped.
    """

    def __init__(
        self,
        spotify_client: SpotifyClient,
        config: Optional[AgentConfig] = None,
        analyzer: Optional[MoodAnalyzer] = None,
        create_playlists: bool = True
    ):
        """
        Initialize the agent.

        Args:
            spotify_client: Authenticated catalog client
            config: Agent descriptor
            analyzer: Mood classifier
            create_playlists: Whether to save results as a playlist
        """
        self.spotify_client = spotify_client
        self.config = config or AgentConfig()
        self.analyzer = analyzer or MoodAnalyzer()
        self.create_playlists = create_playlists

        self.success_count = 0
        self.error_count = 0

        self.logger = logger.bind(agent=self.config.agent_name, component="MoodAnalystAgent")
        self.logger.info("Agent initialized", capabilities=self.config.capabilities)

    @property
    def available_commands(self) -> str:
        return ", ".join(self.config.commands)

    async def process_task(self, task: str) -> str:
        """
        Dispatch a raw task string.

        The task is trimmed, one leading slash is removed, and the result is
        lowercased and split on whitespace. The first word selects the
        command; the rest is the mood description.
        """
        text = (task or "").strip()
        if text.startswith("/"):
            text = text[1:]
        parts = text.lower().split()

        if not parts:
            return f"No command provided. Available commands: {self.available_commands}"

        command, args = parts[0], parts[1:]
        self.logger.info("Processing task", command=command, arg_count=len(args))

        if command == MOOD_COMMAND and command in self.config.commands:
            if not args:
                return (
                    "Please describe your mood. "
                    "Example: 'mood_analyzer I feel happy and energetic'"
                )
            return await self.recommend_music(" ".join(args))

        return f"Unknown command '{command}'. Available commands: {self.available_commands}"

    async def recommend_music(self, description: str) -> str:
        """
        Recommend tracks for a mood description.

        Args:
            description: Free-text mood description

        Returns:
            Formatted recommendation text, or an apology when the catalog
            cannot be reached or has nothing to offer
        """
        profile = self.analyzer.analyze_mood(description)
        query = profile.search_query_terms or description

        self.logger.info("Mood detected", mood=profile.mood, query=query)

        try:
            seed_tracks = await self.spotify_client.search_tracks(query, SEED_SEARCH_LIMIT)
        except CatalogError as e:
            self.error_count += 1
            self.logger.error("Seed search failed", mood=profile.mood, error=str(e))
            return (
                f"I detected your mood as '{profile.mood}', but I couldn't fetch "
                "recommendations right now. Try again later!"
            )

        if not seed_tracks:
            self.logger.info("Seed search returned no tracks", mood=profile.mood)
            return (
                f"I understand you're feeling {profile.mood}, but I couldn't find "
                "any matching songs right now."
            )

        tracks = list(seed_tracks)
        tracks.extend(await self._fetch_recommendations(profile, seed_tracks, query))

        response, uris = self._format_response(profile, tracks)

        if self.create_playlists and uris:
            playlist_url = await self._create_playlist(profile, uris)
            if playlist_url:
                response += f"\n✨ I've also created a playlist for you: {playlist_url}\n"

        self.success_count += 1
        return response

    def select_seeds(self, profile: MoodProfile, seed_tracks: List[SpotifyTrack]):
        """
        Pick recommendation seeds.

        Up to five non-empty track IDs are used; remaining slots are filled
        from the profile's suggested genres in order.

        Returns:
            Tuple of (track_ids, genres)
        """
        track_ids = [t.id for t in seed_tracks if t.id][:MAX_SEEDS]
        genres: List[str] = []
        if len(track_ids) < MAX_SEEDS:
            genres = list(profile.suggested_genres[:MAX_SEEDS - len(track_ids)])
        return track_ids, genres

    async def _fetch_recommendations(
        self,
        profile: MoodProfile,
        seed_tracks: List[SpotifyTrack],
        query: str
    ) -> List[SpotifyTrack]:
        track_ids, genres = self.select_seeds(profile, seed_tracks)

        self.logger.debug(
            "Recommendation seeds selected",
            seed_tracks=len(track_ids),
            seed_genres=genres
        )

        try:
            return await self.spotify_client.get_recommendations(
                track_ids,
                genres,
                profile.targets,
                RECOMMENDATION_LIMIT
            )
        except CatalogError as e:
            self.logger.warning(
                "Recommendations failed, falling back to search",
                mood=profile.mood,
                error=str(e)
            )

        # Tracks already returned by the seed search may repeat here.
        try:
            return await self.spotify_client.search_tracks(
                f"{query} {profile.mood}",
                FALLBACK_SEARCH_LIMIT
            )
        except CatalogError as e:
            self.logger.warning("Fallback search failed", mood=profile.mood, error=str(e))
            return []

    def _format_response(self, profile: MoodProfile, tracks: List[SpotifyTrack]):
        lines = [f"Based on your mood ({profile.mood}), here are some song recommendations:\n\n"]
        uris = []

        for i, track in enumerate(tracks, start=1):
            entry = format_track_recommendation(
                track.name,
                track.primary_artist,
                track.external_url or ""
            )
            lines.append(f"{i}. {entry}\n")
            if track.uri:
                uris.append(track.uri)

        return "".join(lines), uris

    async def _create_playlist(self, profile: MoodProfile, uris: List[str]) -> Optional[str]:
        """Save tracks as a playlist; returns its URL, or None on any failure."""
        try:
            user = await self.spotify_client.get_current_user()
            playlist = await self.spotify_client.create_playlist(
                user.id,
                f"Mood Analyst: {profile.mood.title()} Vibes",
                f"A playlist curated for your {profile.mood} mood."
            )
            await self.spotify_client.add_tracks_to_playlist(playlist.id, uris)
        except CatalogError as e:
            self.logger.warning("Playlist creation failed", mood=profile.mood, error=str(e))
            return None

        self.logger.info("Playlist created for mood", mood=profile.mood, playlist_id=playlist.id)
        return playlist.external_url

    def get_stats(self):
        return {
            "agent_name": self.config.agent_name,
            "success_count": self.success_count,
            "error_count": self.error_count
        }
