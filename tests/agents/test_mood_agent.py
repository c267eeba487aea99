"""
Tests for MoodAnalystAgent.

The Spotify client is mocked so the recommend flow can be checked call by
call: seed search, seed selection, recommendations with search fallback,
response formatting and the optional playlist step.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from mood_analyst.agents.mood_agent import MoodAnalystAgent
from mood_analyst.api.exceptions import APIError, NotAuthenticatedError, TransportError
from mood_analyst.api.spotify_client import (
    AuthSession,
    SpotifyClient,
    SpotifyPlaylist,
    SpotifyTrack,
    SpotifyUser
)
from mood_analyst.models.agent_models import AgentConfig


def make_track(track_id, name=None, artists=None, uri=None):
    return SpotifyTrack(
        id=track_id,
        name=name or f"Song {track_id}",
        artists=["Artist " + track_id] if artists is None else artists,
        external_url=f"https://open.spotify.com/track/{track_id}",
        uri=f"spotify:track:{track_id}" if uri is None else uri
    )


@pytest.fixture
def spotify_client():
    client = Mock()
    client.search_tracks = AsyncMock(return_value=[make_track(f"s{i}") for i in range(1, 6)])
    client.get_recommendations = AsyncMock(return_value=[make_track("r1"), make_track("r2")])
    client.get_current_user = AsyncMock(return_value=SpotifyUser(id="user-42"))
    client.create_playlist = AsyncMock(return_value=SpotifyPlaylist(
        id="pl-1",
        name="Mood Analyst: Energetic Vibes",
        external_url="https://open.spotify.com/playlist/pl-1"
    ))
    client.add_tracks_to_playlist = AsyncMock(return_value=None)
    return client


@pytest.fixture
def agent(spotify_client):
    return MoodAnalystAgent(spotify_client)


class TestProcessTask:
    """Test command dispatch."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("task", ["", "   ", "/"])
    async def test_empty_task(self, agent, task):
        assert await agent.process_task(task) == (
            "No command provided. Available commands: mood_analyzer"
        )

    @pytest.mark.asyncio
    async def test_command_without_description(self, agent):
        assert await agent.process_task("/mood_analyzer") == (
            "Please describe your mood. Example: 'mood_analyzer I feel happy and energetic'"
        )

    @pytest.mark.asyncio
    async def test_unknown_command(self, agent):
        assert await agent.process_task("/Dance now") == (
            "Unknown command 'dance'. Available commands: mood_analyzer"
        )

    @pytest.mark.asyncio
    async def test_dispatch_normalizes_task(self, agent):
        agent.recommend_music = AsyncMock(return_value="ok")

        result = await agent.process_task("  /MOOD_ANALYZER  I feel   Calm ")

        assert result == "ok"
        agent.recommend_music.assert_awaited_once_with("i feel calm")


class TestRecommendMusic:
    """Test the recommend-for-mood flow."""

    @pytest.mark.asyncio
    async def test_full_flow(self, agent, spotify_client):
        response = await agent.recommend_music("I feel happy and energetic")

        spotify_client.search_tracks.assert_awaited_once_with("energetic powerful intense", 5)

        seeds, genres, targets, limit = spotify_client.get_recommendations.await_args.args
        assert seeds == ["s1", "s2", "s3", "s4", "s5"]
        assert genres == []
        assert targets.energy == 0.9
        assert limit == 15

        assert response.startswith(
            "Based on your mood (energetic), here are some song recommendations:\n\n"
        )
        assert "1. 🎵 Song s1 by Artist s1\n   🔗 https://open.spotify.com/track/s1\n" in response
        assert "7. 🎵 Song r2 by Artist r2\n" in response
        assert response.endswith(
            "\n✨ I've also created a playlist for you: https://open.spotify.com/playlist/pl-1\n"
        )

        spotify_client.create_playlist.assert_awaited_once_with(
            "user-42",
            "Mood Analyst: Energetic Vibes",
            "A playlist curated for your energetic mood."
        )
        added_uris = spotify_client.add_tracks_to_playlist.await_args.args[1]
        assert added_uris == [f"spotify:track:s{i}" for i in range(1, 6)] + [
            "spotify:track:r1", "spotify:track:r2"
        ]

    @pytest.mark.asyncio
    async def test_genre_seeds_fill_remaining_slots(self, agent, spotify_client):
        spotify_client.search_tracks.return_value = [make_track("s1"), make_track("s2")]

        await agent.recommend_music("feeling sad")

        seeds, genres, _, _ = spotify_client.get_recommendations.await_args.args
        assert seeds == ["s1", "s2"]
        assert genres == ["indie", "folk", "soul"]

    @pytest.mark.asyncio
    async def test_genre_seeds_limited_by_available_genres(self, agent, spotify_client):
        spotify_client.search_tracks.return_value = [make_track("s1")]

        await agent.recommend_music("feeling romantic")

        _, genres, _, _ = spotify_client.get_recommendations.await_args.args
        assert genres == ["soul", "r&b", "indie", "acoustic pop"]

    @pytest.mark.asyncio
    async def test_tracks_without_id_are_not_seeds(self, agent, spotify_client):
        spotify_client.search_tracks.return_value = [make_track(""), make_track("s2")]

        await agent.recommend_music("feeling focused")

        seeds, genres, _, _ = spotify_client.get_recommendations.await_args.args
        assert seeds == ["s2"]
        assert len(genres) == 4

    @pytest.mark.asyncio
    async def test_neutral_uses_raw_description(self, agent, spotify_client):
        spotify_client.search_tracks.return_value = [make_track("s1")]

        response = await agent.recommend_music("banana bread recipe")

        spotify_client.search_tracks.assert_awaited_once_with("banana bread recipe", 5)
        _, genres, targets, _ = spotify_client.get_recommendations.await_args.args
        assert genres == []
        assert targets.energy == 0.5
        assert "Based on your mood (neutral)" in response

    @pytest.mark.asyncio
    async def test_zero_search_results(self, agent, spotify_client):
        spotify_client.search_tracks.return_value = []

        response = await agent.recommend_music("feeling calm")

        assert response == (
            "I understand you're feeling relaxed, but I couldn't find any matching songs right now."
        )
        spotify_client.get_recommendations.assert_not_awaited()
        spotify_client.get_current_user.assert_not_awaited()
        spotify_client.create_playlist.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_search_failure_apologizes(self, agent, spotify_client):
        spotify_client.search_tracks.side_effect = TransportError("Spotify request timed out after 10s")

        response = await agent.recommend_music("feeling calm")

        assert response == (
            "I detected your mood as 'relaxed', but I couldn't fetch recommendations "
            "right now. Try again later!"
        )
        assert "timed out" not in response

    @pytest.mark.asyncio
    async def test_unauthenticated_client_apologizes(self, agent, spotify_client):
        spotify_client.search_tracks.side_effect = NotAuthenticatedError("not authenticated")

        response = await agent.recommend_music("feeling calm")

        assert response.startswith("I detected your mood as 'relaxed'")

    @pytest.mark.asyncio
    async def test_recommendation_failure_falls_back_to_search(self, agent, spotify_client):
        seeds = [make_track("s1")]
        fallback = [make_track("f1"), make_track("s1")]
        spotify_client.search_tracks.side_effect = [seeds, fallback]
        spotify_client.get_recommendations.side_effect = APIError("recommendations failed with status 404")

        response = await agent.recommend_music("feeling calm")

        assert spotify_client.search_tracks.await_args_list[1].args == (
            "relaxing chill ambient relaxed", 15
        )
        assert "2. 🎵 Song f1 by Artist f1" in response
        # fallback results are appended as-is, duplicates included
        assert "3. 🎵 Song s1 by Artist s1" in response

    @pytest.mark.asyncio
    async def test_fallback_failure_keeps_seed_tracks(self, agent, spotify_client):
        spotify_client.search_tracks.side_effect = [[make_track("s1")], TransportError("boom")]
        spotify_client.get_recommendations.side_effect = APIError("failed")

        response = await agent.recommend_music("feeling calm")

        assert "1. 🎵 Song s1 by Artist s1" in response
        assert "2. " not in response
        assert "boom" not in response

    @pytest.mark.asyncio
    async def test_unknown_artist(self, agent, spotify_client):
        spotify_client.search_tracks.return_value = [make_track("s1", name="Mystery", artists=[])]
        spotify_client.get_recommendations.return_value = []

        response = await agent.recommend_music("feeling calm")

        assert "1. 🎵 Mystery by Unknown\n" in response


class TestPlaylistCreation:
    """Playlist failures never reach the caller."""

    @pytest.mark.asyncio
    async def test_user_lookup_failure_is_silent(self, agent, spotify_client):
        spotify_client.get_current_user.side_effect = APIError("Spotify request failed with status 401")

        response = await agent.recommend_music("I feel happy and energetic")

        assert "playlist" not in response
        assert "401" not in response
        spotify_client.create_playlist.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_tracks_failure_is_silent(self, agent, spotify_client):
        spotify_client.add_tracks_to_playlist.side_effect = APIError("Forbidden")

        response = await agent.recommend_music("I feel happy and energetic")

        assert "playlist" not in response
        assert response.startswith("Based on your mood (energetic)")

    @pytest.mark.asyncio
    async def test_tracks_without_uri_are_not_added(self, agent, spotify_client):
        spotify_client.search_tracks.return_value = [make_track("s1"), make_track("s2", uri="")]
        spotify_client.get_recommendations.return_value = []

        response = await agent.recommend_music("feeling calm")

        assert "2. 🎵 Song s2 by Artist s2" in response
        spotify_client.add_tracks_to_playlist.assert_awaited_once_with("pl-1", ["spotify:track:s1"])

    @pytest.mark.asyncio
    async def test_playlists_can_be_disabled(self, spotify_client):
        agent = MoodAnalystAgent(spotify_client, create_playlists=False)

        response = await agent.recommend_music("feeling calm")

        assert "playlist" not in response
        spotify_client.get_current_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stats_track_outcomes(self, agent, spotify_client):
        await agent.recommend_music("feeling calm")
        spotify_client.search_tracks.side_effect = TransportError("down")
        await agent.recommend_music("feeling calm")

        stats = agent.get_stats()
        assert stats["success_count"] == 1
        assert stats["error_count"] == 1
        assert stats["agent_name"] == "mood analyst"


class TestMalformedCatalogResponses:
    """Malformed catalog payloads are handled like any other catalog failure."""

    @pytest.fixture
    def real_client(self):
        client = SpotifyClient(client_id="test_id", client_secret="test_secret")
        client.auth = AuthSession(access_token="test-access-token", grant_type="client_credentials")
        return client

    @pytest.mark.asyncio
    async def test_malformed_search_items_apologize(self, real_client, make_session, make_response):
        real_client.session = make_session(make_response(payload={
            "tracks": {"items": [{"id": "a", "name": "Song", "artists": ["Bob"]}]}
        }))
        agent = MoodAnalystAgent(real_client, create_playlists=False)

        response = await agent.recommend_music("feeling calm")

        assert response == (
            "I detected your mood as 'relaxed', but I couldn't fetch recommendations "
            "right now. Try again later!"
        )

    @pytest.mark.asyncio
    async def test_numeric_track_id_still_seeds(self, real_client, make_session, make_response):
        real_client.session = make_session(
            make_response(payload={"tracks": {"items": [
                {"id": 123, "name": "Numbers", "artists": [{"name": "Counter"}], "uri": "spotify:track:123"}
            ]}}),
            make_response(payload={"tracks": []})
        )
        agent = MoodAnalystAgent(real_client, create_playlists=False)

        response = await agent.recommend_music("feeling calm")

        assert response.startswith("Based on your mood (relaxed)")
        assert "1. 🎵 Numbers by Counter" in response
        rec_url = str(real_client.session.request.call_args.kwargs["url"])
        assert "seed_tracks=123" in rec_url

    @pytest.mark.asyncio
    async def test_malformed_recommendations_fall_back(self, real_client, make_session, make_response):
        real_client.session = make_session(
            make_response(payload={"tracks": {"items": [{"id": "s1", "name": "Seed"}]}}),
            make_response(payload={"tracks": [{"id": "r1", "artists": "not-a-list"}]}),
            make_response(payload={"tracks": {"items": [{"id": "f1", "name": "Fallback"}]}})
        )
        agent = MoodAnalystAgent(real_client, create_playlists=False)

        response = await agent.recommend_music("feeling calm")

        assert "1. 🎵 Seed by Unknown" in response
        assert "2. 🎵 Fallback by Unknown" in response
        fallback_params = real_client.session.request.call_args.kwargs["params"]
        assert fallback_params["q"] == "relaxing chill ambient relaxed"


class TestCommandList:

    @pytest.mark.asyncio
    async def test_available_commands_come_from_config(self, spotify_client):
        agent = MoodAnalystAgent(spotify_client, config=AgentConfig(commands=["mood_analyzer", "help"]))

        assert await agent.process_task("") == (
            "No command provided. Available commands: mood_analyzer, help"
        )
        assert await agent.process_task("/dance") == (
            "Unknown command 'dance'. Available commands: mood_analyzer, help"
        )

    @pytest.mark.asyncio
    async def test_command_missing_from_config_is_unknown(self, spotify_client):
        agent = MoodAnalystAgent(spotify_client, config=AgentConfig(commands=["help"]))

        assert await agent.process_task("mood_analyzer I feel calm") == (
            "Unknown command 'mood_analyzer'. Available commands: help"
        )
        spotify_client.search_tracks.assert_not_awaited()
