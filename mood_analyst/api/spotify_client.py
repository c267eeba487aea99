"""
Spotify Web API Client

Provides authenticated access to Spotify search, recommendations, the current
user profile and playlist creation for the Mood Analyst agent.
"""

import base64
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from yarl import URL

from ..models.mood_models import AudioFeatureTargets
from .base_client import BaseAPIClient
from .exceptions import APIError, AuthError, DecodeError, NotAuthenticatedError


@dataclass
class SpotifyTrack:
    """Spotify track data."""
    id: str
    name: str
    artists: List[str] = field(default_factory=list)
    external_url: Optional[str] = None
    preview_url: Optional[str] = None
    uri: str = ""

    @property
    def primary_artist(self) -> str:
        return self.artists[0] if self.artists else "Unknown"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SpotifyTrack":
        """
        Build a track from a catalog item.

        Raises:
            AttributeError, TypeError: The item does not have the catalog shape
        """
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            artists=[str(a.get("name") or "") for a in data.get("artists") or [] if a],
            external_url=(data.get("external_urls") or {}).get("spotify"),
            preview_url=data.get("preview_url"),
            uri=str(data.get("uri") or "")
        )


def parse_tracks(items: Any) -> List[SpotifyTrack]:
    """
    Parse a list of catalog track items, skipping empty entries.

    Raises:
        DecodeError: The items are not a list of track objects
    """
    try:
        return [SpotifyTrack.from_api(item) for item in items or [] if item]
    except (AttributeError, TypeError, ValueError) as e:
        raise DecodeError(f"malformed track item in response: {e}") from e


@dataclass
class SpotifyUser:
    """Spotify user profile."""
    id: str
    display_name: Optional[str] = None


@dataclass
class SpotifyPlaylist:
    """Spotify playlist reference."""
    id: str
    name: str
    external_url: Optional[str] = None


@dataclass
class AuthSession:
    """Bearer token obtained from a token exchange, held for the client's lifetime."""
    access_token: str
    grant_type: str
    scope: str = ""
    expires_at: Optional[float] = None

    @property
    def is_user_scoped(self) -> bool:
        return self.grant_type == "refresh_token"


class SpotifyClient(BaseAPIClient):
    """
    Spotify Web API client with explicit authentication state.

    The client starts unauthenticated. authenticate() performs a token
    exchange and stores an AuthSession; every other operation raises
    NotAuthenticatedError until that has happened. Tokens are not refreshed
    automatically; reauthenticate() replaces the session on demand.
    """

    BASE_URL = "https://api.spotify.com/v1"
    AUTH_URL = "https://accounts.spotify.com/api/token"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: Optional[str] = None,
        timeout: float = 10
    ):
        """
        Initialize Spotify client.

        Args:
            client_id: Spotify client ID
            client_secret: Spotify client secret
            refresh_token: Refresh token for user-scoped access (optional)
            timeout: Per-request timeout in seconds
        """
        super().__init__(
            base_url=self.BASE_URL,
            timeout=timeout,
            service_name="Spotify"
        )

        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.auth: Optional[AuthSession] = None

        self.logger = self.logger.bind(component="SpotifyClient")
        self.logger.info("Spotify client initialized", user_scoped=bool(refresh_token))

    @property
    def is_authenticated(self) -> bool:
        return self.auth is not None

    def _extract_api_error(self, data: Dict[str, Any]) -> Optional[str]:
        """
        Extract Spotify API error information from response data.

        Args:
            data: Parsed response data

        Returns:
            Error message if found, None otherwise
        """
        if "error" in data:
            error_info = data["error"]
            if isinstance(error_info, dict):
                return error_info.get("message", f"Error {error_info.get('status', 'unknown')}")
            return str(error_info)
        return None

    async def authenticate(self) -> AuthSession:
        """
        Exchange credentials for a bearer token.

        Uses the refresh-token grant when a refresh token is configured
        (user-scoped access), otherwise the client-credentials grant
        (catalog-only access; user and playlist calls will be rejected).

        Returns:
            The new authentication session

        Raises:
            AuthError: Non-200 token response or missing access token
            TransportError: Network failure
        """
        auth_str = f"{self.client_id}:{self.client_secret}"
        auth_b64 = base64.b64encode(auth_str.encode()).decode()

        headers = {
            "Authorization": f"Basic {auth_b64}",
            "Content-Type": "application/x-www-form-urlencoded"
        }

        if self.refresh_token:
            self.logger.info("Using refresh token for user authentication")
            form = {"grant_type": "refresh_token", "refresh_token": self.refresh_token}
        else:
            self.logger.info("No refresh token found, using client credentials (limited API access)")
            form = {"grant_type": "client_credentials"}

        try:
            token_data = await self._make_request(
                self.AUTH_URL,
                method="POST",
                data=form,
                headers=headers
            )
        except APIError as e:
            self.logger.error("Spotify authentication failed", status=e.status, error=e.body)
            raise AuthError(
                f"auth failed with status {e.status}: {e.body}",
                status=e.status,
                body=e.body
            ) from e
        except DecodeError as e:
            raise AuthError("failed to decode auth response", status=e.status) from e

        access_token = token_data.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            self.logger.error("Access token not found in auth response")
            raise AuthError("access token not found in response")

        scope = token_data.get("scope")
        if isinstance(scope, str) and scope:
            self.logger.info("Authenticated with scopes", scope=scope)

        expires_in = token_data.get("expires_in")
        self.auth = AuthSession(
            access_token=access_token,
            grant_type=form["grant_type"],
            scope=scope if isinstance(scope, str) else "",
            expires_at=time.time() + expires_in if isinstance(expires_in, (int, float)) else None
        )

        self.logger.info("Spotify authentication successful", grant_type=self.auth.grant_type)
        return self.auth

    async def reauthenticate(self) -> AuthSession:
        """
        Discard the current session and run the token exchange again.

        Nothing calls this automatically; hosts that run long enough to
        outlive a token call it when requests start failing with 401.
        """
        self.logger.info("Re-authenticating with Spotify")
        self.auth = None
        return await self.authenticate()

    def _require_auth(self) -> AuthSession:
        if self.auth is None:
            raise NotAuthenticatedError("not authenticated")
        return self.auth

    async def _make_spotify_request(
        self,
        endpoint: Any,
        params: Optional[Dict[str, Any]] = None,
        method: str = "GET",
        json_body: Optional[Dict[str, Any]] = None,
        expected_status=(200,)
    ) -> Dict[str, Any]:
        """
        Make authenticated request to Spotify API.

        Args:
            endpoint: API endpoint (without base URL) or pre-encoded URL
            params: Query parameters
            method: HTTP method
            json_body: JSON request body for state-changing calls
            expected_status: Status codes treated as success

        Returns:
            API response data
        """
        auth = self._require_auth()

        headers = {"Authorization": f"Bearer {auth.access_token}"}
        if json_body is not None:
            headers["Content-Type"] = "application/json"

        return await self._make_request(
            endpoint=endpoint,
            params=params,
            method=method,
            headers=headers,
            json_body=json_body,
            expected_status=expected_status
        )

    async def search_tracks(self, query: str, limit: int = 20) -> List[SpotifyTrack]:
        """
        Search for tracks with a general query.

        Args:
            query: Search query
            limit: Number of results

        Returns:
            List of matching tracks (possibly empty)
        """
        data = await self._make_spotify_request(
            "search",
            {
                "q": query,
                "type": "track",
                "limit": str(limit)
            }
        )

        tracks_page = data.get("tracks") or {}
        if not isinstance(tracks_page, dict):
            raise DecodeError("malformed search response: 'tracks' is not an object")
        tracks = parse_tracks(tracks_page.get("items"))

        self.logger.info(
            "Spotify search completed",
            query=query,
            results_count=len(tracks)
        )
        return tracks

    async def get_recommendations(
        self,
        seed_tracks: List[str],
        seed_genres: List[str],
        targets: AudioFeatureTargets,
        limit: int = 20
    ) -> List[SpotifyTrack]:
        """
        Get track recommendations from seed tracks, seed genres and feature targets.

        Seed lists are sent as single comma-separated values with the commas
        left unescaped.

        Args:
            seed_tracks: Spotify track IDs
            seed_genres: Genre tags
            targets: Audio feature targets
            limit: Number of recommendations

        Returns:
            Recommended tracks

        Raises:
            APIError: Non-200 response; the message includes the request URL
        """
        self._require_auth()

        params: Dict[str, str] = {}
        if seed_tracks:
            params["seed_tracks"] = ",".join(str(t) for t in seed_tracks)
        if seed_genres:
            params["seed_genres"] = ",".join(str(g) for g in seed_genres)
        params.update(targets.to_query_params())
        params["limit"] = str(limit)

        rec_url = f"{self.base_url}/recommendations?{urlencode(params, safe=',')}"

        self.logger.debug(
            "Requesting recommendations",
            url=rec_url,
            seed_tracks=seed_tracks,
            seed_genres=seed_genres
        )

        try:
            data = await self._make_spotify_request(URL(rec_url, encoded=True))
        except APIError as e:
            body = e.body or "(empty response)"
            self.logger.error("Recommendations API error", status=e.status, body=body, url=rec_url)
            raise APIError(
                f"recommendations failed with status {e.status}: {body} (URL: {rec_url})",
                status=e.status,
                body=e.body,
                url=rec_url
            ) from e

        tracks = parse_tracks(data.get("tracks"))

        self.logger.info("Recommendations retrieved", count=len(tracks))
        return tracks

    async def get_current_user(self) -> SpotifyUser:
        """
        Get the profile of the authenticated user.

        Requires user-scoped authentication; the endpoint rejects
        client-credentials tokens.
        """
        data = await self._make_spotify_request("me")

        user_id = data.get("id")
        if not user_id:
            raise DecodeError("user response missing id")

        return SpotifyUser(id=user_id, display_name=data.get("display_name"))

    async def create_playlist(
        self,
        user_id: str,
        name: str,
        description: str
    ) -> SpotifyPlaylist:
        """
        Create a private playlist owned by a user.

        Args:
            user_id: Owner's Spotify user ID
            name: Playlist name
            description: Playlist description

        Returns:
            The created playlist
        """
        data = await self._make_spotify_request(
            f"users/{user_id}/playlists",
            method="POST",
            json_body={
                "name": name,
                "description": description,
                "public": False
            },
            expected_status=(200, 201)
        )

        playlist_id = data.get("id")
        if not playlist_id:
            raise DecodeError("playlist response missing id")

        playlist = SpotifyPlaylist(
            id=playlist_id,
            name=data.get("name") or name,
            external_url=(data.get("external_urls") or {}).get("spotify")
        )

        self.logger.info("Playlist created", playlist_id=playlist.id, name=playlist.name)
        return playlist

    async def add_tracks_to_playlist(self, playlist_id: str, track_uris: List[str]) -> None:
        """
        Append tracks to a playlist by URI.

        No de-duplication is performed; callers pre-filter the URIs.
        """
        await self._make_spotify_request(
            f"playlists/{playlist_id}/tracks",
            method="POST",
            json_body={"uris": list(track_uris)},
            expected_status=(200, 201)
        )

        self.logger.info("Tracks added to playlist", playlist_id=playlist_id, count=len(track_uris))

    def get_service_info(self) -> Dict[str, Any]:
        info = super().get_service_info()
        info.update({
            "authenticated": self.is_authenticated,
            "grant_type": self.auth.grant_type if self.auth else None,
            "user_scoped": self.auth.is_user_scoped if self.auth else False,
            "component_type": "SpotifyClient"
        })
        return info
