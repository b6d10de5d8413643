"""Spotify Web API client used to backfill songs.

Handles the low-level catalog concerns:
- client-credentials token management
- rate limiting with exponential backoff
- mapping track payloads into CatalogTrack records
"""

import logging
import time
from typing import Any, Optional

import requests
from pydantic import ValidationError

from mysetlist.errors import CatalogError, CatalogRateLimitError
from mysetlist.models.song import SongCreate
from mysetlist.models.track import UNKNOWN_ARTIST, CatalogTrack

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE_URL = "https://api.spotify.com/v1"

# Spotify's search endpoint accepts 1..50 results per page
MAX_SEARCH_LIMIT = 50


class SpotifyCatalog:
    """Catalog client backed by the Spotify Web API."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        max_wait: float = 10.0,
    ):
        """Initialize the Spotify client.

        Args:
            client_id: Spotify application client ID
            client_secret: Spotify application client secret
            session: Optional requests session (a new one is created if omitted)
            timeout: Per-request timeout in seconds
            max_retries: Retries for rate-limited requests
            backoff_base: Base delay for exponential backoff when no
                Retry-After header is sent
            max_wait: Most seconds one call may spend sleeping on rate
                limits before giving up
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.max_wait = max_wait

        self.access_token: Optional[str] = None
        self.token_expires = 0.0

    def _get_access_token(self) -> str:
        """Return a cached token, fetching a new one when it is about to expire."""
        if self.access_token and time.time() < self.token_expires:
            return self.access_token

        try:
            response = self.session.post(
                TOKEN_URL,
                data={"grant_type": "client_credentials"},
                auth=(self.client_id, self.client_secret),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise CatalogError(f"Could not reach Spotify token endpoint: {e}") from e

        if not response.ok:
            raise CatalogError(
                f"Failed to get Spotify access token: {response.status_code} {response.reason}"
            )

        try:
            data = response.json()
            token = data["access_token"]
            expires_in = int(data.get("expires_in", 3600))
        except (ValueError, KeyError, TypeError) as e:
            raise CatalogError(f"Malformed Spotify token response: {e}") from e

        self.access_token = token
        # Refresh one minute early
        self.token_expires = time.time() + expires_in - 60
        logger.debug("Fetched Spotify access token (expires in %ss)", expires_in)
        return token

    @staticmethod
    def _retry_after(response: requests.Response) -> Optional[int]:
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return int(retry_after)
            except ValueError:
                logger.warning("Invalid Retry-After header: %s", retry_after)
        return None

    def _request(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET an API endpoint, retrying on 429.

        Raises:
            CatalogRateLimitError: If still rate limited after all retries, or
                waiting would exceed max_wait
            CatalogError: For network errors, non-2xx responses or invalid JSON
        """
        url = f"{API_BASE_URL}{endpoint}"
        attempt = 0
        waited = 0.0

        while True:
            headers = {"Authorization": f"Bearer {self._get_access_token()}"}
            try:
                response = self.session.get(
                    url, params=params, headers=headers, timeout=self.timeout
                )
            except requests.RequestException as e:
                raise CatalogError(f"Spotify request failed: {e}") from e

            if response.status_code == 429:
                retry_after = self._retry_after(response)
                if attempt >= self.max_retries:
                    raise CatalogRateLimitError(retry_after)

                wait_time = (
                    retry_after
                    if retry_after is not None
                    else self.backoff_base * (2 ** attempt)
                )
                if waited + wait_time > self.max_wait:
                    logger.warning(
                        "Spotify asked us to wait %ss, over the %ss budget", wait_time, self.max_wait
                    )
                    raise CatalogRateLimitError(retry_after)

                logger.warning(
                    "Spotify rate limit hit (attempt %d/%d), waiting %ss",
                    attempt + 1,
                    self.max_retries + 1,
                    wait_time,
                )
                time.sleep(wait_time)
                waited += wait_time
                attempt += 1
                continue

            if response.status_code == 401:
                # Token revoked early; drop it so the next call re-authenticates
                self.access_token = None

            if not response.ok:
                raise CatalogError(
                    f"Spotify API error: {response.status_code} {response.reason}"
                )

            try:
                return response.json()
            except ValueError as e:
                raise CatalogError(f"Spotify returned invalid JSON: {e}") from e

    def search_tracks(
        self,
        query: str,
        artist: Optional[str] = None,
        limit: int = 10,
    ) -> list[CatalogTrack]:
        """Search the catalog for tracks.

        Args:
            query: Free-text track query
            artist: Optional artist name to narrow the search
            limit: Maximum tracks to return (clamped to 1..50)

        Returns:
            Tracks in the order Spotify ranked them
        """
        search_query = f'track:"{query}" artist:"{artist}"' if artist else query
        limit = max(1, min(limit, MAX_SEARCH_LIMIT))

        data = self._request(
            "/search",
            params={"q": search_query, "type": "track", "limit": limit},
        )

        try:
            items = data["tracks"]["items"]
        except (KeyError, TypeError) as e:
            raise CatalogError("Spotify search response has no tracks.items") from e
        if not isinstance(items, list):
            raise CatalogError("Spotify search response tracks.items is not a list")

        tracks = [self.parse_track(item) for item in items if item is not None]
        logger.debug("Spotify returned %d tracks for %r", len(tracks), search_query)
        return tracks[:limit]

    @staticmethod
    def parse_track(item: dict[str, Any]) -> CatalogTrack:
        """Convert a Spotify track object into a CatalogTrack.

        Raises:
            CatalogError: If the item does not have the shape of a track object
        """
        try:
            track_id = item["id"]
            name = item["name"]
            if not track_id or not name:
                raise CatalogError("Malformed Spotify track: empty id or name")

            artists = item.get("artists") or []
            artist_name = artists[0].get("name") if artists else None
            album = item.get("album") or {}

            return CatalogTrack(
                external_id=track_id,
                title=name,
                artist_name=artist_name or UNKNOWN_ARTIST,
                album=album.get("name"),
                popularity=item.get("popularity"),
                raw=item,
            )
        except (KeyError, IndexError, TypeError, AttributeError, ValidationError) as e:
            raise CatalogError(f"Malformed Spotify track: {e}") from e

    @staticmethod
    def to_song(track: CatalogTrack) -> SongCreate:
        """Map a catalog track into the local song shape."""
        return track.to_song()
