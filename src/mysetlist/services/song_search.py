"""Song search with read-through backfill from the music catalog."""

import logging
from typing import Optional, Protocol

from mysetlist.catalog.spotify import SpotifyCatalog
from mysetlist.config import Settings
from mysetlist.errors import CatalogError, DuplicateSongError, StoreError
from mysetlist.models.song import Song, SongCreate
from mysetlist.models.track import CatalogTrack
from mysetlist.storage.database import Database

logger = logging.getLogger(__name__)


class SongStore(Protocol):
    """The song store operations the search flow relies on."""

    def find_by_title_substring(
        self, text: str, artist: Optional[str] = None, limit: int = 20
    ) -> list[Song]: ...

    def find_by_external_id(self, spotify_id: str) -> Optional[Song]: ...

    def insert_song(self, song: SongCreate) -> Song: ...


class Catalog(Protocol):
    """The catalog operations the search flow relies on."""

    def search_tracks(
        self, query: str, artist: Optional[str] = None, limit: int = 10
    ) -> list[CatalogTrack]: ...

    def to_song(self, track: CatalogTrack) -> SongCreate: ...


class SongSearchService:
    """Searches stored songs, filling sparse results from the catalog."""

    def __init__(
        self,
        store: SongStore,
        catalog: Optional[Catalog] = None,
        sparse_threshold: int = 5,
        candidate_limit: int = 10,
        min_query_length: int = 2,
    ):
        """Initialize the search service.

        Args:
            store: Song store to read from and insert into
            catalog: Catalog client; when None, searches never backfill
            sparse_threshold: Local match count below which the catalog is queried
            candidate_limit: Maximum candidates requested from the catalog
            min_query_length: Shortest trimmed query that is searched at all
        """
        self.store = store
        self.catalog = catalog
        self.sparse_threshold = sparse_threshold
        self.candidate_limit = candidate_limit
        self.min_query_length = min_query_length

    def search(
        self,
        query: str,
        artist: Optional[str] = None,
        limit: int = 20,
    ) -> list[Song]:
        """Search for songs by title, optionally narrowed by artist.

        Local matches come first, ordered by title. When there are fewer
        than ``sparse_threshold`` of them, catalog tracks that are not yet
        stored are inserted and appended in catalog order.

        Args:
            query: Title search text
            artist: Optional artist name filter
            limit: Maximum local matches

        Returns:
            Local matches followed by newly stored songs

        Raises:
            StoreError: If the store cannot be read
        """
        query = (query or "").strip()
        artist = (artist or "").strip() or None

        if len(query) < self.min_query_length:
            return []

        songs = self.store.find_by_title_substring(query, artist=artist, limit=limit)

        if len(songs) < self.sparse_threshold and self.catalog is not None:
            songs.extend(self._backfill(query, artist))

        return songs

    def _backfill(self, query: str, artist: Optional[str]) -> list[Song]:
        """Store catalog tracks we don't have yet and return them in catalog order."""
        try:
            tracks = self.catalog.search_tracks(query, artist, self.candidate_limit)
        except CatalogError as e:
            logger.warning("Catalog search for %r failed, using local results: %s", query, e)
            return []

        created: list[Song] = []
        seen: set[str] = set()

        for track in tracks:
            if track.external_id in seen:
                continue
            seen.add(track.external_id)

            if self.store.find_by_external_id(track.external_id) is not None:
                continue

            try:
                song = self.store.insert_song(self.catalog.to_song(track))
            except DuplicateSongError:
                # Another request stored it between our lookup and insert
                logger.debug("Track %s was inserted concurrently", track.external_id)
                continue
            except StoreError as e:
                logger.warning("Could not store track %s: %s", track.external_id, e)
                continue

            created.append(song)

        if created:
            logger.info("Backfilled %d songs from catalog for %r", len(created), query)
        return created


def create_search_service(settings: Settings) -> SongSearchService:
    """Build a SongSearchService from settings.

    The catalog is only wired in when Spotify credentials are configured.
    """
    db = Database(db_url=settings.db_url)
    db.init_db()

    catalog = None
    if settings.has_spotify_credentials:
        catalog = SpotifyCatalog(
            client_id=settings.spotify_client_id,
            client_secret=settings.spotify_client_secret,
            max_wait=settings.catalog_max_wait,
        )
    else:
        logger.info("Spotify credentials not set; song search will not backfill")

    return SongSearchService(
        store=db,
        catalog=catalog,
        sparse_threshold=settings.sparse_threshold,
        candidate_limit=settings.candidate_limit,
        min_query_length=settings.min_query_length,
    )
