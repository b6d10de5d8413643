"""Pytest fixtures shared across the MySetlist test suite."""

import pytest

from mysetlist.errors import CatalogError
from mysetlist.models.song import SongCreate
from mysetlist.models.track import CatalogTrack
from mysetlist.storage.database import Database


class FakeCatalog:
    """In-memory catalog that records every search it receives."""

    def __init__(self, tracks=None, error=None):
        self.tracks = list(tracks or [])
        self.error = error
        self.calls = []

    def search_tracks(self, query, artist=None, limit=10):
        self.calls.append({"query": query, "artist": artist, "limit": limit})
        if self.error is not None:
            raise self.error
        return self.tracks[:limit]

    def to_song(self, track):
        return track.to_song()


def make_track(external_id, title, artist_name="Test Artist"):
    return CatalogTrack(external_id=external_id, title=title, artist_name=artist_name)


@pytest.fixture
def db(tmp_path):
    """A fresh SQLite song store."""
    database = Database(db_url=f"sqlite:///{tmp_path / 'songs.db'}")
    database.init_db()
    return database


@pytest.fixture
def add_song(db):
    """Insert a song directly into the store."""

    def _add(title, artist_name="Test Artist", spotify_id=None):
        return db.insert_song(
            SongCreate(title=title, artist_name=artist_name, spotify_id=spotify_id)
        )

    return _add


@pytest.fixture
def catalog():
    """An empty fake catalog."""
    return FakeCatalog()


@pytest.fixture
def failing_catalog():
    """A fake catalog whose searches always fail."""
    return FakeCatalog(error=CatalogError("Spotify API error: 503 Service Unavailable"))
