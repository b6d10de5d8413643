"""Data models for MySetlist."""

from mysetlist.models.song import Song, SongCreate
from mysetlist.models.track import CatalogTrack

__all__ = ["CatalogTrack", "Song", "SongCreate"]
