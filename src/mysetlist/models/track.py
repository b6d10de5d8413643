"""Track model for records returned by the music catalog."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from mysetlist.models.song import SongCreate

UNKNOWN_ARTIST = "Unknown Artist"


class CatalogTrack(BaseModel):
    """A track as described by the external catalog.

    Only ``external_id``, ``title`` and ``artist_name`` are ever persisted;
    everything else is provider metadata kept for display and debugging.
    """

    external_id: str = Field(description="Catalog track ID")
    title: str = Field(description="Track name")
    artist_name: str = Field(default=UNKNOWN_ARTIST, description="First listed artist")
    album: Optional[str] = Field(default=None)
    popularity: Optional[int] = Field(default=None)
    raw: dict[str, Any] = Field(default_factory=dict, description="Provider payload")

    def to_song(self) -> SongCreate:
        """Map this track into the local song shape."""
        return SongCreate(
            title=self.title,
            artist_name=self.artist_name,
            spotify_id=self.external_id,
        )
