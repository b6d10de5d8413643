"""Pydantic schemas for web API responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from mysetlist.models.song import Song


class SongResponse(BaseModel):
    """Response model for a song."""

    id: str
    title: str
    artist_name: str
    spotify_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_song(cls, song: Song) -> "SongResponse":
        return cls(
            id=song.id,
            title=song.title,
            artist_name=song.artist_name,
            spotify_id=song.spotify_id,
            created_at=song.created_at,
        )


class SongSearchResponse(BaseModel):
    """Response from the song search endpoint."""

    songs: list[SongResponse]


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    has_spotify_credentials: bool
