"""Song model representing a row in the local song table."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SongCreate(BaseModel):
    """Fields needed to insert a new song."""

    title: str = Field(description="Song title")
    artist_name: str = Field(description="Artist/band name")
    spotify_id: Optional[str] = Field(
        default=None,
        description="Spotify track ID, unique when present",
    )


class Song(SongCreate):
    """A stored song."""

    id: str = Field(description="Unique identifier assigned by the store")
    created_at: datetime = Field(description="When the row was created")

    class Config:
        from_attributes = True
