"""API routes for the MySetlist web service."""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from mysetlist import __version__
from mysetlist.config import Settings
from mysetlist.errors import StoreError
from mysetlist.services.song_search import SongSearchService, create_search_service
from mysetlist.web.schemas import (
    ErrorResponse,
    HealthResponse,
    SongResponse,
    SongSearchResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings.from_env()


@lru_cache
def _default_search_service() -> SongSearchService:
    return create_search_service(get_settings())


def get_search_service() -> SongSearchService:
    """Get the process-wide SongSearchService."""
    try:
        return _default_search_service()
    except StoreError as e:
        logger.error("Song store unavailable: %s", e)
        raise HTTPException(status_code=500, detail=str(e)) from e


# Health check endpoint
@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check",
)
def health_check(settings: Settings = Depends(get_settings)):
    """Check service health and configuration status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        has_spotify_credentials=settings.has_spotify_credentials,
    )


@router.get(
    "/api/songs/search",
    response_model=SongSearchResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Songs"],
    summary="Search songs",
    description="Search stored songs by title, backfilling sparse results from Spotify.",
)
def search_songs(
    q: Optional[str] = Query(None, description="Title search text"),
    artist: Optional[str] = Query(None, description="Artist name filter"),
    limit: int = Query(20, ge=1, le=100, description="Maximum stored matches"),
    service: SongSearchService = Depends(get_search_service),
):
    """Search for songs by title and optional artist."""
    try:
        songs = service.search(query=q or "", artist=artist, limit=limit)
    except StoreError as e:
        logger.error("Song search failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e)) from e

    return SongSearchResponse(songs=[SongResponse.from_song(song) for song in songs])


@router.get(
    "/api/songs/{song_id}",
    response_model=SongResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Songs"],
    summary="Get song",
)
def get_song(
    song_id: str,
    service: SongSearchService = Depends(get_search_service),
):
    """Get a single stored song."""
    try:
        song = service.store.get_song(song_id)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    if not song:
        raise HTTPException(status_code=404, detail=f"Song not found: {song_id}")

    return SongResponse.from_song(song)
