"""Exception types raised by MySetlist components."""

from typing import Optional


class MySetlistError(Exception):
    """Base class for MySetlist errors."""


class StoreError(MySetlistError):
    """Raised when the song store cannot be read or written."""


class DuplicateSongError(StoreError):
    """Raised when an insert collides with an existing catalog ID."""

    def __init__(self, spotify_id: Optional[str]):
        self.spotify_id = spotify_id
        super().__init__(f"Song with spotify_id {spotify_id!r} already exists")


class CatalogError(MySetlistError):
    """Raised when the music catalog cannot be queried."""


class CatalogRateLimitError(CatalogError):
    """Raised when the catalog keeps rate limiting after all retries."""

    def __init__(self, retry_after: Optional[int] = None):
        self.retry_after = retry_after
        super().__init__(
            f"Catalog rate limit exceeded. Retry after {retry_after} seconds."
            if retry_after
            else "Catalog rate limit exceeded."
        )
