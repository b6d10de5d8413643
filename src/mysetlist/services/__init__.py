"""Services for MySetlist."""

from mysetlist.services.song_search import SongSearchService, create_search_service

__all__ = ["SongSearchService", "create_search_service"]
