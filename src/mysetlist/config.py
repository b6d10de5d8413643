"""Environment-driven settings for MySetlist."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()

DEFAULT_DB_URL = "sqlite:///mysetlist.db"


class Settings(BaseModel):
    """Runtime settings, normally built with :meth:`from_env`."""

    db_url: str = Field(default=DEFAULT_DB_URL, description="SQLAlchemy database URL")
    spotify_client_id: Optional[str] = Field(default=None)
    spotify_client_secret: Optional[str] = Field(default=None)

    sparse_threshold: int = Field(
        default=5,
        ge=0,
        description="Local match count below which the catalog is consulted",
    )
    candidate_limit: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum catalog candidates requested per search",
    )
    min_query_length: int = Field(default=2, ge=1)
    catalog_max_wait: float = Field(
        default=10.0,
        ge=0,
        description="Most seconds a search may spend waiting out catalog rate limits",
    )

    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=False)

    @property
    def has_spotify_credentials(self) -> bool:
        return bool(self.spotify_client_id and self.spotify_client_secret)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``MYSETLIST_*`` and ``SPOTIFY_*`` variables."""
        return cls(
            db_url=os.getenv("MYSETLIST_DB_URL", DEFAULT_DB_URL),
            spotify_client_id=os.getenv("SPOTIFY_CLIENT_ID"),
            spotify_client_secret=os.getenv("SPOTIFY_CLIENT_SECRET"),
            sparse_threshold=int(os.getenv("MYSETLIST_SPARSE_THRESHOLD", "5")),
            candidate_limit=int(os.getenv("MYSETLIST_CANDIDATE_LIMIT", "10")),
            min_query_length=int(os.getenv("MYSETLIST_MIN_QUERY_LENGTH", "2")),
            catalog_max_wait=float(os.getenv("MYSETLIST_CATALOG_MAX_WAIT", "10")),
            log_level=os.getenv("MYSETLIST_LOG_LEVEL", "INFO"),
            host=os.getenv("MYSETLIST_HOST", "0.0.0.0"),
            port=int(os.getenv("MYSETLIST_PORT", "8000")),
            reload=os.getenv("MYSETLIST_RELOAD", "false").lower() == "true",
        )
