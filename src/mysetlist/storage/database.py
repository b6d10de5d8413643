"""Relational song store for MySetlist."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, String, UniqueConstraint, create_engine, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from mysetlist.config import DEFAULT_DB_URL
from mysetlist.errors import DuplicateSongError, StoreError
from mysetlist.models.song import Song, SongCreate


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_spotify_id_conflict(error: IntegrityError) -> bool:
    """Tell a spotify_id uniqueness violation apart from other integrity errors."""
    message = str(error.orig)
    # PostgreSQL names the constraint, SQLite names the column
    return "uq_songs_spotify_id" in message or (
        "UNIQUE" in message and "songs.spotify_id" in message
    )


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class SongRecord(Base):
    """SQLAlchemy model for songs."""

    __tablename__ = "songs"
    __table_args__ = (UniqueConstraint("spotify_id", name="uq_songs_spotify_id"),)

    id = Column(String, primary_key=True, default=_new_id)
    title = Column(String, nullable=False, index=True)
    artist_name = Column(String, nullable=False, index=True)
    # NULLs never collide under the unique constraint
    spotify_id = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)

    def to_model(self) -> Song:
        """Convert to Pydantic model."""
        return Song(
            id=self.id,
            title=self.title,
            artist_name=self.artist_name,
            spotify_id=self.spotify_id,
            created_at=self.created_at,
        )

    @classmethod
    def from_model(cls, song: SongCreate) -> "SongRecord":
        """Create from Pydantic model."""
        return cls(
            title=song.title,
            artist_name=song.artist_name,
            spotify_id=song.spotify_id,
        )


class Database:
    """SQL database interface for the song table.

    Every read failure surfaces as :class:`StoreError`. Inserts that violate
    the ``spotify_id`` uniqueness constraint surface as
    :class:`DuplicateSongError` so callers can tell a lost race from a broken
    store.
    """

    def __init__(self, db_url: str = DEFAULT_DB_URL):
        """Initialize the database.

        Args:
            db_url: SQLAlchemy database URL
        """
        self.db_url = db_url
        self.engine = create_engine(db_url)
        self.SessionLocal = sessionmaker(bind=self.engine)

    def init_db(self):
        """Create all tables."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not create tables: {e}") from e

    def get_session(self) -> Session:
        """Get a database session."""
        return self.SessionLocal()

    def find_by_title_substring(
        self,
        text: str,
        artist: Optional[str] = None,
        limit: int = 20,
    ) -> list[Song]:
        """Find songs whose title contains ``text``, case-insensitively.

        Args:
            text: Substring to look for in the title
            artist: Optional substring the artist name must also contain
            limit: Maximum rows to return

        Returns:
            Matching songs ordered by title
        """
        try:
            with self.get_session() as session:
                query = session.query(SongRecord).filter(
                    SongRecord.title.icontains(text, autoescape=True)
                )
                if artist:
                    query = query.filter(
                        SongRecord.artist_name.icontains(artist, autoescape=True)
                    )

                query = query.order_by(SongRecord.title.asc(), SongRecord.id.asc())
                query = query.limit(limit)

                return [r.to_model() for r in query.all()]
        except SQLAlchemyError as e:
            raise StoreError(f"Song search failed: {e}") from e

    def find_by_external_id(self, spotify_id: str) -> Optional[Song]:
        """Get the song linked to a catalog track, if any."""
        try:
            with self.get_session() as session:
                record = (
                    session.query(SongRecord)
                    .filter(SongRecord.spotify_id == spotify_id)
                    .one_or_none()
                )
                return record.to_model() if record else None
        except SQLAlchemyError as e:
            raise StoreError(f"Lookup of spotify_id {spotify_id!r} failed: {e}") from e

    def insert_song(self, song: SongCreate) -> Song:
        """Insert a new song and return the stored row.

        Raises:
            DuplicateSongError: If a row with the same spotify_id exists
            StoreError: For any other database failure
        """
        try:
            with self.get_session() as session:
                record = SongRecord.from_model(song)
                session.add(record)
                try:
                    session.commit()
                except IntegrityError as e:
                    session.rollback()
                    if _is_spotify_id_conflict(e):
                        raise DuplicateSongError(song.spotify_id) from e
                    raise StoreError(f"Could not insert song {song.title!r}: {e}") from e
                return record.to_model()
        except StoreError:
            raise
        except SQLAlchemyError as e:
            raise StoreError(f"Could not insert song {song.title!r}: {e}") from e

    def get_song(self, song_id: str) -> Optional[Song]:
        """Get a song by ID."""
        try:
            with self.get_session() as session:
                record = session.get(SongRecord, song_id)
                return record.to_model() if record else None
        except SQLAlchemyError as e:
            raise StoreError(f"Could not load song {song_id!r}: {e}") from e

    def get_recent_songs(self, limit: int = 20) -> list[Song]:
        """Get the most recently added songs."""
        try:
            with self.get_session() as session:
                query = (
                    session.query(SongRecord)
                    .order_by(SongRecord.created_at.desc())
                    .limit(limit)
                )
                return [r.to_model() for r in query.all()]
        except SQLAlchemyError as e:
            raise StoreError(f"Could not list songs: {e}") from e

    def get_stats(self) -> dict:
        """Get database statistics."""
        try:
            with self.get_session() as session:
                total_songs = session.query(func.count(SongRecord.id)).scalar()
                linked_songs = (
                    session.query(func.count(SongRecord.id))
                    .filter(SongRecord.spotify_id.isnot(None))
                    .scalar()
                )
        except SQLAlchemyError as e:
            raise StoreError(f"Could not compute stats: {e}") from e

        return {
            "total_songs": total_songs,
            "catalog_linked_songs": linked_songs,
            "unlinked_songs": total_songs - linked_songs,
        }
