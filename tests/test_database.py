"""Tests for the SQLAlchemy song store."""

import pytest

from mysetlist.errors import DuplicateSongError, StoreError
from mysetlist.models.song import SongCreate
from mysetlist.storage.database import Database


class TestInsertSong:
    def test_insert_assigns_id_and_timestamp(self, db):
        song = db.insert_song(
            SongCreate(title="Yesterday", artist_name="The Beatles", spotify_id="S1")
        )

        assert song.id
        assert song.created_at is not None
        assert song.title == "Yesterday"
        assert db.get_song(song.id) == song

    def test_duplicate_spotify_id_rejected(self, db, add_song):
        add_song("Yesterday", spotify_id="S1")

        with pytest.raises(DuplicateSongError) as exc_info:
            add_song("Yesterday (Remastered)", spotify_id="S1")

        assert exc_info.value.spotify_id == "S1"
        assert db.get_stats()["total_songs"] == 1

    def test_duplicate_error_is_a_store_error(self):
        assert issubclass(DuplicateSongError, StoreError)

    def test_songs_without_spotify_id_do_not_collide(self, db, add_song):
        add_song("Encore Jam")
        add_song("Encore Jam")

        assert db.get_stats() == {
            "total_songs": 2,
            "catalog_linked_songs": 0,
            "unlinked_songs": 2,
        }


class TestFindByTitleSubstring:
    def test_case_insensitive_substring(self, db, add_song):
        add_song("Yesterday")
        add_song("Here Comes the Sun")

        results = db.find_by_title_substring("YESTER")

        assert [s.title for s in results] == ["Yesterday"]

    def test_ordered_by_title(self, db, add_song):
        for title in ["night c", "night a", "night b"]:
            add_song(title)

        results = db.find_by_title_substring("night")

        assert [s.title for s in results] == ["night a", "night b", "night c"]

    def test_limit(self, db, add_song):
        for i in range(4):
            add_song(f"track {i}")

        assert len(db.find_by_title_substring("track", limit=3)) == 3

    def test_artist_filter(self, db, add_song):
        add_song("Let It Be", artist_name="The Beatles")
        add_song("Let It Go", artist_name="Idina Menzel")

        results = db.find_by_title_substring("let it", artist="beatles")

        assert [s.artist_name for s in results] == ["The Beatles"]

    def test_like_wildcards_are_literal(self, db, add_song):
        add_song("100% Pure Love")
        add_song("1000 Oceans")

        results = db.find_by_title_substring("100%")

        assert [s.title for s in results] == ["100% Pure Love"]

    def test_no_matches(self, db, add_song):
        add_song("Yesterday")

        assert db.find_by_title_substring("tomorrow") == []


class TestLookups:
    def test_find_by_external_id(self, db, add_song):
        song = add_song("Yesterday", spotify_id="S1")

        assert db.find_by_external_id("S1") == song
        assert db.find_by_external_id("missing") is None

    def test_get_song_missing(self, db):
        assert db.get_song("no-such-id") is None

    def test_recent_songs_newest_first(self, db, add_song):
        first = add_song("first")
        second = add_song("second")

        recent = db.get_recent_songs(limit=10)

        assert {s.id for s in recent} == {first.id, second.id}
        assert recent[0].created_at >= recent[1].created_at


class TestStoreFailures:
    def test_read_without_tables_raises_store_error(self, tmp_path):
        database = Database(db_url=f"sqlite:///{tmp_path / 'empty.db'}")

        with pytest.raises(StoreError):
            database.find_by_title_substring("anything")

    def test_lookup_without_tables_raises_store_error(self, tmp_path):
        database = Database(db_url=f"sqlite:///{tmp_path / 'empty.db'}")

        with pytest.raises(StoreError):
            database.find_by_external_id("S1")

    def test_insert_without_tables_is_not_a_duplicate(self, tmp_path):
        database = Database(db_url=f"sqlite:///{tmp_path / 'empty.db'}")

        with pytest.raises(StoreError) as exc_info:
            database.insert_song(SongCreate(title="x", artist_name="y", spotify_id="S1"))

        assert not isinstance(exc_info.value, DuplicateSongError)


class TestIntegrityErrors:
    def test_not_null_violation_is_not_a_duplicate(self, db):
        song = SongCreate.model_construct(title=None, artist_name="Nobody", spotify_id="S9")

        with pytest.raises(StoreError) as exc_info:
            db.insert_song(song)

        assert not isinstance(exc_info.value, DuplicateSongError)
        assert db.find_by_external_id("S9") is None
