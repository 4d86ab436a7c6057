"""Test key/value storage and the collection store"""

import json
import logging

import pytest

from mvfinder.collection.models import ArtistEntry, CollectionData, VideoEntry
from mvfinder.core.exceptions import StorageError
from mvfinder.core.storage import MemoryStorage, SQLiteStorage
from mvfinder.core.store import (
    ARTIST_DATA_KEY,
    LEGACY_DATA_KEY,
    META_DATA_KEY,
    VIDEO_DATA_KEY,
    CollectionStore,
)


def _collection():
    video = VideoEntry(
        artist_external_id="ad-1",
        artist_identity_id="mb-1",
        track_external_id="t-1",
        title="Song",
        source_url="https://youtu.be/dQw4w9WgXcQ",
        platform_video_id="dQw4w9WgXcQ",
        artist_display_name="Test",
    )
    artist = ArtistEntry(
        artist_external_id="ad-1",
        artist_identity_id="mb-1",
        display_name="Test",
        video_count=1,
        primary_thumbnail_id="dQw4w9WgXcQ",
        genre="Rock",
    )
    return CollectionData.of([artist], [video])


class TestSQLiteStorage:
    """Test the SQLite backend"""

    def test_set_get_and_reopen(self, temp_dir):
        """Test values survive closing and reopening the file"""
        path = temp_dir / "collection.db"
        storage = SQLiteStorage(path)
        storage.set_many({"a": "1", "b": "2"})
        storage.close()

        reopened = SQLiteStorage(path)
        assert reopened.get("a") == "1"
        assert reopened.get("b") == "2"
        assert reopened.get("missing") is None
        assert reopened.keys() == ["a", "b"]
        reopened.close()

    def test_overwrite_and_delete(self, temp_dir):
        storage = SQLiteStorage(temp_dir / "collection.db")
        storage.set("a", "1")
        storage.set("a", "2")
        assert storage.get("a") == "2"

        storage.delete("a", "not-there")
        assert storage.get("a") is None
        storage.close()

    def test_missing_parent_directory(self, temp_dir):
        """Test a clear error when the directory does not exist"""
        with pytest.raises(StorageError):
            SQLiteStorage(temp_dir / "nope" / "collection.db")

    def test_keys_failure_is_a_storage_error(self, temp_dir):
        storage = SQLiteStorage(temp_dir / "collection.db")
        with storage._get_connection() as conn:
            conn.execute("DROP TABLE kv_store")

        with pytest.raises(StorageError):
            storage.keys()
        storage.close()


class TestCollectionStore:
    """Test loading and saving the collection"""

    def test_empty_storage_loads_empty_collection(self, store):
        data = store.load()
        assert data.artists == ()
        assert data.videos == ()

    def test_save_then_load(self, store):
        """Test a saved collection loads back equal"""
        data = _collection()
        store.save(data)
        assert store.load() == data

    def test_save_writes_both_containers_and_timestamp(self, storage, store):
        store.save(_collection())

        artists = json.loads(storage.get(ARTIST_DATA_KEY))
        videos = json.loads(storage.get(VIDEO_DATA_KEY))
        assert artists["artists"][0]["artistADID"] == "ad-1"
        assert artists["artists"][0]["strGenre"] == "Rock"
        assert videos["videos"][0]["thumbnailYTID"] == "dQw4w9WgXcQ"
        assert store.last_updated() is not None
        assert META_DATA_KEY in storage.keys()

    def test_save_is_one_atomic_write(self, store):
        """Test both containers go through a single set_many call"""
        calls = []
        original = store.storage.set_many
        store.storage.set_many = lambda items: (calls.append(dict(items)), original(items))

        store.save(_collection())

        assert len(calls) == 1
        assert ARTIST_DATA_KEY in calls[0] and VIDEO_DATA_KEY in calls[0]

    def test_malformed_container_is_read_as_empty(self, caplog):
        """Test a broken container falls back to empty without raising"""
        storage = MemoryStorage({
            ARTIST_DATA_KEY: "{not json",
            VIDEO_DATA_KEY: json.dumps(_collection().videos_to_dict()),
        })

        with caplog.at_level(logging.ERROR):
            data = CollectionStore(storage).load()

        assert data.artists == ()
        assert data.video_count == 1
        assert "not valid JSON" in caplog.text

    def test_malformed_rows_are_skipped(self):
        storage = MemoryStorage({
            ARTIST_DATA_KEY: json.dumps({"artists": [{"artistName": "no id"}, {"artistADID": "ad-1"}]}),
            VIDEO_DATA_KEY: json.dumps({"videos": ["not an object"]}),
        })

        data = CollectionStore(storage).load()

        assert [a.artist_external_id for a in data.artists] == ["ad-1"]
        assert data.videos == ()

    def test_legacy_key_is_upgraded_but_not_persisted(self, legacy_payload):
        """Test the legacy format is read through the upgrade only"""
        storage = MemoryStorage({LEGACY_DATA_KEY: json.dumps(legacy_payload)})
        store = CollectionStore(storage)

        first = store.load()
        second = store.load()

        assert first == second
        assert first.artist_count == 2
        assert first.video_count == 3
        assert storage.get(ARTIST_DATA_KEY) is None
        assert storage.get(VIDEO_DATA_KEY) is None

    def test_current_keys_take_precedence_over_legacy(self, legacy_payload):
        storage = MemoryStorage({
            LEGACY_DATA_KEY: json.dumps(legacy_payload),
            ARTIST_DATA_KEY: json.dumps({"artists": []}),
        })
        assert CollectionStore(storage).load().artist_count == 0

    def test_stats(self, store):
        store.save(_collection())
        stats = store.stats()
        assert (stats.artist_count, stats.video_count) == (1, 1)

    def test_reset_removes_everything(self, storage, store, legacy_payload):
        storage.set(LEGACY_DATA_KEY, json.dumps(legacy_payload))
        store.save(_collection())

        store.reset()

        assert storage.keys() == []
        assert store.load() == CollectionData()

    def test_round_trip_through_sqlite(self, temp_dir):
        """Test the store on the SQLite backend"""
        storage = SQLiteStorage(temp_dir / "collection.db")
        CollectionStore(storage).save(_collection())
        storage.close()

        storage = SQLiteStorage(temp_dir / "collection.db")
        assert CollectionStore(storage).load() == _collection()
        storage.close()
