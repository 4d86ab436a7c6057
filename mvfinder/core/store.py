"""
Collection store: reads and writes the collection in key-value storage.

Storage Keys:
    ARTIST_DATA_JSON:     {"artists": [<ArtistEntry dict>, ...]}
    VIDEO_DATA_JSON:      {"videos": [<VideoEntry dict>, ...]}
    Video_Data_JSON:      legacy single-key format (read only)
    COLLECTION_META_JSON: {"lastUpdated": <ISO timestamp>}

Guarantees:
    - save() writes the artist and video containers together, in one
      atomic storage call.
    - load() never raises because of malformed JSON: a container that
      cannot be decoded is logged and read as empty.
    - When neither current key exists but the legacy key does, load()
      returns the upgraded legacy collection. The upgrade is not written
      back until the next save().

Usage:
    store = CollectionStore(SQLiteStorage(path))
    data = store.load()
    store.save(data)
    print(store.stats())
"""

import json
from datetime import datetime, timezone
from typing import Any, Callable

from mvfinder.collection.legacy import upgrade_legacy_collection
from mvfinder.collection.models import (
    ArtistEntry,
    CollectionData,
    CollectionStats,
    VideoEntry,
)
from mvfinder.core.exceptions import ParseError
from mvfinder.core.logger import get_logger
from mvfinder.core.storage import KeyValueStorage


logger = get_logger(__name__)


ARTIST_DATA_KEY = "ARTIST_DATA_JSON"
VIDEO_DATA_KEY = "VIDEO_DATA_JSON"
LEGACY_DATA_KEY = "Video_Data_JSON"
META_DATA_KEY = "COLLECTION_META_JSON"


def _decode_container(raw: str, key: str, list_field: str) -> list[Any]:
    """
    Decode one stored container and return its row list.

    Raises:
        ParseError: If raw is not JSON or not an object holding list_field.
    """
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ParseError(
            f"Stored {key} is not valid JSON: {e}",
            details={"key": key, "original_error": str(e)}
        ) from e

    if not isinstance(decoded, dict):
        raise ParseError(f"Stored {key} is not a JSON object", details={"key": key})

    rows = decoded.get(list_field, [])
    if not isinstance(rows, list):
        raise ParseError(f"Stored {key}.{list_field} is not a list", details={"key": key})
    return rows


def _parse_rows(rows: list[Any], factory: Callable[[dict[str, Any]], Any], key: str) -> list[Any]:
    parsed = []
    for index, row in enumerate(rows):
        try:
            parsed.append(factory(row))
        except ValueError as e:
            logger.warning(f"Skipping malformed row {index} in {key}: {e}")
    return parsed


class CollectionStore:
    """
    Reads and writes the collection through a KeyValueStorage.

    The store holds no cached state: every load() reads storage, every
    save() replaces both containers.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def load(self) -> CollectionData:
        """
        Read the collection.

        Returns:
            CollectionData; empty when nothing has been stored yet.
        """
        artist_raw = self.storage.get(ARTIST_DATA_KEY)
        video_raw = self.storage.get(VIDEO_DATA_KEY)

        if artist_raw is None and video_raw is None:
            legacy_raw = self.storage.get(LEGACY_DATA_KEY)
            if legacy_raw is not None:
                return self._load_legacy(legacy_raw)
            return CollectionData()

        artists = self._load_container(artist_raw, ARTIST_DATA_KEY, "artists", ArtistEntry.from_dict)
        videos = self._load_container(video_raw, VIDEO_DATA_KEY, "videos", VideoEntry.from_dict)
        return CollectionData.of(artists, videos)

    def _load_container(
        self,
        raw: str | None,
        key: str,
        list_field: str,
        factory: Callable[[dict[str, Any]], Any]
    ) -> list[Any]:
        if raw is None:
            return []
        try:
            rows = _decode_container(raw, key, list_field)
        except ParseError as e:
            logger.error(f"{e.message}; treating it as empty")
            return []
        return _parse_rows(rows, factory, key)

    def _load_legacy(self, raw: str) -> CollectionData:
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Stored {LEGACY_DATA_KEY} is not valid JSON: {e}; treating it as empty")
            return CollectionData()

        logger.info("Found collection in legacy format, upgrading")
        return upgrade_legacy_collection(payload)

    def save(self, data: CollectionData) -> None:
        """
        Replace the stored collection with data.

        Raises:
            StorageError: If the storage cannot be written.
        """
        self.storage.set_many({
            ARTIST_DATA_KEY: json.dumps(data.artists_to_dict(), ensure_ascii=False),
            VIDEO_DATA_KEY: json.dumps(data.videos_to_dict(), ensure_ascii=False),
            META_DATA_KEY: json.dumps({"lastUpdated": datetime.now(timezone.utc).isoformat()}),
        })
        logger.debug(f"Saved collection: {data.artist_count} artists, {data.video_count} videos")

    def stats(self) -> CollectionStats:
        data = self.load()
        return CollectionStats(artist_count=data.artist_count, video_count=data.video_count)

    def last_updated(self) -> str | None:
        """Timestamp of the last save(), or None if unknown."""
        raw = self.storage.get(META_DATA_KEY)
        if raw is None:
            return None
        try:
            value = json.loads(raw).get("lastUpdated")
        except (TypeError, ValueError, AttributeError):
            return None
        return value if isinstance(value, str) else None

    def reset(self) -> None:
        """Remove the whole collection, legacy data included."""
        self.storage.delete(ARTIST_DATA_KEY, VIDEO_DATA_KEY, LEGACY_DATA_KEY, META_DATA_KEY)
        logger.info("Collection reset")
