"""
Import of external JSON files and artist lists into the collection.

Accepted JSON shapes (checked in this order):

    NormalizedArtists   {"artists": [{"artistADID": ...}, ...]}
    NormalizedVideos    {"videos": [{"artistADID": ...}, ...]}
    Combined            {"artistData": {"artists": [...]},
                         "videoData": {"videos": [...]}, ...}
    LegacySearchResult  {"artist": {"id", "name"}, "videos": [<mvid>, ...]}
    LegacyCollection    {"artists": [{"id", "name"}], "videos": [<mvid>, ...]}

Anything else is Unrecognized and importing it changes nothing.

Import only ever adds rows: an artist already present (by TheAudioDB id)
or a video already present (by track id) is left untouched. After rows
are added, every ArtistEntry is rebuilt from the video list so counts
stay exact; names, MusicBrainz ids and enrichment fields known before
the rebuild are carried over. Importing the same file twice is a no-op
the second time.

Usage:
    result = import_json_file(store, Path("collection.json"))
    names = parse_artist_text_file(Path("artists.txt"))
"""

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Union

from mvfinder.audiodb.models import MusicVideo
from mvfinder.collection.aggregates import generate_artists_from_videos
from mvfinder.collection.legacy import upgrade_legacy_collection
from mvfinder.collection.merge import video_entries_from_search
from mvfinder.collection.models import ENRICHMENT_FIELDS, ArtistEntry, CollectionData, VideoEntry
from mvfinder.core.exceptions import ParseError
from mvfinder.core.logger import get_logger
from mvfinder.core.store import CollectionStore
from mvfinder.musicbrainz.models import Artist
from mvfinder.youtube.urls import extract_video_id


logger = get_logger(__name__)


# =============================================================================
# Payload variants
# =============================================================================

@dataclass(frozen=True)
class NormalizedArtists:
    artists: list[dict[str, Any]]


@dataclass(frozen=True)
class NormalizedVideos:
    videos: list[dict[str, Any]]


@dataclass(frozen=True)
class Combined:
    artists: list[dict[str, Any]]
    videos: list[dict[str, Any]]


@dataclass(frozen=True)
class LegacySearchResult:
    artist: Artist
    videos: list[MusicVideo]


@dataclass(frozen=True)
class LegacyCollection:
    payload: dict[str, Any]


@dataclass(frozen=True)
class Unrecognized:
    reason: str


ImportPayload = Union[
    NormalizedArtists, NormalizedVideos, Combined, LegacySearchResult, LegacyCollection, Unrecognized
]


@dataclass(frozen=True)
class ImportResult:
    """
    Outcome of an import.

    Attributes:
        kind: Name of the detected payload variant.
        added_artists: Artist rows added.
        added_videos: Video rows added.
        skipped: Rows rejected as malformed or without a YouTube id.
    """
    kind: str
    added_artists: int = 0
    added_videos: int = 0
    skipped: int = 0

    @property
    def modified(self) -> bool:
        return bool(self.added_artists or self.added_videos)


def _first_has_artist_id(rows: Any) -> bool:
    return isinstance(rows, list) and bool(rows) and isinstance(rows[0], dict) and "artistADID" in rows[0]


def _dict_rows(value: Any, list_field: str) -> list[dict[str, Any]]:
    """Rows of a container given either as {list_field: [...]} or as a bare list."""
    if isinstance(value, dict):
        value = value.get(list_field)
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]


def decode_payload(obj: Any) -> ImportPayload:
    """
    Classify a decoded JSON value as one of the import variants.

    Never raises; unknown shapes yield Unrecognized.
    """
    if not isinstance(obj, dict):
        return Unrecognized(f"top-level value is {type(obj).__name__}, not an object")

    artists = obj.get("artists")
    videos = obj.get("videos")

    if _first_has_artist_id(artists):
        return NormalizedArtists(artists=_dict_rows(artists, "artists"))

    if _first_has_artist_id(videos):
        return NormalizedVideos(videos=_dict_rows(videos, "videos"))

    if obj.get("artistData") and obj.get("videoData"):
        return Combined(
            artists=_dict_rows(obj["artistData"], "artists"),
            videos=_dict_rows(obj["videoData"], "videos"),
        )

    if isinstance(obj.get("artist"), dict) and isinstance(videos, list):
        raw_artist = obj["artist"]
        if not raw_artist.get("id"):
            return Unrecognized("search result artist has no id")
        return LegacySearchResult(
            artist=Artist.from_dict(raw_artist),
            videos=[MusicVideo.from_api(v) for v in videos if isinstance(v, dict)],
        )

    if isinstance(artists, list) and isinstance(videos, list):
        return LegacyCollection(payload=obj)

    return Unrecognized("no known collection keys")


# =============================================================================
# Row conversion
# =============================================================================

def _artist_rows(rows: list[dict[str, Any]]) -> tuple[list[ArtistEntry], int]:
    entries, skipped = [], 0
    for row in rows:
        try:
            entries.append(ArtistEntry.from_dict(row))
        except ValueError as e:
            logger.debug(f"Skipping imported artist row: {e}")
            skipped += 1
    return entries, skipped


def _video_rows(rows: list[dict[str, Any]]) -> tuple[list[VideoEntry], int]:
    """Convert rows, re-deriving the YouTube id from the video URL."""
    entries, skipped = [], 0
    for row in rows:
        try:
            entry = VideoEntry.from_dict(row)
        except ValueError as e:
            logger.debug(f"Skipping imported video row: {e}")
            skipped += 1
            continue

        video_id = extract_video_id(entry.source_url)
        if not video_id:
            logger.debug(f"Skipping imported video without YouTube id: {entry.title!r}")
            skipped += 1
            continue
        entries.append(replace(entry, platform_video_id=video_id))
    return entries, skipped


def _rows_for(payload: ImportPayload) -> tuple[list[ArtistEntry], list[VideoEntry], int]:
    if isinstance(payload, NormalizedArtists):
        artists, skipped = _artist_rows(payload.artists)
        return artists, [], skipped

    if isinstance(payload, NormalizedVideos):
        videos, skipped = _video_rows(payload.videos)
        return [], videos, skipped

    if isinstance(payload, Combined):
        artists, skipped_artists = _artist_rows(payload.artists)
        videos, skipped_videos = _video_rows(payload.videos)
        return artists, videos, skipped_artists + skipped_videos

    if isinstance(payload, LegacySearchResult):
        videos = video_entries_from_search(payload.artist, payload.videos)
        artists = []
        if videos:
            artists.append(ArtistEntry(
                artist_external_id=videos[0].artist_external_id,
                artist_identity_id=payload.artist.id,
                display_name=payload.artist.name,
            ))
        return artists, videos, len(payload.videos) - len(videos)

    if isinstance(payload, LegacyCollection):
        upgraded = upgrade_legacy_collection(payload.payload)
        return list(upgraded.artists), list(upgraded.videos), 0

    return [], [], 0


# =============================================================================
# Merge
# =============================================================================

def _carry_over(generated: ArtistEntry, known: ArtistEntry) -> ArtistEntry:
    values = {name: getattr(known, name) or getattr(generated, name) for name in ENRICHMENT_FIELDS}
    return replace(
        generated,
        display_name=known.display_name or generated.display_name,
        artist_identity_id=known.artist_identity_id or generated.artist_identity_id,
        **values,
    )


def merge_import(store: CollectionStore, payload: ImportPayload) -> ImportResult:
    """
    Add the rows of an import payload that are not yet in the collection.

    Args:
        store: Collection store to read from and write to.
        payload: Result of decode_payload().

    Returns:
        ImportResult with the number of rows added.

    Behavior:
        1. Unrecognized payloads return immediately.
        2. Artist rows with a new TheAudioDB id and video rows with a new
           track id (and a YouTube id) are appended.
        3. If nothing was added, storage is not touched.
        4. Artists are rebuilt from the videos by the grouping rule, and
           values known before the rebuild are carried over. Known
           artists that own no videos are kept with video_count 0.
        5. The collection is saved.

    Raises:
        StorageError: If the collection cannot be saved.
    """
    kind = type(payload).__name__

    if isinstance(payload, Unrecognized):
        logger.warning(f"Unrecognized import format: {payload.reason}")
        return ImportResult(kind=kind)

    incoming_artists, incoming_videos, skipped = _rows_for(payload)

    data = store.load()
    artists = list(data.artists)
    videos = list(data.videos)
    artist_ids = {a.artist_external_id for a in artists}
    track_ids = data.track_ids()

    added_artists = 0
    for entry in incoming_artists:
        if entry.artist_external_id not in artist_ids:
            artist_ids.add(entry.artist_external_id)
            artists.append(entry)
            added_artists += 1

    added_videos = 0
    for entry in incoming_videos:
        if entry.track_external_id not in track_ids:
            track_ids.add(entry.track_external_id)
            videos.append(entry)
            added_videos += 1

    result = ImportResult(kind=kind, added_artists=added_artists, added_videos=added_videos, skipped=skipped)

    if not result.modified:
        logger.info(f"Import ({kind}) added nothing new")
        return result

    known = {a.artist_external_id: a for a in artists}
    rebuilt = []
    for generated in generate_artists_from_videos(videos):
        previous = known.get(generated.artist_external_id)
        rebuilt.append(_carry_over(generated, previous) if previous else generated)

    rebuilt_ids = {a.artist_external_id for a in rebuilt}
    rebuilt.extend(
        replace(a, video_count=0, primary_thumbnail_id="") for a in artists if a.artist_external_id not in rebuilt_ids
    )

    store.save(CollectionData.of(rebuilt, videos))

    logger.info(
        f"Import ({kind}) added {added_artists} artists and {added_videos} videos"
        + (f", skipped {skipped} rows" if skipped else "")
    )
    return result


def import_json_text(store: CollectionStore, text: str) -> ImportResult:
    """
    Import a JSON document given as text.

    Malformed JSON is logged and treated as an unrecognized payload.
    """
    try:
        obj = _decode_json(text)
    except ParseError as e:
        logger.error(e.message)
        return ImportResult(kind=Unrecognized.__name__)
    return merge_import(store, decode_payload(obj))


def import_json_file(store: CollectionStore, path: Path) -> ImportResult:
    """
    Import a JSON file.

    Raises:
        OSError: If the file cannot be read.
    """
    logger.info(f"Importing {path}")
    return import_json_text(store, path.read_text(encoding="utf-8"))


def _decode_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise ParseError(f"Imported file is not valid JSON: {e}", details={"original_error": str(e)}) from e


def parse_artist_text_file(path: Path) -> list[str]:
    """
    Read artist names from a text file, one per line.

    Lines are stripped and blank lines are dropped. Order is preserved
    and duplicates are kept.
    """
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]
