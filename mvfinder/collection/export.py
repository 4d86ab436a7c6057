"""
Export projections of the collection.

Every projection is a pure function from CollectionData to a
JSON-serializable value:

    raw-artists   {"artists": [...]}              (stored form)
    raw-videos    {"videos": [...]}               (stored form)
    combined      {"artistData", "videoData", "timestamp",
                   "artistCount", "videoCount"}   (full backup, re-importable)
    legacy-v2     [{"artist_name", "mbid", "music_videos": [...]}, ...]

write_exports() writes any of them to descriptive file names that carry
the artist and video counts, e.g. "mvfinder_combined_12-artists_87-videos.json".

export_search_result() serializes one search result in the format the
importer reads back as a legacy search result.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from mvfinder.audiodb.models import MusicVideo
from mvfinder.collection.models import CollectionData, placeholder_artist_name
from mvfinder.core.logger import get_logger
from mvfinder.musicbrainz.models import Artist
from mvfinder.youtube.urls import thumbnail_url, watch_url


logger = get_logger(__name__)


def _iso_now(now: datetime | None = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def export_raw_artists(data: CollectionData) -> dict[str, Any]:
    return data.artists_to_dict()


def export_raw_videos(data: CollectionData) -> dict[str, Any]:
    return data.videos_to_dict()


def export_combined(data: CollectionData, now: datetime | None = None) -> dict[str, Any]:
    """Both containers plus a timestamp and the row counts."""
    return {
        "artistData": data.artists_to_dict(),
        "videoData": data.videos_to_dict(),
        "timestamp": _iso_now(now),
        "artistCount": data.artist_count,
        "videoCount": data.video_count,
    }


def export_legacy_v2(data: CollectionData) -> list[dict[str, Any]]:
    """
    One record per artist with its videos nested.

    Video URLs are rebuilt from the YouTube id rather than copied from the
    stored source URL. Artists without videos get an empty list, and an
    artist without a display name gets "Artist (ID: <first 8 chars>...)".
    """
    records = []
    for artist in data.artists:
        records.append({
            "artist_name": artist.display_name or placeholder_artist_name(artist.artist_external_id),
            "mbid": artist.artist_identity_id,
            "music_videos": [
                {
                    "title": video.title,
                    "youtube_url": watch_url(video.platform_video_id),
                    "track_thumb": thumbnail_url(video.platform_video_id),
                }
                for video in data.videos_for(artist.artist_external_id)
            ],
        })
    return records


def export_search_result(artist: Artist, videos: Sequence[MusicVideo], now: datetime | None = None) -> dict[str, Any]:
    """Serialize one search result, tagging every video with the artist's MBID."""
    return {
        "artist": artist.to_dict(),
        "videos": [
            {**video.to_api_dict(), "strMusicBrainzArtistID": artist.id}
            for video in videos
        ],
        "timestamp": _iso_now(now),
    }


EXPORT_KINDS: dict[str, Callable[[CollectionData], Any]] = {
    "artists": export_raw_artists,
    "videos": export_raw_videos,
    "combined": export_combined,
    "legacy-v2": export_legacy_v2,
}


def export_filename(kind: str, data: CollectionData) -> str:
    """Descriptive file name for an export, including the row counts."""
    if kind == "artists":
        return f"mvfinder_artists_{data.artist_count}-artists.json"
    if kind == "videos":
        return f"mvfinder_videos_{data.video_count}-videos.json"
    return f"mvfinder_{kind}_{data.artist_count}-artists_{data.video_count}-videos.json"


def write_json(path: Path, payload: Any) -> Path:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return path


def write_exports(data: CollectionData, directory: Path, kinds: Iterable[str]) -> list[Path]:
    """
    Write the requested export projections into directory.

    Args:
        data: Collection snapshot.
        directory: Target directory, created if missing.
        kinds: Any of EXPORT_KINDS.

    Returns:
        Paths of the written files.

    Raises:
        ValueError: For an unknown kind.
        OSError: If a file cannot be written.
    """
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for kind in kinds:
        if kind not in EXPORT_KINDS:
            raise ValueError(f"Unknown export kind: {kind}")
        path = write_json(directory / export_filename(kind, data), EXPORT_KINDS[kind](data))
        logger.info(f"Exported {kind} to {path}")
        written.append(path)
    return written
