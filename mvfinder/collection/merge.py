"""
Merging of artist search results into the collection.

A search result is one MusicBrainz artist plus the TheAudioDB music
videos listed for it. Merging:

    1. Converts each video to a VideoEntry. Videos without a YouTube id
       and videos whose track id is already stored are skipped, so the
       first stored copy of a track always wins.
    2. Appends the new entries after the existing ones.
    3. Creates or refreshes the ArtistEntry of the result's artist. Its
       video_count is recounted from the whole video list, and an empty
       display name is filled in from the search result.
    4. Saves both lists.

The artist's TheAudioDB id is taken from the first video of the result;
a result is expected to hold the videos of a single artist.

An artist whose search returned no videos is still recorded (with
video_count 0) so it shows up in the collection. When its TheAudioDB id
is unknown the row is keyed by its MusicBrainz id until a later search
returns videos, at which point the row is re-keyed to the real id.
"""

from dataclasses import replace
from typing import Sequence

from mvfinder.audiodb.models import MusicVideo
from mvfinder.collection.aggregates import count_videos
from mvfinder.collection.models import ArtistEntry, CollectionData, VideoEntry
from mvfinder.core.logger import get_logger
from mvfinder.core.store import CollectionStore
from mvfinder.musicbrainz.models import Artist
from mvfinder.youtube.urls import extract_video_id


logger = get_logger(__name__)


def video_entries_from_search(
    artist: Artist,
    videos: Sequence[MusicVideo],
    known_track_ids: set[str] | None = None
) -> list[VideoEntry]:
    """
    Convert catalog videos to new VideoEntry rows.

    Args:
        artist: The MusicBrainz artist the videos were looked up for.
        videos: Videos as returned by TheAudioDB.
        known_track_ids: Track ids already stored. Not modified.

    Returns:
        Entries for videos with a YouTube id and a track id not seen in
        known_track_ids or earlier in videos.
    """
    seen = set(known_track_ids or ())
    entries = []

    for video in videos:
        video_id = extract_video_id(video.video_url)
        if not video_id or not video.track_id or not video.artist_id:
            logger.debug(f"Skipping video without YouTube id: {video.track!r} ({video.video_url!r})")
            continue
        if video.track_id in seen:
            continue
        seen.add(video.track_id)

        entries.append(VideoEntry(
            artist_external_id=video.artist_id,
            artist_identity_id=artist.id,
            track_external_id=video.track_id,
            title=video.track,
            source_url=video.video_url,
            platform_video_id=video_id,
            artist_display_name=video.artist or artist.name,
        ))

    return entries


def _refresh_artist(entry: ArtistEntry, artist: Artist, videos: Sequence[VideoEntry]) -> ArtistEntry:
    own_videos = [v for v in videos if v.artist_external_id == entry.artist_external_id]
    thumbnail_id = entry.primary_thumbnail_id
    if thumbnail_id not in {v.platform_video_id for v in own_videos}:
        thumbnail_id = own_videos[0].platform_video_id if own_videos else ""
    return replace(
        entry,
        video_count=len(own_videos),
        display_name=entry.display_name or artist.name,
        artist_identity_id=entry.artist_identity_id or artist.id,
        primary_thumbnail_id=thumbnail_id,
    )


def _find_index(artists: list[ArtistEntry], artist_external_id: str) -> int | None:
    for index, entry in enumerate(artists):
        if entry.artist_external_id == artist_external_id:
            return index
    return None


def merge_search_result(
    store: CollectionStore,
    artist: Artist,
    videos: Sequence[MusicVideo],
    artist_external_id: str = ""
) -> CollectionData:
    """
    Merge one artist search result into the stored collection.

    Args:
        store: Collection store to read from and write to.
        artist: MusicBrainz artist that was searched.
        videos: TheAudioDB music videos of that artist (may be empty).
        artist_external_id: TheAudioDB id of the artist when known
                            independently of videos. Ignored when videos
                            is non-empty.

    Returns:
        The collection as saved.

    Raises:
        StorageError: If the collection cannot be saved.
    """
    data = store.load()

    new_videos = video_entries_from_search(artist, videos, data.track_ids())
    all_videos = list(data.videos) + new_videos
    artists = list(data.artists)

    key = videos[0].artist_id if videos else ""
    key = key or artist_external_id

    other_ids = {v.artist_id for v in videos if v.artist_id and v.artist_id != key}
    if other_ids:
        logger.warning(
            f"Search result for {artist.name} contains videos of other artists "
            f"({', '.join(sorted(other_ids))}); only {key} is aggregated"
        )

    index = _find_index(artists, key) if key else None
    placeholder_index = _find_index(artists, artist.id)

    if index is not None:
        artists[index] = _refresh_artist(artists[index], artist, all_videos)
        if placeholder_index is not None and placeholder_index != index and key != artist.id:
            del artists[placeholder_index]

    elif key and placeholder_index is not None:
        # Promote the row recorded before TheAudioDB knew this artist
        promoted = replace(artists[placeholder_index], artist_external_id=key)
        artists[placeholder_index] = _refresh_artist(promoted, artist, all_videos)
        logger.debug(f"Re-keyed {artist.name} from {artist.id} to {key}")

    elif key:
        artists.append(_refresh_artist(
            ArtistEntry(artist_external_id=key, artist_identity_id=artist.id, display_name=artist.name),
            artist,
            all_videos,
        ))

    else:
        existing = next(
            (i for i, a in enumerate(artists) if a.artist_identity_id == artist.id),
            None
        )
        if existing is not None:
            artists[existing] = _refresh_artist(artists[existing], artist, all_videos)
        else:
            artists.append(ArtistEntry(
                artist_external_id=artist.id,
                artist_identity_id=artist.id,
                display_name=artist.name,
                video_count=0,
            ))

    merged = CollectionData.of(artists, all_videos)
    store.save(merged)

    count = count_videos(all_videos, key) if key else 0
    logger.info(f"Merged {artist.name}: {len(new_videos)} new videos ({count} total)")
    return merged
