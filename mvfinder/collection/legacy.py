"""
Upgrade of the legacy single-key collection format.

Before artists and videos were stored separately, the whole collection
lived under one key (Video_Data_JSON) as:

    {
        "artists": [{"id": <MBID>, "name": ..., "score": ...}, ...],
        "videos": [<TheAudioDB mvid record>, ...],
        "artistCount": ..., "videoCount": ..., "lastUpdated": ...
    }

The legacy artists carry MusicBrainz ids but no TheAudioDB ids, and the
legacy videos carry TheAudioDB ids but (usually) no MusicBrainz id. The
upgrade rebuilds both new-format lists from the legacy videos and links
them back to the legacy artists by name.

The upgrade is a pure function: same input, same output.
"""

from typing import Any

from mvfinder.collection.aggregates import generate_artists_from_videos
from mvfinder.collection.models import CollectionData, VideoEntry
from mvfinder.core.logger import get_logger
from mvfinder.youtube.urls import extract_video_id


logger = get_logger(__name__)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def upgrade_legacy_collection(payload: Any) -> CollectionData:
    """
    Convert a legacy collection payload to the current format.

    Args:
        payload: The decoded legacy JSON object.

    Returns:
        CollectionData with the derived videos and artists.

    Behavior:
        1. Each legacy video whose strMusicVid yields a YouTube id becomes
           a VideoEntry; the rest are dropped. Repeated idTrack values
           keep the first row.
        2. The identity id comes from strMusicBrainzArtistID when present.
           Otherwise it is taken from the first legacy artist (in legacy
           order) whose name appears as strArtist on a legacy video with
           the same idArtist. With no such artist it stays "".
        3. Artists are regenerated from the videos by the grouping rule.
    """
    if not isinstance(payload, dict):
        return CollectionData()

    legacy_artists = [a for a in payload.get("artists") or [] if isinstance(a, dict)]
    legacy_videos = [v for v in payload.get("videos") or [] if isinstance(v, dict)]

    # idArtist -> set of artist names written on that artist's videos
    names_by_artist_id: dict[str, set[str]] = {}
    for raw in legacy_videos:
        names_by_artist_id.setdefault(_text(raw.get("idArtist")), set()).add(_text(raw.get("strArtist")))

    def identity_for(artist_external_id: str) -> str:
        names = names_by_artist_id.get(artist_external_id, set())
        for legacy_artist in legacy_artists:
            if _text(legacy_artist.get("name")) in names:
                return _text(legacy_artist.get("id"))
        return ""

    videos: list[VideoEntry] = []
    seen_tracks: set[str] = set()
    dropped = 0

    for raw in legacy_videos:
        artist_external_id = _text(raw.get("idArtist"))
        track_external_id = _text(raw.get("idTrack"))
        video_id = extract_video_id(raw.get("strMusicVid"))

        if not artist_external_id or not track_external_id or not video_id:
            dropped += 1
            continue
        if track_external_id in seen_tracks:
            continue
        seen_tracks.add(track_external_id)

        videos.append(VideoEntry(
            artist_external_id=artist_external_id,
            artist_identity_id=_text(raw.get("strMusicBrainzArtistID")) or identity_for(artist_external_id),
            track_external_id=track_external_id,
            title=_text(raw.get("strTrack")),
            source_url=_text(raw.get("strMusicVid")),
            platform_video_id=video_id,
            artist_display_name=_text(raw.get("strArtist")),
        ))

    artists = generate_artists_from_videos(videos)

    logger.info(
        f"Upgraded legacy collection: {len(artists)} artists, {len(videos)} videos"
        + (f" ({dropped} videos without a YouTube id dropped)" if dropped else "")
    )

    return CollectionData.of(artists, videos)
