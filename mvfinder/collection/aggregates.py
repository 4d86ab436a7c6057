"""
Artist aggregates derived from the video list.

An ArtistEntry's video_count and primary_thumbnail_id are never edited by
hand: they are recomputed from the VideoEntry list whenever videos change.
"""

from typing import Iterable

from mvfinder.collection.models import ArtistEntry, VideoEntry


def count_videos(videos: Iterable[VideoEntry], artist_external_id: str) -> int:
    return sum(1 for v in videos if v.artist_external_id == artist_external_id)


def generate_artists_from_videos(videos: Iterable[VideoEntry]) -> list[ArtistEntry]:
    """
    Build one ArtistEntry per distinct artist_external_id.

    Grouping rule:
        - Artists appear in the order their first video appears.
        - video_count is the size of the group.
        - primary_thumbnail_id is the first video's platform_video_id.
        - display_name is the first non-empty artist_display_name.
        - artist_identity_id is the first non-empty identity id.
        - Enrichment fields are empty.
    """
    groups: dict[str, list[VideoEntry]] = {}
    for video in videos:
        groups.setdefault(video.artist_external_id, []).append(video)

    artists = []
    for artist_external_id, group in groups.items():
        artists.append(ArtistEntry(
            artist_external_id=artist_external_id,
            artist_identity_id=next((v.artist_identity_id for v in group if v.artist_identity_id), ""),
            display_name=next((v.artist_display_name for v in group if v.artist_display_name), ""),
            video_count=len(group),
            primary_thumbnail_id=group[0].platform_video_id,
        ))
    return artists
