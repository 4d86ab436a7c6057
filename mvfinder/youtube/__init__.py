"""
YouTube helpers.

    urls      - Video id extraction, thumbnail and watch URLs
    playlist  - Artist names from playlist titles (YouTube Data API)
"""

from mvfinder.youtube.playlist import (
    YouTubePlaylistClient,
    extract_artists_from_playlist,
    extract_artists_from_titles,
)
from mvfinder.youtube.urls import (
    ThumbnailSize,
    extract_playlist_id,
    extract_video_id,
    is_valid_video_id,
    thumbnail_url,
    watch_url,
)

__all__ = [
    "YouTubePlaylistClient",
    "extract_artists_from_playlist",
    "extract_artists_from_titles",
    "ThumbnailSize",
    "extract_playlist_id",
    "extract_video_id",
    "is_valid_video_id",
    "thumbnail_url",
    "watch_url",
]
