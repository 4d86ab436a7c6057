"""
YouTube URL helpers.

Every video stored in the collection is identified on YouTube by an
11-character id. This module extracts that id from the many URL shapes
TheAudioDB hands out and derives the thumbnail/watch URLs from it.

Recognized shapes:
    https://youtu.be/<id>
    https://www.youtube.com/watch?v=<id>   (also &v=<id>, ?vi=<id>)
    https://www.youtube.com/embed/<id>
    https://www.youtube.com/shorts/<id>
    https://www.youtube.com/v/<id>, /vi/<id>

Usage:
    video_id = extract_video_id("https://youtu.be/dQw4w9WgXcQ?t=42")
    thumb = thumbnail_url(video_id)
"""

import re
from enum import Enum
from typing import Any
from urllib.parse import parse_qs, urlparse


VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

_VIDEO_URL_PATTERN = re.compile(
    r"(?:youtu\.be/|/v/|/vi/|/u/\w/|/embed/|/shorts/|[?&]vi?=)"
    r"([A-Za-z0-9_-]{11})"
    r"(?![A-Za-z0-9_-])"
)

THUMBNAIL_BASE_URL = "https://img.youtube.com/vi"
WATCH_BASE_URL = "https://www.youtube.com/watch?v="
PLACEHOLDER_THUMBNAIL = "/placeholder.svg"


class ThumbnailSize(str, Enum):
    """Thumbnail variants served by img.youtube.com."""
    DEFAULT = "default"
    MEDIUM = "mqdefault"
    HIGH = "hqdefault"
    STANDARD = "sddefault"
    MAX = "maxresdefault"


def extract_video_id(url: Any) -> str:
    """
    Extract the 11-character YouTube video id from a URL.

    Args:
        url: Anything. Non-strings are accepted and yield "".

    Returns:
        The video id, or "" when no id can be found. Never raises.

    Examples:
        extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ")  # "dQw4w9WgXcQ"
        extract_video_id("https://youtu.be/dQw4w9WgXcQ")                 # "dQw4w9WgXcQ"
        extract_video_id("https://vimeo.com/1234")                      # ""
    """
    if not isinstance(url, str) or not url:
        return ""

    match = _VIDEO_URL_PATTERN.search(url)
    return match.group(1) if match else ""


def is_valid_video_id(value: Any) -> bool:
    """Return True if value looks like a YouTube video id."""
    return isinstance(value, str) and bool(VIDEO_ID_PATTERN.match(value))


def thumbnail_url(video_id: str, size: ThumbnailSize = ThumbnailSize.MEDIUM) -> str:
    """
    Derive the thumbnail URL of a video.

    Returns PLACEHOLDER_THUMBNAIL when video_id is empty.
    """
    if not video_id:
        return PLACEHOLDER_THUMBNAIL
    return f"{THUMBNAIL_BASE_URL}/{video_id}/{ThumbnailSize(size).value}.jpg"


def watch_url(video_id: str) -> str:
    """Canonical watch URL of a video."""
    return f"{WATCH_BASE_URL}{video_id}"


def extract_playlist_id(url_or_id: str) -> str:
    """
    Extract a playlist id from a YouTube playlist URL.

    Args:
        url_or_id: A youtube.com / youtu.be URL with a 'list' parameter,
                   or a bare playlist id.

    Returns:
        The playlist id.

    Raises:
        ValueError: If the value is empty, or is a YouTube URL without
                    a 'list' parameter.

    Examples:
        extract_playlist_id("https://www.youtube.com/playlist?list=PL123")  # "PL123"
        extract_playlist_id("PL123")                                        # "PL123"
    """
    value = (url_or_id or "").strip()
    if not value:
        raise ValueError("Empty playlist URL")

    if "youtube.com" in value or "youtu.be" in value:
        query = parse_qs(urlparse(value).query)
        playlist_ids = query.get("list")
        if not playlist_ids or not playlist_ids[0]:
            raise ValueError(f"Not a playlist URL: {value}")
        return playlist_ids[0]

    return value
