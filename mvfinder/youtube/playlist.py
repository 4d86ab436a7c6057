"""
Artist extraction from YouTube playlists.

Music playlists usually title their items "Artist - Song". Listing a
playlist through the YouTube Data API and splitting the titles gives a
list of artist names that can be fed to the search queue.

API:
    GET https://www.googleapis.com/youtube/v3/playlistItems
        ?part=snippet&maxResults=50&playlistId=<id>&key=<key>&pageToken=<token>

Usage:
    client = YouTubePlaylistClient(api_key=config.youtube.api_key)
    names = extract_artists_from_playlist(client, "https://www.youtube.com/playlist?list=PL...")
"""

from typing import Any, Iterable

from mvfinder.core.exceptions import ConfigError
from mvfinder.core.http import ApiClient
from mvfinder.core.logger import get_logger
from mvfinder.youtube.urls import extract_playlist_id


logger = get_logger(__name__)


YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"
PAGE_SIZE = 50
TITLE_SEPARATOR = " - "


class YouTubePlaylistClient(ApiClient):
    """Client for the YouTube Data API playlistItems endpoint."""

    service_name = "YouTube"

    def __init__(self, api_key: str | None, *args: Any, base_url: str = YOUTUBE_API_URL, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def get_playlist_items(self, playlist_id: str) -> list[dict[str, Any]]:
        """
        List every item of a playlist, following pagination.

        Returns:
            Raw playlistItem resources from all pages, in playlist order.

        Raises:
            ConfigError: If no API key is configured.
            TransportError: If any page cannot be fetched.
        """
        if not self.api_key:
            raise ConfigError(
                "A YouTube API key is required to read playlists "
                "(set youtube.api_key or MVFINDER_YOUTUBE_API_KEY)",
                details={"field": "youtube.api_key"}
            )

        items: list[dict[str, Any]] = []
        page_token: str | None = None

        while True:
            params = {
                "part": "snippet",
                "maxResults": PAGE_SIZE,
                "playlistId": playlist_id,
                "key": self.api_key,
            }
            if page_token:
                params["pageToken"] = page_token

            data = self._get_json(f"{self.base_url}/playlistItems", params=params)
            if not isinstance(data, dict):
                break

            items.extend(item for item in data.get("items") or [] if isinstance(item, dict))
            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.info(f"Playlist {playlist_id}: {len(items)} items")
        return items


def extract_artists_from_titles(titles: Iterable[str]) -> list[str]:
    """
    Extract artist names from "Artist - Title" strings.

    Titles without the separator are ignored, as are one-character
    names. Each name appears once, in first-seen order.

    Example:
        extract_artists_from_titles(["Muse - Uprising", "Muse - Madness", "Intro"])
        # ["Muse"]
    """
    artists: list[str] = []
    seen: set[str] = set()

    for title in titles:
        if not isinstance(title, str) or TITLE_SEPARATOR not in title:
            continue
        name = title.split(TITLE_SEPARATOR)[0].strip()
        if len(name) > 1 and name not in seen:
            seen.add(name)
            artists.append(name)

    return artists


def extract_artists_from_playlist(client: YouTubePlaylistClient, url_or_id: str) -> list[str]:
    """
    List a playlist and extract the artist names from its item titles.

    Raises:
        ValueError: If url_or_id is not a playlist URL or id.
        ConfigError, TransportError: As get_playlist_items().
    """
    playlist_id = extract_playlist_id(url_or_id)
    items = client.get_playlist_items(playlist_id)
    titles = [(item.get("snippet") or {}).get("title", "") for item in items]
    return extract_artists_from_titles(titles)
