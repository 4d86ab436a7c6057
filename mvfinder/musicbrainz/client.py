"""
MusicBrainz artist search.

Resolves a free-text artist name to the best-matching MusicBrainz artist.
MusicBrainz allows one request per second per client and rejects
requests without a descriptive User-Agent, so both are enforced here.

API:
    GET https://musicbrainz.org/ws/2/artist?query=<name>&fmt=json

Usage:
    client = MusicBrainzClient(user_agent=config.network.user_agent)
    artist = client.search_artist("Daft Punk")
    if artist is None:
        print("not found")
"""

from typing import Any

from mvfinder.core.http import ApiClient
from mvfinder.core.logger import get_logger
from mvfinder.musicbrainz.models import Artist


logger = get_logger(__name__)


MUSICBRAINZ_API_URL = "https://musicbrainz.org/ws/2"
MUSICBRAINZ_MIN_INTERVAL = 1.0


class MusicBrainzClient(ApiClient):
    """Client for the MusicBrainz artist search endpoint."""

    service_name = "MusicBrainz"

    def __init__(self, *args: Any, base_url: str = MUSICBRAINZ_API_URL, **kwargs: Any) -> None:
        kwargs.setdefault("min_interval", MUSICBRAINZ_MIN_INTERVAL)
        super().__init__(*args, **kwargs)
        self.base_url = base_url.rstrip("/")

    def search_artist(self, name: str) -> Artist | None:
        """
        Find the best-matching artist for a name.

        Args:
            name: Free-text artist name.

        Returns:
            The top-ranked Artist, or None when the name is blank or
            MusicBrainz returns no artists.

        Raises:
            TransportError: If MusicBrainz cannot be reached.
        """
        name = (name or "").strip()
        if not name:
            return None

        data = self._get_json(
            f"{self.base_url}/artist",
            params={"query": name, "fmt": "json", "limit": 1},
        )

        artists = data.get("artists") if isinstance(data, dict) else None
        if not artists:
            logger.info(f"No MusicBrainz artist found for {name!r}")
            return None

        artist = Artist.from_api(artists[0])
        logger.debug(f"MusicBrainz match for {name!r}: {artist.name} ({artist.id}, score {artist.score})")
        return artist
