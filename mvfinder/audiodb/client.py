"""
TheAudioDB client: music videos and artist details.

TheAudioDB's free API is served from two hosts. Every call tries the
primary host first and the alternate host second; only when both fail
is a TransportError raised.

Endpoints (free key "2"):
    mvid-mb.php?i=<MBID>     music videos of an artist   -> {"mvids": [...]}
    artist.php?i=<ADID>      artist details               -> {"artists": [...]}
    artist-mb.php?i=<MBID>   artist details by MBID       -> {"artists": [...]}

Usage:
    client = AudioDBClient(user_agent=config.network.user_agent)
    videos = client.get_music_videos("056e4f3e-d505-4dad-8ec1-d04f521cbb56")
    details = client.get_artist_details(videos[0].artist_id)
"""

from typing import Any

from mvfinder.audiodb.models import ArtistDetails, MusicVideo
from mvfinder.core.exceptions import TransportError
from mvfinder.core.http import ApiClient
from mvfinder.core.logger import get_logger


logger = get_logger(__name__)


AUDIODB_BASE_URLS = (
    "https://www.theaudiodb.com/api/v1/json/2",
    "https://theaudiodb.com/api/v1/json/2",
)


class AudioDBClient(ApiClient):
    """Client for TheAudioDB music video and artist endpoints."""

    service_name = "TheAudioDB"

    def __init__(self, *args: Any, base_urls: tuple[str, ...] = AUDIODB_BASE_URLS, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.base_urls = tuple(url.rstrip("/") for url in base_urls)

    def _get_with_fallback(self, endpoint: str, params: dict[str, Any]) -> Any:
        """
        GET endpoint from each base URL in turn until one answers.

        Raises:
            TransportError: The error of the last host, if all hosts fail.
        """
        last_error: TransportError | None = None

        for base_url in self.base_urls:
            try:
                return self._get_json(f"{base_url}/{endpoint}", params=params)
            except TransportError as e:
                logger.debug(f"{e.message} ({base_url}), trying next host")
                last_error = e

        if last_error is None:
            raise TransportError(f"No {self.service_name} host configured")
        raise last_error

    def get_music_videos(self, identity_id: str) -> list[MusicVideo]:
        """
        List the music videos of an artist.

        Args:
            identity_id: MusicBrainz artist id.

        Returns:
            MusicVideo list; empty when the id is blank or the artist has
            no videos. Records without strArtist get "".

        Raises:
            TransportError: If both hosts fail.
        """
        if not identity_id:
            return []

        data = self._get_with_fallback("mvid-mb.php", {"i": identity_id})
        rows = data.get("mvids") if isinstance(data, dict) else None
        if not rows:
            return []

        videos = [MusicVideo.from_api(row) for row in rows if isinstance(row, dict)]
        logger.debug(f"TheAudioDB returned {len(videos)} videos for {identity_id}")
        return videos

    def _first_artist(self, endpoint: str, artist_id: str) -> ArtistDetails | None:
        if not artist_id:
            return None

        data = self._get_with_fallback(endpoint, {"i": artist_id})
        rows = data.get("artists") if isinstance(data, dict) else None
        if not rows or not isinstance(rows[0], dict):
            return None
        return ArtistDetails.from_api(rows[0])

    def get_artist_details(self, external_id: str) -> ArtistDetails | None:
        """
        Fetch the detail record of an artist by TheAudioDB id.

        Returns:
            ArtistDetails, or None for a blank id or unknown artist.

        Raises:
            TransportError: If both hosts fail.
        """
        return self._first_artist("artist.php", external_id)

    def get_artist_by_identity(self, identity_id: str) -> ArtistDetails | None:
        """
        Fetch the detail record of an artist by MusicBrainz id.

        Used to learn an artist's TheAudioDB id when it has no videos.
        """
        return self._first_artist("artist-mb.php", identity_id)
