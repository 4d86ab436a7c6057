"""
Artist search: from a name to videos in the collection.

For every artist name:
    1. Resolve the name on MusicBrainz. No match: nothing is stored.
    2. List the artist's music videos on TheAudioDB. If that fails, the
       artist is still recorded, without videos.
    3. If TheAudioDB lists no videos, look the artist up by MBID so the
       empty entry can be keyed by its TheAudioDB id.
    4. Merge the result into the collection.

process_names() runs a list of names through a WorkQueue, so only one
search is in flight at a time. A name that fails is reported in the
search failure log and the queue moves on.

Usage:
    service = ArtistSearchService(store, MusicBrainzClient(), AudioDBClient())
    outcomes = service.process_names(["Muse", "Portishead"], on_outcome=print)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Protocol

from mvfinder.audiodb.models import ArtistDetails, MusicVideo
from mvfinder.collection.merge import merge_search_result
from mvfinder.collection.queue import WorkItemResult, WorkQueue
from mvfinder.core.exceptions import StorageError, TransportError
from mvfinder.core.logger import get_logger, log_search_failure
from mvfinder.core.store import CollectionStore
from mvfinder.musicbrainz.models import Artist


logger = get_logger(__name__)


class IdentitySource(Protocol):
    def search_artist(self, name: str) -> Artist | None: ...


class CatalogSource(Protocol):
    def get_music_videos(self, identity_id: str) -> list[MusicVideo]: ...

    def get_artist_by_identity(self, identity_id: str) -> ArtistDetails | None: ...


class SearchStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    VIDEOS_UNAVAILABLE = "videos_unavailable"
    FAILED = "failed"


@dataclass(frozen=True)
class SearchOutcome:
    """
    Result of searching one artist name.

    Attributes:
        name: The name as searched.
        status: What happened.
        artist: The MusicBrainz artist, when found.
        videos: Videos listed by TheAudioDB.
        added_videos: Videos that were new to the collection.
        error: Failure message for FAILED / VIDEOS_UNAVAILABLE.
    """
    name: str
    status: SearchStatus
    artist: Artist | None = None
    videos: tuple[MusicVideo, ...] = ()
    added_videos: int = 0
    error: str = ""


class ArtistSearchService:
    """Searches artists and merges their videos into the collection."""

    def __init__(self, store: CollectionStore, identity: IdentitySource, catalog: CatalogSource) -> None:
        self.store = store
        self.identity = identity
        self.catalog = catalog

    def _resolve_external_id(self, artist: Artist) -> str:
        try:
            details = self.catalog.get_artist_by_identity(artist.id)
        except TransportError as e:
            logger.debug(f"Could not look up {artist.name} by MBID: {e.message}")
            return ""
        return details.artist_id if details else ""

    def search_and_merge(self, name: str) -> SearchOutcome:
        """
        Search one artist and merge the result.

        Raises:
            TransportError: If MusicBrainz cannot be reached.
            StorageError: If the collection cannot be saved.
        """
        name = name.strip()
        logger.info(f"Searching {name}")

        artist = self.identity.search_artist(name)
        if artist is None:
            log_search_failure(logger, name, "no MusicBrainz match")
            return SearchOutcome(name=name, status=SearchStatus.NOT_FOUND)

        videos_before = self.store.load().video_count

        try:
            videos = self.catalog.get_music_videos(artist.id)
        except TransportError as e:
            log_search_failure(logger, name, f"videos unavailable: {e.message}")
            merge_search_result(self.store, artist, [])
            return SearchOutcome(
                name=name, status=SearchStatus.VIDEOS_UNAVAILABLE, artist=artist, error=e.message
            )

        external_id = "" if videos else self._resolve_external_id(artist)
        merged = merge_search_result(self.store, artist, videos, artist_external_id=external_id)

        return SearchOutcome(
            name=name,
            status=SearchStatus.FOUND,
            artist=artist,
            videos=tuple(videos),
            added_videos=merged.video_count - videos_before,
        )

    def process_names(
        self,
        names: Iterable[str],
        on_outcome: Callable[[SearchOutcome], None] | None = None
    ) -> list[SearchOutcome]:
        """
        Search every name, one at a time.

        Args:
            names: Artist names; blank names are skipped.
            on_outcome: Called after every name.

        Returns:
            One SearchOutcome per searched name, in order.
        """
        outcomes: list[SearchOutcome] = []

        def record(result: WorkItemResult[str, SearchOutcome]) -> None:
            if isinstance(result.error, StorageError):
                raise result.error
            if result.ok and result.value is not None:
                outcome = result.value
            else:
                message = getattr(result.error, "message", str(result.error))
                log_search_failure(logger, result.item, message)
                outcome = SearchOutcome(name=result.item, status=SearchStatus.FAILED, error=message)
            outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)

        queue: WorkQueue[str, SearchOutcome] = WorkQueue(self.search_and_merge)
        queue.extend(name for name in names if name and name.strip())
        queue.run(on_result=record)

        return outcomes
