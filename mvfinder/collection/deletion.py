"""Removal of artists, together with their videos, from the collection."""

from typing import Iterable

from mvfinder.collection.models import CollectionData
from mvfinder.core.logger import get_logger
from mvfinder.core.store import CollectionStore


logger = get_logger(__name__)


def delete_artists(store: CollectionStore, artist_external_ids: Iterable[str]) -> CollectionData:
    """
    Delete artists and every video they own.

    Ids that are not in the collection are ignored. The collection is
    saved even when nothing matched.

    Returns:
        The collection as saved.
    """
    ids = set(artist_external_ids)
    data = store.load()

    remaining = CollectionData.of(
        (a for a in data.artists if a.artist_external_id not in ids),
        (v for v in data.videos if v.artist_external_id not in ids),
    )
    store.save(remaining)

    logger.info(
        f"Deleted {data.artist_count - remaining.artist_count} artists "
        f"and {data.video_count - remaining.video_count} videos"
    )
    return remaining
