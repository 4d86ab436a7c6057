"""
Artist enrichment: artwork, genre, mood and style from TheAudioDB.

Enrichment only ever fills in. For each field, a non-empty value from
the detail record replaces the stored one; an empty value from the
detail record leaves the stored one alone. An artist whose display name
is still unknown also takes the name from the detail record.

enrich_all() walks the whole collection one artist at a time, waiting a
fixed delay between calls, and reports progress after every artist. A
failing artist is logged to the enrichment failure report and counted;
the batch continues.

Usage:
    result = enrich_all(store, audiodb, on_progress=bar.on_progress)
    print(f"{result.success} enriched, {result.failed} failed")
"""

import time
from dataclasses import dataclass, replace
from typing import Callable, Protocol

from mvfinder.audiodb.models import ArtistDetails
from mvfinder.collection.models import ArtistEntry
from mvfinder.collection.queue import WorkItemResult, WorkQueue
from mvfinder.core.config import DEFAULT_ENRICHMENT_DELAY
from mvfinder.core.exceptions import TransportError
from mvfinder.core.logger import get_logger, log_enrichment_failure
from mvfinder.core.store import CollectionStore


logger = get_logger(__name__)


class ArtistDetailSource(Protocol):
    def get_artist_details(self, external_id: str) -> ArtistDetails | None: ...


ProgressCallback = Callable[[int, int, int, int], None]


@dataclass(frozen=True)
class EnrichmentResult:
    """Tally of an enrichment batch."""
    success: int
    failed: int

    @property
    def total(self) -> int:
        return self.success + self.failed


def apply_details(entry: ArtistEntry, details: ArtistDetails) -> ArtistEntry:
    """Return entry with every non-empty detail value filled in."""
    updates = {name: value for name, value in details.enrichment_values().items() if value}
    if not entry.display_name and details.name:
        updates["display_name"] = details.name
    return replace(entry, **updates)


def enrich_one(
    store: CollectionStore,
    source: ArtistDetailSource,
    artist_external_id: str
) -> ArtistEntry | None:
    """
    Enrich one artist and save the collection.

    Args:
        store: Collection store.
        source: Artist detail lookup (normally AudioDBClient).
        artist_external_id: TheAudioDB id of the artist.

    Returns:
        The updated ArtistEntry, or None when the artist is not in the
        collection, the lookup failed or returned nothing. Nothing is
        saved in those cases.
    """
    data = store.load()
    entry = data.find_artist(artist_external_id)
    if entry is None:
        logger.warning(f"Cannot enrich {artist_external_id}: not in collection")
        return None

    try:
        details = source.get_artist_details(artist_external_id)
    except TransportError as e:
        log_enrichment_failure(logger, entry.name_or_placeholder, artist_external_id, e.message)
        return None

    if details is None:
        log_enrichment_failure(logger, entry.name_or_placeholder, artist_external_id, "no artist details returned")
        return None

    # Apply to the state after the lookup, not the earlier snapshot
    data = store.load()
    current = data.find_artist(artist_external_id)
    if current is None:
        logger.warning(f"Artist {artist_external_id} was removed during enrichment")
        return None

    enriched = apply_details(current, details)
    store.save(data.with_artist(enriched))
    logger.debug(f"Enriched {enriched.name_or_placeholder}")
    return enriched


def enrich_all(
    store: CollectionStore,
    source: ArtistDetailSource,
    on_progress: ProgressCallback | None = None,
    delay: float = DEFAULT_ENRICHMENT_DELAY,
    sleep: Callable[[float], None] = time.sleep
) -> EnrichmentResult:
    """
    Enrich every artist in the collection, one after another.

    Args:
        store: Collection store.
        source: Artist detail lookup.
        on_progress: Called after every artist with
                     (current_index, total, success_so_far, failed_so_far),
                     current_index counting from 1.
        delay: Seconds to wait before every lookup after the first.
        sleep: Sleep function (replaceable in tests).

    Returns:
        EnrichmentResult with the success/failure tally.
    """
    names = {a.artist_external_id: a.name_or_placeholder for a in store.load().artists}
    artist_ids = list(names)
    total = len(artist_ids)
    counts = {"success": 0, "failed": 0}

    logger.info(f"Enriching {total} artists")

    def record(result: WorkItemResult[str, ArtistEntry | None]) -> None:
        if result.ok and result.value is not None:
            counts["success"] += 1
        else:
            counts["failed"] += 1
            if result.error is not None:
                log_enrichment_failure(logger, names[result.item], result.item, str(result.error))
        if on_progress is not None:
            on_progress(counts["success"] + counts["failed"], total, counts["success"], counts["failed"])

    queue: WorkQueue[str, ArtistEntry | None] = WorkQueue(lambda artist_id: enrich_one(store, source, artist_id))
    queue.extend(artist_ids)
    queue.run(on_result=record, delay=delay, sleep=sleep)

    logger.info(f"Enrichment finished: {counts['success']} enriched, {counts['failed']} failed")
    return EnrichmentResult(success=counts["success"], failed=counts["failed"])
