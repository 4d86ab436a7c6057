"""
The music video collection: data model and operations.

Modules:
    models      - VideoEntry, ArtistEntry, CollectionData
    aggregates  - Per-artist counts and artist generation from videos
    legacy      - Upgrade of the old single-container format
    merge       - Merge of one search result
    importer    - JSON import (all supported shapes)
    enrichment  - TheAudioDB artist details
    deletion    - Cascading artist removal
    export      - Export projections
    queue       - Sequential work queue
    search      - Name -> MusicBrainz -> TheAudioDB -> collection

Only the data model is re-exported here; operations are imported from
their modules.
"""

from mvfinder.collection.models import (
    ArtistEntry,
    CollectionData,
    CollectionStats,
    VideoEntry,
    placeholder_artist_name,
)

__all__ = [
    "ArtistEntry",
    "CollectionData",
    "CollectionStats",
    "VideoEntry",
    "placeholder_artist_name",
]
