"""
mvfinder - build a music video collection from artist names.

Artists are resolved against MusicBrainz, their music videos are pulled
from TheAudioDB, and the result is kept as a de-duplicated local
collection that can be enriched with artwork, imported, pruned and
exported.

Usage:
    mvfinder search "Daft Punk" "Massive Attack"
    mvfinder import-text artists.txt
    mvfinder enrich
    mvfinder export --kind combined
"""

__version__ = "1.0.0"
