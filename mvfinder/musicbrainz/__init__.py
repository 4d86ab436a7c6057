"""MusicBrainz artist lookup."""

from mvfinder.musicbrainz.client import MusicBrainzClient
from mvfinder.musicbrainz.models import Artist

__all__ = ["MusicBrainzClient", "Artist"]
