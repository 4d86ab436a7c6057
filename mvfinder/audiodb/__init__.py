"""
TheAudioDB access: music video listings and artist details.

Usage:
    from mvfinder.audiodb import AudioDBClient

    client = AudioDBClient()
    videos = client.get_music_videos(mbid)
"""

from mvfinder.audiodb.client import AudioDBClient
from mvfinder.audiodb.models import ArtistDetails, MusicVideo

__all__ = ["AudioDBClient", "ArtistDetails", "MusicVideo"]
