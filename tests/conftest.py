"""Test configuration and fixtures"""

import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from mvfinder.audiodb.models import ArtistDetails, MusicVideo
from mvfinder.core.storage import MemoryStorage
from mvfinder.core.store import CollectionStore
from mvfinder.musicbrainz.models import Artist


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def storage():
    """Empty in-memory key/value storage"""
    return MemoryStorage()


@pytest.fixture
def store(storage):
    """Collection store backed by in-memory storage"""
    return CollectionStore(storage)


@pytest.fixture
def sample_artist():
    """MusicBrainz artist from the basic merge scenario"""
    return Artist(id="mb-1", name="Test", score=100)


@pytest.fixture
def sample_video():
    """TheAudioDB video belonging to sample_artist"""
    return MusicVideo(
        artist_id="ad-1",
        track_id="t-1",
        track="Song",
        video_url="https://youtu.be/dQw4w9WgXcQ",
    )


@pytest.fixture
def sample_details():
    """TheAudioDB artist details for ad-1"""
    return ArtistDetails(
        artist_id="ad-1",
        name="Test",
        musicbrainz_id="mb-1",
        thumb="https://r2.theaudiodb.com/images/media/artist/thumb/test.jpg",
        banner="https://r2.theaudiodb.com/images/media/artist/banner/test.jpg",
        genre="Trip Hop",
        mood="Dark",
        style="Electronic",
    )


@pytest.fixture
def legacy_payload():
    """Collection in the old single-key format"""
    return {
        "artists": [
            {"id": "mb-massive", "name": "Massive Attack", "score": 100},
            {"id": "mb-portis", "name": "Portishead", "score": 98},
        ],
        "videos": [
            {
                "idArtist": "111",
                "idTrack": "1001",
                "strTrack": "Teardrop",
                "strArtist": "Massive Attack",
                "strMusicVid": "https://www.youtube.com/watch?v=u7K72X4eo_s",
            },
            {
                "idArtist": "111",
                "idTrack": "1002",
                "strTrack": "Angel",
                "strArtist": "Massive Attack",
                "strMusicVid": "http://youtu.be/hbe3CQamF8k",
            },
            {
                "idArtist": "222",
                "idTrack": "2001",
                "strTrack": "Glory Box",
                "strArtist": "Portishead",
                "strMusicVid": "https://www.youtube.com/embed/4qQyUi4zfDs",
                "strMusicBrainzArtistID": "mb-portis-direct",
            },
            {
                "idArtist": "222",
                "idTrack": "2002",
                "strTrack": "Roads",
                "strArtist": "Portishead",
                "strMusicVid": "https://vimeo.com/12345",
            },
        ],
        "artistCount": 2,
        "videoCount": 4,
        "lastUpdated": "2023-05-01T10:00:00Z",
    }


def _response(payload=None, status_code=200, json_error=False):
    response = Mock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    if status_code >= 400:
        error = requests.exceptions.HTTPError(f"{status_code} Error")
        error.response = response
        response.raise_for_status.side_effect = error
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def make_response():
    """Factory for mock requests.Response objects"""
    return _response
