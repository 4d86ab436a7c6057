"""Test the artist search service"""

from unittest.mock import Mock

import pytest

from mvfinder.audiodb.models import ArtistDetails, MusicVideo
from mvfinder.collection.search import ArtistSearchService, SearchStatus
from mvfinder.core.exceptions import StorageError, TransportError
from mvfinder.musicbrainz.models import Artist


@pytest.fixture
def identity():
    """MusicBrainz stand-in"""
    return Mock()


@pytest.fixture
def catalog():
    """TheAudioDB stand-in"""
    source = Mock()
    source.get_artist_by_identity.return_value = None
    return source


@pytest.fixture
def service(store, identity, catalog):
    return ArtistSearchService(store, identity, catalog)


class TestSearchAndMerge:
    """Test searching a single name"""

    def test_found_with_videos(self, service, identity, catalog, store, sample_artist, sample_video):
        identity.search_artist.return_value = sample_artist
        catalog.get_music_videos.return_value = [sample_video]

        outcome = service.search_and_merge("  Test ")

        assert outcome.status == SearchStatus.FOUND
        assert outcome.name == "Test"
        assert outcome.added_videos == 1
        identity.search_artist.assert_called_once_with("Test")
        catalog.get_music_videos.assert_called_once_with("mb-1")
        catalog.get_artist_by_identity.assert_not_called()
        assert store.load().find_artist("ad-1").video_count == 1

    def test_repeat_search_adds_nothing(self, service, identity, catalog, sample_artist, sample_video):
        identity.search_artist.return_value = sample_artist
        catalog.get_music_videos.return_value = [sample_video]

        service.search_and_merge("Test")
        outcome = service.search_and_merge("Test")

        assert outcome.added_videos == 0

    def test_not_found_stores_nothing(self, service, identity, catalog, storage):
        identity.search_artist.return_value = None

        outcome = service.search_and_merge("Nobody")

        assert outcome.status == SearchStatus.NOT_FOUND
        catalog.get_music_videos.assert_not_called()
        assert storage.keys() == []

    def test_no_videos_keys_artist_by_catalog_id(self, service, identity, catalog, store, sample_artist):
        """Test the TheAudioDB id is looked up when no videos exist"""
        identity.search_artist.return_value = sample_artist
        catalog.get_music_videos.return_value = []
        catalog.get_artist_by_identity.return_value = ArtistDetails(artist_id="ad-1", name="Test")

        outcome = service.search_and_merge("Test")

        assert outcome.status == SearchStatus.FOUND
        artist = store.load().artists[0]
        assert artist.artist_external_id == "ad-1"
        assert artist.video_count == 0

    def test_failed_video_lookup_still_records_artist(self, service, identity, catalog, store, sample_artist):
        identity.search_artist.return_value = sample_artist
        catalog.get_music_videos.side_effect = TransportError("TheAudioDB request failed: timeout")

        outcome = service.search_and_merge("Test")

        assert outcome.status == SearchStatus.VIDEOS_UNAVAILABLE
        assert "timeout" in outcome.error
        data = store.load()
        assert data.artist_count == 1
        assert data.artists[0].video_count == 0

    def test_failed_identity_lookup_propagates(self, service, identity):
        identity.search_artist.side_effect = TransportError("MusicBrainz request failed")
        with pytest.raises(TransportError):
            service.search_and_merge("Test")


class TestProcessNames:
    """Test batch search"""

    def test_outcomes_in_order(self, service, identity, catalog, sample_artist, sample_video):
        identity.search_artist.side_effect = [sample_artist, None, TransportError("MusicBrainz down")]
        catalog.get_music_videos.return_value = [sample_video]
        seen = []

        outcomes = service.process_names(["Test", "", "Nobody", "Broken"], on_outcome=seen.append)

        assert [o.name for o in outcomes] == ["Test", "Nobody", "Broken"]
        assert [o.status for o in outcomes] == [SearchStatus.FOUND, SearchStatus.NOT_FOUND, SearchStatus.FAILED]
        assert outcomes[2].error == "MusicBrainz down"
        assert seen == outcomes

    def test_storage_error_aborts_batch(self, service, identity, catalog, store, sample_artist, sample_video):
        identity.search_artist.return_value = sample_artist
        catalog.get_music_videos.return_value = [sample_video]
        store.storage.set_many = Mock(side_effect=StorageError("disk full"))

        with pytest.raises(StorageError):
            service.process_names(["Test", "Other"])

        assert identity.search_artist.call_count == 1

    def test_videos_of_each_artist(self, service, identity, catalog, store):
        identity.search_artist.side_effect = [Artist("mb-1", "One"), Artist("mb-2", "Two")]
        catalog.get_music_videos.side_effect = [
            [MusicVideo(artist_id="ad-1", track_id="t-1", video_url="https://youtu.be/dQw4w9WgXcQ")],
            [MusicVideo(artist_id="ad-2", track_id="t-2", video_url="https://youtu.be/u7K72X4eo_s")],
        ]

        service.process_names(["One", "Two"])

        data = store.load()
        assert [a.display_name for a in data.artists] == ["One", "Two"]
        assert data.video_count == 2
