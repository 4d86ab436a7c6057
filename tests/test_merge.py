"""Test merging search results into the collection"""

from dataclasses import replace

from mvfinder.audiodb.models import MusicVideo
from mvfinder.collection.deletion import delete_artists
from mvfinder.collection.merge import merge_search_result, video_entries_from_search
from mvfinder.collection.models import ArtistEntry, CollectionData
from mvfinder.musicbrainz.models import Artist


def _video(track_id, video_id, artist_id="ad-1", url=None, artist=""):
    return MusicVideo(
        artist_id=artist_id,
        track_id=track_id,
        track=f"Track {track_id}",
        artist=artist,
        video_url=url if url is not None else f"https://www.youtube.com/watch?v={video_id}",
    )


class TestVideoEntriesFromSearch:
    """Test conversion of catalog videos"""

    def test_skips_videos_without_youtube_id(self, sample_artist):
        videos = [_video("t-1", "dQw4w9WgXcQ"), _video("t-2", "", url="https://vimeo.com/1")]
        entries = video_entries_from_search(sample_artist, videos)
        assert [e.track_external_id for e in entries] == ["t-1"]

    def test_skips_known_and_repeated_tracks(self, sample_artist):
        videos = [_video("t-1", "dQw4w9WgXcQ"), _video("t-2", "u7K72X4eo_s"), _video("t-2", "hbe3CQamF8k")]
        entries = video_entries_from_search(sample_artist, videos, known_track_ids={"t-1"})
        assert [(e.track_external_id, e.platform_video_id) for e in entries] == [("t-2", "u7K72X4eo_s")]

    def test_display_name_fallback(self, sample_artist):
        """Test the catalog name is preferred over the searched name"""
        entries = video_entries_from_search(
            sample_artist,
            [_video("t-1", "dQw4w9WgXcQ", artist="Catalog Name"), _video("t-2", "u7K72X4eo_s")],
        )
        assert entries[0].artist_display_name == "Catalog Name"
        assert entries[1].artist_display_name == "Test"
        assert entries[0].artist_identity_id == "mb-1"


class TestMergeSearchResult:
    """Test merge_search_result"""

    def test_basic_merge(self, store, sample_artist, sample_video):
        """Test one artist with one video"""
        data = merge_search_result(store, sample_artist, [sample_video])

        assert data.video_count == 1
        video = data.videos[0]
        assert video.platform_video_id == "dQw4w9WgXcQ"
        assert video.artist_external_id == "ad-1"

        assert data.artist_count == 1
        artist = data.artists[0]
        assert artist.video_count == 1
        assert artist.primary_thumbnail_id == "dQw4w9WgXcQ"
        assert artist.display_name == "Test"
        assert artist.artist_identity_id == "mb-1"
        assert store.load() == data

    def test_merging_twice_does_not_duplicate(self, store, sample_artist, sample_video):
        merge_search_result(store, sample_artist, [sample_video])
        data = merge_search_result(store, sample_artist, [sample_video])

        assert data.video_count == 1
        assert data.artist_count == 1
        assert data.artists[0].video_count == 1

    def test_new_videos_are_appended_and_counted(self, store, sample_artist, sample_video):
        merge_search_result(store, sample_artist, [sample_video])
        data = merge_search_result(store, sample_artist, [sample_video, _video("t-2", "u7K72X4eo_s")])

        assert [v.track_external_id for v in data.videos] == ["t-1", "t-2"]
        assert data.artists[0].video_count == 2
        assert data.artists[0].primary_thumbnail_id == "dQw4w9WgXcQ"

    def test_existing_name_and_enrichment_are_kept(self, store, sample_artist, sample_video):
        merge_search_result(store, sample_artist, [sample_video])
        data = store.load()
        store.save(data.with_artist(replace(data.artists[0], display_name="Renamed", genre="Rock")))

        data = merge_search_result(store, sample_artist, [_video("t-2", "u7K72X4eo_s")])

        assert data.artists[0].display_name == "Renamed"
        assert data.artists[0].genre == "Rock"
        assert data.artists[0].video_count == 2

    def test_stale_thumbnail_is_recomputed(self, store, sample_artist, sample_video):
        merge_search_result(store, sample_artist, [sample_video])
        data = store.load()
        store.save(data.with_artist(replace(data.artists[0], primary_thumbnail_id="stale-value")))

        data = merge_search_result(store, sample_artist, [_video("t-2", "u7K72X4eo_s")])

        assert data.artists[0].primary_thumbnail_id == "dQw4w9WgXcQ"

    def test_own_thumbnail_is_kept(self, store, sample_artist, sample_video):
        merge_search_result(store, sample_artist, [sample_video, _video("t-2", "u7K72X4eo_s")])
        data = store.load()
        store.save(data.with_artist(replace(data.artists[0], primary_thumbnail_id="u7K72X4eo_s")))

        data = merge_search_result(store, sample_artist, [_video("t-3", "hbe3CQamF8k")])

        assert data.artists[0].primary_thumbnail_id == "u7K72X4eo_s"

    def test_artist_without_videos_is_recorded(self, store, sample_artist):
        """Test a found artist with no videos still gets a row"""
        data = merge_search_result(store, sample_artist, [])

        assert data.video_count == 0
        assert data.artist_count == 1
        artist = data.artists[0]
        assert artist.video_count == 0
        assert artist.display_name == "Test"
        assert artist.artist_identity_id == "mb-1"

    def test_artist_without_videos_keyed_by_external_id(self, store, sample_artist):
        data = merge_search_result(store, sample_artist, [], artist_external_id="ad-1")
        assert data.artists[0].artist_external_id == "ad-1"
        assert data.artists[0].video_count == 0

    def test_empty_search_twice_keeps_one_row(self, store, sample_artist):
        merge_search_result(store, sample_artist, [])
        data = merge_search_result(store, sample_artist, [])
        assert data.artist_count == 1

    def test_placeholder_row_is_rekeyed_when_videos_arrive(self, store, sample_artist, sample_video):
        """Test the MBID-keyed row becomes the TheAudioDB-keyed row"""
        merge_search_result(store, sample_artist, [])
        data = merge_search_result(store, sample_artist, [sample_video])

        assert data.artist_count == 1
        artist = data.artists[0]
        assert artist.artist_external_id == "ad-1"
        assert artist.video_count == 1
        assert artist.primary_thumbnail_id == "dQw4w9WgXcQ"

    def test_placeholder_row_dropped_when_real_row_exists(self, store, sample_artist, sample_video):
        merge_search_result(store, sample_artist, [sample_video])
        data = store.load()
        store.save(CollectionData.of(
            list(data.artists) + [ArtistEntry(artist_external_id="mb-1", artist_identity_id="mb-1")],
            data.videos,
        ))

        data = merge_search_result(store, sample_artist, [_video("t-2", "u7K72X4eo_s")])

        assert [a.artist_external_id for a in data.artists] == ["ad-1"]

    def test_other_artists_untouched(self, store, sample_artist, sample_video):
        other = Artist(id="mb-2", name="Other")
        merge_search_result(store, other, [_video("t-9", "hbe3CQamF8k", artist_id="ad-2")])

        data = merge_search_result(store, sample_artist, [sample_video])

        assert [a.artist_external_id for a in data.artists] == ["ad-2", "ad-1"]
        assert data.find_artist("ad-2").video_count == 1

    def test_video_without_youtube_id_only(self, store, sample_artist):
        """Test an artist whose only video has no YouTube id"""
        data = merge_search_result(store, sample_artist, [_video("t-1", "", url="https://vimeo.com/1")])

        assert data.video_count == 0
        assert data.find_artist("ad-1").video_count == 0


class TestDeleteArtists:
    """Test cascading deletion"""

    def test_delete_removes_artist_and_videos(self, store, sample_artist, sample_video):
        merge_search_result(store, sample_artist, [sample_video])

        data = delete_artists(store, {"ad-1"})

        assert data.artists == ()
        assert data.videos == ()
        assert store.load().artist_count == 0

    def test_unknown_id_is_ignored(self, store, sample_artist, sample_video):
        merge_search_result(store, sample_artist, [sample_video])

        data = delete_artists(store, {"does-not-exist"})

        assert data.artist_count == 1
        assert data.video_count == 1

    def test_only_selected_artists_removed(self, store, sample_artist, sample_video):
        merge_search_result(store, sample_artist, [sample_video])
        merge_search_result(store, Artist("mb-2", "Other"), [_video("t-9", "hbe3CQamF8k", artist_id="ad-2")])

        data = delete_artists(store, ["ad-2"])

        assert [a.artist_external_id for a in data.artists] == ["ad-1"]
        assert [v.track_external_id for v in data.videos] == ["t-1"]
