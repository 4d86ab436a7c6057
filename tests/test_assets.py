"""Test thumbnail and artwork downloads"""

from unittest.mock import MagicMock, Mock, patch

import requests

from mvfinder.collection.models import ArtistEntry, VideoEntry
from mvfinder.utils.assets import (
    DOWNLOADED,
    FAILED,
    artwork_jobs,
    download_artist_artwork,
    download_video_thumbnails,
)
from mvfinder.youtube.urls import ThumbnailSize


def _video(track_id, video_id):
    return VideoEntry("ad-1", "mb-1", track_id, "Song", f"https://youtu.be/{video_id}", video_id)


def _session(fail_urls=()):
    """Session whose streamed responses yield b'jpeg' or raise for fail_urls"""
    session = Mock(spec=requests.Session)

    def get(url, timeout=None, stream=False):
        response = MagicMock()
        response.__enter__.return_value = response
        response.__exit__.return_value = False
        if url in fail_urls:
            error = requests.exceptions.HTTPError("404 Not Found")
            response.raise_for_status.side_effect = error
        response.iter_content.return_value = [b"jp", b"eg"]
        return response

    session.get.side_effect = get
    return session


class TestVideoThumbnails:
    """Test download_video_thumbnails"""

    def test_downloads_each_id_once(self, temp_dir):
        session = _session()
        statuses = []

        result = download_video_thumbnails(
            [_video("t-1", "dQw4w9WgXcQ"), _video("t-2", "dQw4w9WgXcQ"), _video("t-3", "u7K72X4eo_s")],
            temp_dir,
            session=session,
            size=ThumbnailSize.MAX,
            on_progress=statuses.append,
        )

        assert (result.success, result.failed, result.skipped) == (2, 0, 0)
        assert statuses == [DOWNLOADED, DOWNLOADED]
        assert (temp_dir / "thumbnails" / "dQw4w9WgXcQ.jpg").read_bytes() == b"jpeg"
        first_url = session.get.call_args_list[0].args[0]
        assert first_url == "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"

    def test_existing_files_are_skipped(self, temp_dir):
        (temp_dir / "thumbnails").mkdir()
        (temp_dir / "thumbnails" / "dQw4w9WgXcQ.jpg").write_bytes(b"old")
        session = _session()

        result = download_video_thumbnails([_video("t-1", "dQw4w9WgXcQ")], temp_dir, session=session)

        assert result.skipped == 1
        session.get.assert_not_called()
        assert (temp_dir / "thumbnails" / "dQw4w9WgXcQ.jpg").read_bytes() == b"old"

    def test_failure_is_counted_and_leaves_no_file(self, temp_dir):
        url = "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
        statuses = []

        result = download_video_thumbnails(
            [_video("t-1", "dQw4w9WgXcQ")], temp_dir, session=_session(fail_urls={url}), on_progress=statuses.append
        )

        assert result.failed == 1
        assert statuses == [FAILED]
        assert list((temp_dir / "thumbnails").iterdir()) == []

    def test_own_session_is_closed(self, temp_dir):
        """Test the session created when none is passed is closed afterwards"""
        own_session = MagicMock()
        own_session.__enter__.return_value = _session()

        with patch("mvfinder.utils.assets.requests.Session", return_value=own_session):
            result = download_video_thumbnails([_video("t-1", "dQw4w9WgXcQ")], temp_dir)

        assert result.success == 1
        own_session.__exit__.assert_called_once()


class TestArtistArtwork:
    """Test download_artist_artwork"""

    def test_only_http_urls(self, temp_dir):
        artists = [
            ArtistEntry(
                "ad-1",
                thumbnail_url="https://r2.theaudiodb.com/a/thumb.jpg",
                logo_url="https://r2.theaudiodb.com/a/logo.png",
            ),
            ArtistEntry("ad-2"),
        ]

        jobs = artwork_jobs(artists, temp_dir)

        assert [path.name for _, path in jobs] == ["ad-1_thumb.jpg", "ad-1_logo.png"]

    def test_download(self, temp_dir):
        artists = [ArtistEntry("ad-1", banner_url="https://r2.theaudiodb.com/a/banner")]

        result = download_artist_artwork(artists, temp_dir, session=_session())

        assert result.success == 1
        assert (temp_dir / "artwork" / "ad-1_banner.jpg").exists()

    def test_second_run_skips(self, temp_dir):
        artists = [ArtistEntry("ad-1", banner_url="https://r2.theaudiodb.com/a/banner.jpg")]
        download_artist_artwork(artists, temp_dir, session=_session())

        result = download_artist_artwork(artists, temp_dir, session=_session())

        assert (result.success, result.skipped) == (0, 1)
