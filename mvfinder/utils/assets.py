"""
Download of video thumbnails and artist artwork.

Video thumbnails are derived from the YouTube id of every video; artist
artwork comes from the URLs filled in by enrichment. Files are named by
id so repeated runs skip what is already on disk.

Layout:
    <dest>/thumbnails/<youtube id>.jpg
    <dest>/artwork/<TheAudioDB artist id>_<kind>.<ext>

Failures of single files are logged and counted; they never abort the run.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable
from urllib.parse import urlparse

import requests

from mvfinder.collection.models import ArtistEntry, VideoEntry
from mvfinder.core.config import DEFAULT_TIMEOUT
from mvfinder.core.logger import get_logger
from mvfinder.utils import ensure_directory
from mvfinder.youtube.urls import ThumbnailSize, is_valid_video_id, thumbnail_url


logger = get_logger(__name__)


CHUNK_SIZE = 8192

ARTWORK_KINDS = {
    "thumb": "thumbnail_url",
    "banner": "banner_url",
    "logo": "logo_url",
    "widethumb": "wide_thumbnail_url",
}

# Per-file status passed to progress callbacks
DOWNLOADED = "downloaded"
FAILED = "failed"
SKIPPED = "skipped"


@dataclass
class AssetDownloadResult:
    """Tally of an asset download run."""
    success: int = 0
    failed: int = 0
    skipped: int = 0

    def add(self, status: str) -> None:
        if status == DOWNLOADED:
            self.success += 1
        elif status == SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


def download_file(session: requests.Session, url: str, dest: Path, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Download url to dest unless dest already exists.

    The body is written to a .part file first and renamed when complete.

    Returns:
        DOWNLOADED, SKIPPED or FAILED.
    """
    if dest.exists():
        return SKIPPED

    partial = dest.with_name(dest.name + ".part")
    try:
        with session.get(url, timeout=timeout, stream=True) as response:
            response.raise_for_status()
            with open(partial, "wb") as f:
                for chunk in response.iter_content(CHUNK_SIZE):
                    f.write(chunk)
        os.replace(partial, dest)
    except (requests.exceptions.RequestException, OSError) as e:
        logger.warning(f"Download failed: {url} ({e})")
        partial.unlink(missing_ok=True)
        return FAILED

    logger.debug(f"Downloaded {url} -> {dest}")
    return DOWNLOADED


def _run(
    jobs: list[tuple[str, Path]],
    session: requests.Session | None,
    timeout: float,
    on_progress: Callable[[str], None] | None
) -> AssetDownloadResult:
    if session is None:
        with requests.Session() as own_session:
            return _run(jobs, own_session, timeout, on_progress)

    result = AssetDownloadResult()
    for url, dest in jobs:
        status = download_file(session, url, dest, timeout)
        result.add(status)
        if on_progress is not None:
            on_progress(status)
    return result


def thumbnail_jobs(
    videos: Iterable[VideoEntry],
    dest_dir: Path,
    size: ThumbnailSize = ThumbnailSize.HIGH
) -> list[tuple[str, Path]]:
    """(url, path) pairs for every video with a valid YouTube id, one per id."""
    target = ensure_directory(dest_dir / "thumbnails")
    jobs, seen = [], set()
    for video in videos:
        video_id = video.platform_video_id
        if not is_valid_video_id(video_id) or video_id in seen:
            continue
        seen.add(video_id)
        jobs.append((thumbnail_url(video_id, size), target / f"{video_id}.jpg"))
    return jobs


def artwork_jobs(artists: Iterable[ArtistEntry], dest_dir: Path) -> list[tuple[str, Path]]:
    """(url, path) pairs for every http(s) artwork URL of every artist."""
    target = ensure_directory(dest_dir / "artwork")
    jobs = []
    for artist in artists:
        for kind, attribute in ARTWORK_KINDS.items():
            url = getattr(artist, attribute)
            if not url.startswith(("http://", "https://")):
                continue
            extension = Path(urlparse(url).path).suffix or ".jpg"
            jobs.append((url, target / f"{artist.artist_external_id}_{kind}{extension}"))
    return jobs


def download_video_thumbnails(
    videos: Iterable[VideoEntry],
    dest_dir: Path,
    session: requests.Session | None = None,
    size: ThumbnailSize = ThumbnailSize.HIGH,
    timeout: float = DEFAULT_TIMEOUT,
    on_progress: Callable[[str], None] | None = None
) -> AssetDownloadResult:
    """Download the thumbnail of every video into dest_dir/thumbnails."""
    return _run(thumbnail_jobs(videos, dest_dir, size), session, timeout, on_progress)


def download_artist_artwork(
    artists: Iterable[ArtistEntry],
    dest_dir: Path,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    on_progress: Callable[[str], None] | None = None
) -> AssetDownloadResult:
    """Download the enrichment artwork of every artist into dest_dir/artwork."""
    return _run(artwork_jobs(artists, dest_dir), session, timeout, on_progress)
