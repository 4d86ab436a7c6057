"""
Data models for the music video collection.

The collection is two flat lists:

    VideoEntry:   one row per catalog track that has a YouTube video
    ArtistEntry:  one row per catalog artist, aggregating its videos

Both are frozen dataclasses. Updates build new instances with
dataclasses.replace(), so a collection that has been loaded is never
partially mutated.

Persisted format:
    Rows are stored as JSON objects with the camelCase keys the earlier
    browser application used (artistADID, songADID, ...). to_dict() and
    from_dict() are the only places that know these keys.

    VideoEntry:
        artistADID, artistMBID, songADID, songTitle, videoURL,
        thumbnailYTID, strArtist

    ArtistEntry:
        artistMBID, artistADID, artistName, artistVideoCount, artistThumb,
        strArtistThumb, strArtistBanner, strArtistLogo, strArtistWideThumb,
        strGenre, strMood, strStyle
"""

from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from mvfinder.youtube.urls import is_valid_video_id


# Enrichment fields: attribute name -> persisted key
ENRICHMENT_FIELDS = {
    "thumbnail_url": "strArtistThumb",
    "banner_url": "strArtistBanner",
    "logo_url": "strArtistLogo",
    "wide_thumbnail_url": "strArtistWideThumb",
    "genre": "strGenre",
    "mood": "strMood",
    "style": "strStyle",
}


def _text(value: Any) -> str:
    """Coerce a JSON value to a stripped string ("" for null/absent)."""
    if value is None:
        return ""
    return str(value).strip()


def _count(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def placeholder_artist_name(artist_external_id: str) -> str:
    """Name shown for an artist whose display name is unknown."""
    return f"Artist (ID: {artist_external_id[:8]}...)"


@dataclass(frozen=True)
class VideoEntry:
    """
    A music video of one catalog track.

    Attributes:
        artist_external_id: TheAudioDB artist id (groups videos by artist).
        artist_identity_id: MusicBrainz artist id. May be "" for rows
                            upgraded from the legacy format.
        track_external_id: TheAudioDB track id. Unique in the collection.
        title: Track title.
        source_url: Original video URL as given by the catalog.
        platform_video_id: 11-character YouTube id extracted from source_url.
                           Never empty for a stored entry.
        artist_display_name: Artist name as written on the catalog record.
    """
    artist_external_id: str
    artist_identity_id: str
    track_external_id: str
    title: str
    source_url: str
    platform_video_id: str
    artist_display_name: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "artistADID": self.artist_external_id,
            "artistMBID": self.artist_identity_id,
            "songADID": self.track_external_id,
            "songTitle": self.title,
            "videoURL": self.source_url,
            "thumbnailYTID": self.platform_video_id,
            "strArtist": self.artist_display_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VideoEntry":
        """
        Build a VideoEntry from its persisted form.

        Raises:
            ValueError: If data is not a dict or lacks the artist or track id.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Video row must be an object, got {type(data).__name__}")

        artist_external_id = _text(data.get("artistADID"))
        track_external_id = _text(data.get("songADID"))
        if not artist_external_id or not track_external_id:
            raise ValueError("Video row is missing artistADID or songADID")

        return cls(
            artist_external_id=artist_external_id,
            artist_identity_id=_text(data.get("artistMBID")),
            track_external_id=track_external_id,
            title=_text(data.get("songTitle")),
            source_url=_text(data.get("videoURL")),
            platform_video_id=_text(data.get("thumbnailYTID")),
            artist_display_name=_text(data.get("strArtist")),
        )


@dataclass(frozen=True)
class ArtistEntry:
    """
    An artist in the collection.

    Attributes:
        artist_external_id: TheAudioDB artist id. Unique in the collection.
        artist_identity_id: MusicBrainz artist id.
        display_name: Human-readable name. "" when unknown.
        video_count: Number of VideoEntry rows with this artist_external_id.
        primary_thumbnail_id: YouTube id of the artist's first video, used
                              as its picture until real artwork is fetched.
        thumbnail_url .. style: Enrichment fields, "" until enriched.
    """
    artist_external_id: str
    artist_identity_id: str = ""
    display_name: str = ""
    video_count: int = 0
    primary_thumbnail_id: str = ""
    thumbnail_url: str = ""
    banner_url: str = ""
    logo_url: str = ""
    wide_thumbnail_url: str = ""
    genre: str = ""
    mood: str = ""
    style: str = ""

    @property
    def name_or_placeholder(self) -> str:
        return self.display_name or placeholder_artist_name(self.artist_external_id)

    @property
    def is_enriched(self) -> bool:
        return any(getattr(self, name) for name in ENRICHMENT_FIELDS)

    def enrichment_values(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in ENRICHMENT_FIELDS}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "artistMBID": self.artist_identity_id,
            "artistADID": self.artist_external_id,
            "artistName": self.display_name,
            "artistVideoCount": self.video_count,
            "artistThumb": self.primary_thumbnail_id,
        }
        for name, key in ENRICHMENT_FIELDS.items():
            data[key] = getattr(self, name)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArtistEntry":
        """
        Build an ArtistEntry from its persisted form.

        Older files stored the first video's YouTube id in strArtistThumb
        and the name in strArtist; both are accepted.

        Raises:
            ValueError: If data is not a dict or lacks artistADID.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Artist row must be an object, got {type(data).__name__}")

        artist_external_id = _text(data.get("artistADID"))
        if not artist_external_id:
            raise ValueError("Artist row is missing artistADID")

        enrichment = {name: _text(data.get(key)) for name, key in ENRICHMENT_FIELDS.items()}

        primary_thumbnail_id = _text(data.get("artistThumb"))
        if not primary_thumbnail_id and is_valid_video_id(enrichment["thumbnail_url"]):
            primary_thumbnail_id = enrichment["thumbnail_url"]
            enrichment["thumbnail_url"] = ""

        return cls(
            artist_external_id=artist_external_id,
            artist_identity_id=_text(data.get("artistMBID")),
            display_name=_text(data.get("artistName")) or _text(data.get("strArtist")),
            video_count=_count(data.get("artistVideoCount")),
            primary_thumbnail_id=primary_thumbnail_id,
            **enrichment,
        )


@dataclass(frozen=True)
class CollectionData:
    """
    A snapshot of the whole collection.

    Attributes:
        artists: Artist rows in stored order.
        videos: Video rows in stored order.
    """
    artists: tuple[ArtistEntry, ...] = field(default_factory=tuple)
    videos: tuple[VideoEntry, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, artists: Iterable[ArtistEntry] = (), videos: Iterable[VideoEntry] = ()) -> "CollectionData":
        return cls(artists=tuple(artists), videos=tuple(videos))

    @property
    def artist_count(self) -> int:
        return len(self.artists)

    @property
    def video_count(self) -> int:
        return len(self.videos)

    def find_artist(self, artist_external_id: str) -> ArtistEntry | None:
        for artist in self.artists:
            if artist.artist_external_id == artist_external_id:
                return artist
        return None

    def videos_for(self, artist_external_id: str) -> list[VideoEntry]:
        return [v for v in self.videos if v.artist_external_id == artist_external_id]

    def track_ids(self) -> set[str]:
        return {v.track_external_id for v in self.videos}

    def with_artist(self, artist: ArtistEntry) -> "CollectionData":
        """Return a copy with artist replacing the row of the same id."""
        return replace(
            self,
            artists=tuple(
                artist if a.artist_external_id == artist.artist_external_id else a
                for a in self.artists
            ),
        )

    def artists_to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {"artists": [a.to_dict() for a in self.artists]}

    def videos_to_dict(self) -> dict[str, list[dict[str, str]]]:
        return {"videos": [v.to_dict() for v in self.videos]}


@dataclass(frozen=True)
class CollectionStats:
    """Row counts of the collection."""
    artist_count: int
    video_count: int
