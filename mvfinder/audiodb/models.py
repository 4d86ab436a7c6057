"""
TheAudioDB data models.

MusicVideo mirrors one element of the 'mvids' array returned by
mvid-mb.php; ArtistDetails mirrors one element of the 'artists' array
returned by artist.php / artist-mb.php. Only the fields mvfinder uses
are kept. TheAudioDB returns null for most absent values, so every
field is normalized to "".
"""

from dataclasses import dataclass
from typing import Any


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class MusicVideo:
    """
    A track with a music video, as listed by TheAudioDB.

    Attributes:
        artist_id: TheAudioDB artist id (idArtist).
        track_id: TheAudioDB track id (idTrack).
        track: Track title (strTrack).
        artist: Artist name on the record (strArtist), may be "".
        video_url: Video URL, usually YouTube (strMusicVid).
        thumb: Track thumbnail URL (strTrackThumb).
        description: English description (strDescriptionEN).
        musicbrainz_artist_id: MBID if TheAudioDB knows it.
    """
    artist_id: str
    track_id: str
    track: str = ""
    artist: str = ""
    video_url: str = ""
    thumb: str = ""
    description: str = ""
    musicbrainz_artist_id: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MusicVideo":
        return cls(
            artist_id=_text(data.get("idArtist")),
            track_id=_text(data.get("idTrack")),
            track=_text(data.get("strTrack")),
            artist=_text(data.get("strArtist")),
            video_url=_text(data.get("strMusicVid")),
            thumb=_text(data.get("strTrackThumb")),
            description=_text(data.get("strDescriptionEN")),
            musicbrainz_artist_id=_text(data.get("strMusicBrainzArtistID")),
        )

    def to_api_dict(self) -> dict[str, str]:
        data = {
            "idArtist": self.artist_id,
            "idTrack": self.track_id,
            "strTrack": self.track,
            "strArtist": self.artist,
            "strMusicVid": self.video_url,
            "strTrackThumb": self.thumb,
            "strDescriptionEN": self.description,
        }
        if self.musicbrainz_artist_id:
            data["strMusicBrainzArtistID"] = self.musicbrainz_artist_id
        return data


@dataclass(frozen=True)
class ArtistDetails:
    """
    Artist detail record from TheAudioDB.

    Attributes:
        artist_id: TheAudioDB artist id (idArtist).
        name: Artist name (strArtist).
        musicbrainz_id: MBID (strMusicBrainzID).
        thumb .. style: Artwork URLs and descriptive tags.
    """
    artist_id: str
    name: str = ""
    musicbrainz_id: str = ""
    thumb: str = ""
    banner: str = ""
    logo: str = ""
    wide_thumb: str = ""
    genre: str = ""
    mood: str = ""
    style: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ArtistDetails":
        return cls(
            artist_id=_text(data.get("idArtist")),
            name=_text(data.get("strArtist")),
            musicbrainz_id=_text(data.get("strMusicBrainzID")),
            thumb=_text(data.get("strArtistThumb")),
            banner=_text(data.get("strArtistBanner")),
            logo=_text(data.get("strArtistLogo")),
            wide_thumb=_text(data.get("strArtistWideThumb")),
            genre=_text(data.get("strGenre")),
            mood=_text(data.get("strMood")),
            style=_text(data.get("strStyle")),
        )

    def enrichment_values(self) -> dict[str, str]:
        """Detail values keyed by ArtistEntry attribute name."""
        return {
            "thumbnail_url": self.thumb,
            "banner_url": self.banner,
            "logo_url": self.logo,
            "wide_thumbnail_url": self.wide_thumb,
            "genre": self.genre,
            "mood": self.mood,
            "style": self.style,
        }
