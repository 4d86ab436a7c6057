"""MusicBrainz data models."""

from dataclasses import dataclass
from typing import Any


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class Artist:
    """
    An artist as identified by MusicBrainz.

    Attributes:
        id: MusicBrainz artist id (MBID).
        name: Canonical artist name.
        score: Search relevance reported by MusicBrainz (0-100).
    """
    id: str
    name: str
    score: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Artist":
        """Create an Artist from one element of the search 'artists' array."""
        try:
            score = int(data.get("score", 0))
        except (TypeError, ValueError):
            score = 0
        return cls(id=str(data["id"]), name=_text(data.get("name")), score=score)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Artist":
        """Create an Artist from the {id, name, score} form used in JSON files."""
        return cls.from_api(data)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "score": self.score}
