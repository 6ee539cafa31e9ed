"""
Conversion of Plex movie metadata into the records written to movies.json.

Nothing in here touches the network or the disk; everything downstream of
``map_movie`` only ever sees ``MovieRecord``.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

TAG_FIELDS = {
    "genres": "Genre",
    "directors": "Director",
    "writers": "Writer",
    "actors": "Role",
}


@dataclass
class MovieRecord:
    id: str
    title: str
    thumb: str
    summary: str = ""
    year: Optional[int] = None
    duration: Optional[int] = None
    rating: Optional[float] = None
    contentRating: Optional[str] = None
    studio: Optional[str] = None
    tagline: Optional[str] = None
    originallyAvailableAt: Optional[str] = None
    art: Optional[str] = None
    genres: List[str] = field(default_factory=list)
    directors: List[str] = field(default_factory=list)
    writers: List[str] = field(default_factory=list)
    actors: List[str] = field(default_factory=list)
    addedAt: Optional[int] = None
    updatedAt: Optional[int] = None
    lastViewedAt: Optional[int] = None
    viewCount: Optional[int] = None

    def to_dict(self) -> dict:
        """JSON shape for the manifest. Optional fields that are unset are left out."""
        data = {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "summary": self.summary,
            "thumb": self.thumb,
            "art": self.art,
            "duration": self.duration,
            "rating": self.rating,
            "contentRating": self.contentRating,
            "studio": self.studio,
            "tagline": self.tagline,
            "originallyAvailableAt": self.originallyAvailableAt,
            "genres": list(self.genres),
            "directors": list(self.directors),
            "writers": list(self.writers),
            "actors": list(self.actors),
            "addedAt": self.addedAt,
            "updatedAt": self.updatedAt,
            "lastViewedAt": self.lastViewedAt,
            "viewCount": self.viewCount,
        }
        return {key: value for key, value in data.items() if value is not None}


def flatten_tags(tags: Any) -> List[str]:
    """[{"tag": "Drama"}, {"tag": "Crime"}] -> ["Drama", "Crime"], in server order."""
    if not isinstance(tags, list):
        return []
    return [str(t["tag"]) for t in tags if isinstance(t, dict) and t.get("tag")]


def _optional_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def placeholder_thumb(movie_id: str) -> str:
    return f"{movie_id}.jpg"


def map_movie(raw: dict) -> MovieRecord:
    """Map one Plex metadata object (from /library/sections/<key>/all) to a MovieRecord."""
    movie_id = str(raw["ratingKey"])
    tags = {name: flatten_tags(raw.get(source)) for name, source in TAG_FIELDS.items()}

    return MovieRecord(
        id=movie_id,
        title=str(raw.get("title") or ""),
        thumb=placeholder_thumb(movie_id),
        summary=str(raw.get("summary") or ""),
        year=_optional_int(raw.get("year")),
        duration=_optional_int(raw.get("duration")),
        rating=_optional_float(raw.get("rating")),
        contentRating=_optional_str(raw.get("contentRating")),
        studio=_optional_str(raw.get("studio")),
        tagline=_optional_str(raw.get("tagline")),
        originallyAvailableAt=_optional_str(raw.get("originallyAvailableAt")),
        art=_optional_str(raw.get("art")),
        addedAt=_optional_int(raw.get("addedAt")),
        updatedAt=_optional_int(raw.get("updatedAt")),
        lastViewedAt=_optional_int(raw.get("lastViewedAt")),
        viewCount=_optional_int(raw.get("viewCount")),
        **tags,
    )


def poster_path(movie: MovieRecord) -> str:
    """Server path of a movie's poster; updatedAt busts Plex's image cache."""
    if movie.updatedAt is None:
        return f"/library/metadata/{movie.id}/thumb"
    return f"/library/metadata/{movie.id}/thumb/{movie.updatedAt}"
