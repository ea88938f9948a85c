"""Recommendation records and their song suggestions."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Suggestion:
    """One song row: title + artist. Either may be empty."""
    title: str = ""
    artist: str = ""

    def to_dict(self) -> dict:
        return {"title": self.title, "artist": self.artist}

    @classmethod
    def from_dict(cls, item: Optional[dict]) -> "Suggestion":
        item = item or {}
        return cls(title=item.get("title") or "", artist=item.get("artist") or "")


@dataclass
class Recommendation:
    """Stored recommendation: name, genre, description and ordered song suggestions."""
    id: str
    name: str
    genre: str
    description: str = ""
    suggestions: List[Suggestion] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "genre": self.genre,
            "description": self.description,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, item: dict) -> "Recommendation":
        """Build from stored JSON. Raises KeyError/TypeError on malformed items."""
        return cls(
            id=item["id"],
            name=item["name"],
            genre=item["genre"],
            description=item.get("description") or "",
            suggestions=[Suggestion.from_dict(s) for s in item.get("suggestions") or []],
            created_at=item.get("created_at") or "",
            updated_at=item.get("updated_at") or "",
        )
