"""Personal rating attached to a Spotify playlist."""
from dataclasses import dataclass
from typing import Optional


@dataclass
class PlaylistRating:
    """Stored rating: one per Spotify playlist id."""
    id: str
    playlist_id: str
    rating: int
    comment: Optional[str] = None
