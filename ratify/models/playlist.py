"""Spotify playlist and genre shapes served to the client."""
from dataclasses import dataclass
from typing import Optional


@dataclass
class Playlist:
    """Playlist summary mapped from the Spotify API."""
    id: str
    title: str
    description: str
    image_url: Optional[str]
    track_count: int
    spotify_url: str
    anchor_id: str  # DOM anchor for jumping to a playlist card


@dataclass(frozen=True)
class GenreOption:
    """Choice offered by the genre selector."""
    value: str
    label: str
