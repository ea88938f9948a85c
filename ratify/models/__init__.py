"""Data models for recommendations, ratings, and playlists."""
from ratify.models.playlist import GenreOption, Playlist
from ratify.models.rating import PlaylistRating
from ratify.models.recommendation import Recommendation, Suggestion

__all__ = [
    "GenreOption",
    "Playlist",
    "PlaylistRating",
    "Recommendation",
    "Suggestion",
]
