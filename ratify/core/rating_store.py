"""Persist and load playlist ratings (JSON)."""
import json
import uuid
from pathlib import Path
from typing import List, Optional

from ratify.config import RATINGS_PATH
from ratify.models.rating import PlaylistRating


class RatingNotFound(Exception):
    pass


class RatingExists(Exception):
    pass


def _path() -> Path:
    RATINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    return RATINGS_PATH


def load_ratings() -> List[PlaylistRating]:
    """Load all ratings from disk."""
    p = _path()
    if not p.exists():
        return []
    try:
        data = json.loads(p.read_text())
    except (json.JSONDecodeError, OSError):
        return []
    out = []
    for item in data.get("ratings", []):
        try:
            out.append(
                PlaylistRating(
                    id=item["id"],
                    playlist_id=item["playlist_id"],
                    rating=int(item["rating"]),
                    comment=item.get("comment"),
                )
            )
        except (KeyError, TypeError, ValueError):
            continue
    return out


def save_ratings(ratings: List[PlaylistRating]) -> None:
    """Save all ratings to disk."""
    p = _path()
    data = {
        "ratings": [
            {
                "id": r.id,
                "playlist_id": r.playlist_id,
                "rating": r.rating,
                "comment": r.comment,
            }
            for r in ratings
        ]
    }
    p.write_text(json.dumps(data, indent=2))


def get_rating(ratings: List[PlaylistRating], playlist_id: str) -> Optional[PlaylistRating]:
    """Return the rating for a Spotify playlist id or None."""
    for r in ratings:
        if r.playlist_id == playlist_id:
            return r
    return None


def add_rating(
    ratings: List[PlaylistRating],
    playlist_id: str,
    rating: int,
    comment: Optional[str] = None,
) -> PlaylistRating:
    """Rate a playlist for the first time and save."""
    if get_rating(ratings, playlist_id) is not None:
        raise RatingExists(f"Playlist {playlist_id} is already rated")
    r = PlaylistRating(id=str(uuid.uuid4()), playlist_id=playlist_id, rating=rating, comment=comment)
    ratings.append(r)
    save_ratings(ratings)
    return r


def update_rating(
    ratings: List[PlaylistRating],
    playlist_id: str,
    rating: int,
    comment: Optional[str] = None,
) -> PlaylistRating:
    """Change the rating (and comment, when given) of a rated playlist; save."""
    for i, r in enumerate(ratings):
        if r.playlist_id == playlist_id:
            updated = PlaylistRating(
                r.id, r.playlist_id, rating, comment if comment is not None else r.comment
            )
            ratings[i] = updated
            save_ratings(ratings)
            return updated
    raise RatingNotFound(f"Playlist rating with id {playlist_id} not found")


def delete_rating(ratings: List[PlaylistRating], rating_id: str) -> None:
    """Remove a rating by its own id (not the playlist id); save."""
    for i, r in enumerate(ratings):
        if r.id == rating_id:
            ratings.pop(i)
            save_ratings(ratings)
            return
    raise RatingNotFound(f"Playlist rating with id {rating_id} not found")
