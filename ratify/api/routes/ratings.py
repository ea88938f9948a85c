"""Playlist ratings: one rating + comment per Spotify playlist (stored in JSON)."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ratify.api.state import AppState, get_state
from ratify.core.rating_store import (
    RatingExists,
    RatingNotFound,
    add_rating,
    delete_rating,
    get_rating,
    load_ratings,
    update_rating,
)
from ratify.models.rating import PlaylistRating

router = APIRouter()


class CreateRatingBody(BaseModel):
    playlist_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class UpdateRatingBody(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


def _rating_to_dict(r: PlaylistRating) -> dict:
    return {
        "id": r.id,
        "playlist_id": r.playlist_id,
        "rating": r.rating,
        "comment": r.comment,
    }


@router.get("/")
def list_ratings(state: AppState = Depends(get_state)):
    """List all playlist ratings."""
    return [_rating_to_dict(r) for r in load_ratings()]


@router.get("/{playlist_id}")
def get_playlist_rating(playlist_id: str, state: AppState = Depends(get_state)):
    """Return the rating for a Spotify playlist."""
    r = get_rating(load_ratings(), playlist_id)
    if r is None:
        raise HTTPException(status_code=404, detail="Rating not found")
    return _rating_to_dict(r)


@router.post("/", status_code=201)
def create_rating(body: CreateRatingBody, state: AppState = Depends(get_state)):
    """Rate a playlist."""
    try:
        with state.ratings_lock:
            r = add_rating(load_ratings(), body.playlist_id, body.rating, body.comment)
    except RatingExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _rating_to_dict(r)


@router.put("/{playlist_id}")
def change_rating(playlist_id: str, body: UpdateRatingBody, state: AppState = Depends(get_state)):
    """Change a playlist's rating; comment is kept unless a new one is sent."""
    try:
        with state.ratings_lock:
            r = update_rating(load_ratings(), playlist_id, body.rating, body.comment)
    except RatingNotFound:
        raise HTTPException(status_code=404, detail="Rating not found")
    return _rating_to_dict(r)


@router.delete("/{rating_id}", status_code=204)
def remove_rating(rating_id: str, state: AppState = Depends(get_state)):
    """Delete a rating by its own id."""
    try:
        with state.ratings_lock:
            delete_rating(load_ratings(), rating_id)
    except RatingNotFound:
        raise HTTPException(status_code=404, detail="Rating not found")
