"""Spotify pass-through: playlists (with our ratings) and genre options."""
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from ratify.api.state import AppState, get_state
from ratify.core import spotify_client
from ratify.core.rating_store import get_rating, load_ratings
from ratify.models.playlist import Playlist

logger = logging.getLogger(__name__)

router = APIRouter()


def _client():
    try:
        return spotify_client.require_spotify_client()
    except spotify_client.SpotifyNotConfigured as e:
        raise HTTPException(status_code=503, detail=str(e))


def _with_rating(playlist: Playlist, ratings) -> dict:
    out = asdict(playlist)
    r = get_rating(ratings, playlist.id)
    out["rating"] = r.rating if r else None
    out["comment"] = r.comment if r else None
    out["rating_id"] = r.id if r else None
    return out


@router.get("/playlists")
def list_playlists(state: AppState = Depends(get_state)):
    """Return the configured user's playlists merged with their ratings."""
    sp = _client()
    try:
        playlists = spotify_client.get_playlists(sp)
    except Exception as e:
        logger.warning("Spotify playlists: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    ratings = load_ratings()
    return [_with_rating(p, ratings) for p in playlists]


@router.get("/playlists/{playlist_id}")
def get_playlist(playlist_id: str, state: AppState = Depends(get_state)):
    """Return one playlist merged with its rating."""
    sp = _client()
    try:
        playlist = spotify_client.get_playlist(sp, playlist_id)
    except Exception as e:
        logger.warning("Spotify playlist %s: %s", playlist_id, e)
        raise HTTPException(status_code=502, detail=str(e))
    if playlist is None:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return _with_rating(playlist, load_ratings())


@router.get("/genres")
def list_genres(state: AppState = Depends(get_state)):
    """Return genre options for the recommendation editor."""
    sp = _client()
    try:
        options = spotify_client.get_genre_options(sp)
    except Exception as e:
        logger.warning("Spotify genres: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    return [{"value": o.value, "label": o.label} for o in options]
