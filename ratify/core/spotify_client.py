"""Spotify API client via Spotipy; app-level client-credentials flow."""
import logging
from typing import List, Optional

from spotipy import Spotify, SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials

from ratify.config import (
    RATIFY_GENRES,
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_PLAYLIST_URL,
    SPOTIFY_USERNAME,
)
from ratify.models.playlist import GenreOption, Playlist

logger = logging.getLogger(__name__)

_spotify_client: Optional[Spotify] = None


def get_spotify_client() -> Optional[Spotify]:
    """Return a Spotipy client, or None if credentials are not configured."""
    global _spotify_client
    if not SPOTIFY_CLIENT_ID or not SPOTIFY_CLIENT_SECRET:
        return None
    if _spotify_client is None:
        auth = SpotifyClientCredentials(
            client_id=SPOTIFY_CLIENT_ID,
            client_secret=SPOTIFY_CLIENT_SECRET,
        )
        _spotify_client = Spotify(auth_manager=auth)
    return _spotify_client


def playlist_url(playlist_id: str) -> str:
    """'Open in Spotify' link for a playlist."""
    return f"{SPOTIFY_PLAYLIST_URL}{playlist_id}"


def _map_playlist(pl: dict) -> Playlist:
    """Map a Spotify playlist object (simplified or full) to our shape."""
    images = pl.get("images") or []
    tracks = pl.get("tracks") or {}
    title = pl.get("name") or ""
    return Playlist(
        id=pl["id"],
        title=title,
        description=pl.get("description") or "",
        image_url=images[0]["url"] if images else None,
        track_count=int(tracks.get("total") or 0),
        spotify_url=playlist_url(pl["id"]),
        anchor_id="".join(ch for ch in title.lower().replace(" ", "-") if ch.isalnum() or ch == "-"),
    )


def get_playlists(sp: Spotify, username: str = SPOTIFY_USERNAME) -> List[Playlist]:
    """Return all public playlists of `username`, following pagination."""
    out: List[Playlist] = []
    results = sp.user_playlists(username, limit=50)
    while results:
        for item in results.get("items") or []:
            if item and item.get("id"):
                out.append(_map_playlist(item))
        if results.get("next"):
            results = sp.next(results)
        else:
            break
    return out


def get_playlist(sp: Spotify, playlist_id: str) -> Optional[Playlist]:
    """Return one playlist or None if Spotify returned nothing."""
    pl = sp.playlist(playlist_id)
    if not pl:
        return None
    return _map_playlist(pl)


def get_genres(sp: Spotify, fallback: Optional[List[str]] = None) -> List[str]:
    """Return Spotify's genre seed list.

    Spotify retired the seed endpoint for newly registered apps, which get a 404;
    then the configured RATIFY_GENRES are used if there are any.
    """
    fallback = RATIFY_GENRES if fallback is None else fallback
    try:
        return list((sp.recommendation_genre_seeds() or {}).get("genres") or [])
    except SpotifyException as e:
        if e.http_status != 404 or not fallback:
            raise
        logger.warning("Genre seeds unavailable (HTTP 404); using %d configured genres", len(fallback))
        return list(fallback)


def genre_label(genre: str) -> str:
    """'hip-hop' -> 'Hip Hop'."""
    return genre.replace("-", " ").title()


def get_genre_options(sp: Spotify) -> List[GenreOption]:
    """Genre seeds as selector options, in Spotify's order."""
    return [GenreOption(value=g, label=genre_label(g)) for g in get_genres(sp)]


class SpotifyNotConfigured(Exception):
    """SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET are not set."""


def require_spotify_client() -> Spotify:
    sp = get_spotify_client()
    if sp is None:
        raise SpotifyNotConfigured("Spotify is not configured. Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET.")
    return sp
