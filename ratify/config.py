"""Configuration: env, data paths, Spotify credentials, client routes."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of ratify package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so SPOTIFY_CLIENT_ID etc. are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("RATIFY_DATA_DIR", str(BASE_DIR / "data")))
RECOMMENDATIONS_PATH = DATA_DIR / "recommendations.json"
RATINGS_PATH = DATA_DIR / "ratings.json"

# API
API_HOST = os.getenv("RATIFY_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("RATIFY_API_PORT", "8000"))
# Browser origin allowed by CORS (e.g. http://localhost:5173 for Vite dev); empty = any
RATIFY_WEB_ORIGIN = os.getenv("RATIFY_WEB_ORIGIN", "")

# Spotify (client-credentials flow; playlists are read from SPOTIFY_USERNAME)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID", "")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET", "")
SPOTIFY_USERNAME = os.getenv("SPOTIFY_USERNAME", "")
SPOTIFY_PLAYLIST_URL = "https://open.spotify.com/playlist/"
# Comma-separated genres used when Spotify's genre seed endpoint answers 404 (newer apps)
RATIFY_GENRES = [g.strip() for g in os.getenv("RATIFY_GENRES", "").split(",") if g.strip()]

# Editor sessions idle longer than this are closed; past the cap the least recently used goes
EDITOR_IDLE_SECONDS = float(os.getenv("RATIFY_EDITOR_IDLE_SECONDS", "1800"))
MAX_EDITORS = int(os.getenv("RATIFY_MAX_EDITORS", "100"))

# Client-side routes the editor navigates to / links at
RECOMMENDATIONS_ROUTE = "/recommendations"
RECOMMENDATIONS_FORM_ROUTE = "/recommendations/form/"


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
