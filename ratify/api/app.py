"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from ratify.api.state import AppState, get_state
from ratify.config import RATIFY_WEB_ORIGIN, ensure_data_dir

# Import routes after state to avoid circular imports
from ratify.api.routes import editor, notifications, ratings, recommendations, spotify

__all__ = ["app", "AppState", "get_state"]

_state = get_state()


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()
    logging.getLogger(__name__).info("Ratify API ready")

    yield

    _state.close_all_editors()


app = FastAPI(
    title="Ratify API",
    description="Rate Spotify playlists and curate song recommendations",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[RATIFY_WEB_ORIGIN] if RATIFY_WEB_ORIGIN else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recommendations.router, prefix="/api/recommendations", tags=["recommendations"])
app.include_router(ratings.router, prefix="/api/ratings", tags=["ratings"])
app.include_router(spotify.router, prefix="/api/spotify", tags=["spotify"])
app.include_router(editor.router, prefix="/api/editor", tags=["editor"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
