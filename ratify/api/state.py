"""Shared application state (injected into routes): toast slot, editor sessions, data access."""
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from ratify.config import EDITOR_IDLE_SECONDS, MAX_EDITORS
from ratify.core import spotify_client
from ratify.core.recommendation_store import (
    InvalidRecommendation,
    RecommendationNotFound,
    get_recommendation_by_id,
    load_recommendations,
    upsert_recommendation,
)
from ratify.forms.controller import RecommendationFormController, UpsertResult
from ratify.forms.notifications import NotificationChannel
from ratify.models.playlist import GenreOption

logger = logging.getLogger(__name__)


@dataclass
class EditorSession:
    """One mounted recommendation editor and where it last navigated to."""
    session_id: str
    controller: RecommendationFormController
    location: Optional[str] = None
    last_seen: float = field(default_factory=time.monotonic)


class AppState:
    def __init__(self, editor_idle_seconds: float = EDITOR_IDLE_SECONDS, max_editors: int = MAX_EDITORS) -> None:
        self.notifications = NotificationChannel()
        self._editors: Dict[str, EditorSession] = {}
        self._editors_lock = threading.Lock()
        self.editor_idle_seconds = editor_idle_seconds
        self.max_editors = max(1, max_editors)
        # Serialise read-modify-write cycles on the JSON files
        self.store_lock = threading.Lock()
        self.ratings_lock = threading.Lock()

    # --- data access used by the editor -------------------------------------

    async def fetch_recommendation(self, rec_id: str) -> dict:
        recs = await run_in_threadpool(load_recommendations)
        rec = get_recommendation_by_id(recs, rec_id)
        if rec is None:
            raise RecommendationNotFound(f"Recommendation with id {rec_id} not found")
        return rec.to_dict()

    async def fetch_genres(self) -> List[GenreOption]:
        sp = spotify_client.require_spotify_client()
        return await run_in_threadpool(spotify_client.get_genre_options, sp)

    def _upsert(self, data: dict, is_create_mode: bool) -> dict:
        with self.store_lock:
            recs = load_recommendations()
            return upsert_recommendation(recs, data, is_create_mode).to_dict()

    async def upsert_recommendation(self, data: dict, is_create_mode: bool) -> UpsertResult:
        """Save through the store; rejected data comes back as an error result, not an exception."""
        try:
            saved = await run_in_threadpool(self._upsert, data, is_create_mode)
        except (InvalidRecommendation, RecommendationNotFound) as e:
            return UpsertResult(error=str(e))
        return UpsertResult(data=saved)

    # --- editor sessions ----------------------------------------------------

    def open_editor(self, recommendation_id: Optional[str] = None) -> EditorSession:
        self._expire_editors()
        session_id = uuid.uuid4().hex

        def navigate(route: str) -> None:
            self._navigated(session_id, route)

        controller = RecommendationFormController(
            recommendation_id=recommendation_id,
            fetch_recommendation=self.fetch_recommendation,
            fetch_genres=self.fetch_genres,
            upsert_recommendation=self.upsert_recommendation,
            notify=self.notifications.publish,
            navigate=navigate,
        )
        session = EditorSession(session_id=session_id, controller=controller)
        with self._editors_lock:
            self._editors[session_id] = session
        logger.info("Opened %s editor %s", session.controller.mode, session_id)
        return session

    def _navigated(self, session_id: str, route: str) -> None:
        """The editor left its page: record where it went, then discard the session."""
        with self._editors_lock:
            session = self._editors.get(session_id)
        if session is None:
            return
        session.location = route
        self.close_editor(session_id)

    def _expire_editors(self) -> None:
        now = time.monotonic()
        with self._editors_lock:
            expired = [
                sid for sid, s in self._editors.items() if now - s.last_seen >= self.editor_idle_seconds
            ]
            # Leave room for the session about to be opened
            overflow = len(self._editors) - len(expired) - (self.max_editors - 1)
            if overflow > 0:
                live = sorted(
                    (s for sid, s in self._editors.items() if sid not in expired),
                    key=lambda s: s.last_seen,
                )
                expired.extend(s.session_id for s in live[:overflow])
        for session_id in expired:
            logger.info("Expiring editor %s", session_id)
            self.close_editor(session_id)

    def get_editor(self, session_id: str) -> Optional[EditorSession]:
        with self._editors_lock:
            session = self._editors.get(session_id)
            if session is not None:
                session.last_seen = time.monotonic()
            return session

    def close_editor(self, session_id: str) -> bool:
        with self._editors_lock:
            session = self._editors.pop(session_id, None)
        if session is None:
            return False
        session.controller.unmount()
        return True

    def close_all_editors(self) -> None:
        with self._editors_lock:
            ids = list(self._editors)
        for session_id in ids:
            self.close_editor(session_id)


_state = AppState()


def get_state() -> AppState:
    return _state
