"""Recommendation editor: loads a record (edit) or starts empty (create), gates and performs saves.

Lifecycle::

    IDLE --mount--> LOADING --fetched--> READY --submit--> SUBMITTING --done--> READY
                      |                                                  (any outcome)
                      +--fetch failed--> LOAD_FAILED
    any --unmount--> CLOSED

Every async completion checks the session generation first; anything that
finishes after ``unmount`` is dropped without touching state, toasts or
navigation.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from ratify.config import RECOMMENDATIONS_FORM_ROUTE, RECOMMENDATIONS_ROUTE
from ratify.forms.errors import UnknownFieldError
from ratify.forms.fields import SelectField, TextField
from ratify.forms.notifications import Toast
from ratify.forms.paths import parse_path
from ratify.forms.rows import SuggestionRows
from ratify.forms.state import FormState
from ratify.models.playlist import GenreOption

logger = logging.getLogger(__name__)

NAME_RULES = {"required": "Name is required."}
GENRE_RULES = {"required": "Genre is required."}

CREATED_MESSAGE = "Recommendation created."
SAVED_MESSAGE = "Recommendation saved."
ERROR_MESSAGE = "Error saving recommendation."


class FormStatus(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    LOAD_FAILED = "load_failed"
    CLOSED = "closed"


class SubmitOutcome(enum.Enum):
    SAVED = "saved"
    FAILED = "failed"
    REJECTED = "rejected"  # submit was not allowed; nothing was sent
    DISCARDED = "discarded"  # finished after the editor was closed


@dataclass
class UpsertResult:
    """Outcome of an upsert call: the saved record, or an error."""
    data: Optional[dict] = None
    error: Optional[str] = None


FetchRecommendation = Callable[[str], Awaitable[dict]]
FetchGenres = Callable[[], Awaitable[List[GenreOption]]]
UpsertRecommendation = Callable[..., Awaitable[UpsertResult]]


class RecommendationFormController:
    """Owns the form state for one editor session."""

    def __init__(
        self,
        *,
        fetch_recommendation: FetchRecommendation,
        fetch_genres: FetchGenres,
        upsert_recommendation: UpsertRecommendation,
        notify: Callable[[Toast], None],
        navigate: Callable[[str], None],
        recommendation_id: Optional[str] = None,
    ) -> None:
        self.recommendation_id = recommendation_id
        self.is_create_mode = recommendation_id is None
        self._fetch_recommendation = fetch_recommendation
        self._fetch_genres = fetch_genres
        self._upsert = upsert_recommendation
        self._notify = notify
        self._navigate = navigate

        self.status = FormStatus.IDLE
        self.in_flight = False
        self.load_error: Optional[str] = None
        self.genres_error: Optional[str] = None
        self.genres: List[GenreOption] = []
        self._generation = 0

        self.state = FormState()
        control = self.state.control
        # Rules go in up front so validity never depends on which fields have rendered yet
        self.state.register("name", NAME_RULES)
        self.state.register("genre", GENRE_RULES)

        record_loading = not self.is_create_mode
        self.name_field = TextField(
            "name", control, id="name", label="Name", rules=NAME_RULES, is_loading=record_loading
        )
        self.genre_field = SelectField(
            "genre", control, id="genre", label="Genre", rules=GENRE_RULES, options_loading=True
        )
        self.description_field = TextField(
            "description",
            control,
            id="description",
            label="Description",
            multiline=True,
            full_width=True,
            is_loading=record_loading,
        )
        self.rows = SuggestionRows(control)

    @property
    def mode(self) -> str:
        return "create" if self.is_create_mode else "edit"

    @property
    def record_loading(self) -> bool:
        return self.name_field.is_loading

    @property
    def genres_loading(self) -> bool:
        return self.genre_field.options_loading

    @property
    def is_dirty(self) -> bool:
        return self.state.is_dirty

    @property
    def is_valid(self) -> bool:
        return self.state.is_valid

    @property
    def can_submit(self) -> bool:
        return (
            self.status is FormStatus.READY
            and not self.in_flight
            and self.state.is_dirty
            and self.state.is_valid
        )

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    # --- loading ------------------------------------------------------------

    async def mount(self) -> None:
        generation = self._generation
        if self.is_create_mode:
            self.status = FormStatus.READY
            await self._load_genres(generation)
            return
        self.status = FormStatus.LOADING
        await asyncio.gather(self._load_record(generation), self._load_genres(generation))

    async def _load_record(self, generation: int) -> None:
        try:
            record = await self._fetch_recommendation(self.recommendation_id)
        except Exception as e:
            if self._is_stale(generation):
                return
            logger.warning("Failed to load recommendation %s: %s", self.recommendation_id, e)
            self.load_error = str(e) or "Failed to load recommendation."
            self.status = FormStatus.LOAD_FAILED
            return
        if self._is_stale(generation):
            logger.debug("Discarding recommendation %s loaded after close", self.recommendation_id)
            return
        self.state.reset(record)
        self.rows.seed()
        self.name_field.is_loading = False
        self.description_field.is_loading = False
        self.status = FormStatus.READY

    async def _load_genres(self, generation: int) -> None:
        try:
            genres = await self._fetch_genres()
        except Exception as e:
            if self._is_stale(generation):
                return
            logger.warning("Failed to load genres: %s", e)
            self.genres_error = str(e) or "Failed to load genres."
            genres = []
        if self._is_stale(generation):
            return
        self.genres = list(genres)
        self.genre_field.set_options(self.genres, loading=False)

    def unmount(self) -> None:
        """Close the session; pending loads and saves will be ignored when they finish."""
        self._generation += 1
        self.status = FormStatus.CLOSED

    # --- rows ---------------------------------------------------------------

    def add_row(self) -> Optional[int]:
        """Append a song row; None while a save is running."""
        if self.in_flight:
            return None
        return self.rows.add()

    def remove_row(self, index: Optional[int] = None) -> bool:
        if self.in_flight:
            return False
        return self.rows.remove(index)

    # --- fields -------------------------------------------------------------

    def field(self, path: str):
        """Binder for a field path, e.g. ``genre`` or ``suggestions[1].artist``."""
        fields = {
            "name": self.name_field,
            "genre": self.genre_field,
            "description": self.description_field,
        }
        if path in fields:
            return fields[path]
        try:
            parts = parse_path(path)
        except ValueError:
            raise UnknownFieldError(path)
        if (
            len(parts) == 3
            and parts[0] == self.rows.path
            and isinstance(parts[1], int)
            and parts[2] in ("title", "artist")
            and parts[1] < len(self.rows)
        ):
            title, artist = self.rows.fields(parts[1], self.record_loading, disabled=self.in_flight)
            return title if parts[2] == "title" else artist
        raise UnknownFieldError(path)

    # --- submit -------------------------------------------------------------

    def _lock_fields(self, locked: bool) -> None:
        # Edits made during a save would be lost when the saved record replaces the values
        for field in (self.name_field, self.genre_field, self.description_field):
            field.disabled = locked

    async def submit(self) -> SubmitOutcome:
        if not self.can_submit:
            return SubmitOutcome.REJECTED
        generation = self._generation
        is_create_mode = self.is_create_mode
        data = self.state.get_values()
        if not is_create_mode:
            data["id"] = self.recommendation_id
        self.in_flight = True
        self.status = FormStatus.SUBMITTING
        self._lock_fields(True)
        try:
            try:
                result = await self._upsert(data=data, is_create_mode=is_create_mode)
            except Exception as e:
                # Transport failures are reported like a rejected save
                logger.exception("Saving recommendation failed")
                result = UpsertResult(error=str(e) or e.__class__.__name__)
            if self._is_stale(generation):
                logger.debug("Discarding save result for a closed editor")
                return SubmitOutcome.DISCARDED
            if result.error is not None or not result.data:
                logger.warning("Recommendation not saved: %s", result.error)
                self._notify(Toast(message=ERROR_MESSAGE, is_error=True))
                return SubmitOutcome.FAILED

            record = result.data
            self._notify(
                Toast(
                    message=CREATED_MESSAGE if is_create_mode else SAVED_MESSAGE,
                    link=f"{RECOMMENDATIONS_FORM_ROUTE}{record['id']}",
                )
            )
            self.recommendation_id = record["id"]
            self.is_create_mode = False
            self.state.reset(record)
            self.rows.seed()
            self._navigate(RECOMMENDATIONS_ROUTE)
            return SubmitOutcome.SAVED
        finally:
            self.in_flight = False
            self._lock_fields(False)
            if self.status is FormStatus.SUBMITTING:
                self.status = FormStatus.READY

    # --- view ---------------------------------------------------------------

    def render(self) -> dict:
        return {
            "title": f"{'Create' if self.is_create_mode else 'Edit'} Recommendation",
            "mode": self.mode,
            "recommendation_id": self.recommendation_id,
            "status": self.status.value,
            "load_error": self.load_error,
            "genres_error": self.genres_error,
            "is_dirty": self.is_dirty,
            "is_valid": self.is_valid,
            "fields": {
                "name": self.name_field.render(),
                "genre": self.genre_field.render(),
                "description": self.description_field.render(),
            },
            "rows": self.rows.render(is_loading=self.record_loading, disabled=self.in_flight),
            "row_count": len(self.rows),
            "submit": {
                "id": "submit-form-btn",
                "text": "Create" if self.is_create_mode else "Save",
                "disabled": not self.can_submit,
                "loading": self.in_flight,
            },
        }
