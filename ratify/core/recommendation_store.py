"""Persist and load recommendations (JSON)."""
import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ratify.config import RECOMMENDATIONS_PATH
from ratify.models.recommendation import Recommendation, Suggestion

logger = logging.getLogger(__name__)


class RecommendationNotFound(Exception):
    """No recommendation with the given id."""


class InvalidRecommendation(ValueError):
    """Recommendation data is missing a required field."""


def _path() -> Path:
    RECOMMENDATIONS_PATH.parent.mkdir(parents=True, exist_ok=True)
    return RECOMMENDATIONS_PATH


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def load_recommendations() -> List[Recommendation]:
    """Load all recommendations from disk."""
    p = _path()
    if not p.exists():
        return []
    try:
        data = json.loads(p.read_text())
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not read %s: %s", p, e)
        return []
    out = []
    for item in data.get("recommendations", []):
        try:
            out.append(Recommendation.from_dict(item))
        except (KeyError, TypeError):
            continue
    return out


def save_recommendations(recs: List[Recommendation]) -> None:
    """Save all recommendations to disk."""
    p = _path()
    data = {"recommendations": [r.to_dict() for r in recs]}
    p.write_text(json.dumps(data, indent=2))


def get_recommendation_by_id(recs: List[Recommendation], rec_id: str) -> Optional[Recommendation]:
    """Return recommendation by id or None."""
    for r in recs:
        if r.id == rec_id:
            return r
    return None


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidRecommendation(f"{key} must be text.")
    return value


def _clean(data: dict) -> tuple[str, str, str, List[Suggestion]]:
    name = _text(data, "name").strip()
    genre = _text(data, "genre").strip()
    if not name:
        raise InvalidRecommendation("Name is required.")
    if not genre:
        raise InvalidRecommendation("Genre is required.")
    description = _text(data, "description")
    # Empty rows are kept as-is; the editor may carry trailing blank suggestions
    suggestions = [Suggestion.from_dict(s) for s in data.get("suggestions") or []]
    return name, genre, description, suggestions


def add_recommendation(recs: List[Recommendation], data: dict) -> Recommendation:
    """Append a new recommendation with a fresh id and save."""
    name, genre, description, suggestions = _clean(data)
    now = _now()
    rec = Recommendation(
        id=str(uuid.uuid4()),
        name=name,
        genre=genre,
        description=description,
        suggestions=suggestions,
        created_at=now,
        updated_at=now,
    )
    recs.append(rec)
    save_recommendations(recs)
    logger.info("Created recommendation %s (%s)", rec.id, rec.name)
    return rec


def update_recommendation(recs: List[Recommendation], rec_id: str, data: dict) -> Recommendation:
    """Replace name/genre/description/suggestions of an existing recommendation; save."""
    name, genre, description, suggestions = _clean(data)
    for i, r in enumerate(recs):
        if r.id == rec_id:
            updated = Recommendation(
                id=r.id,
                name=name,
                genre=genre,
                description=description,
                suggestions=suggestions,
                created_at=r.created_at,
                updated_at=_now(),
            )
            recs[i] = updated
            save_recommendations(recs)
            logger.info("Saved recommendation %s (%s)", rec_id, name)
            return updated
    raise RecommendationNotFound(f"Recommendation with id {rec_id} not found")


def upsert_recommendation(recs: List[Recommendation], data: dict, is_create_mode: bool) -> Recommendation:
    """Create or update depending on the caller's mode flag (no existence check in create mode)."""
    if is_create_mode:
        return add_recommendation(recs, data)
    rec_id = data.get("id")
    if not rec_id:
        raise RecommendationNotFound("Recommendation id is required to save")
    return update_recommendation(recs, rec_id, data)


def delete_recommendation(recs: List[Recommendation], rec_id: str) -> bool:
    """Remove recommendation by id; save. Returns True if found and removed."""
    for i, r in enumerate(recs):
        if r.id == rec_id:
            recs.pop(i)
            save_recommendations(recs)
            return True
    return False
