"""Recommendations CRUD: name, genre, description and song suggestions (stored in JSON)."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ratify.api.state import AppState, get_state
from ratify.core.recommendation_store import (
    InvalidRecommendation,
    RecommendationNotFound,
    delete_recommendation,
    get_recommendation_by_id,
    load_recommendations,
    upsert_recommendation,
)

router = APIRouter()


class SuggestionBody(BaseModel):
    title: str = ""
    artist: str = ""


class RecommendationBody(BaseModel):
    name: str = Field(..., max_length=2000)
    genre: str
    description: Optional[str] = Field(None, max_length=2000)
    suggestions: List[SuggestionBody] = []


def _save(state: AppState, data: dict, is_create_mode: bool) -> dict:
    try:
        with state.store_lock:
            recs = load_recommendations()
            return upsert_recommendation(recs, data, is_create_mode).to_dict()
    except InvalidRecommendation as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecommendationNotFound:
        raise HTTPException(status_code=404, detail="Recommendation not found")


@router.get("/")
def list_recommendations(state: AppState = Depends(get_state)):
    """List all recommendations."""
    return [r.to_dict() for r in load_recommendations()]


@router.get("/{rec_id}")
def get_recommendation(rec_id: str, state: AppState = Depends(get_state)):
    """Return one recommendation."""
    rec = get_recommendation_by_id(load_recommendations(), rec_id)
    if rec is None:
        raise HTTPException(status_code=404, detail="Recommendation not found")
    return rec.to_dict()


@router.post("/", status_code=201)
def create_recommendation(body: RecommendationBody, state: AppState = Depends(get_state)):
    """Create a recommendation; id is assigned by the server."""
    return _save(state, body.model_dump(), is_create_mode=True)


@router.put("/{rec_id}")
def update_recommendation(
    rec_id: str,
    body: RecommendationBody,
    state: AppState = Depends(get_state),
):
    """Replace an existing recommendation's fields and suggestions."""
    data = body.model_dump()
    data["id"] = rec_id
    return _save(state, data, is_create_mode=False)


@router.delete("/{rec_id}", status_code=204)
def remove_recommendation(rec_id: str, state: AppState = Depends(get_state)):
    """Delete a recommendation."""
    with state.store_lock:
        recs = load_recommendations()
        if not delete_recommendation(recs, rec_id):
            raise HTTPException(status_code=404, detail="Recommendation not found")
