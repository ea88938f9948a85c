# tests/test_stores.py
import pytest

from ratify.core import rating_store, recommendation_store
from ratify.core.rating_store import RatingExists, RatingNotFound
from ratify.core.recommendation_store import (
    InvalidRecommendation,
    RecommendationNotFound,
    get_recommendation_by_id,
    load_recommendations,
    upsert_recommendation,
)


def test_load_missing_file_is_empty():
    assert load_recommendations() == []
    assert rating_store.load_ratings() == []


def test_corrupt_file_loads_as_empty(data_dir):
    (data_dir / "recommendations.json").write_text("{not json")
    assert load_recommendations() == []


def test_create_then_update_round_trips_through_disk():
    created = upsert_recommendation(
        [],
        {"name": "Chill", "genre": "ambient", "suggestions": [{"title": "Teardrop", "artist": "Massive Attack"}]},
        is_create_mode=True,
    )
    assert created.id
    assert created.created_at == created.updated_at

    recs = load_recommendations()
    updated = upsert_recommendation(
        recs,
        {"id": created.id, "name": "Chiller", "genre": "ambient", "suggestions": [{"title": "", "artist": ""}]},
        is_create_mode=False,
    )
    assert updated.created_at == created.created_at

    stored = get_recommendation_by_id(load_recommendations(), created.id)
    assert stored.name == "Chiller"
    # blank rows are stored, not stripped
    assert len(stored.suggestions) == 1


def test_update_unknown_id_raises():
    with pytest.raises(RecommendationNotFound):
        upsert_recommendation([], {"id": "missing", "name": "x", "genre": "rock"}, is_create_mode=False)


@pytest.mark.parametrize("data", [{"name": "", "genre": "rock"}, {"name": "x", "genre": "  "}])
def test_blank_required_fields_are_rejected(data):
    with pytest.raises(InvalidRecommendation):
        upsert_recommendation([], data, is_create_mode=True)


def test_delete_recommendation():
    rec = upsert_recommendation([], {"name": "x", "genre": "rock"}, is_create_mode=True)
    recs = load_recommendations()
    assert recommendation_store.delete_recommendation(recs, rec.id) is True
    assert load_recommendations() == []
    assert recommendation_store.delete_recommendation([], rec.id) is False


def test_rating_lifecycle():
    r = rating_store.add_rating([], "pl1", 4, "good for mornings")
    ratings = rating_store.load_ratings()
    assert rating_store.get_rating(ratings, "pl1") == r

    with pytest.raises(RatingExists):
        rating_store.add_rating(ratings, "pl1", 5)

    updated = rating_store.update_rating(ratings, "pl1", 5)
    assert updated.rating == 5
    assert updated.comment == "good for mornings"

    rating_store.delete_rating(rating_store.load_ratings(), r.id)
    assert rating_store.load_ratings() == []


def test_rating_missing_raises():
    with pytest.raises(RatingNotFound):
        rating_store.update_rating([], "pl1", 3)
    with pytest.raises(RatingNotFound):
        rating_store.delete_rating([], "nope")


@pytest.mark.parametrize("data", [{"name": 123, "genre": "rock"}, {"name": "x", "genre": ["rock"]}])
def test_non_text_fields_are_rejected(data):
    with pytest.raises(InvalidRecommendation):
        upsert_recommendation([], data, is_create_mode=True)
